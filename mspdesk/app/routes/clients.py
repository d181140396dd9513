# mspdesk/app/routes/clients.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..activity import ActionType, ResourceType, get_actor, log_activity
from ..db import get_db
from ..models import Client
from ..schemas import ClientIn, ClientUpdate

router = APIRouter(prefix="/api/clients", tags=["clients"])


def client_out(c: Client) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "contact_person": c.contact_person,
        "email": c.email,
        "phone": c.phone,
        "address": c.address,
        "notes": c.notes,
        "created_at": c.created_at.isoformat() if c.created_at else None,
        "updated_at": c.updated_at.isoformat() if c.updated_at else None,
    }


def _get_or_404(db: Session, client_id: int) -> Client:
    c = db.get(Client, client_id)
    if not c:
        raise HTTPException(status_code=404, detail="client not found")
    return c


@router.get("")
def list_clients(db: Session = Depends(get_db)):
    return [client_out(c) for c in db.query(Client).order_by(Client.name).all()]


@router.get("/{client_id}")
def get_client(client_id: int, db: Session = Depends(get_db)):
    return client_out(_get_or_404(db, client_id))


@router.post("", status_code=201)
def create_client(body: ClientIn, db: Session = Depends(get_db),
                  actor: Optional[str] = Depends(get_actor)):
    c = Client(**body.model_dump())
    db.add(c)
    db.commit()
    db.refresh(c)
    log_activity(db, actor, ActionType.CREATE, ResourceType.CLIENT, c.id, f"Created new client: {c.name}")
    return client_out(c)


@router.patch("/{client_id}")
def update_client(client_id: int, body: ClientUpdate, db: Session = Depends(get_db),
                  actor: Optional[str] = Depends(get_actor)):
    c = _get_or_404(db, client_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(c, field, value)
    db.commit()
    db.refresh(c)
    log_activity(db, actor, ActionType.UPDATE, ResourceType.CLIENT, c.id, f"Updated client: {c.name}")
    return client_out(c)


@router.delete("/{client_id}")
def delete_client(client_id: int, db: Session = Depends(get_db),
                  actor: Optional[str] = Depends(get_actor)):
    c = _get_or_404(db, client_id)
    name = c.name
    db.delete(c)
    db.commit()
    log_activity(db, actor, ActionType.DELETE, ResourceType.CLIENT, client_id, f"Deleted client: {name}")
    return {"ok": True}
