# mspdesk/app/routes/docs.py
# Per-client documentation panels: printers, assets, applications.
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..activity import ActionType, ResourceType, get_actor, log_activity
from ..db import get_db
from ..models import Application, Asset, Printer
from ..schemas import ApplicationIn, AssetIn, PrinterIn
from ..scope import ClientScope, get_client_scope

router = APIRouter(tags=["documentation"])


def row_out(obj) -> dict:
    out = {}
    for col in obj.__table__.columns:
        value = getattr(obj, col.name)
        out[col.name] = value.isoformat() if isinstance(value, (date, datetime)) else value
    return out


def _get_or_404(db: Session, model, obj_id: int, label: str):
    obj = db.get(model, obj_id)
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


def _create(db, model, scope, body, actor, resource, label, title_field):
    obj = model(client_id=scope.client_id, **body.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    log_activity(db, actor, ActionType.CREATE, resource, obj.id,
                 f"Created new {label}: {getattr(obj, title_field)}")
    return row_out(obj)


def _update(db, model, obj_id, body, actor, resource, label, title_field):
    obj = _get_or_404(db, model, obj_id, label)
    for field, value in body.model_dump().items():
        setattr(obj, field, value)
    db.commit()
    db.refresh(obj)
    log_activity(db, actor, ActionType.UPDATE, resource, obj.id,
                 f"Updated {label}: {getattr(obj, title_field)}")
    return row_out(obj)


def _delete(db, model, obj_id, actor, resource, label, title_field):
    obj = _get_or_404(db, model, obj_id, label)
    title = getattr(obj, title_field)
    db.delete(obj)
    db.commit()
    log_activity(db, actor, ActionType.DELETE, resource, obj_id, f"Deleted {label}: {title}")
    return {"ok": True}


# ---------------------------
# Printers
# ---------------------------
@router.get("/api/clients/{client_id}/printers")
def list_printers(scope: ClientScope = Depends(get_client_scope), db: Session = Depends(get_db)):
    rows = db.query(Printer).filter(Printer.client_id == scope.client_id).order_by(Printer.location).all()
    return [row_out(p) for p in rows]


@router.post("/api/clients/{client_id}/printers", status_code=201)
def create_printer(body: PrinterIn, scope: ClientScope = Depends(get_client_scope),
                   db: Session = Depends(get_db), actor: Optional[str] = Depends(get_actor)):
    return _create(db, Printer, scope, body, actor, ResourceType.PRINTER, "printer", "location")


@router.put("/api/printers/{printer_id}")
def update_printer(printer_id: int, body: PrinterIn, db: Session = Depends(get_db),
                   actor: Optional[str] = Depends(get_actor)):
    return _update(db, Printer, printer_id, body, actor, ResourceType.PRINTER, "printer", "location")


@router.delete("/api/printers/{printer_id}")
def delete_printer(printer_id: int, db: Session = Depends(get_db), actor: Optional[str] = Depends(get_actor)):
    return _delete(db, Printer, printer_id, actor, ResourceType.PRINTER, "printer", "location")


# ---------------------------
# Assets
# ---------------------------
@router.get("/api/clients/{client_id}/assets")
def list_assets(scope: ClientScope = Depends(get_client_scope), db: Session = Depends(get_db)):
    rows = db.query(Asset).filter(Asset.client_id == scope.client_id).order_by(Asset.name).all()
    return [row_out(a) for a in rows]


@router.post("/api/clients/{client_id}/assets", status_code=201)
def create_asset(body: AssetIn, scope: ClientScope = Depends(get_client_scope),
                 db: Session = Depends(get_db), actor: Optional[str] = Depends(get_actor)):
    return _create(db, Asset, scope, body, actor, ResourceType.ASSET, "asset", "name")


@router.put("/api/assets/{asset_id}")
def update_asset(asset_id: int, body: AssetIn, db: Session = Depends(get_db),
                 actor: Optional[str] = Depends(get_actor)):
    return _update(db, Asset, asset_id, body, actor, ResourceType.ASSET, "asset", "name")


@router.delete("/api/assets/{asset_id}")
def delete_asset(asset_id: int, db: Session = Depends(get_db), actor: Optional[str] = Depends(get_actor)):
    return _delete(db, Asset, asset_id, actor, ResourceType.ASSET, "asset", "name")


# ---------------------------
# Applications
# ---------------------------
@router.get("/api/clients/{client_id}/applications")
def list_applications(scope: ClientScope = Depends(get_client_scope), db: Session = Depends(get_db)):
    rows = (db.query(Application)
            .filter(Application.client_id == scope.client_id)
            .order_by(Application.name)
            .all())
    return [row_out(a) for a in rows]


@router.post("/api/clients/{client_id}/applications", status_code=201)
def create_application(body: ApplicationIn, scope: ClientScope = Depends(get_client_scope),
                       db: Session = Depends(get_db), actor: Optional[str] = Depends(get_actor)):
    return _create(db, Application, scope, body, actor, ResourceType.APPLICATION, "application", "name")


@router.put("/api/applications/{application_id}")
def update_application(application_id: int, body: ApplicationIn, db: Session = Depends(get_db),
                       actor: Optional[str] = Depends(get_actor)):
    return _update(db, Application, application_id, body, actor, ResourceType.APPLICATION,
                   "application", "name")


@router.delete("/api/applications/{application_id}")
def delete_application(application_id: int, db: Session = Depends(get_db),
                       actor: Optional[str] = Depends(get_actor)):
    return _delete(db, Application, application_id, actor, ResourceType.APPLICATION, "application", "name")
