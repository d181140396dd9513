# mspdesk/app/routes/integration.py
# Ticketing system settings, customer lookup and client <-> customer mappings.
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Client, CustomerMapping, TicketingSettings
from ..relay import forward_request
from ..schemas import MappingIn, TicketingSettingsIn
from ..settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/integration", tags=["integration"])


def _current_settings(db: Session):
    return db.query(TicketingSettings).order_by(TicketingSettings.id).first()


def settings_out(s) -> dict:
    if s is None:
        return {"configured": False, "api_url": get_settings().TICKETING_API_URL}
    return {"configured": True, "id": s.id, "api_url": s.api_url, "has_api_key": bool(s.api_key)}


def mapping_out(m: CustomerMapping) -> dict:
    return {"client_id": m.client_id, "ticketing_customer_id": m.ticketing_customer_id}


@router.get("/settings")
def get_integration_settings(db: Session = Depends(get_db)):
    return settings_out(_current_settings(db))


@router.put("/settings")
def save_integration_settings(body: TicketingSettingsIn, db: Session = Depends(get_db)):
    api_url = (body.api_url or get_settings().TICKETING_API_URL).rstrip("/")
    s = _current_settings(db)
    if s is None:
        s = TicketingSettings(api_key=body.api_key, api_url=api_url)
        db.add(s)
    else:
        s.api_key = body.api_key
        s.api_url = api_url
    db.commit()
    db.refresh(s)
    logger.info("ticketing settings saved (api_url=%s)", s.api_url)
    return settings_out(s)


@router.get("/customers")
def list_ticketing_customers(db: Session = Depends(get_db)):
    s = _current_settings(db)
    if s is None or not s.api_key:
        raise HTTPException(status_code=400, detail="configure and save the API key first")

    try:
        upstream = forward_request(f"{s.api_url}/customers", "GET",
                                   {"X-API-KEY": s.api_key, "Accept": "application/json"})
    except Exception as e:
        logger.exception("error fetching ticketing customers")
        raise HTTPException(status_code=502, detail=f"ticketing API unreachable: {e}")

    if not upstream.ok:
        logger.warning("ticketing API returned %s", upstream.status_code)
        raise HTTPException(status_code=502,
                            detail=f"failed to fetch customers ({upstream.status_code}): {upstream.text}")
    try:
        data = upstream.json()
    except ValueError:
        raise HTTPException(status_code=502, detail="ticketing API returned invalid JSON")
    return {"items": data.get("items", []) if isinstance(data, dict) else []}


@router.get("/mappings")
def list_mappings(db: Session = Depends(get_db)):
    return [mapping_out(m) for m in db.query(CustomerMapping).order_by(CustomerMapping.client_id).all()]


@router.put("/mappings/{client_id}")
def set_mapping(client_id: int, body: MappingIn, db: Session = Depends(get_db)):
    if not db.get(Client, client_id):
        raise HTTPException(status_code=404, detail="client not found")

    # replacing the client's mapping is a single transaction
    try:
        db.query(CustomerMapping).filter(CustomerMapping.client_id == client_id).delete(
            synchronize_session=False)
        m = CustomerMapping(client_id=client_id, ticketing_customer_id=body.ticketing_customer_id)
        db.add(m)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("store error mapping client %s, rolled back", client_id)
        raise
    except Exception:
        db.rollback()
        logger.exception("error mapping client %s", client_id)
        raise HTTPException(status_code=500, detail="error saving mapping")
    db.refresh(m)
    return mapping_out(m)


@router.delete("/mappings/{client_id}")
def delete_mapping(client_id: int, db: Session = Depends(get_db)):
    deleted = db.query(CustomerMapping).filter(CustomerMapping.client_id == client_id).delete(
        synchronize_session=False)
    db.commit()
    if not deleted:
        raise HTTPException(status_code=404, detail="mapping not found")
    return {"ok": True}
