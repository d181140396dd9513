# mspdesk/app/routes/packages.py
import csv
import io
import logging
from datetime import date, datetime, timezone
from typing import Optional

import pandas as pd
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session, joinedload

from ..activity import ActionType, ResourceType, get_actor, log_activity
from ..db import get_db
from ..models import Client, InboundPackage
from ..schemas import PackageIn, PackageUpdate
from ..scope import ClientScope, get_client_scope
from ..status import PackageFilter, annotate, apply_filters, count_tiers

logger = logging.getLogger(__name__)

router = APIRouter(tags=["packages"])

# the only fields editable after receipt
EDITABLE_FIELDS = ("package_type", "received_by", "ticket_id", "serial_number")
REQUIRED_FIELDS = ("package_type", "received_by")


def _fetch(db: Session, client_id: Optional[int] = None) -> list[InboundPackage]:
    q = db.query(InboundPackage).options(joinedload(InboundPackage.client))
    if client_id is not None:
        q = q.filter(InboundPackage.client_id == client_id)
    return q.order_by(InboundPackage.expected_date.desc(), InboundPackage.id.desc()).all()


def _listing(db: Session, filters: PackageFilter, scope: Optional[ClientScope] = None) -> dict:
    today = date.today()
    rows = [annotate(p, today) for p in _fetch(db, scope.client_id if scope else None)]
    visible = apply_filters(rows, filters, scope)
    return {"count": len(visible), "stats": count_tiers(visible), "items": visible}


def _get_or_404(db: Session, package_id: int) -> InboundPackage:
    p = db.get(InboundPackage, package_id)
    if not p:
        raise HTTPException(status_code=404, detail="package not found")
    return p


def _create(db: Session, body: PackageIn, client_id: int, actor: Optional[str]) -> dict:
    client = db.get(Client, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="client not found")
    p = InboundPackage(
        client_id=client.id,
        package_type=body.package_type,
        received_by=body.received_by,
        ticket_id=body.ticket_id,
        serial_number=body.serial_number,
        expected_date=body.expected_date,
        received_date=datetime.now(timezone.utc),
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    log_activity(db, actor, ActionType.CREATE, ResourceType.INBOUND_PACKAGE, p.id,
                 f"Created new inbound package: {p.package_type} for {client.name}")
    return annotate(p)


# ---------------------------
# List (all clients / one client)
# ---------------------------
@router.get("/api/packages")
def list_packages(filters: PackageFilter = Depends(), db: Session = Depends(get_db)):
    return _listing(db, filters)


@router.get("/api/clients/{client_id}/packages")
def list_client_packages(filters: PackageFilter = Depends(),
                         scope: ClientScope = Depends(get_client_scope),
                         db: Session = Depends(get_db)):
    return _listing(db, filters, scope)


# ---------------------------
# Export
# ---------------------------
@router.get("/api/packages/export")
def export_packages(fmt: str = Query("csv", pattern="^(csv|xlsx)$"), db: Session = Depends(get_db)):
    today = date.today()
    rows = [annotate(p, today) for p in _fetch(db)]
    stamp = today.strftime("%Y%m%d")

    if fmt == "csv":
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=rows[0].keys() if rows else ["id", "package_type"])
        writer.writeheader()
        if rows:
            writer.writerows(rows)
        return Response(content=buffer.getvalue(), media_type="text/csv",
                        headers={"Content-Disposition": f'attachment; filename="inbound_packages_{stamp}.csv"'})

    df = pd.DataFrame(rows)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="inbound_packages")
    buffer.seek(0)
    return Response(content=buffer.read(),
                    media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                    headers={"Content-Disposition": f'attachment; filename="inbound_packages_{stamp}.xlsx"'})


# ---------------------------
# Create (log receipt)
# ---------------------------
@router.post("/api/packages", status_code=201)
def create_package(body: PackageIn, db: Session = Depends(get_db), actor: Optional[str] = Depends(get_actor)):
    if body.client_id is None:
        raise HTTPException(status_code=422, detail="missing client_id")
    return _create(db, body, body.client_id, actor)


@router.post("/api/clients/{client_id}/packages", status_code=201)
def create_client_package(body: PackageIn, scope: ClientScope = Depends(get_client_scope),
                          db: Session = Depends(get_db), actor: Optional[str] = Depends(get_actor)):
    return _create(db, body, scope.client_id, actor)


@router.get("/api/packages/{package_id}")
def get_package(package_id: int, db: Session = Depends(get_db)):
    return annotate(_get_or_404(db, package_id))


# ---------------------------
# Edit details
# ---------------------------
@router.patch("/api/packages/{package_id}")
def update_package(package_id: int, body: PackageUpdate, db: Session = Depends(get_db),
                   actor: Optional[str] = Depends(get_actor)):
    p = _get_or_404(db, package_id)
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if k in EDITABLE_FIELDS}
    if not any(changes.values()):
        return annotate(p)

    for field, value in changes.items():
        if field in REQUIRED_FIELDS and value is None:
            continue
        setattr(p, field, value)
    db.commit()
    db.refresh(p)
    log_activity(db, actor, ActionType.UPDATE, ResourceType.INBOUND_PACKAGE, p.id,
                 "Updated inbound package details")
    return annotate(p)


# ---------------------------
# Complete (one-way)
# ---------------------------
@router.post("/api/packages/{package_id}/complete")
def complete_package(package_id: int, db: Session = Depends(get_db),
                     actor: Optional[str] = Depends(get_actor)):
    p = _get_or_404(db, package_id)
    if p.completed:
        return {"ok": False, "message": "already completed"}
    p.completed = True
    p.completed_at = datetime.now(timezone.utc)
    p.completed_by = actor
    db.commit()
    db.refresh(p)
    logger.info("package %s completed by %s", p.id, actor)
    log_activity(db, actor, ActionType.UPDATE, ResourceType.INBOUND_PACKAGE, p.id,
                 f"Completed inbound package: {p.package_type} for {p.client.name}")
    return {"ok": True, "package": annotate(p)}
