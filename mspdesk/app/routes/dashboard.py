# mspdesk/app/routes/dashboard.py
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from ..db import get_db
from ..models import ActivityLog, Client, InboundPackage
from ..status import annotate, count_tiers

router = APIRouter(tags=["dashboard"])

RECENT_LIMIT = 5


def activity_out(a: ActivityLog) -> dict:
    return {
        "id": a.id,
        "actor": a.actor,
        "action_type": a.action_type,
        "resource_type": a.resource_type,
        "resource_id": a.resource_id,
        "details": a.details,
        "created_at": a.created_at.isoformat() if a.created_at else None,
    }


@router.get("/api/dashboard")
def dashboard(db: Session = Depends(get_db)):
    today = date.today()
    open_packages = (db.query(InboundPackage)
                     .options(joinedload(InboundPackage.client))
                     .filter(InboundPackage.completed.is_(False))
                     .all())
    recent_activity = (db.query(ActivityLog)
                       .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
                       .limit(RECENT_LIMIT)
                       .all())
    recent_inbound = (db.query(InboundPackage)
                      .options(joinedload(InboundPackage.client))
                      .order_by(InboundPackage.received_date.desc())
                      .limit(RECENT_LIMIT)
                      .all())
    return {
        "total_clients": db.query(Client).count(),
        "pending_inbound": len(open_packages),
        "overdue_inbound": sum(1 for p in open_packages if p.expected_date < today),
        "tiers": count_tiers(annotate(p, today) for p in open_packages),
        "recent_activity": [activity_out(a) for a in recent_activity],
        "recent_inbound": [
            {
                "id": p.id,
                "package_type": p.package_type,
                "client_name": p.client.name if p.client else None,
                "received_date": p.received_date.isoformat() if p.received_date else None,
            }
            for p in recent_inbound
        ],
    }


@router.get("/api/activity")
def list_activity(limit: int = Query(50, ge=1, le=500), db: Session = Depends(get_db)):
    rows = (db.query(ActivityLog)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
            .all())
    return [activity_out(a) for a in rows]
