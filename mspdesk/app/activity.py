# mspdesk/app/activity.py
import enum
import logging
from typing import Optional

from fastapi import Header
from sqlalchemy.orm import Session

from .models import ActivityLog

logger = logging.getLogger(__name__)


class ActionType(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ResourceType(str, enum.Enum):
    CLIENT = "CLIENT"
    NETWORK = "NETWORK"
    PRINTER = "PRINTER"
    INBOUND_PACKAGE = "INBOUND_PACKAGE"
    ASSET = "ASSET"
    APPLICATION = "APPLICATION"


def get_actor(x_actor: Optional[str] = Header(None)) -> Optional[str]:
    return x_actor.strip() if x_actor and x_actor.strip() else None


def log_activity(db: Session, actor: Optional[str], action: ActionType, resource: ResourceType,
                 resource_id: Optional[int], details: str) -> None:
    """Append an activity entry (best-effort).

    Nothing is written without an actor. A failing write is rolled back and
    logged; it never propagates to the caller.
    """
    if not actor:
        logger.debug("skipping activity %s %s/%s: no actor", action.value, resource.value, resource_id)
        return
    try:
        db.add(ActivityLog(actor=actor, action_type=action.value, resource_type=resource.value,
                           resource_id=resource_id, details=details))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("error logging activity %s %s/%s", action.value, resource.value, resource_id)
