# mspdesk/app/status.py
"""
Inbound package aging.

A package's tier is derived from how many business days (Mon-Fri) have
passed since its expected arrival date, counting both endpoints. Tiers are
recomputed on every read; nothing here touches the database.
"""
import enum
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from pydantic import BaseModel

WARNING_AFTER = 3    # more than this many business days -> WARNING
CRITICAL_AFTER = 5   # more than this many business days -> CRITICAL


class StatusTier(str, enum.Enum):
    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def business_days_elapsed(expected_date, today: Optional[date] = None) -> int:
    """Count Mon-Fri days from expected_date up to and including today.

    Returns 0 when the expected date is still in the future.
    """
    current = _as_date(expected_date)
    end = _as_date(today) if today is not None else date.today()
    days = 0
    while current <= end:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days


def classify(expected_date, today: Optional[date] = None) -> StatusTier:
    days = business_days_elapsed(expected_date, today)
    if days <= WARNING_AFTER:
        return StatusTier.OK
    if days <= CRITICAL_AFTER:
        return StatusTier.WARNING
    return StatusTier.CRITICAL


class PackageFilter(BaseModel):
    """Table filters; an empty string means no constraint on that field."""
    show_completed: bool = False
    client: str = ""
    package_type: str = ""
    serial_number: str = ""
    received_by: str = ""
    status: str = ""


def annotate(package, today: Optional[date] = None) -> dict:
    """Serialize an InboundPackage row with its freshly computed tier."""
    return {
        "id": package.id,
        "client_id": package.client_id,
        "client_name": package.client.name if package.client else None,
        "package_type": package.package_type,
        "received_by": package.received_by,
        "ticket_id": package.ticket_id,
        "serial_number": package.serial_number,
        "received_date": package.received_date.isoformat() if package.received_date else None,
        "expected_date": package.expected_date.isoformat() if package.expected_date else None,
        "completed": bool(package.completed),
        "completed_at": package.completed_at.isoformat() if package.completed_at else None,
        "completed_by": package.completed_by,
        "status": classify(package.expected_date, today).value,
    }


def _contains(value: Optional[str], needle: str) -> bool:
    return value is not None and needle.lower() in value.lower()


def apply_filters(rows: Iterable[dict], filters: PackageFilter, scope=None) -> list[dict]:
    """Narrow annotated package rows; every predicate is conjunctive.

    The client-name filter is ignored when a client scope is already applied.
    """
    out = list(rows)
    if not filters.show_completed:
        out = [r for r in out if not r["completed"]]
    if filters.client and scope is None:
        out = [r for r in out if _contains(r["client_name"], filters.client)]
    if filters.package_type:
        out = [r for r in out if _contains(r["package_type"], filters.package_type)]
    if filters.serial_number:
        out = [r for r in out if _contains(r["serial_number"], filters.serial_number)]
    if filters.received_by:
        out = [r for r in out if _contains(r["received_by"], filters.received_by)]
    if filters.status:
        out = [r for r in out if r["status"].lower() == filters.status.lower()]
    return out


def count_tiers(rows: Iterable[dict]) -> dict[str, int]:
    counts = {tier.value.lower(): 0 for tier in StatusTier}
    for r in rows:
        counts[r["status"].lower()] += 1
    return counts
