"""
Establishment lifecycle rules - status machine and provenance timestamps.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional


class EstablishmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DEACTIVATE = "DEACTIVATE"
    REACTIVATE = "REACTIVATE"


INITIAL_STATUS = EstablishmentStatus.ACTIVE

# Target status per transition. Both are idempotent: applying one to a
# record already in the target status is allowed and still audited.
TRANSITIONS = {
    AuditAction.DEACTIVATE: EstablishmentStatus.INACTIVE,
    AuditAction.REACTIVATE: EstablishmentStatus.ACTIVE,
}


def target_status(action: AuditAction) -> EstablishmentStatus:
    """Status reached by a status transition action."""
    return TRANSITIONS[action]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def advance_timestamp(previous: Optional[datetime], now: Optional[datetime] = None) -> datetime:
    """
    Next `updated_at` value: never earlier than, nor equal to, the previous one.
    """
    now = now or utcnow()
    if previous is None:
        return now
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now
