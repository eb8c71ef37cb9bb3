"""Audit Recorder - appends immutable before/after change records."""
from datetime import datetime
from typing import Optional

from pharmacy_registry.domain.entities.establishment import AuditAction, utcnow
from pharmacy_registry.models_db import AuditRecord, Pharmacy


class AuditRecorder:
    """
    Adds one AuditRecord to the unit of work's session.

    It never commits: the caller's UnitOfWork.atomic() block commits it
    together with the state change it describes.
    """

    def __init__(self, uow, table_name: str = Pharmacy.__tablename__):
        self._uow = uow
        self._table_name = table_name

    def record(
        self,
        action: AuditAction,
        target_id: str,
        actor_id,
        origin: Optional[str],
        before: Optional[dict],
        after: Optional[dict],
        created_at: Optional[datetime] = None,
    ) -> AuditRecord:
        """
        `created_at` defaults to now; the pipeline passes the record's new
        updated_at so the trail of one establishment is strictly ordered.
        """
        audit = AuditRecord(
            created_at=created_at or utcnow(),
            action=action.value if isinstance(action, AuditAction) else str(action),
            table_name=self._table_name,
            target_id=target_id,
            actor_id=str(actor_id) if actor_id is not None else None,
            origin=origin,
            before=before,
            after=after,
        )
        return self._uow.audits.add(audit)
