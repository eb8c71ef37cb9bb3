"""Repository for AuditRecord entities (append-only)."""
from typing import List

from pharmacy_registry.models_db import AuditRecord


class AuditRepository:
    def __init__(self, session):
        self._session = session

    def add(self, record: AuditRecord) -> AuditRecord:
        self._session.add(record)
        return record

    def get_for_target(self, target_id: str) -> List[AuditRecord]:
        """Provenance trail of one record, oldest first."""
        return self._session.query(AuditRecord).filter(
            AuditRecord.target_id == target_id,
        ).order_by(AuditRecord.created_at, AuditRecord.id).all()

    def count(self) -> int:
        return self._session.query(AuditRecord).count()
