"""Repository for TraceRecord entities (append-only, best-effort)."""
from typing import List

from pharmacy_registry.models_db import TraceRecord


class TraceRepository:
    def __init__(self, session):
        self._session = session

    def add(self, record: TraceRecord) -> TraceRecord:
        self._session.add(record)
        return record

    def get_recent(self, limit: int = 50) -> List[TraceRecord]:
        return self._session.query(TraceRecord).order_by(
            TraceRecord.created_at.desc(),
        ).limit(limit).all()
