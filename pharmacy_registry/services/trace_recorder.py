"""
Trace Recorder - best-effort request trail.

Runs on its own sessions, outside any mutation transaction. Failures are
logged and swallowed; under load (too many pending writes) traces are dropped.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from pharmacy_registry.models_db import TraceRecord

logger = logging.getLogger("pharmacy-registry.trace")


class TraceRecorder:
    def __init__(
        self,
        session_factory,
        routes: Optional[Iterable[str]] = None,
        max_pending: int = 100,
        synchronous: bool = False,
    ):
        self._session_factory = session_factory
        self._routes = tuple(r.lower() for r in routes) if routes else None
        self._max_pending = max_pending
        self._synchronous = synchronous
        self._pending = 0
        self._lock = threading.Lock()
        self._executor = None if synchronous else ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="trace-recorder",
        )

    def should_trace(self, route: str) -> bool:
        """Only routes under one of the configured prefixes are traced."""
        if self._routes is None:
            return True
        route = (route or "").lower()
        return any(route.startswith(prefix) for prefix in self._routes)

    def trace(self, method: str, route: str, actor_id=None, origin: Optional[str] = None) -> None:
        """Fire-and-forget; never raises."""
        try:
            if not self.should_trace(route):
                return

            record = {
                "method": method,
                "route": route,
                "actor_id": str(actor_id) if actor_id is not None else None,
                "origin": origin,
            }

            if self._synchronous:
                self._write(record)
                return

            with self._lock:
                if self._pending >= self._max_pending:
                    logger.warning(f"⚠️ Rastro descartado (fila cheia): {method} {route}")
                    return
                self._pending += 1
            self._executor.submit(self._write_and_release, record)
        except Exception as e:
            logger.error(f"❌ Falha ao agendar rastro da requisição: {e}")

    def _write_and_release(self, record: dict) -> None:
        try:
            self._write(record)
        finally:
            with self._lock:
                self._pending -= 1

    def _write(self, record: dict) -> None:
        session = None
        try:
            session = self._session_factory()
            session.add(TraceRecord(**record))
            session.commit()
        except Exception as e:
            logger.error(f"❌ Falha ao gravar rastro da requisição {record['method']} {record['route']}: {e}")
            if session is not None:
                session.rollback()
        finally:
            if session is not None:
                session.close()

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
