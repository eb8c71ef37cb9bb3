"""
Unit of Work pattern for managing database transactions.

Provides a single entry point for all operational repositories within a
request, and the one place where state + audit rows are committed together.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from pharmacy_registry.database import OPERATIONAL_STORE, TRANSPORT_ERRORS
from pharmacy_registry.domain.exceptions import ConflictOnCommitError, DomainError, TransportFailureError
from .pharmacy_repository import PharmacyRepository
from .audit_repository import AuditRepository
from .trace_repository import TraceRepository
from .user_repository import UserRepository
from .membership_repository import MembershipRepository, OrganizationRepository, SessionRepository

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Aggregates all repositories and manages the database session lifecycle.

    Usage:
        uow = UnitOfWork(session)
        with uow.atomic():
            uow.pharmacies.add(pharmacy)
            uow.audits.add(audit)
        # both rows committed, or neither
    """

    def __init__(self, session):
        self.session = session
        self.pharmacies = PharmacyRepository(session)
        self.audits = AuditRepository(session)
        self.traces = TraceRepository(session)
        self.users = UserRepository(session)
        self.members = MembershipRepository(session)
        self.sessions = SessionRepository(session)
        self.organizations = OrganizationRepository(session)

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

    def flush(self):
        self.session.flush()

    def close(self):
        self.session.close()

    @contextmanager
    def atomic(self):
        """
        Commit everything added inside the block as one transaction.

        Connection loss and timeouts roll back and surface as
        TransportFailureError; any other store failure (flush or commit) as
        ConflictOnCommitError. Domain errors roll back and propagate as is.
        """
        try:
            yield self
            self.session.flush()
            self.session.commit()
        except DomainError:
            self.session.rollback()
            raise
        except TRANSPORT_ERRORS as e:
            self.session.rollback()
            logger.error(f"❌ Banco operacional indisponível no commit, rollback executado: {e.__class__.__name__}")
            raise TransportFailureError(OPERATIONAL_STORE, e.__class__.__name__) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"❌ Commit atômico falhou, rollback executado: {e.__class__.__name__}")
            raise ConflictOnCommitError(e.__class__.__name__) from e
        except Exception:
            self.session.rollback()
            raise

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.rollback()
        self.close()
        return False
