"""
Simple Dependency Injection container using Flask's g object.

No external DI framework needed - just factory functions that create
services with their dependencies, cached per-request in Flask g.
"""
from flask import g, current_app

from pharmacy_registry import database
from pharmacy_registry.database import get_db
from pharmacy_registry.repositories.unit_of_work import UnitOfWork


def get_uow() -> UnitOfWork:
    """Get or create UnitOfWork for the current request."""
    if 'uow' not in g:
        db = next(get_db())
        g.uow = UnitOfWork(db)
    return g.uow


def get_registry_client():
    """Get RegistryClient bound to the reference store."""
    from pharmacy_registry.services.registry_client import RegistryClient
    return RegistryClient(database.reference_session)


def get_access_guard():
    """Get AccessGuard for the current request."""
    from pharmacy_registry.services.access_guard import AccessGuard
    return AccessGuard(get_uow())


def get_pharmacy_service():
    """Get PharmacyService with registry client, guard and audit recorder."""
    from pharmacy_registry.application.pharmacy_service import PharmacyService
    from pharmacy_registry.services.audit_recorder import AuditRecorder

    uow = get_uow()
    return PharmacyService(
        uow,
        registry=get_registry_client(),
        guard=get_access_guard(),
        audit_recorder=AuditRecorder(uow),
    )


def get_trace_recorder():
    """Process-wide TraceRecorder created by the app factory (may be None)."""
    return getattr(current_app, 'trace_recorder', None)


def teardown_uow(exception=None):
    """
    Teardown handler for Flask app context.

    Register with: app.teardown_appcontext(teardown_uow)
    """
    uow = g.pop('uow', None)
    if uow:
        if exception:
            uow.rollback()
        uow.close()
