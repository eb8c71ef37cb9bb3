"""
Domain Entities - Pure business objects without infrastructure dependencies.
"""

from .actor import ActorContext, ResolvedActor
from .identity import (
    IdentityKind,
    IdentityStatus,
    IdentityRecord,
    CityRecord,
    StateRecord,
)
from .establishment import (
    EstablishmentStatus,
    AuditAction,
    INITIAL_STATUS,
    target_status,
    advance_timestamp,
)

__all__ = [
    'ActorContext',
    'ResolvedActor',
    'IdentityKind',
    'IdentityStatus',
    'IdentityRecord',
    'CityRecord',
    'StateRecord',
    'EstablishmentStatus',
    'AuditAction',
    'INITIAL_STATUS',
    'target_status',
    'advance_timestamp',
]
