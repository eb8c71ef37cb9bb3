# Domain Layer - Pure business logic, no dependencies on infrastructure

# Exceptions
from .exceptions import (
    DomainError,
    UnauthenticatedError,
    NoActiveTenantError,
    ForbiddenError,
    ValidationError,
    InvalidDocumentError,
    InvalidInputError,
    UnknownIdentityError,
    InactiveIdentityError,
    NotFoundError,
    EstablishmentNotFoundError,
    DuplicateEstablishmentError,
    TransportFailureError,
    ConflictOnCommitError,
)

# Value Objects
from .value_objects import (
    Cpf,
    Cnpj,
    validate_person_id,
    validate_company_id,
)

# Entities
from .entities import (
    ActorContext,
    ResolvedActor,
    IdentityKind,
    IdentityStatus,
    IdentityRecord,
    CityRecord,
    StateRecord,
    EstablishmentStatus,
    AuditAction,
)

__all__ = [
    # Exceptions
    'DomainError',
    'UnauthenticatedError',
    'NoActiveTenantError',
    'ForbiddenError',
    'ValidationError',
    'InvalidDocumentError',
    'InvalidInputError',
    'UnknownIdentityError',
    'InactiveIdentityError',
    'NotFoundError',
    'EstablishmentNotFoundError',
    'DuplicateEstablishmentError',
    'TransportFailureError',
    'ConflictOnCommitError',
    # Value Objects
    'Cpf',
    'Cnpj',
    'validate_person_id',
    'validate_company_id',
    # Entities
    'ActorContext',
    'ResolvedActor',
    'IdentityKind',
    'IdentityStatus',
    'IdentityRecord',
    'CityRecord',
    'StateRecord',
    'EstablishmentStatus',
    'AuditAction',
]
