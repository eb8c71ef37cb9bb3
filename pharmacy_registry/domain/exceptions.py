"""
Domain exceptions - Business-level errors.

Every failure of the mutation pipeline is one of these tagged errors.
They are raised by the services and translated to responses by the request
layer (see error_codes.ErrorCode).
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    tag = "DomainError"
    retryable = False

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


# Authorization

class UnauthenticatedError(DomainError):
    """Raised when the request carries no active session."""

    tag = "Unauthenticated"

    def __init__(self, message: str = "Sessão ausente ou expirada"):
        super().__init__(message, "UNAUTHENTICATED")


class NoActiveTenantError(DomainError):
    """Raised when the actor has no usable active organization."""

    tag = "NoActiveTenant"

    def __init__(self, message: str = "Nenhuma organização ativa selecionada"):
        super().__init__(message, "NO_ACTIVE_TENANT")


class ForbiddenError(DomainError):
    """Raised when the actor's role lacks the required capability."""

    tag = "Forbidden"

    def __init__(self, capability: str = None, role: str = None):
        self.capability = capability
        self.role = role
        message = "Acesso não autorizado"
        if capability:
            message = f"Perfil '{role}' não possui a permissão '{capability}'"
        super().__init__(message, "FORBIDDEN")


# Validation

class ValidationError(DomainError):
    """Raised when validation fails."""

    def __init__(self, message: str, field: str = None, code: str = None):
        self.field = field
        if code is None:
            code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)


class InvalidDocumentError(ValidationError):
    """Raised when a CPF/CNPJ fails the format or checksum check."""

    tag = "InvalidDocument"

    def __init__(self, field: str, value: str = None):
        self.value = value
        super().__init__(f"Documento inválido no campo '{field}'", field, "INVALID_DOCUMENT")


class InvalidInputError(ValidationError):
    """Raised when the payload shape is wrong (missing field, too long, ...)."""

    tag = "InvalidInput"

    def __init__(self, message: str, errors: list = None):
        self.errors = errors or []
        super().__init__(message, None, "INVALID_INPUT")


# Reference registry outcomes

class UnknownIdentityError(DomainError):
    """Raised when a document/code does not exist in the reference registry."""

    tag = "UnknownIdentity"

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} '{identifier}' não encontrado no cadastro de referência", "UNKNOWN_IDENTITY")


class InactiveIdentityError(DomainError):
    """Raised when a registry record exists but is not active."""

    tag = "InactiveIdentity"

    def __init__(self, kind: str, identifier: str, status: str):
        self.kind = kind
        self.identifier = identifier
        self.status = status
        super().__init__(f"{kind} '{identifier}' está com situação '{status}'", "INACTIVE_IDENTITY")


# Operational store outcomes

class NotFoundError(DomainError):
    """Raised when an entity is not found."""

    tag = "NotFound"

    def __init__(self, entity_type: str, identifier: str = None):
        self.entity_type = entity_type
        self.identifier = identifier
        message = f"{entity_type} não encontrado"
        if identifier:
            message = f"{entity_type} '{identifier}' não encontrado"
        super().__init__(message, "NOT_FOUND")


class EstablishmentNotFoundError(NotFoundError):
    """Raised when a pharmacy establishment is not found."""

    def __init__(self, cnpj: str = None):
        super().__init__("Estabelecimento", cnpj)


class DuplicateEstablishmentError(DomainError):
    """Raised when creating a pharmacy whose CNPJ is already registered."""

    tag = "Duplicate"

    def __init__(self, cnpj: str):
        self.cnpj = cnpj
        super().__init__(f"Estabelecimento '{cnpj}' já está cadastrado", "DUPLICATE_ESTABLISHMENT")


# Infrastructure (safe to retry: nothing was persisted)

class TransportFailureError(DomainError):
    """Raised when a store is unreachable or a call times out."""

    tag = "TransportFailure"
    retryable = True

    def __init__(self, store: str, detail: str = None):
        self.store = store
        self.detail = detail
        super().__init__(f"Falha de comunicação com o banco '{store}'", "TRANSPORT_FAILURE")


class ConflictOnCommitError(DomainError):
    """Raised when the atomic state+audit write fails and was rolled back."""

    tag = "ConflictOnCommit"
    retryable = True

    def __init__(self, detail: str = None):
        self.detail = detail
        super().__init__("Não foi possível gravar a alteração. Tente novamente.", "CONFLICT_ON_COMMIT")
