"""
Access Guard - maps the actor's role in the active organization to capabilities.

The membership is read on every call; nothing is cached across requests
because the active organization may change between two requests.
"""
import logging
from enum import Enum

from pharmacy_registry.database import OPERATIONAL_STORE, store_errors
from pharmacy_registry.domain.entities.actor import ActorContext, ResolvedActor
from pharmacy_registry.domain.exceptions import ForbiddenError, NoActiveTenantError, UnauthenticatedError

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    VIEW = "view"
    WRITE = "write"
    ADMIN = "admin"


_ALL = frozenset({Capability.VIEW, Capability.WRITE, Capability.ADMIN})
_EDIT = frozenset({Capability.VIEW, Capability.WRITE})
_READ = frozenset({Capability.VIEW})

ROLE_CAPABILITIES = {
    "owner": _ALL,
    "admin": _ALL,
    "masterFp": _ALL,
    "member": _EDIT,
    "editor": _EDIT,
    "analistaFp": _EDIT,
    "gestor": _EDIT,
    "representanteLegal": _EDIT,
    "viewer": _READ,
    "consultaFp": _READ,
    "financeiroFp": _READ,
    "vendedor": _READ,
}


def capabilities_for(role: str) -> frozenset:
    """Static role -> capability mapping; unknown roles get nothing."""
    return ROLE_CAPABILITIES.get(role or "", frozenset())


class AccessGuard:
    def __init__(self, uow):
        self._uow = uow

    def resolve(self, actor_ctx: ActorContext) -> ResolvedActor:
        """Resolve the context into exactly one (actor, organization, role) triple."""
        if actor_ctx is None or not actor_ctx.is_authenticated:
            raise UnauthenticatedError()
        if actor_ctx.active_organization_id is None:
            raise NoActiveTenantError()

        with store_errors(OPERATIONAL_STORE):
            role = self._uow.members.get_role(actor_ctx.actor_id, actor_ctx.active_organization_id)

        if role is None:
            logger.warning(f"⚠️ Usuário {actor_ctx.actor_id} não pertence à organização ativa")
            raise NoActiveTenantError("Usuário não é membro da organização ativa")

        return ResolvedActor(
            actor_id=actor_ctx.actor_id,
            organization_id=actor_ctx.active_organization_id,
            role=role,
            capabilities=capabilities_for(role),
            origin=actor_ctx.origin,
        )

    def require(self, actor_ctx: ActorContext, capability: Capability) -> ResolvedActor:
        resolved = self.resolve(actor_ctx)
        if not resolved.can(capability):
            raise ForbiddenError(capability.value, resolved.role)
        return resolved
