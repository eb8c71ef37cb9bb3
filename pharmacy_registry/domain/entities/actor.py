"""
Actor context - who is asking, from which organization and from where.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class ActorContext:
    """
    Request-scoped context handed to every pipeline call by the session layer.

    Nothing here is trusted for authorization until the Access Guard has
    resolved it against the current membership rows.
    """
    actor_id: Optional[UUID] = None
    active_organization_id: Optional[UUID] = None
    origin: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.actor_id is not None


@dataclass(frozen=True)
class ResolvedActor:
    """The (actor, active organization, role) triple plus its capabilities."""
    actor_id: UUID
    organization_id: UUID
    role: str
    capabilities: frozenset
    origin: Optional[str] = None

    def can(self, capability) -> bool:
        return capability in self.capabilities
