"""Pydantic schemas for actors and their role assignments."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResourceRole(BaseModel):
    """A role held by an actor, optionally restricted to resources.

    An empty ``resources`` list makes the role global: its permissions apply
    to every resource. Otherwise they apply only to resources whose id, or
    one of whose owner ids, appears in the list. Listing the actor's own id
    scopes the role to everything the actor owns.
    """
    model_config = ConfigDict(frozen=True)

    role: str = Field(..., description="Role name, resolved against configured role definitions")
    resources: List[str] = Field(default_factory=list, description="Resource or owner ids the role is restricted to")

    @property
    def is_global(self) -> bool:
        return not self.resources


class Actor(BaseModel):
    """The identity on whose behalf an operation runs.

    Internal/system callers pass ``None`` instead of an Actor.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identity id, e.g. https://example.com/i/alice")
    roles: List[ResourceRole] = Field(default_factory=list)

    @classmethod
    def owning(cls, actor_id: str, role: str) -> "Actor":
        """Build an actor whose single role is scoped to what it owns."""
        return cls(id=actor_id, roles=[ResourceRole(role=role, resources=[actor_id])])


def actor_id(actor: Optional[Actor]) -> Optional[str]:
    """Id of the acting identity for log context (None for system calls)."""
    return actor.id if actor is not None else None
