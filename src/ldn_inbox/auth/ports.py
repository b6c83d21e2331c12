"""PermissionCheckerPort - Port interface for the permission oracle.

The stores never decide authorization themselves. They resolve the ownership
context of a resource, describe it with a ResourceDescriptor, and hand it to
an oracle implementing this port. Adapters may evaluate role definitions
in-process (see roles.RoleBasedPermissionChecker) or call out to a policy
service.

Architecture: Hexagonal - Port interface, concrete checkers are adapters
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .permissions import Permission
from .schemas import Actor


@dataclass(frozen=True)
class ResourceDescriptor:
    """A resource plus its explicit, already-resolved owner ids.

    Attributes:
        resource_id: Caller-facing id of the resource being checked
        owners: Owner ids the check is anchored on. For inboxes this is the
            inbox owner; for messages it is the owner of the containing inbox.
    """
    resource_id: Optional[str]
    owners: Tuple[str, ...] = field(default_factory=tuple)

    def identifiers(self) -> Tuple[str, ...]:
        """All ids a scoped role may match: the resource id and its owners."""
        if self.resource_id is None:
            return tuple(self.owners)
        return (self.resource_id,) + tuple(self.owners)


class PermissionCheckerPort(ABC):
    """Abstract interface for permission oracles.

    Implementations must be side-effect free: a check may be repeated (for
    example once per record while filtering a listing) without changing
    the outcome.
    """

    @abstractmethod
    def check_permission(
        self,
        actor: Actor,
        permission: Permission,
        resource: Optional[ResourceDescriptor] = None,
    ) -> None:
        """Check that an actor holds a permission.

        Args:
            actor: The acting identity (never None; the gate handles the
                system bypass before calling the oracle)
            permission: Permission being checked
            resource: Resource descriptor for scoped checks, or None for an
                unscoped check against the actor's roles only

        Raises:
            PermissionDeniedError: If the actor lacks the permission
        """
        pass
