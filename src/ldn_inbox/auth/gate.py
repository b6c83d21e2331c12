"""Permission gate in front of the permission oracle.

The stores call the gate, never the oracle directly. The gate applies the
system-caller bypass (``actor is None``), builds the resource descriptor for
each kind of check, and logs denials.
"""

import logging
from typing import Optional

from ..errors import PermissionDeniedError
from .permissions import Permission, describe_permission
from .ports import PermissionCheckerPort, ResourceDescriptor
from .schemas import Actor

logger = logging.getLogger(__name__)


class PermissionGate:
    """Authorizes actors against inbox and message resources.

    Args:
        checker: Permission oracle evaluating the actual checks
    """

    def __init__(self, checker: PermissionCheckerPort):
        self.checker = checker

    def authorize(
        self,
        actor: Optional[Actor],
        permission: Permission,
        resource: Optional[ResourceDescriptor] = None,
    ) -> None:
        """Authorize an actor, raising on denial.

        Args:
            actor: Acting identity, or None for internal system calls which
                bypass the oracle entirely
            permission: Permission being checked
            resource: Resource descriptor, or None for an unscoped check

        Raises:
            PermissionDeniedError: If the oracle denies the actor
        """
        if actor is None:
            return
        try:
            self.checker.check_permission(actor, permission, resource)
        except PermissionDeniedError:
            logger.warning(
                f"Permission denied: {describe_permission(permission)}",
                extra={
                    "actor_id": actor.id,
                    "permission": str(permission),
                    "resource_id": resource.resource_id if resource else None,
                },
            )
            raise

    def authorize_inbox(
        self,
        actor: Optional[Actor],
        permission: Permission,
        inbox_id: str,
        owner: str,
    ) -> None:
        """Authorize against an inbox, anchored on its direct owner."""
        self.authorize(actor, permission, ResourceDescriptor(inbox_id, (owner,)))

    def authorize_message(
        self,
        actor: Optional[Actor],
        permission: Permission,
        message_id: Optional[str],
        inbox_owner: str,
    ) -> None:
        """Authorize against a message, anchored on its inbox's owner.

        The caller resolves ``inbox_owner`` first (see ownership.OwnershipResolver);
        nothing on the message record itself names an owner.
        """
        self.authorize(actor, permission, ResourceDescriptor(message_id, (inbox_owner,)))

    def is_authorized(
        self,
        actor: Optional[Actor],
        permission: Permission,
        resource: Optional[ResourceDescriptor] = None,
    ) -> bool:
        """Boolean form of authorize(), used to filter listings.

        Denials here are expected and are not logged.
        """
        if actor is None:
            return True
        try:
            self.checker.check_permission(actor, permission, resource)
        except PermissionDeniedError:
            return False
        return True
