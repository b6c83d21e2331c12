"""Role definitions and the in-process role-based permission oracle.

Default Roles:
- ldn-inbox.manager: every inbox and message permission
- ldn-inbox.reader: read-only access to inboxes and messages

Whether a role applies to a given resource is decided by the actor's role
assignment (see schemas.ResourceRole), not by the role definition:

┌──────────────────────┬─────────────────┬──────────────────────────────┐
│ Check                │ Global role     │ Resource-scoped role         │
├──────────────────────┼─────────────────┼──────────────────────────────┤
│ unscoped (listings)  │   ✓             │   ✓                          │
│ scoped to a resource │   ✓             │ if resource/owner id matches │
└──────────────────────┴─────────────────┴──────────────────────────────┘
"""

from typing import Dict, Iterable, Mapping, Optional, Set

from ..errors import PermissionDeniedError
from .permissions import Permission
from .ports import PermissionCheckerPort, ResourceDescriptor
from .schemas import Actor, ResourceRole


MANAGER_ROLE = "ldn-inbox.manager"
READER_ROLE = "ldn-inbox.reader"

DEFAULT_ROLES: Dict[str, Set[Permission]] = {
    MANAGER_ROLE: set(Permission),
    READER_ROLE: {Permission.LDN_INBOX_ACCESS, Permission.LDN_MESSAGE_ACCESS},
}


def has_permission(
    roles: Mapping[str, Iterable[Permission]],
    role: str,
    permission: Permission,
) -> bool:
    """Check if a role definition grants a permission.

    Unknown roles grant nothing.

    Examples:
        >>> has_permission(DEFAULT_ROLES, MANAGER_ROLE, Permission.LDN_INBOX_REMOVE)
        True
        >>> has_permission(DEFAULT_ROLES, READER_ROLE, Permission.LDN_INBOX_REMOVE)
        False
    """
    return Permission(permission) in set(roles.get(role, ()))


def get_granting_roles(
    roles: Mapping[str, Iterable[Permission]],
    permission: Permission,
) -> Set[str]:
    """Get all role names whose definition grants a permission.

    Example:
        >>> sorted(get_granting_roles(DEFAULT_ROLES, Permission.LDN_MESSAGE_ACCESS))
        ['ldn-inbox.manager', 'ldn-inbox.reader']
    """
    return {name for name in roles if has_permission(roles, name, permission)}


class RoleBasedPermissionChecker(PermissionCheckerPort):
    """Permission oracle evaluating configured role definitions.

    Args:
        roles: Mapping of role name to the permissions it grants. Defaults
            to DEFAULT_ROLES.
    """

    def __init__(self, roles: Optional[Mapping[str, Iterable[Permission]]] = None):
        source = DEFAULT_ROLES if roles is None else roles
        self.roles: Dict[str, Set[Permission]] = {
            name: {Permission(p) for p in permissions}
            for name, permissions in source.items()
        }

    def check_permission(
        self,
        actor: Actor,
        permission: Permission,
        resource: Optional[ResourceDescriptor] = None,
    ) -> None:
        granting = get_granting_roles(self.roles, permission)
        for assignment in actor.roles:
            if assignment.role not in granting:
                continue
            if resource is None or self._applies_to(assignment, resource):
                return

        details = {"actor": actor.id}
        if resource is not None and resource.resource_id is not None:
            details["resource"] = resource.resource_id
        raise PermissionDeniedError(permission, details)

    @staticmethod
    def _applies_to(assignment: ResourceRole, resource: ResourceDescriptor) -> bool:
        if assignment.is_global:
            return True
        return any(identifier in assignment.resources for identifier in resource.identifiers())
