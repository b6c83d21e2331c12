"""Authorization module - permission catalog, actors, oracle port and gate.

This module provides:
- The LDN permission catalog
- Actor and role-assignment schemas
- The permission oracle port and a role-based in-process adapter
- The PermissionGate the stores authorize through
"""

from .permissions import Permission, PERMISSION_CATALOG
from .schemas import Actor, ResourceRole, actor_id
from .ports import PermissionCheckerPort, ResourceDescriptor
from .roles import RoleBasedPermissionChecker, DEFAULT_ROLES, MANAGER_ROLE, READER_ROLE
from .gate import PermissionGate

__all__ = [
    "Permission",
    "PERMISSION_CATALOG",
    "Actor",
    "ResourceRole",
    "actor_id",
    "PermissionCheckerPort",
    "ResourceDescriptor",
    "RoleBasedPermissionChecker",
    "DEFAULT_ROLES",
    "MANAGER_ROLE",
    "READER_ROLE",
    "PermissionGate",
]
