"""Authorization-gated storage for LDN inboxes and messages.

Typical use:

    from ldn_inbox import Actor, MANAGER_ROLE, create_service

    service = create_service()
    service.bootstrap()

    alice = Actor.owning("alice", MANAGER_ROLE)
    service.inboxes.add(alice, {"id": "https://example.org/inbox/alice"}, "alice")
"""

from .auth import (
    MANAGER_ROLE,
    READER_ROLE,
    Actor,
    Permission,
    PermissionCheckerPort,
    PermissionGate,
    ResourceDescriptor,
    ResourceRole,
    RoleBasedPermissionChecker,
)
from .config import Settings, get_settings
from .errors import (
    BadRequestError,
    ConflictError,
    LdnInboxError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    is_duplicate_error,
)
from .inboxes import InboxQuery, InboxRecord, InboxStore
from .messages import MessageQuery, MessageRecord, MessageStore, MoveOptions
from .schemas import GetOptions, ListOptions, WriteResult
from .service import LdnInboxService, create_service

__version__ = "0.1.0"

__all__ = [
    "MANAGER_ROLE",
    "READER_ROLE",
    "Actor",
    "Permission",
    "PermissionCheckerPort",
    "PermissionGate",
    "ResourceDescriptor",
    "ResourceRole",
    "RoleBasedPermissionChecker",
    "Settings",
    "get_settings",
    "BadRequestError",
    "ConflictError",
    "LdnInboxError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationError",
    "is_duplicate_error",
    "InboxQuery",
    "InboxRecord",
    "InboxStore",
    "MessageQuery",
    "MessageRecord",
    "MessageStore",
    "MoveOptions",
    "GetOptions",
    "ListOptions",
    "WriteResult",
    "LdnInboxService",
    "create_service",
]
