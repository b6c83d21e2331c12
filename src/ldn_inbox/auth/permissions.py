"""Permission catalog for LDN inboxes and messages.

Permission Matrix (which permission each operation checks, and against whom):
┌──────────────────────┬────────────────────┬──────────────────────────────┐
│ Operation            │ Permission         │ Ownership anchor             │
├──────────────────────┼────────────────────┼──────────────────────────────┤
│ inboxes.add          │ LDN_INBOX_INSERT   │ requested owner              │
│ inboxes.get          │ LDN_INBOX_ACCESS   │ inbox owner                  │
│ inboxes.get_all      │ LDN_INBOX_ACCESS   │ none, then each inbox owner  │
│ inboxes.remove       │ LDN_INBOX_REMOVE   │ inbox owner                  │
│ messages.add         │ LDN_MESSAGE_INSERT │ target inbox owner           │
│ messages.get         │ LDN_MESSAGE_ACCESS │ containing inbox owner       │
│ messages.get_all     │ LDN_MESSAGE_ACCESS │ none, then each inbox owner  │
│ messages.remove      │ LDN_MESSAGE_REMOVE │ containing inbox owner       │
│ messages.move        │ LDN_MESSAGE_REMOVE │ source inbox owner           │
│                      │ LDN_MESSAGE_INSERT │ target inbox owner           │
└──────────────────────┴────────────────────┴──────────────────────────────┘

The EDIT permissions are part of the catalog so role definitions can grant
them, but no store operation checks them yet.
"""

from enum import Enum
from typing import Dict


class Permission(str, Enum):
    """Named capabilities checked by the stores.

    Values double as the permission ids reported in PermissionDenied errors.
    """
    LDN_INBOX_ACCESS = "LDN_INBOX_ACCESS"
    LDN_INBOX_INSERT = "LDN_INBOX_INSERT"
    LDN_INBOX_EDIT = "LDN_INBOX_EDIT"
    LDN_INBOX_REMOVE = "LDN_INBOX_REMOVE"
    LDN_MESSAGE_ACCESS = "LDN_MESSAGE_ACCESS"
    LDN_MESSAGE_INSERT = "LDN_MESSAGE_INSERT"
    LDN_MESSAGE_EDIT = "LDN_MESSAGE_EDIT"
    LDN_MESSAGE_REMOVE = "LDN_MESSAGE_REMOVE"

    def __str__(self) -> str:
        return self.value


PERMISSION_CATALOG: Dict[Permission, Dict[str, str]] = {
    Permission.LDN_INBOX_ACCESS: {
        "label": "Access an LDN inbox",
        "comment": "Required to access a Linked Data Notifications inbox.",
    },
    Permission.LDN_INBOX_INSERT: {
        "label": "Insert an LDN inbox",
        "comment": "Required to insert a Linked Data Notifications inbox.",
    },
    Permission.LDN_INBOX_EDIT: {
        "label": "Edit an LDN inbox",
        "comment": "Required to edit a Linked Data Notifications inbox.",
    },
    Permission.LDN_INBOX_REMOVE: {
        "label": "Remove an LDN inbox",
        "comment": "Required to remove a Linked Data Notifications inbox.",
    },
    Permission.LDN_MESSAGE_ACCESS: {
        "label": "Access an LDN message",
        "comment": "Required to access a Linked Data Notifications message.",
    },
    Permission.LDN_MESSAGE_INSERT: {
        "label": "Insert an LDN message",
        "comment": "Required to insert a Linked Data Notifications message.",
    },
    Permission.LDN_MESSAGE_EDIT: {
        "label": "Edit an LDN message",
        "comment": "Required to edit a Linked Data Notifications message.",
    },
    Permission.LDN_MESSAGE_REMOVE: {
        "label": "Remove an LDN message",
        "comment": "Required to remove a Linked Data Notifications message.",
    },
}


def describe_permission(permission: Permission) -> str:
    """Human-readable label for a permission, e.g. for denial diagnostics."""
    return PERMISSION_CATALOG[Permission(permission)]["label"]
