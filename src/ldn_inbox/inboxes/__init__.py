"""Inbox module - authorization-gated storage of LDN inboxes"""

from .schemas import InboxMeta, InboxQuery, InboxRecord
from .store import InboxStore

__all__ = [
    "InboxMeta",
    "InboxQuery",
    "InboxRecord",
    "InboxStore",
]
