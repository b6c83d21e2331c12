"""Message module - authorization-gated storage and moving of LDN messages"""

from .schemas import MessageMeta, MessageQuery, MessageRecord, MoveOptions, RESERVED_META_KEYS
from .store import MessageStore

__all__ = [
    "MessageMeta",
    "MessageQuery",
    "MessageRecord",
    "MoveOptions",
    "RESERVED_META_KEYS",
    "MessageStore",
]
