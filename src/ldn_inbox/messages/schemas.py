"""Pydantic schemas for message records, queries and move options"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..inboxes.schemas import InboxRecord
from ..models.collections import RecordStatus

# Meta keys always written by the store, never taken from caller-supplied meta
RESERVED_META_KEYS = frozenset({"created", "updated", "status", "inbox"})


class MessageMeta(BaseModel):
    """Store-managed metadata of a message.

    Caller-supplied extra meta fields are kept alongside the reserved ones.
    """
    model_config = ConfigDict(extra="allow")

    created: int
    updated: int
    status: RecordStatus = RecordStatus.ACTIVE
    inbox: str = Field(..., description="Plain id of the inbox currently containing the message")

    def extra_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class MessageRecord(BaseModel):
    """A message document with its metadata"""
    message: Dict[str, Any]
    meta: MessageMeta

    @property
    def id(self) -> str:
        return self.message["id"]

    @property
    def inbox_id(self) -> str:
        return self.meta.inbox


class MessageQuery(BaseModel):
    """Filters for messages.get_all. Tombstoned messages are always excluded."""
    model_config = ConfigDict(frozen=True)

    inbox: Optional[str] = Field(None, description="Only messages currently in this inbox")


class MoveOptions(BaseModel):
    """Pre-fetched records for messages.move.

    Supplying them avoids repeat lookups during bulk moves; supplied records
    are trusted as-is, but both permission checks still run against them.
    """
    model_config = ConfigDict(frozen=True)

    message_record: Optional[MessageRecord] = None
    target_inbox: Optional[InboxRecord] = None
