"""Pydantic schemas for inbox records and queries"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.collections import RecordStatus


class InboxMeta(BaseModel):
    """Store-managed metadata of an inbox"""
    created: int = Field(..., description="Creation time, epoch milliseconds")
    updated: int = Field(..., description="Last update time, epoch milliseconds")
    owner: str = Field(..., description="Owner identity id; immutable")
    status: RecordStatus = Field(RecordStatus.ACTIVE)


class InboxRecord(BaseModel):
    """An inbox document with its metadata"""
    inbox: Dict[str, Any]
    meta: InboxMeta

    @property
    def id(self) -> str:
        return self.inbox["id"]

    @property
    def owner(self) -> str:
        return self.meta.owner


class InboxQuery(BaseModel):
    """Filters for inboxes.get_all. Tombstoned inboxes are always excluded."""
    model_config = ConfigDict(frozen=True)

    owner: Optional[str] = Field(None, description="Only inboxes owned by this identity")

    @property
    def is_owner_scoped(self) -> bool:
        return self.owner is not None
