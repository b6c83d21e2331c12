"""Pydantic schemas shared by the inbox and message stores.

Every store operation takes an explicit options model listing each
recognized option and its default.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class GetOptions(BaseModel):
    """Options for inboxes.get / messages.get"""
    model_config = ConfigDict(frozen=True)

    meta: bool = Field(False, description="Return the full record ({document, meta}) instead of the bare document")
    message_list: bool = Field(False, description="Inboxes only: add a 'contains' list of active message ids")


class ListOptions(BaseModel):
    """Options for inboxes.get_all / messages.get_all"""
    model_config = ConfigDict(frozen=True)

    sort_by: Literal["created", "updated"] = Field("created", description="Timestamp to order by")
    descending: bool = Field(False, description="Sort newest first")
    offset: int = Field(0, ge=0, description="Records to skip")
    limit: Optional[int] = Field(None, ge=1, description="Maximum records to return")


class WriteResult(BaseModel):
    """Outcome of a conditional write (remove, move)"""
    n: int = Field(..., description="Number of records affected")
