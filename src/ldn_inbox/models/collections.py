"""Inbox and message collection tables.

Both collections are keyed on the hashed form of the caller-facing id (see
hashing.hash_id). Table names come from configuration, so the tables are
built by a factory on a fresh MetaData rather than declared at import time.

Inbox table:
    id        hash of inbox id (primary key)
    owner     hash of owner id; unique together with id
    owner_id  plain owner id (meta.owner)
    status    'active' | 'deleted'
    created   epoch milliseconds
    updated   epoch milliseconds
    inbox     the inbox document

Message table:
    id        hash of message id (primary key)
    inbox     hash of the containing inbox id; unique together with id
    inbox_id  plain containing inbox id (meta.inbox)
    status    'active' | 'deleted'
    created   epoch milliseconds
    updated   epoch milliseconds
    meta_json caller-supplied extra meta fields
    message   the message document
"""

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    Index,
    MetaData,
    String,
    Table,
    Text,
)

from .base import PortableJSONB

HASH_LENGTH = 64


class RecordStatus(str, Enum):
    """Lifecycle status shared by inboxes and messages.

    State machine:
    ACTIVE → DELETED (terminal; records are never resurrected)
    """
    ACTIVE = "active"
    DELETED = "deleted"


@dataclass(frozen=True)
class Collections:
    """The two collection tables and the MetaData they live on."""
    metadata: MetaData
    inbox: Table
    message: Table


def _status_column(table_name: str) -> Column:
    return Column(
        "status",
        String(16),
        CheckConstraint("status IN ('active', 'deleted')", name=f"ck_{table_name}_status"),
        nullable=False,
        server_default=RecordStatus.ACTIVE.value,
    )


def define_collections(inbox_name: str = "ldn_inbox", message_name: str = "ldn_message") -> Collections:
    """Build the inbox and message tables under the configured names.

    Args:
        inbox_name: Table name for inbox records
        message_name: Table name for message records

    Returns:
        Collections: Tables bound to a new MetaData (call
        ``metadata.create_all(engine)`` to create tables and indexes)
    """
    metadata = MetaData()

    inbox = Table(
        inbox_name,
        metadata,
        Column("id", String(HASH_LENGTH), primary_key=True),
        Column("owner", String(HASH_LENGTH), nullable=False),
        Column("owner_id", Text, nullable=False),
        _status_column(inbox_name),
        Column("created", BigInteger, nullable=False),
        Column("updated", BigInteger, nullable=False),
        Column("inbox", PortableJSONB, nullable=False),
        Index(f"ix_{inbox_name}_owner_id", "owner", "id", unique=True),
    )

    message = Table(
        message_name,
        metadata,
        Column("id", String(HASH_LENGTH), primary_key=True),
        Column("inbox", String(HASH_LENGTH), nullable=False),
        Column("inbox_id", Text, nullable=False),
        _status_column(message_name),
        Column("created", BigInteger, nullable=False),
        Column("updated", BigInteger, nullable=False),
        Column("meta_json", PortableJSONB, nullable=True),
        Column("message", PortableJSONB, nullable=False),
        Index(f"ix_{message_name}_inbox_id", "inbox", "id", unique=True),
        Index(f"ix_{message_name}_inbox_status", "inbox", "status"),
    )

    return Collections(metadata=metadata, inbox=inbox, message=message)
