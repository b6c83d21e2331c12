"""Message store: authorized add/get/get_all/remove/move over the message collection.

Messages carry no owner. Every permission check resolves the owner of the
containing inbox through the OwnershipResolver and authorizes against it.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from ..auth.gate import PermissionGate
from ..auth.permissions import Permission
from ..auth.ports import ResourceDescriptor
from ..auth.schemas import Actor, actor_id
from ..database import Database
from ..errors import BadRequestError, ConflictError, NotFoundError, ValidationError
from ..hashing import hash_id
from ..inboxes.store import InboxStore
from ..listing import apply_sort, apply_window, project, window
from ..models.base import epoch_millis
from ..models.collections import Collections, RecordStatus
from ..ownership import OwnershipResolver
from ..schemas import GetOptions, ListOptions, WriteResult
from .schemas import (
    RESERVED_META_KEYS,
    MessageMeta,
    MessageQuery,
    MessageRecord,
    MoveOptions,
)

logger = logging.getLogger(__name__)


class MessageStore:
    """Authorization-gated access to LDN messages.

    Args:
        database: Database the collections live in
        collections: Inbox and message tables
        gate: Permission gate used for every check
        inboxes: Inbox store, used to look up containing inboxes and owners
    """

    def __init__(
        self,
        database: Database,
        collections: Collections,
        gate: PermissionGate,
        inboxes: InboxStore,
    ):
        self.db = database
        self.table = collections.message
        self.gate = gate
        self.inboxes = inboxes
        self.ownership = OwnershipResolver(inboxes)

    def add(
        self,
        actor: Optional[Actor],
        message: Dict[str, Any],
        inbox: str,
        extra_meta: Optional[Dict[str, Any]] = None,
    ) -> MessageRecord:
        """Add a message to an active inbox.

        Args:
            actor: Acting identity (None for system calls)
            message: Message document; must contain a string ``id``
            inbox: Plain id of the inbox to file the message in
            extra_meta: Additional meta fields; ``created``, ``updated``,
                ``status`` and ``inbox`` are always set by the store

        Returns:
            MessageRecord: The stored message with its metadata

        Raises:
            ValidationError: If message, inbox or extra_meta are malformed
            NotFoundError: If the inbox does not exist or was removed
            PermissionDeniedError: If actor lacks LDN_MESSAGE_INSERT on the inbox
            ConflictError: If the message id is already taken
        """
        if not isinstance(message, dict):
            raise ValidationError("message must be specified.")
        if not isinstance(message.get("id"), str):
            raise ValidationError("message.id must be a string.")
        if not isinstance(inbox, str):
            raise ValidationError("inbox must be a string.")
        if extra_meta is not None and not (
            isinstance(extra_meta, dict) and all(isinstance(key, str) for key in extra_meta)
        ):
            raise ValidationError("meta must be an object with string keys.")

        message_id = message["id"]
        target = self.inboxes.fetch_record(inbox)
        self.gate.authorize_inbox(actor, Permission.LDN_MESSAGE_INSERT, inbox, target.meta.owner)

        extra = {
            key: value for key, value in (extra_meta or {}).items()
            if key not in RESERVED_META_KEYS
        }
        now = epoch_millis()
        document = copy.deepcopy(message)
        meta = MessageMeta(
            created=now,
            updated=now,
            status=RecordStatus.ACTIVE,
            inbox=inbox,
            **copy.deepcopy(extra),
        )

        logger.debug(
            "Adding message",
            extra={
                "message_id": message_id,
                "inbox_id": inbox,
                "actor_id": actor_id(actor),
            },
        )

        try:
            with self.db.session() as session:
                session.execute(
                    insert(self.table).values(
                        id=hash_id(message_id),
                        inbox=hash_id(inbox),
                        inbox_id=inbox,
                        status=RecordStatus.ACTIVE.value,
                        created=now,
                        updated=now,
                        meta_json=extra or None,
                        message=document,
                    )
                )
        except IntegrityError as e:
            raise ConflictError("Duplicate message.", {"message": message_id}) from e

        return MessageRecord(message=copy.deepcopy(document), meta=meta)

    def get(
        self,
        actor: Optional[Actor],
        message_id: str,
        options: Optional[GetOptions] = None,
    ) -> Union[Dict[str, Any], MessageRecord]:
        """Get an active message.

        Returns the document, or the MessageRecord when ``options.meta`` is set.

        Raises:
            NotFoundError: If the message (or its inbox) does not exist or was removed
            PermissionDeniedError: If actor lacks LDN_MESSAGE_ACCESS on the inbox
        """
        options = options or GetOptions()
        record = self.fetch_record(message_id)
        owner = self.ownership.resolve_owner(record.inbox_id)
        self.gate.authorize_message(actor, Permission.LDN_MESSAGE_ACCESS, message_id, owner)

        if options.meta:
            return record
        return record.message

    def get_all(
        self,
        actor: Optional[Actor],
        query: Optional[MessageQuery] = None,
        fields: Optional[Sequence[str]] = None,
        options: Optional[ListOptions] = None,
    ) -> List[MessageRecord]:
        """Get all active messages matching a query that the actor may see.

        The actor needs LDN_MESSAGE_ACCESS at all (unscoped check); each
        message is then kept only if the actor may access messages of its
        inbox's owner. Messages whose inbox was removed are dropped.

        Raises:
            PermissionDeniedError: If actor lacks LDN_MESSAGE_ACCESS entirely
        """
        query = query or MessageQuery()
        options = options or ListOptions()

        self.gate.authorize(actor, Permission.LDN_MESSAGE_ACCESS)
        filter_per_record = actor is not None

        stmt = select(self.table).where(self.table.c.status == RecordStatus.ACTIVE.value)
        if query.inbox is not None:
            stmt = stmt.where(self.table.c.inbox == hash_id(query.inbox))
        stmt = apply_sort(stmt, self.table, options)
        if not filter_per_record:
            stmt = apply_window(stmt, options)

        with self.db.session() as session:
            rows = session.execute(stmt).all()
        records = [self._to_record(row) for row in rows]

        if filter_per_record and records:
            owners = self.ownership.resolve_owners(record.inbox_id for record in records)
            records = [
                record for record in records
                if record.inbox_id in owners and self.gate.is_authorized(
                    actor,
                    Permission.LDN_MESSAGE_ACCESS,
                    ResourceDescriptor(record.id, (owners[record.inbox_id],)),
                )
            ]
            records = window(records, options)

        return [
            MessageRecord(message=project(record.message, fields), meta=record.meta)
            for record in records
        ]

    def remove(self, actor: Optional[Actor], message_id: str) -> WriteResult:
        """Mark a message as deleted.

        Raises:
            NotFoundError: If the message does not exist, was already removed,
                or was removed concurrently before the update
            PermissionDeniedError: If actor lacks LDN_MESSAGE_REMOVE on the inbox
        """
        record = self.fetch_record(message_id)
        owner = self.ownership.resolve_owner(record.inbox_id)
        self.gate.authorize_message(actor, Permission.LDN_MESSAGE_REMOVE, message_id, owner)

        now = epoch_millis()
        with self.db.session() as session:
            result = session.execute(
                update(self.table)
                .where(
                    self.table.c.id == hash_id(message_id),
                    self.table.c.status == RecordStatus.ACTIVE.value,
                )
                .values(status=RecordStatus.DELETED.value, updated=now)
            )
            affected = result.rowcount

        if affected == 0:
            raise NotFoundError(
                "Could not remove message. Message not found.",
                {"message": message_id},
            )

        logger.info(
            "Message removed",
            extra={"message_id": message_id, "actor_id": actor_id(actor)},
        )
        return WriteResult(n=affected)

    def move(
        self,
        actor: Optional[Actor],
        message_id: str,
        target_inbox_id: str,
        options: Optional[MoveOptions] = None,
    ) -> WriteResult:
        """Move a message from its current inbox into another inbox.

        Requires LDN_MESSAGE_REMOVE on the current inbox's owner and
        LDN_MESSAGE_INSERT on the target inbox's owner, checked in that
        order; nothing is written unless both pass.

        Args:
            actor: Acting identity (None for system calls)
            message_id: Plain id of the message to move
            target_inbox_id: Plain id of the destination inbox
            options: Pre-fetched message and target inbox records, used
                as-is instead of looking them up again

        Raises:
            ValidationError: If a supplied record does not match the given id
            NotFoundError: If the message or either inbox does not exist
            PermissionDeniedError: If either permission check fails
            BadRequestError: If the message is already in the target inbox,
                or vanished before the update
        """
        options = options or MoveOptions()
        if options.message_record is not None and options.message_record.id != message_id:
            raise ValidationError(
                "options.message_record must be the message being moved.",
                {"message": message_id},
            )
        if options.target_inbox is not None and options.target_inbox.id != target_inbox_id:
            raise ValidationError(
                "options.target_inbox must be the target inbox.",
                {"target": target_inbox_id},
            )

        record = options.message_record or self.fetch_record(message_id)
        target = options.target_inbox or self.inboxes.fetch_record(target_inbox_id)

        source_owner = self.ownership.resolve_owner(record.inbox_id)
        self.gate.authorize_message(actor, Permission.LDN_MESSAGE_REMOVE, message_id, source_owner)
        target_owner = self.ownership.resolve_owner(target)
        self.gate.authorize_inbox(actor, Permission.LDN_MESSAGE_INSERT, target.id, target_owner)

        now = epoch_millis()
        with self.db.session() as session:
            result = session.execute(
                update(self.table)
                .where(
                    self.table.c.id == hash_id(message_id),
                    self.table.c.inbox_id != target_inbox_id,
                )
                .values(inbox_id=target_inbox_id, inbox=hash_id(target_inbox_id), updated=now)
            )
            affected = result.rowcount

        if affected == 0:
            raise BadRequestError(
                "Could not move message; message not found or already "
                "present in the target inbox.",
                {"message": message_id, "target": target_inbox_id},
            )

        logger.info(
            "Message moved",
            extra={
                "message_id": message_id,
                "inbox_id": record.inbox_id,
                "target_inbox_id": target_inbox_id,
                "actor_id": actor_id(actor),
            },
        )
        return WriteResult(n=affected)

    def fetch_record(self, message_id: str) -> MessageRecord:
        """Fetch an active message record without any permission check.

        Raises:
            NotFoundError: If the message does not exist or was removed
        """
        stmt = select(self.table).where(
            self.table.c.id == hash_id(message_id),
            self.table.c.status == RecordStatus.ACTIVE.value,
        )
        with self.db.session() as session:
            row = session.execute(stmt).first()

        if row is None:
            raise NotFoundError("Message not found.", {"message": message_id})
        return self._to_record(row)

    @staticmethod
    def _to_record(row) -> MessageRecord:
        return MessageRecord(
            message=dict(row.message),
            meta=MessageMeta(
                created=row.created,
                updated=row.updated,
                status=RecordStatus(row.status),
                inbox=row.inbox_id,
                **(row.meta_json or {}),
            ),
        )
