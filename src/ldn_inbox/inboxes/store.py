"""Inbox store: authorized add/get/get_all/remove over the inbox collection.

Every operation follows the same order: validate input, resolve the owner,
authorize through the PermissionGate, and only then read or write. Writes are
single-row statements guarded by the hashed id (and, for removal, the active
status) so concurrent callers observe a failure instead of double-applying.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from ..auth.gate import PermissionGate
from ..auth.permissions import Permission
from ..auth.ports import ResourceDescriptor
from ..auth.schemas import Actor, actor_id
from ..database import Database
from ..errors import ConflictError, NotFoundError, ValidationError
from ..hashing import hash_id
from ..listing import apply_sort, apply_window, project, window
from ..models.base import epoch_millis
from ..models.collections import Collections, RecordStatus
from ..schemas import GetOptions, ListOptions, WriteResult
from .schemas import InboxMeta, InboxQuery, InboxRecord

logger = logging.getLogger(__name__)


class InboxStore:
    """Authorization-gated access to LDN inboxes.

    Args:
        database: Database the collections live in
        collections: Inbox and message tables
        gate: Permission gate used for every check
    """

    def __init__(self, database: Database, collections: Collections, gate: PermissionGate):
        self.db = database
        self.table = collections.inbox
        self.message_table = collections.message
        self.gate = gate

    def add(self, actor: Optional[Actor], inbox: Dict[str, Any], owner: str) -> InboxRecord:
        """Add a new inbox.

        Args:
            actor: Acting identity (None for system calls)
            inbox: Inbox document; must contain a string ``id``
            owner: Owner identity id

        Returns:
            InboxRecord: The stored inbox with its metadata

        Raises:
            ValidationError: If inbox or owner are malformed
            PermissionDeniedError: If actor lacks LDN_INBOX_INSERT for owner
            ConflictError: If the inbox id is already taken (even by a removed inbox)
        """
        if not isinstance(inbox, dict):
            raise ValidationError("inbox must be specified.")
        if not isinstance(inbox.get("id"), str):
            raise ValidationError("inbox.id must be a string.")
        if not isinstance(owner, str):
            raise ValidationError("owner must be a string.")

        inbox_id = inbox["id"]
        # Owner-only scope: a new inbox id is chosen by the caller
        self.gate.authorize(actor, Permission.LDN_INBOX_INSERT, ResourceDescriptor(None, (owner,)))

        logger.debug(
            "Adding inbox",
            extra={"inbox_id": inbox_id, "actor_id": actor_id(actor)},
        )

        now = epoch_millis()
        document = copy.deepcopy(inbox)
        try:
            with self.db.session() as session:
                session.execute(
                    insert(self.table).values(
                        id=hash_id(inbox_id),
                        owner=hash_id(owner),
                        owner_id=owner,
                        status=RecordStatus.ACTIVE.value,
                        created=now,
                        updated=now,
                        inbox=document,
                    )
                )
        except IntegrityError as e:
            raise ConflictError(
                "Duplicate inbox.", {"inbox": inbox_id}
            ) from e

        return InboxRecord(
            inbox=copy.deepcopy(document),
            meta=InboxMeta(created=now, updated=now, owner=owner, status=RecordStatus.ACTIVE),
        )

    def get(
        self,
        actor: Optional[Actor],
        inbox_id: str,
        options: Optional[GetOptions] = None,
    ) -> Union[Dict[str, Any], InboxRecord]:
        """Get an active inbox.

        Args:
            actor: Acting identity (None for system calls)
            inbox_id: Plain inbox id
            options: ``meta`` returns the whole InboxRecord instead of the
                document; ``message_list`` adds a ``contains`` list holding
                the ids of the inbox's active messages

        Returns:
            The inbox document, or an InboxRecord when ``options.meta`` is set

        Raises:
            NotFoundError: If the inbox does not exist or was removed
            PermissionDeniedError: If actor lacks LDN_INBOX_ACCESS
        """
        options = options or GetOptions()
        record = self.fetch_record(inbox_id)
        self.gate.authorize_inbox(actor, Permission.LDN_INBOX_ACCESS, inbox_id, record.meta.owner)

        if options.message_list:
            record.inbox["contains"] = self._message_ids(inbox_id)

        if options.meta:
            return record
        return record.inbox

    def get_all(
        self,
        actor: Optional[Actor],
        query: Optional[InboxQuery] = None,
        fields: Optional[Sequence[str]] = None,
        options: Optional[ListOptions] = None,
    ) -> List[InboxRecord]:
        """Get all active inboxes matching a query that the actor may see.

        Authorization is two-tiered: the actor first needs LDN_INBOX_ACCESS
        at all (unscoped check). Then, for an owner-scoped query one owner
        check covers every result; otherwise each inbox is checked against
        its own owner and silently dropped on denial.

        Args:
            actor: Acting identity (None for system calls, sees everything)
            query: Filters (default: all inboxes)
            fields: Top-level document keys to keep (default: all)
            options: Sort and paging

        Returns:
            List of InboxRecord; empty if nothing matches or is authorized

        Raises:
            PermissionDeniedError: If actor lacks LDN_INBOX_ACCESS entirely
        """
        query = query or InboxQuery()
        options = options or ListOptions()

        self.gate.authorize(actor, Permission.LDN_INBOX_ACCESS)

        if actor is not None and query.is_owner_scoped:
            scope = ResourceDescriptor(None, (query.owner,))
            if not self.gate.is_authorized(actor, Permission.LDN_INBOX_ACCESS, scope):
                return []
        filter_per_record = actor is not None and not query.is_owner_scoped

        stmt = select(self.table).where(self.table.c.status == RecordStatus.ACTIVE.value)
        if query.owner is not None:
            stmt = stmt.where(self.table.c.owner == hash_id(query.owner))
        stmt = apply_sort(stmt, self.table, options)
        if not filter_per_record:
            stmt = apply_window(stmt, options)

        with self.db.session() as session:
            rows = session.execute(stmt).all()
        records = [self._to_record(row) for row in rows]

        if filter_per_record:
            records = [
                record for record in records
                if self.gate.is_authorized(
                    actor,
                    Permission.LDN_INBOX_ACCESS,
                    ResourceDescriptor(record.id, (record.meta.owner,)),
                )
            ]
            records = window(records, options)

        return [
            InboxRecord(inbox=project(record.inbox, fields), meta=record.meta)
            for record in records
        ]

    def remove(self, actor: Optional[Actor], inbox_id: str) -> WriteResult:
        """Mark an inbox as deleted.

        The id stays reserved: a removed inbox can never be re-added.

        Raises:
            NotFoundError: If the inbox does not exist, was already removed,
                or was removed concurrently before the update
            PermissionDeniedError: If actor lacks LDN_INBOX_REMOVE
        """
        record = self.get(None, inbox_id, GetOptions(meta=True))
        self.gate.authorize_inbox(actor, Permission.LDN_INBOX_REMOVE, inbox_id, record.meta.owner)

        now = epoch_millis()
        with self.db.session() as session:
            result = session.execute(
                update(self.table)
                .where(
                    self.table.c.id == hash_id(inbox_id),
                    self.table.c.status == RecordStatus.ACTIVE.value,
                )
                .values(status=RecordStatus.DELETED.value, updated=now)
            )
            affected = result.rowcount

        if affected == 0:
            raise NotFoundError(
                "Could not remove inbox. Inbox not found.",
                {"inbox": inbox_id},
            )

        logger.info(
            "Inbox removed",
            extra={"inbox_id": inbox_id, "actor_id": actor_id(actor)},
        )
        return WriteResult(n=affected)

    def fetch_record(self, inbox_id: str) -> InboxRecord:
        """Fetch an active inbox record without any permission check.

        Internal lookup used by the ownership resolver and message store.

        Raises:
            NotFoundError: If the inbox does not exist or was removed
        """
        stmt = select(self.table).where(
            self.table.c.id == hash_id(inbox_id),
            self.table.c.status == RecordStatus.ACTIVE.value,
        )
        with self.db.session() as session:
            row = session.execute(stmt).first()

        if row is None:
            raise NotFoundError("Inbox not found.", {"inbox": inbox_id})
        return self._to_record(row)

    def fetch_records(self, inbox_ids: Iterable[str]) -> Dict[str, InboxRecord]:
        """Fetch several active inbox records, keyed by plain id.

        Ids that do not resolve to an active inbox are absent from the result.
        """
        keys = [hash_id(inbox_id) for inbox_id in inbox_ids]
        if not keys:
            return {}

        stmt = select(self.table).where(
            self.table.c.id.in_(keys),
            self.table.c.status == RecordStatus.ACTIVE.value,
        )
        with self.db.session() as session:
            rows = session.execute(stmt).all()

        records = (self._to_record(row) for row in rows)
        return {record.id: record for record in records}

    def _message_ids(self, inbox_id: str) -> List[str]:
        """Plain ids of the active messages filed in an inbox."""
        messages = self.message_table
        stmt = (
            select(messages.c.message)
            .where(
                messages.c.inbox == hash_id(inbox_id),
                messages.c.status == RecordStatus.ACTIVE.value,
            )
            .order_by(messages.c.created, messages.c.id)
        )
        with self.db.session() as session:
            documents = session.execute(stmt).scalars().all()
        return [document["id"] for document in documents]

    @staticmethod
    def _to_record(row) -> InboxRecord:
        return InboxRecord(
            inbox=dict(row.inbox),
            meta=InboxMeta(
                created=row.created,
                updated=row.updated,
                owner=row.owner_id,
                status=RecordStatus(row.status),
            ),
        )
