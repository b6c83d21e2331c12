"""Ownership resolution for message permission checks.

Messages have no owner of their own: every message capability is evaluated
against the owner of the inbox that contains the message. The resolver turns
an inbox reference (plain id or already-fetched record) into that owner id
before the permission gate is consulted.
"""

from typing import TYPE_CHECKING, Dict, Iterable, Union

from .inboxes.schemas import InboxRecord

if TYPE_CHECKING:
    from .inboxes.store import InboxStore


class OwnershipResolver:
    """Resolves inbox owners for message-level authorization.

    Stateless apart from the inbox store it reads through; every call
    performs a fresh lookup.

    Args:
        inboxes: Inbox store used for unauthenticated active-inbox lookups
    """

    def __init__(self, inboxes: "InboxStore"):
        self.inboxes = inboxes

    def resolve_owner(self, inbox: Union[str, InboxRecord]) -> str:
        """Get the owner of an inbox.

        Args:
            inbox: Plain inbox id, or an inbox record fetched earlier

        Returns:
            str: Owner identity id of the inbox

        Raises:
            NotFoundError: If the inbox does not exist or has been removed
        """
        if isinstance(inbox, InboxRecord):
            return inbox.meta.owner
        return self.inboxes.fetch_record(inbox).meta.owner

    def resolve_owners(self, inbox_ids: Iterable[str]) -> Dict[str, str]:
        """Bulk form of resolve_owner for filtering listings.

        Missing or removed inboxes are left out of the mapping rather than
        raising, so their messages simply fail the ownership check.

        Returns:
            Dict[str, str]: Plain inbox id -> owner id
        """
        records = self.inboxes.fetch_records(set(inbox_ids))
        return {inbox_id: record.meta.owner for inbox_id, record in records.items()}
