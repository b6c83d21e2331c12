"""Service wiring: one object holding the database, collections and both stores.

Build it once at process start with ``create_service()`` and share it; the
stores hold no per-request state.
"""

import logging
from typing import Any, Dict, List, Optional

from .auth.gate import PermissionGate
from .auth.ports import PermissionCheckerPort
from .auth.roles import RoleBasedPermissionChecker
from .config import Settings, get_settings
from .database import Database
from .errors import ConflictError
from .inboxes.store import InboxStore
from .messages.store import MessageStore
from .models.collections import Collections, define_collections

logger = logging.getLogger(__name__)


class LdnInboxService:
    """The inbox and message stores over one database.

    Attributes:
        database: Engine and session factory
        collections: Inbox and message tables
        gate: Permission gate shared by both stores
        inboxes: Inbox store
        messages: Message store
    """

    def __init__(
        self,
        database: Database,
        collections: Collections,
        permission_checker: PermissionCheckerPort,
        seeds: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.database = database
        self.collections = collections
        self.gate = PermissionGate(permission_checker)
        self.inboxes = InboxStore(database, collections, self.gate)
        self.messages = MessageStore(database, collections, self.gate, self.inboxes)
        self.seeds = dict(seeds or {})

    def bootstrap(self) -> List[str]:
        """Create tables and indexes, then add the configured seed inboxes.

        Safe to run on every start.

        Returns:
            List[str]: Ids of seed inboxes created by this call
        """
        self.database.create_collections(self.collections)
        return self.seed_inboxes(self.seeds)

    def seed_inboxes(self, seeds: Dict[str, Dict[str, Any]]) -> List[str]:
        """Add seed inboxes as the system caller, skipping those already present.

        Args:
            seeds: ``{id: {"owner": ..., "document": {...}}}``

        Returns:
            List[str]: Ids of inboxes created by this call
        """
        created = []
        for inbox_id, seed in seeds.items():
            try:
                self.inboxes.add(None, seed["document"], seed["owner"])
            except ConflictError:
                logger.info("Seed inbox already exists", extra={"inbox_id": inbox_id})
                continue
            logger.info("Seed inbox created", extra={"inbox_id": inbox_id})
            created.append(inbox_id)
        return created

    def close(self) -> None:
        self.database.dispose()


def create_service(
    settings: Optional[Settings] = None,
    permission_checker: Optional[PermissionCheckerPort] = None,
) -> LdnInboxService:
    """Build the service from settings.

    Args:
        settings: Settings to use (default: get_settings())
        permission_checker: Permission oracle (default: a
            RoleBasedPermissionChecker over ``settings.ROLES``)

    Returns:
        LdnInboxService: Ready to use once bootstrap() has run
    """
    settings = settings or get_settings()
    if permission_checker is None:
        permission_checker = RoleBasedPermissionChecker(settings.ROLES)

    database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    collections = define_collections(settings.INBOX_COLLECTION, settings.MESSAGE_COLLECTION)
    return LdnInboxService(
        database,
        collections,
        permission_checker,
        seeds=settings.seed_inboxes(),
    )
