"""Pytest fixtures for the inbox and message stores.

Provides reusable test fixtures for:
- An in-memory SQLite service with the collections created
- Actors: two regular users owning their own resources, a global admin,
  a global read-only actor and an actor without roles
- Inbox and message factories with unique ids

Usage:
    def test_owner_reads_inbox(service, alice, make_inbox):
        record = make_inbox(alice.id)
        assert service.inboxes.get(alice, record.id)["id"] == record.id
"""

from typing import Any, Callable, Dict, Generator, Optional
from uuid import uuid4

import pytest

from ldn_inbox.auth import MANAGER_ROLE, READER_ROLE, Actor, ResourceRole
from ldn_inbox.config import Settings
from ldn_inbox.inboxes import InboxRecord
from ldn_inbox.messages import MessageRecord
from ldn_inbox.service import LdnInboxService, create_service


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a private in-memory database."""
    return Settings(DATABASE_URL="sqlite://", LOG_JSON=False, _env_file=None)


@pytest.fixture
def service(settings) -> Generator[LdnInboxService, None, None]:
    """Service with tables and indexes created."""
    service = create_service(settings)
    service.bootstrap()
    yield service
    service.close()


@pytest.fixture
def alice() -> Actor:
    """Regular user: manager of everything alice owns."""
    return Actor.owning("https://example.com/i/alice", MANAGER_ROLE)


@pytest.fixture
def bob() -> Actor:
    """Regular user: manager of everything bob owns."""
    return Actor.owning("https://example.com/i/bob", MANAGER_ROLE)


@pytest.fixture
def admin() -> Actor:
    """Global manager: every permission on every resource."""
    return Actor(id="https://example.com/i/admin", roles=[ResourceRole(role=MANAGER_ROLE)])


@pytest.fixture
def auditor() -> Actor:
    """Global reader: may access everything but change nothing."""
    return Actor(id="https://example.com/i/auditor", roles=[ResourceRole(role=READER_ROLE)])


@pytest.fixture
def nobody() -> Actor:
    """Authenticated actor without any role."""
    return Actor(id="https://example.com/i/nobody")


def new_inbox_document(**extra: Any) -> Dict[str, Any]:
    """LDN inbox container document with a unique id."""
    document = {
        "@context": "https://www.w3.org/ns/ldp",
        "id": f"https://example.com/inboxes/{uuid4()}",
        "type": "ldp:Container",
    }
    document.update(extra)
    return document


def new_message_document(**extra: Any) -> Dict[str, Any]:
    """ActivityStreams notification with a unique id."""
    document = {
        "@context": "https://www.w3.org/ns/activitystreams",
        "id": f"https://example.com/messages/{uuid4()}",
        "type": "Announce",
        "object": "https://example.com/articles/1",
    }
    document.update(extra)
    return document


@pytest.fixture
def make_inbox(service) -> Callable[..., InboxRecord]:
    """Factory adding an inbox owned by ``owner`` (as the system caller by default)."""

    def _make_inbox(owner: str, actor: Optional[Actor] = None, **extra: Any) -> InboxRecord:
        return service.inboxes.add(actor, new_inbox_document(**extra), owner)

    return _make_inbox


@pytest.fixture
def make_message(service) -> Callable[..., MessageRecord]:
    """Factory adding a message to ``inbox_id`` (as the system caller by default)."""

    def _make_message(inbox_id: str, actor: Optional[Actor] = None, **extra: Any) -> MessageRecord:
        return service.messages.add(actor, new_message_document(**extra), inbox_id)

    return _make_message


@pytest.fixture
def inbox_document() -> Callable[..., Dict[str, Any]]:
    """Factory for unsaved inbox documents."""
    return new_inbox_document


@pytest.fixture
def message_document() -> Callable[..., Dict[str, Any]]:
    """Factory for unsaved message documents."""
    return new_message_document
