"""Database engine and session factory.

Provides database connectivity and session management for the inbox and
message stores. Each store operation opens its own short-lived session: one
read plus at most one conditional write, never a multi-record transaction.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models.collections import Collections

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str, echo: bool) -> dict:
    kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": echo,
    }

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # An in-memory database only exists on its one connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        # Pool settings only apply to non-SQLite databases
        kwargs["pool_size"] = 5
        kwargs["max_overflow"] = 10

    return kwargs


class Database:
    """Engine plus session factory for one database.

    Args:
        url: SQLAlchemy database URL
        echo: Log every SQL statement

    Example:
        db = Database("sqlite://")
        with db.session() as session:
            session.execute(select(collections.inbox)).all()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: Engine = create_engine(url, **_engine_kwargs(url, echo))
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context manager for database sessions.

        Automatically commits on success, rolls back on exception.
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_collections(self, collections: Collections) -> None:
        """Create the collection tables and their unique indexes if missing."""
        logger.info(
            "Ensuring collections exist",
            extra={"tables": sorted(collections.metadata.tables)},
        )
        collections.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
