"""Create the inbox/message collections and seed the configured inboxes.

This should be run once per deployment (running it again is harmless:
existing tables are kept and already seeded inboxes are skipped).

Usage:
    ldn-inbox-bootstrap

Environment Variables:
    LDN_DATABASE_URL: SQLAlchemy database URL
    LDN_INBOX_COLLECTION: Table holding inbox records (default: ldn_inbox)
    LDN_MESSAGE_COLLECTION: Table holding message records (default: ldn_message)
    LDN_INBOXES: JSON map of inbox id -> {"owner": ..., "document": {...}}
    LDN_LOG_LEVEL: Logging level (default: INFO)
"""

import sys

from pydantic import ValidationError as SettingsError
from sqlalchemy.exc import SQLAlchemyError

from .config import get_settings
from .observability import configure_logging, correlation_scope
from .service import create_service


def main():
    """Bootstrap the collections and seed inboxes."""
    try:
        settings = get_settings()
    except SettingsError as e:
        print(f"ERROR: Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    try:
        service = create_service(settings)
    except SQLAlchemyError as e:
        print(f"ERROR: Invalid database configuration: {e}")
        sys.exit(1)

    try:
        with correlation_scope():
            created = service.bootstrap()
    except SQLAlchemyError as e:
        print(f"ERROR: Failed to bootstrap collections: {e}")
        sys.exit(1)
    finally:
        service.close()

    seeded = len(settings.INBOXES)
    print("SUCCESS: Collections ready")
    print(f"  Inboxes:  {settings.INBOX_COLLECTION}")
    print(f"  Messages: {settings.MESSAGE_COLLECTION}")
    print(f"  Seeded:   {len(created)} created, {seeded - len(created)} already present")


if __name__ == "__main__":
    main()
