"""Configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables (prefixed ``LDN_``) can be loaded from a .env file.
"""

from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .auth.permissions import Permission
from .auth.roles import DEFAULT_ROLES


class SeedInbox(BaseModel):
    """An inbox created at startup if it does not exist yet."""
    owner: str = Field(..., description="Owner identity id")
    document: Dict[str, Any] = Field(default_factory=dict, description="Inbox document; id defaults to the map key")


def _default_roles() -> Dict[str, List[Permission]]:
    return {name: sorted(permissions) for name, permissions in DEFAULT_ROLES.items()}


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Environment Variables:
        LDN_DATABASE_URL: SQLAlchemy database URL
        LDN_DATABASE_ECHO: Echo SQL statements (default False)
        LDN_INBOX_COLLECTION: Table holding inbox records (default ldn_inbox)
        LDN_MESSAGE_COLLECTION: Table holding message records (default ldn_message)
        LDN_INBOXES: JSON map of inbox id -> {"owner": ..., "document": {...}}
            seeded at bootstrap
        LDN_ROLES: JSON map of role name -> list of permission ids
        LDN_LOG_LEVEL: Logging level (default INFO)
        LDN_LOG_JSON: Use the JSON log formatter (default True)
    """
    model_config = SettingsConfigDict(
        env_prefix="LDN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./ldn_inbox.db"
    DATABASE_ECHO: bool = False

    # Collections
    INBOX_COLLECTION: str = "ldn_inbox"
    MESSAGE_COLLECTION: str = "ldn_message"

    # Inboxes seeded at startup
    INBOXES: Dict[str, SeedInbox] = Field(default_factory=dict)

    # Role definitions for the role-based permission checker
    ROLES: Dict[str, List[Permission]] = Field(default_factory=_default_roles)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @field_validator("INBOX_COLLECTION", "MESSAGE_COLLECTION")
    @classmethod
    def validate_collection_name(cls, value: str) -> str:
        if not value or not value.replace("_", "").isalnum():
            raise ValueError("Collection names may only contain letters, digits and underscores")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return value

    def seed_inboxes(self) -> Dict[str, Dict[str, Any]]:
        """Configured seed inboxes as ``{id: {"owner": ..., "document": ...}}``.

        The document id is filled in from the map key when absent.
        """
        seeds = {}
        for inbox_id, seed in self.INBOXES.items():
            document = dict(seed.document)
            document.setdefault("id", inbox_id)
            seeds[inbox_id] = {"owner": seed.owner, "document": document}
        return seeds


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
