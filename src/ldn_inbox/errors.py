"""Error taxonomy for the inbox and message stores.

Every error raised by this package carries a stable ``name`` (the error
kind), an HTTP-style status hint and a ``details`` dict with the contextual
fields (identifier, permission, target inbox). Errors from the storage and
permission collaborators that are not translated here propagate unchanged.
"""

from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError


class LdnInboxError(Exception):
    """Base class for all inbox/message store errors."""

    name = "LdnInboxError"
    http_status = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for logs or an outer API layer."""
        return {
            "name": self.name,
            "message": self.message,
            "http_status": self.http_status,
            "details": self.details,
        }

    def __repr__(self):
        return f"<{type(self).__name__}(name={self.name!r}, details={self.details!r})>"


class ValidationError(LdnInboxError, TypeError):
    """Malformed input shape. Raised before any storage or permission call."""

    name = "ValidationError"
    http_status = 400


class NotFoundError(LdnInboxError):
    """Resource is absent, tombstoned, or vanished before a dependent update."""

    name = "NotFound"
    http_status = 404


class PermissionDeniedError(LdnInboxError):
    """The permission oracle denied the actor.

    ``details["permission"]`` names the permission that failed.
    """

    name = "PermissionDenied"
    http_status = 403

    def __init__(self, permission: str, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details["permission"] = str(permission)
        super().__init__(f"Permission denied: {permission}", details)

    @property
    def permission(self) -> str:
        return self.details["permission"]


class ConflictError(LdnInboxError):
    """An identifier is already present (active or tombstoned)."""

    name = "Conflict"
    http_status = 409


class BadRequestError(LdnInboxError):
    """Ambiguous client error, e.g. moving a message into its current inbox."""

    name = "BadRequest"
    http_status = 400


def is_duplicate_error(exc: BaseException) -> bool:
    """Check whether an exception signals a duplicate key.

    Recognizes both the translated ``ConflictError`` and a raw SQLAlchemy
    ``IntegrityError`` coming straight from the storage layer.
    """
    return isinstance(exc, (ConflictError, IntegrityError))
