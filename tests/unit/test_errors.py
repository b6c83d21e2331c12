"""Unit tests for the error taxonomy"""

import pytest
from sqlalchemy.exc import IntegrityError

from ldn_inbox.auth import Permission
from ldn_inbox.errors import (
    BadRequestError,
    ConflictError,
    LdnInboxError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    is_duplicate_error,
)


class TestErrorKinds:
    """Test names and status hints of each error kind"""

    @pytest.mark.parametrize(
        "error_cls,name,status",
        [
            (ValidationError, "ValidationError", 400),
            (NotFoundError, "NotFound", 404),
            (ConflictError, "Conflict", 409),
            (BadRequestError, "BadRequest", 400),
        ],
    )
    def test_name_and_status(self, error_cls, name, status):
        """Test each error carries its stable name and HTTP status"""
        error = error_cls("boom", {"inbox": "https://example.com/inbox/1"})
        assert isinstance(error, LdnInboxError)
        assert error.name == name
        assert error.http_status == status
        assert error.details == {"inbox": "https://example.com/inbox/1"}

    def test_validation_error_is_type_error(self):
        """Test malformed input can be caught as TypeError"""
        with pytest.raises(TypeError):
            raise ValidationError("inbox.id must be a string.")

    def test_details_default_to_empty_dict(self):
        """Test errors without details expose an empty dict"""
        assert NotFoundError("Inbox not found.").details == {}

    def test_to_dict(self):
        """Test serialization for an outer API layer"""
        error = NotFoundError("Message not found.", {"message": "m1"})
        assert error.to_dict() == {
            "name": "NotFound",
            "message": "Message not found.",
            "http_status": 404,
            "details": {"message": "m1"},
        }


class TestPermissionDeniedError:
    """Test the permission carried by denial errors"""

    def test_permission_in_details(self):
        """Test details name the failing permission id"""
        error = PermissionDeniedError(Permission.LDN_INBOX_REMOVE, {"actor": "alice"})
        assert error.name == "PermissionDenied"
        assert error.http_status == 403
        assert error.permission == "LDN_INBOX_REMOVE"
        assert error.details == {"actor": "alice", "permission": "LDN_INBOX_REMOVE"}
        assert "LDN_INBOX_REMOVE" in str(error)

    def test_caller_details_not_mutated(self):
        """Test the details dict passed in is copied"""
        details = {"actor": "alice"}
        PermissionDeniedError(Permission.LDN_MESSAGE_ACCESS, details)
        assert details == {"actor": "alice"}


class TestIsDuplicateError:
    """Test duplicate-key detection"""

    def test_conflict_error(self):
        assert is_duplicate_error(ConflictError("Duplicate inbox.")) is True

    def test_integrity_error(self):
        """Test raw storage errors are recognized too"""
        error = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed"))
        assert is_duplicate_error(error) is True

    def test_other_errors(self):
        assert is_duplicate_error(NotFoundError("Inbox not found.")) is False
        assert is_duplicate_error(ValueError("nope")) is False
