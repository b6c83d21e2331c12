"""Identifier hashing for indexed lookups.

Caller-facing identifiers (inbox ids, message ids, owner ids) are arbitrary
strings, often long URLs. They are never indexed directly: every stored
record keys on the SHA-256 digest of the identifier, and every query hashes
its input the same way.
"""

import hashlib


def hash_id(value: str) -> str:
    """Map an identifier to its storage key.

    Args:
        value: Caller-facing identifier

    Returns:
        str: 64-character lowercase hex SHA-256 digest

    Example:
        >>> hash_id("https://example.com/inbox/1") == hash_id("https://example.com/inbox/1")
        True
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
