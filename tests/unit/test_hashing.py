"""Unit tests for identifier hashing"""

from ldn_inbox.hashing import hash_id


class TestHashId:
    """Test storage keys derived from caller-facing ids"""

    def test_hash_is_deterministic(self):
        """Test the same id always maps to the same key"""
        assert hash_id("https://example.com/inbox/1") == hash_id("https://example.com/inbox/1")

    def test_hash_is_sha256_hex(self):
        """Test keys are 64 lowercase hex characters"""
        key = hash_id("https://example.com/inbox/1")
        assert len(key) == 64
        assert key == key.lower()
        int(key, 16)

    def test_known_digest(self):
        """Test against the published SHA-256 digest of the empty string"""
        assert hash_id("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_distinct_ids_distinct_keys(self):
        """Test different ids (including long URLs) produce different keys"""
        long_id = "https://example.com/" + "a" * 5000
        keys = {hash_id("a"), hash_id("b"), hash_id(long_id), hash_id(long_id + "b")}
        assert len(keys) == 4
