"""
Unit tests for argon2id password hashing.

Tests cover:
- Hash format and salting
- Verification of correct and wrong passwords
- Corrupt hash handling
- Rehash detection when cost parameters change
"""

import pytest

from api.src.exceptions import PasswordVerificationError
from api.src.services import PasswordHasher


class TestPasswordHashing:
    """Tests for PasswordHasher.hash."""

    def test_hash_is_argon2id(self, hasher):
        """Test hashes use the argon2id variant."""
        hashed = hasher.hash("correct horse")

        assert hashed.startswith("$argon2id$")
        assert "correct horse" not in hashed

    def test_hash_is_salted(self, hasher):
        """Test the same password hashes differently each time."""
        assert hasher.hash("password123") != hasher.hash("password123")

    def test_hash_carries_configured_parameters(self, hasher):
        """Test cost parameters are encoded in the hash."""
        hashed = hasher.hash("password123")

        assert "m=64,t=1,p=1" in hashed


class TestPasswordVerification:
    """Tests for PasswordHasher.verify."""

    def test_verify_correct_password(self, hasher):
        """Test the original password verifies."""
        hashed = hasher.hash("password123")

        assert hasher.verify(hashed, "password123") is True

    def test_verify_wrong_password(self, hasher):
        """Test a different password is rejected."""
        hashed = hasher.hash("password123")

        assert hasher.verify(hashed, "password124") is False

    def test_verify_is_case_sensitive(self, hasher):
        """Test verification is case sensitive."""
        hashed = hasher.hash("Password123")

        assert hasher.verify(hashed, "password123") is False

    def test_verify_corrupt_hash_raises(self, hasher):
        """Test a corrupt stored hash is an error, not a mismatch."""
        with pytest.raises(PasswordVerificationError):
            hasher.verify("not-a-hash", "password123")


class TestPasswordRehash:
    """Tests for PasswordHasher.needs_rehash."""

    def test_current_hash_does_not_need_rehash(self, hasher):
        """Test a hash made with current parameters is kept."""
        assert hasher.needs_rehash(hasher.hash("password123")) is False

    def test_changed_memory_cost_needs_rehash(self, hasher, settings):
        """Test a hash made with older parameters is flagged."""
        stronger = PasswordHasher(settings.model_copy(update={"argon2_memory_cost": 128}))

        assert stronger.needs_rehash(hasher.hash("password123")) is True
