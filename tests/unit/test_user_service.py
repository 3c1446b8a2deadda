"""
Unit tests for UserService.

Tests cover:
- Registration with hashing, normalization and uniqueness
- Authentication with a uniform failure for unknown email and bad password
- Transparent rehash on login
- Read-through cache with TTL expiry and invalidation
"""

import pytest

from api.src.exceptions import (
    AlreadyExistsError,
    InvalidCredentialsError,
    PasswordVerificationError,
    ValidationError,
)
from api.src.repositories import UserRepository
from api.src.services import PasswordHasher, UserService
from api.src.services.user_service import normalize_email, user_cache_key


async def register_ada(user_service, email="Ada@Example.com"):
    return await user_service.register(
        first_name="Ada",
        last_name="Lovelace",
        email=email,
        password="analytical"
    )


class TestHelpers:
    """Tests for key helpers."""

    def test_normalize_email(self):
        assert normalize_email("  Ada@Example.COM ") == "ada@example.com"

    def test_user_cache_key_is_normalized(self):
        assert user_cache_key("Ada@Example.com") == "user:ada@example.com"


class TestRegistration:
    """Tests for UserService.register."""

    @pytest.mark.asyncio
    async def test_register_returns_public_user(self, user_service, database):
        """Test registration stores a hash and returns no password."""
        user = await register_ada(user_service)

        assert user.email == "ada@example.com"
        assert user.full_name == "Ada Lovelace"
        assert user.is_verified is False
        assert "password" not in str(user.to_response()).lower()

        stored = database.users.documents[0]
        assert stored["password_hash"].startswith("$argon2id$")
        assert stored["password_hash"] != "analytical"

    @pytest.mark.asyncio
    async def test_register_caches_public_user(self, user_service, user_cache):
        """Test the new user is cached under its normalized email."""
        user = await register_ada(user_service)

        assert user_cache.get("user:ada@example.com") == user

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, user_service):
        """Test a second registration with the same email fails."""
        await register_ada(user_service)

        with pytest.raises(AlreadyExistsError) as exc_info:
            await register_ada(user_service, email="ADA@example.com")

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "User with this email already exists"

    @pytest.mark.asyncio
    async def test_register_duplicate_rejected_by_unique_index(self, database):
        """Test the unique index catches duplicates the lookup missed."""
        await database.connect()
        repo = UserRepository(database.users)
        await repo.create_user("Ada", "Lovelace", "ada@example.com", "hash")

        with pytest.raises(AlreadyExistsError):
            await repo.create_user("Ada", "Byron", "ada@example.com", "hash")

    @pytest.mark.asyncio
    async def test_register_short_password(self, user_service, database):
        """Test validation happens before anything is stored."""
        with pytest.raises(ValidationError) as exc_info:
            await user_service.register("Ada", "Lovelace", "ada@example.com", "short")

        assert exc_info.value.status_code == 400
        assert "password must be at least 8 characters long" in exc_info.value.message
        assert database.users.documents == []

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, user_service):
        with pytest.raises(ValidationError):
            await user_service.register("Ada", "Lovelace", "ada-at-example", "analytical")


class TestAuthentication:
    """Tests for UserService.authenticate."""

    @pytest.mark.asyncio
    async def test_authenticate_valid_credentials(self, user_service):
        """Test correct credentials return the public user."""
        registered = await register_ada(user_service)

        user = await user_service.authenticate("ada@example.com", "analytical")

        assert user.id == registered.id

    @pytest.mark.asyncio
    async def test_authenticate_normalizes_email(self, user_service):
        await register_ada(user_service)

        user = await user_service.authenticate("  ADA@EXAMPLE.COM ", "analytical")

        assert user.email == "ada@example.com"

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_are_indistinguishable(self, user_service):
        """Test both failures raise the same error and message."""
        await register_ada(user_service)

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await user_service.authenticate("ada@example.com", "wrong-password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await user_service.authenticate("nobody@example.com", "analytical")

        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.status_code == unknown_email.value.status_code == 401

    @pytest.mark.asyncio
    async def test_corrupt_stored_hash_is_internal_error(self, user_service, database):
        """Test a corrupt hash surfaces as an internal error, not a 401."""
        await register_ada(user_service)
        database.users.documents[0]["password_hash"] = "garbage"

        with pytest.raises(PasswordVerificationError) as exc_info:
            await user_service.authenticate("ada@example.com", "analytical")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_authenticate_rehashes_outdated_hash(self, database, user_cache, settings):
        """Test login upgrades a hash made with older parameters."""
        weak = UserService(UserRepository(database.users), user_cache, PasswordHasher(settings))
        await register_ada(weak)
        old_hash = database.users.documents[0]["password_hash"]

        stronger = PasswordHasher(settings.model_copy(update={"argon2_memory_cost": 128}))
        service = UserService(UserRepository(database.users), user_cache, stronger)
        await service.authenticate("ada@example.com", "analytical")

        new_hash = database.users.documents[0]["password_hash"]
        assert new_hash != old_hash
        assert stronger.needs_rehash(new_hash) is False
        assert stronger.verify(new_hash, "analytical") is True


class TestUserLookup:
    """Tests for the read-through lookup and invalidation."""

    @pytest.mark.asyncio
    async def test_find_unknown_email(self, user_service):
        assert await user_service.find_by_email("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_find_serves_cache_until_ttl(self, user_service, user_cache, database, clock):
        """Test cached users are served until expiry, then reloaded."""
        await register_ada(user_service)
        database.users.documents[0]["first_name"] = "Augusta"

        cached = await user_service.find_by_email("ada@example.com")
        assert cached.first_name == "Ada"

        clock.advance(user_cache.default_ttl)

        reloaded = await user_service.find_by_email("ada@example.com")
        assert reloaded.first_name == "Augusta"

    @pytest.mark.asyncio
    async def test_invalidate_single_user(self, user_service, database):
        """Test invalidating one email forces a reload."""
        await register_ada(user_service)
        database.users.documents[0]["last_name"] = "King"

        user_service.invalidate("ADA@example.com")

        user = await user_service.find_by_email("ada@example.com")
        assert user.last_name == "King"

    @pytest.mark.asyncio
    async def test_invalidate_all_users(self, user_service, user_cache):
        await register_ada(user_service)
        await register_ada(user_service, email="grace@example.com")

        user_service.invalidate()

        assert len(user_cache) == 0
