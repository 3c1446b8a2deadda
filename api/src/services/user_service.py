"""
User service: registration, authentication and cached lookup by email.

Provides:
- Registration with uniqueness check and explicit password hashing
- Authentication that never reveals whether an email is registered
- Read-through lookup of the public user projection
- Cache invalidation
"""

import asyncio
from typing import Optional

import structlog

from api.src.cache import TTLCache
from api.src.exceptions import AlreadyExistsError, InvalidCredentialsError, ValidationError
from api.src.models.user import UserPublic
from api.src.repositories.user_repo import UserRepository
from api.src.services.password import PasswordHasher
from api.src.validation import registration_violations

logger = structlog.get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def user_cache_key(email: str) -> str:
    return f"user:{normalize_email(email)}"


class UserService:
    """Service for user registration and authentication."""

    def __init__(
        self,
        user_repo: UserRepository,
        cache: TTLCache,
        hasher: PasswordHasher,
        password_min_length: int = 8
    ):
        """
        Initialize user service.

        Args:
            user_repo: User repository
            cache: Cache for public user projections
            hasher: Password hasher
            password_min_length: Minimum accepted password length
        """
        self.user_repo = user_repo
        self.cache = cache
        self.hasher = hasher
        self.password_min_length = password_min_length

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str
    ) -> UserPublic:
        """
        Register a new user.

        Args:
            first_name: First name
            last_name: Last name
            email: Email address (normalized to lowercase)
            password: Plain text password

        Returns:
            Public projection of the created user

        Raises:
            ValidationError: If a field is invalid
            AlreadyExistsError: If the email is already registered
            PasswordHashError: If hashing fails
        """
        email = normalize_email(email)

        violations = registration_violations(
            first_name, last_name, email, password, self.password_min_length
        )
        if violations:
            logger.warning("registration_invalid", email=email, violations=violations)
            raise ValidationError(violations)

        existing = await self.user_repo.get_user_by_email(email)
        if existing is not None:
            logger.warning("registration_duplicate_email", email=email)
            raise AlreadyExistsError("User with this email already exists")

        password_hash = await asyncio.to_thread(self.hasher.hash, password)

        user = await self.user_repo.create_user(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash
        )

        public = user.to_public()
        self.cache.set(user_cache_key(email), public)

        logger.info("user_registered", user_id=public.id, email=email)
        return public

    async def authenticate(self, email: str, password: str) -> UserPublic:
        """
        Authenticate user with email and password.

        Unknown email and wrong password raise the same error.

        Args:
            email: Email address
            password: Plain text password

        Returns:
            Public projection of the authenticated user

        Raises:
            InvalidCredentialsError: If authentication fails
            PasswordVerificationError: If the stored hash is corrupt
        """
        email = normalize_email(email)

        user = await self.user_repo.get_user_by_email(email)
        if user is None:
            logger.warning("authentication_failed_user_not_found", email=email)
            raise InvalidCredentialsError()

        verified = await asyncio.to_thread(self.hasher.verify, user.password_hash, password)
        if not verified:
            logger.warning("authentication_failed_invalid_password", email=email)
            raise InvalidCredentialsError()

        if self.hasher.needs_rehash(user.password_hash):
            password_hash = await asyncio.to_thread(self.hasher.hash, password)
            await self.user_repo.update_password_hash(user.id, password_hash)
            logger.info("password_rehashed", user_id=user.id)

        public = user.to_public()
        self.cache.set(user_cache_key(email), public)

        logger.info("user_authenticated", user_id=public.id, email=email)
        return public

    async def find_by_email(self, email: str) -> Optional[UserPublic]:
        """
        Look up a user, serving from cache when possible.

        Args:
            email: Email address

        Returns:
            Public projection or None if not registered
        """
        key = user_cache_key(email)

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        user = await self.user_repo.get_user_by_email(normalize_email(email))
        if user is None:
            return None

        public = user.to_public()
        self.cache.set(key, public)
        return public

    def invalidate(self, email: Optional[str] = None) -> None:
        """
        Drop cached users.

        Args:
            email: Email to drop; every cached user when omitted
        """
        if email:
            self.cache.delete(user_cache_key(email))
        else:
            self.cache.clear()
