"""
Password hashing and verification (passlib + argon2id).

Cost parameters come from settings. A wrong password is a normal ``False``
result; a corrupt or unrecognised stored hash raises
``PasswordVerificationError`` so callers can tell the two apart.
"""

import structlog
from passlib.context import CryptContext

from api.src.config import Settings
from api.src.exceptions import PasswordHashError, PasswordVerificationError

logger = structlog.get_logger(__name__)


class PasswordHasher:
    """One-way password hashing with argon2id."""

    def __init__(self, settings: Settings):
        """
        Initialize hasher.

        Args:
            settings: Application settings with argon2 cost parameters

        Raises:
            PasswordHashError: If the parameters are rejected
        """
        try:
            self.pwd_context = CryptContext(
                schemes=["argon2"],
                deprecated="auto",
                argon2__type="ID",
                argon2__memory_cost=settings.argon2_memory_cost,
                argon2__rounds=settings.argon2_time_cost,
                argon2__parallelism=settings.argon2_parallelism,
                argon2__digest_size=settings.argon2_digest_size,
            )
        except (ValueError, TypeError) as e:
            logger.error("password_hasher_config_invalid", error=str(e))
            raise PasswordHashError(f"Invalid password hashing parameters: {e}") from e

    def hash(self, password: str) -> str:
        """
        Hash a password using argon2id.

        Args:
            password: Plain text password

        Returns:
            Encoded hash including salt and parameters

        Raises:
            PasswordHashError: If hashing fails
        """
        try:
            hashed = self.pwd_context.hash(password)
            logger.debug("password_hashed")
            return hashed
        except Exception as e:
            logger.error("password_hash_failed", error=str(e))
            raise PasswordHashError() from e

    def verify(self, hashed_password: str, plain_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            hashed_password: Stored hash
            plain_password: Candidate plain text password

        Returns:
            True if password matches, False otherwise

        Raises:
            PasswordVerificationError: If the stored hash is corrupt
        """
        try:
            verified = self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.error("password_verify_failed", error=str(e))
            raise PasswordVerificationError() from e

        logger.debug("password_verified", verified=verified)
        return verified

    def needs_rehash(self, hashed_password: str) -> bool:
        """
        Check whether a hash was made with outdated parameters.

        Args:
            hashed_password: Stored hash

        Returns:
            True if the hash should be regenerated
        """
        try:
            return self.pwd_context.needs_update(hashed_password)
        except (ValueError, TypeError) as e:
            logger.error("password_rehash_check_failed", error=str(e))
            raise PasswordVerificationError() from e
