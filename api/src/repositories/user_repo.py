"""
User repository for database operations.

Provides async operations on the ``users`` collection using pymongo's
async API. Duplicate emails rejected by the unique index surface as
``AlreadyExistsError``.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from api.src.exceptions import AlreadyExistsError
from api.src.models.user import UserDB

logger = structlog.get_logger(__name__)


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, collection):
        """
        Initialize user repository.

        Args:
            collection: Async MongoDB collection holding users
        """
        self.collection = collection

    async def create_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        is_verified: bool = False
    ) -> UserDB:
        """
        Insert a new user.

        Args:
            first_name: First name
            last_name: Last name
            email: Normalized email address
            password_hash: Hashed password
            is_verified: Verified flag

        Returns:
            Created user

        Raises:
            AlreadyExistsError: If the email is already taken
            PyMongoError: On database error
        """
        now = datetime.now(timezone.utc)
        document = {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "password_hash": password_hash,
            "is_verified": is_verified,
            "created_at": now,
            "updated_at": now,
        }

        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.warning("email_already_exists", email=email)
            raise AlreadyExistsError("User with this email already exists")
        except Exception as e:
            logger.error("user_create_failed", error=str(e), email=email)
            raise

        document["_id"] = result.inserted_id
        logger.info("user_created", user_id=str(result.inserted_id), email=email)
        return UserDB.from_document(document)

    async def get_user_by_email(self, email: str) -> Optional[UserDB]:
        """
        Get user by email.

        Args:
            email: Normalized email address

        Returns:
            User or None if not found
        """
        try:
            document = await self.collection.find_one({"email": email})
        except Exception as e:
            logger.error("user_get_by_email_failed", error=str(e), email=email)
            raise

        if document is None:
            logger.debug("user_not_found", email=email)
            return None

        return UserDB.from_document(document)

    async def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        """
        Replace a user's password hash.

        Args:
            user_id: ObjectId hex string
            password_hash: New hash

        Returns:
            True if a user was updated
        """
        try:
            result = await self.collection.update_one(
                {"_id": ObjectId(user_id)},
                {"$set": {
                    "password_hash": password_hash,
                    "updated_at": datetime.now(timezone.utc),
                }}
            )
        except Exception as e:
            logger.error("user_update_failed", error=str(e), user_id=user_id)
            raise

        updated = result.modified_count == 1
        if updated:
            logger.info("user_password_hash_updated", user_id=user_id)
        else:
            logger.debug("user_not_found", user_id=user_id)
        return updated
