"""
User models.

Documents are stored with snake_case keys; the API speaks camelCase
(``firstName``, ``isVerified``...) through field aliases. ``UserDB`` carries
the password hash and never leaves the service layer; ``UserPublic`` is the
public projection returned to clients and kept in the cache.
"""

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class UserPublic(BaseModel):
    """User record without the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        ...,
        description="User ID (ObjectId hex)"
    )
    first_name: str = Field(
        ...,
        alias="firstName",
        description="First name"
    )
    last_name: str = Field(
        ...,
        alias="lastName",
        description="Last name"
    )
    email: str = Field(
        ...,
        description="Email address (lowercase)"
    )
    is_verified: bool = Field(
        default=False,
        alias="isVerified",
        description="Whether the email address has been verified"
    )
    created_at: datetime = Field(
        ...,
        alias="createdAt",
        description="Creation timestamp"
    )
    updated_at: datetime = Field(
        ...,
        alias="updatedAt",
        description="Last update timestamp"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_response(self) -> Dict[str, Any]:
        """JSON-ready dict using API field names."""
        return self.model_dump(mode="json", by_alias=True)


class UserDB(UserPublic):
    """User record as stored, including the password hash."""

    password_hash: str = Field(
        ...,
        description="Argon2 password hash"
    )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserDB":
        """
        Build a user from a MongoDB document.

        Args:
            document: Raw document from the users collection

        Returns:
            User model
        """
        return cls(
            id=str(document["_id"]),
            first_name=document["first_name"],
            last_name=document["last_name"],
            email=document["email"],
            password_hash=document["password_hash"],
            is_verified=document.get("is_verified", False),
            created_at=document["created_at"],
            updated_at=document["updated_at"]
        )

    def to_public(self) -> UserPublic:
        """Public projection with the password hash removed."""
        return UserPublic(**self.model_dump(exclude={"password_hash"}))
