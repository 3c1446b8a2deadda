"""Data models for the FastAPI service.

This package contains Pydantic models for stored records, their public
projections, and the response envelope.
"""

from api.src.models.common import ApiResponse
from api.src.models.item import Item
from api.src.models.user import UserDB, UserPublic

__all__ = ["ApiResponse", "Item", "UserDB", "UserPublic"]
