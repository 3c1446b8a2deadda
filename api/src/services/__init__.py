"""Business logic services.

This package contains service classes that implement business logic,
combine the repositories with the read-through caches, and provide
high-level functionality to API endpoints.
"""

from api.src.services.item_service import ItemService
from api.src.services.password import PasswordHasher
from api.src.services.user_service import UserService

__all__ = ["ItemService", "PasswordHasher", "UserService"]
