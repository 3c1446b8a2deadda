"""MongoDB repositories."""

from api.src.repositories.item_repo import ItemRepository
from api.src.repositories.user_repo import UserRepository

__all__ = ["ItemRepository", "UserRepository"]
