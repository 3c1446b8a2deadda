"""
Item service: create, list and fetch items through a read-through cache.

Single items are cached under ``item:<id>`` with the cache's default TTL.
The full listing lives in one aggregate entry (``items:all``) with its own,
shorter TTL and is dropped on every write.
"""

from typing import List, Optional

import structlog

from api.src.cache import TTLCache
from api.src.exceptions import ValidationError
from api.src.models.item import Item
from api.src.repositories.item_repo import ItemRepository
from api.src.validation import item_violations

logger = structlog.get_logger(__name__)

ALL_ITEMS_KEY = "items:all"


def item_cache_key(item_id: str) -> str:
    return f"item:{item_id}"


class ItemService:
    """Service for item operations."""

    def __init__(
        self,
        item_repo: ItemRepository,
        cache: TTLCache,
        list_ttl: Optional[float] = None
    ):
        """
        Initialize item service.

        Args:
            item_repo: Item repository
            cache: Cache for items and the aggregate listing
            list_ttl: TTL for the aggregate listing (cache default when None)
        """
        self.item_repo = item_repo
        self.cache = cache
        self.list_ttl = list_ttl

    async def create(
        self,
        name: str,
        price: float,
        description: Optional[str] = None
    ) -> Item:
        """
        Create an item.

        Args:
            name: Item name, must not be empty
            price: Item price, must be >= 0
            description: Optional description

        Returns:
            Created item

        Raises:
            ValidationError: If name is empty or price is negative
        """
        violations = item_violations(name, price, description)
        if violations:
            logger.warning("item_invalid", name=name, violations=violations)
            raise ValidationError(violations)

        item = await self.item_repo.create_item(
            name=name.strip(),
            price=float(price),
            description=description
        )

        self.cache.set(item_cache_key(item.id), item)
        self.cache.delete(ALL_ITEMS_KEY)

        return item

    async def get_all(self) -> List[Item]:
        """
        List every item, serving the aggregate cache entry when fresh.

        Returns:
            List of items
        """
        cached = self.cache.get(ALL_ITEMS_KEY)
        if cached is not None:
            logger.debug("item_list_cache_hit", count=len(cached))
            return list(cached)

        items = await self.item_repo.list_items()
        self.cache.set(ALL_ITEMS_KEY, items, ttl=self.list_ttl)

        logger.debug("item_list_loaded", count=len(items))
        return list(items)

    async def get_by_id(self, item_id: str) -> Optional[Item]:
        """
        Fetch one item.

        Args:
            item_id: Item ID

        Returns:
            Item or None if absent
        """
        key = item_cache_key(item_id)

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        item = await self.item_repo.get_item_by_id(item_id)
        if item is not None:
            self.cache.set(key, item)
        return item

    def invalidate(self, item_id: Optional[str] = None) -> None:
        """
        Drop cached items. The aggregate listing is always dropped.

        Args:
            item_id: Item to drop; every cached item when omitted
        """
        if item_id:
            self.cache.delete(item_cache_key(item_id))
        else:
            self.cache.clear()
        self.cache.delete(ALL_ITEMS_KEY)
