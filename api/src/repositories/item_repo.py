"""Item repository for the ``items`` collection."""

from datetime import datetime, timezone
from typing import List, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId

from api.src.models.item import Item

logger = structlog.get_logger(__name__)


class ItemRepository:
    """Repository for item database operations."""

    def __init__(self, collection):
        self.collection = collection

    async def create_item(
        self,
        name: str,
        price: float,
        description: Optional[str] = None
    ) -> Item:
        """
        Insert a new item.

        Args:
            name: Item name
            price: Item price
            description: Optional description

        Returns:
            Created item
        """
        document = {
            "name": name,
            "price": price,
            "created_at": datetime.now(timezone.utc),
        }
        if description is not None:
            document["description"] = description

        try:
            result = await self.collection.insert_one(document)
        except Exception as e:
            logger.error("item_create_failed", error=str(e), name=name)
            raise

        document["_id"] = result.inserted_id
        logger.info("item_created", item_id=str(result.inserted_id), name=name)
        return Item.from_document(document)

    async def get_item_by_id(self, item_id: str) -> Optional[Item]:
        """
        Get item by ID.

        Args:
            item_id: ObjectId hex string

        Returns:
            Item or None if not found or the ID is malformed
        """
        try:
            object_id = ObjectId(item_id)
        except (InvalidId, TypeError):
            logger.debug("item_id_invalid", item_id=item_id)
            return None

        try:
            document = await self.collection.find_one({"_id": object_id})
        except Exception as e:
            logger.error("item_get_by_id_failed", error=str(e), item_id=item_id)
            raise

        if document is None:
            logger.debug("item_not_found", item_id=item_id)
            return None

        return Item.from_document(document)

    async def list_items(self) -> List[Item]:
        """
        List all items in insertion order.

        Returns:
            List of items
        """
        try:
            cursor = self.collection.find({})
            documents = await cursor.to_list(length=None)
        except Exception as e:
            logger.error("item_list_failed", error=str(e))
            raise

        return [Item.from_document(document) for document in documents]
