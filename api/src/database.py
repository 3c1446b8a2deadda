"""
MongoDB connection management.

Wraps pymongo's ``AsyncMongoClient`` with the driver options from settings
(pool sizes, timeouts, read preference, write concern), an idempotent
connect that verifies the server and ensures indexes, and collection
accessors for the repositories.
"""

from typing import Any, Dict, Optional

import structlog
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.errors import PyMongoError

from api.src.config import Settings

logger = structlog.get_logger(__name__)

USERS_COLLECTION = "users"
ITEMS_COLLECTION = "items"


def client_options(settings: Settings) -> Dict[str, Any]:
    """
    Driver options derived from settings.

    Args:
        settings: Application settings

    Returns:
        Keyword arguments for ``AsyncMongoClient``
    """
    return {
        "maxPoolSize": settings.mongodb_max_pool_size,
        "minPoolSize": settings.mongodb_min_pool_size,
        "socketTimeoutMS": settings.mongodb_socket_timeout_ms,
        "connectTimeoutMS": settings.mongodb_connect_timeout_ms,
        "serverSelectionTimeoutMS": settings.mongodb_server_selection_timeout_ms,
        "heartbeatFrequencyMS": settings.mongodb_heartbeat_frequency_ms,
        "readPreference": settings.mongodb_read_preference,
        "w": settings.mongodb_write_concern,
        "wTimeoutMS": settings.mongodb_write_timeout_ms,
        "tz_aware": True,
    }


class Database:
    """MongoDB client and database handle."""

    def __init__(self, settings: Settings, client: Optional[AsyncMongoClient] = None):
        """
        Initialize database wrapper.

        The client connects lazily; ``connect()`` verifies the server is
        reachable and prepares indexes.

        Args:
            settings: Application settings
            client: Pre-built client (optional)
        """
        self.settings = settings
        self._client = client or AsyncMongoClient(settings.mongodb_uri, **client_options(settings))
        self._db = self._client[settings.mongodb_database]
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def users(self):
        return self._db[USERS_COLLECTION]

    @property
    def items(self):
        return self._db[ITEMS_COLLECTION]

    async def connect(self) -> None:
        """
        Verify connectivity and ensure indexes.

        Calling it again on a connected instance is a no-op.

        Raises:
            PyMongoError: If the server cannot be reached
        """
        if self._connected:
            logger.info("database_connection_reused", database=self.settings.mongodb_database)
            return

        try:
            await self._client.admin.command("ping")
            await self.ensure_indexes()
        except PyMongoError as e:
            logger.error("database_connect_failed", error=str(e))
            raise

        self._connected = True
        logger.info(
            "database_connected",
            database=self.settings.mongodb_database,
            max_pool_size=self.settings.mongodb_max_pool_size
        )

    async def ensure_indexes(self) -> None:
        """Create the unique email index and the item creation-time index."""
        await self.users.create_index([("email", ASCENDING)], unique=True, name="uniq_email")
        await self.items.create_index([("created_at", ASCENDING)], name="idx_created_at")
        logger.debug("database_indexes_ensured")

    async def ping(self) -> bool:
        """
        Check the server answers.

        Returns:
            True if the ping succeeded
        """
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("database_ping_failed", error=str(e))
            return False

    async def disconnect(self) -> None:
        """Close the client."""
        if not self._connected:
            logger.info("database_disconnect_skipped", reason="not_connected")
            return

        try:
            await self._client.close()
            logger.info("database_disconnected")
        except PyMongoError as e:
            logger.error("database_disconnect_failed", error=str(e))
        finally:
            self._connected = False
