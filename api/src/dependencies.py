"""
FastAPI dependency injection for services.

The application builds one ``ServiceContainer`` at startup and stores it on
``app.state``; route handlers receive services through the ``get_*``
dependencies below instead of module-level singletons.
"""

import time
from dataclasses import dataclass, field

import structlog
from fastapi import Depends, Request

from api.src.cache import TTLCache
from api.src.config import Settings
from api.src.database import Database
from api.src.repositories import ItemRepository, UserRepository
from api.src.services import ItemService, PasswordHasher, UserService
from shared.metrics import ApiMetrics

logger = structlog.get_logger(__name__)


@dataclass
class ServiceContainer:
    """Shared resources for one application instance."""

    settings: Settings
    database: Database
    hasher: PasswordHasher
    user_cache: TTLCache
    item_cache: TTLCache
    user_service: UserService
    item_service: ItemService
    metrics: ApiMetrics
    started_at: float = field(default_factory=time.monotonic)

    @property
    def caches(self):
        return (self.user_cache, self.item_cache)

    @property
    def uptime(self) -> float:
        return time.monotonic() - self.started_at


def build_container(settings: Settings, database: Database) -> ServiceContainer:
    """
    Wire caches, repositories and services.

    Args:
        settings: Application settings
        database: Database handle providing the collections

    Returns:
        Service container
    """
    hasher = PasswordHasher(settings)

    user_cache = TTLCache(
        name="users",
        default_ttl=settings.user_cache_ttl,
        max_keys=settings.cache_max_keys
    )
    item_cache = TTLCache(
        name="items",
        default_ttl=settings.item_cache_ttl,
        max_keys=settings.cache_max_keys
    )

    user_service = UserService(
        UserRepository(database.users),
        user_cache,
        hasher,
        password_min_length=settings.password_min_length
    )
    item_service = ItemService(
        ItemRepository(database.items),
        item_cache,
        list_ttl=settings.item_list_cache_ttl
    )

    logger.info("services_initialized")

    return ServiceContainer(
        settings=settings,
        database=database,
        hasher=hasher,
        user_cache=user_cache,
        item_cache=item_cache,
        user_service=user_service,
        item_service=item_service,
        metrics=ApiMetrics()
    )


def get_container(request: Request) -> ServiceContainer:
    """
    Get the service container of the running application.

    Raises:
        RuntimeError: If the application was not built with ``create_app``
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        logger.error("service_container_missing")
        raise RuntimeError("Service container not initialized. Build the app with create_app().")
    return container


def get_user_service(container: ServiceContainer = Depends(get_container)) -> UserService:
    return container.user_service


def get_item_service(container: ServiceContainer = Depends(get_container)) -> ItemService:
    return container.item_service
