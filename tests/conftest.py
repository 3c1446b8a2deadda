"""
Shared fixtures and in-memory database doubles.

The doubles implement the subset of pymongo's async collection API the
repositories use, so services and the HTTP app run end to end without a
MongoDB server.
"""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from api.src.cache import TTLCache
from api.src.config import Settings
from api.src.repositories import ItemRepository, UserRepository
from api.src.services import ItemService, PasswordHasher, UserService


# ============================================================================
# DATABASE DOUBLES
# ============================================================================


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in query.items())


class InMemoryCursor:
    """Result of ``find``."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        if length is None:
            return list(self._documents)
        return self._documents[:length]


class InMemoryCollection:
    """Insertion-ordered collection with optional unique fields."""

    def __init__(self, unique_fields: Sequence[str] = ()):
        self.documents: List[Dict[str, Any]] = []
        self.unique_fields = set(unique_fields)
        self.indexes: Dict[str, Any] = {}

    async def create_index(self, keys, unique: bool = False, name: Optional[str] = None) -> str:
        index_name = name or "_".join(field for field, _ in keys)
        self.indexes[index_name] = keys
        if unique:
            self.unique_fields.update(field for field, _ in keys)
        return index_name

    async def insert_one(self, document: Dict[str, Any]):
        for field in self.unique_fields:
            if field in document and any(d.get(field) == document[field] for d in self.documents):
                raise DuplicateKeyError(f"E11000 duplicate key error dup key: {{ {field} }}")

        stored = dict(document)
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"], acknowledged=True)

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for document in self.documents:
            if _matches(document, query):
                return dict(document)
        return None

    def find(self, query: Optional[Dict[str, Any]] = None) -> InMemoryCursor:
        query = query or {}
        return InMemoryCursor([dict(d) for d in self.documents if _matches(d, query)])

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]):
        for document in self.documents:
            if _matches(document, query):
                document.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)


class InMemoryDatabase:
    """Stands in for ``api.src.database.Database``."""

    def __init__(self, available: bool = True):
        self.users = InMemoryCollection()
        self.items = InMemoryCollection()
        self.available = available
        self.is_connected = False
        self.connect_calls = 0

    async def connect(self) -> None:
        self.connect_calls += 1
        if self.is_connected:
            return
        await self.users.create_index([("email", 1)], unique=True, name="uniq_email")
        await self.items.create_index([("created_at", 1)], name="idx_created_at")
        self.is_connected = True

    async def ping(self) -> bool:
        return self.available

    async def disconnect(self) -> None:
        self.is_connected = False


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# PYTEST FIXTURES
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Test settings with cheap argon2 parameters and no background sweep."""
    return Settings(
        _env_file=None,
        environment="test",
        log_level="WARNING",
        log_format="text",
        argon2_memory_cost=64,
        argon2_time_cost=1,
        argon2_parallelism=1,
        cache_check_period=0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hasher(settings) -> PasswordHasher:
    return PasswordHasher(settings)


@pytest.fixture
def database() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def user_cache(clock) -> TTLCache:
    return TTLCache(name="users", default_ttl=300, max_keys=100, clock=clock)


@pytest.fixture
def item_cache(clock) -> TTLCache:
    return TTLCache(name="items", default_ttl=600, max_keys=100, clock=clock)


@pytest.fixture
def user_service(database, user_cache, hasher) -> UserService:
    return UserService(UserRepository(database.users), user_cache, hasher)


@pytest.fixture
def item_service(database, item_cache) -> ItemService:
    return ItemService(ItemRepository(database.items), item_cache, list_ttl=300)


@pytest.fixture
def unavailable_database() -> InMemoryDatabase:
    """Database that connects but stops answering pings."""
    return InMemoryDatabase(available=False)


@pytest.fixture
def unreachable_database() -> InMemoryDatabase:
    """Database whose server cannot be selected at startup."""

    class UnreachableDatabase(InMemoryDatabase):
        async def connect(self) -> None:
            raise ServerSelectionTimeoutError("no servers available")

    return UnreachableDatabase()
