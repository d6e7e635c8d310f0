# ==============================================================================
# CONFTEST - Pytest Fixtures and Configuration
# ==============================================================================
# Shared fixtures for all tests
# MongoDB runs in-process (mongomock-motor), the relational store on SQLite
# ==============================================================================

from __future__ import annotations

import os
from typing import Any, AsyncGenerator, Callable, List, Mapping, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

# Set test environment before importing the app
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_app.db"

from dualstore.core.constants import Backend  # noqa: E402
from dualstore.core.settings import Settings  # noqa: E402
from dualstore.database.adapters.base_adapter import BaseUserAdapter  # noqa: E402
from dualstore.database.adapters.mongodb_adapter import MongoDBAdapter  # noqa: E402
from dualstore.database.adapters.postgresql_adapter import PostgreSQLAdapter  # noqa: E402
from dualstore.database.registry import AdapterRegistry  # noqa: E402
from dualstore.schemas.user import UserRecord  # noqa: E402


# ==============================================================================
# SETTINGS
# ==============================================================================

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing the relational store at a throwaway SQLite file."""
    return Settings(
        ENVIRONMENT="development",
        DEBUG=False,
        DATABASE_URL=f"sqlite:///{tmp_path / 'users.db'}",
        MONGODB_DB=f"test_{uuid4().hex[:8]}",
        REQUEST_LOGGING=True,
    )


# ==============================================================================
# ADAPTER FIXTURES
# ==============================================================================

def build_mongo_adapter(database_name: str) -> MongoDBAdapter:
    return MongoDBAdapter(
        connection_url="mongodb://localhost:27017",
        database_name=database_name,
        client=AsyncMongoMockClient(),
    )


@pytest_asyncio.fixture
async def mongo_adapter() -> AsyncGenerator[MongoDBAdapter, None]:
    """Connected document-store adapter backed by mongomock."""
    adapter = build_mongo_adapter(f"test_{uuid4().hex[:8]}")
    await adapter.connect()
    yield adapter
    await adapter.disconnect()


@pytest_asyncio.fixture
async def sql_adapter(tmp_path) -> AsyncGenerator[PostgreSQLAdapter, None]:
    """Connected relational adapter backed by a temp SQLite file."""
    adapter = PostgreSQLAdapter(f"sqlite+aiosqlite:///{tmp_path / 'adapter.db'}")
    await adapter.connect()
    yield adapter
    await adapter.disconnect()


@pytest_asyncio.fixture
async def registry(test_settings: Settings) -> AsyncGenerator[AdapterRegistry, None]:
    """Initialized registry with both stores running in-process."""
    adapters = {
        Backend.MONGO: build_mongo_adapter(test_settings.MONGODB_DB),
        Backend.POSTGRES: PostgreSQLAdapter(test_settings.relational_url),
    }
    registry = AdapterRegistry(test_settings, adapters=adapters)
    await registry.initialize()
    yield registry
    await registry.shutdown()


# ==============================================================================
# HTTP CLIENT FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def client(
    test_settings: Settings,
    registry: AdapterRegistry,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    from dualstore.main import create_app

    # ASGITransport does not run the lifespan; the registry fixture
    # has already connected the stores.
    app = create_app(settings=test_settings, registry=registry)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        timeout=30.0,
    ) as async_client:
        yield async_client


# ==============================================================================
# HELPER FIXTURES
# ==============================================================================

@pytest.fixture
def sample_user_data() -> dict:
    """Generate a valid create payload with a unique email."""
    return {
        "name": "Sample User",
        "email": f"user_{uuid4().hex[:8]}@example.com",
        "age": 30,
    }


# ==============================================================================
# LIFECYCLE DOUBLES
# ==============================================================================

class RecordingAdapter(BaseUserAdapter[str]):
    """Adapter that only counts lifecycle calls."""

    store_label = "Recording"

    def __init__(self, backend: Backend, fail_with: Optional[Exception] = None) -> None:
        self.backend = backend
        self.fail_with = fail_with
        self.connects = 0
        self.disconnects = 0

    async def connect(self) -> None:
        self.connects += 1
        if self.fail_with is not None:
            raise self.fail_with

    async def disconnect(self) -> None:
        self.disconnects += 1

    async def health_check(self) -> bool:
        return self.connects > 0

    def parse_id(self, raw_id: Any) -> str:
        return str(raw_id)

    async def list_all(self) -> List[UserRecord]:
        return []

    async def get_by_id(self, id: Any) -> UserRecord:
        raise NotImplementedError

    async def create(self, payload: Mapping[str, Any]) -> UserRecord:
        raise NotImplementedError

    async def update(self, id: Any, payload: Mapping[str, Any]) -> UserRecord:
        raise NotImplementedError

    async def delete(self, id: Any) -> UserRecord:
        raise NotImplementedError


@pytest.fixture
def recording_registry() -> Callable[..., AdapterRegistry]:
    """
    Factory for registries whose adapters only count lifecycle calls.

    Keyword arguments named after a backend make that adapter's
    connect() raise the given exception.
    """

    def build(settings: Optional[Settings] = None, **failures) -> AdapterRegistry:
        adapters = {
            backend: RecordingAdapter(backend, failures.get(backend.value))
            for backend in Backend
        }
        return AdapterRegistry(settings or Settings(), adapters=adapters)

    return build
