# ==============================================================================
# HEALTH ENDPOINT TESTS
# ==============================================================================
# Tests for root and health check endpoints, plus application lifespan
# ==============================================================================

import pytest
from httpx import AsyncClient

from dualstore.core.exceptions import StoreConnectionError
from dualstore.core.settings import Settings
from dualstore.main import create_app


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client: AsyncClient):
        """Test root endpoint returns API info."""
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "success"
        assert "version" in data
        assert data["endpoints"]["mongo"] == "/api/users/mongo"
        assert data["endpoints"]["postgres"] == "/api/users/postgres"

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client: AsyncClient):
        """Test health endpoint reports both stores."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "success"
        assert data["message"] == "Server is running"
        assert data["uptime"] >= 0
        assert "timestamp" in data
        assert set(data["stores"]) == {"mongo", "postgres"}
        assert data["stores"]["postgres"] == "connected"
        assert data["stores"]["mongo"] in ["connected", "disconnected"]


class TestLifespan:
    """Tests for store startup and shutdown around the app lifespan."""

    @pytest.mark.asyncio
    async def test_lifespan_opens_and_closes_stores(self, recording_registry):
        settings = Settings(REQUEST_LOGGING=False)
        registry = recording_registry(settings)
        app = create_app(settings=settings, registry=registry)

        async with app.router.lifespan_context(app):
            assert registry.is_initialized

        assert registry.is_initialized is False
        assert registry.get_adapter("mongo").disconnects == 1

    @pytest.mark.asyncio
    async def test_startup_failure_tolerated_outside_production(self, recording_registry):
        settings = Settings(ENVIRONMENT="development", REQUEST_LOGGING=False)
        registry = recording_registry(settings, mongo=RuntimeError("refused"))
        app = create_app(settings=settings, registry=registry)

        async with app.router.lifespan_context(app):
            assert registry.is_initialized is False

    @pytest.mark.asyncio
    async def test_startup_failure_fatal_in_production(self, recording_registry):
        settings = Settings(ENVIRONMENT="production", REQUEST_LOGGING=False)
        registry = recording_registry(settings, mongo=RuntimeError("refused"))
        app = create_app(settings=settings, registry=registry)

        with pytest.raises(StoreConnectionError):
            async with app.router.lifespan_context(app):
                pass
