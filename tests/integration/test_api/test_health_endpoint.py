"""Integration tests for the /health and /info endpoints."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from place_resolver import __version__
from place_resolver.api.v1.health import health_router
from place_resolver.core.config import Settings, get_settings


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Create a minimal FastAPI app with the health router."""
    app = FastAPI()
    app.include_router(health_router, prefix="/api/v1")
    app.dependency_overrides[get_settings] = lambda: settings
    return app


@pytest.fixture
def client(app: FastAPI) -> AsyncClient:
    """Create an async test client."""
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestHealthEndpoint:
    """Tests for GET /api/v1/health."""

    async def test_healthy(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}


class TestInfoEndpoint:
    """Tests for GET /api/v1/info."""

    async def test_reports_version_and_environment(self, client: AsyncClient, settings: Settings) -> None:
        settings.environment = "staging"

        resp = await client.get("/api/v1/info")

        assert resp.status_code == 200
        assert resp.json() == {
            "version": __version__,
            "environment": "staging",
            "google_maps_configured": True,
            "search_mode": "text",
            "api_audit_enabled": False,
        }

    async def test_default_environment(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/info")
        assert resp.json()["environment"] == "production"

    async def test_key_never_exposed(self, client: AsyncClient, settings: Settings) -> None:
        settings.google_maps_api_key = "   "

        resp = await client.get("/api/v1/info")

        assert resp.json()["google_maps_configured"] is False
        assert "AIza" not in resp.text
