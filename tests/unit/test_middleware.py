"""Tests for CORS and security headers middleware."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from place_resolver.api.middleware import SecurityHeadersMiddleware, setup_cors
from place_resolver.core.config import Settings


def _create_test_app() -> FastAPI:
    """Create a minimal FastAPI app for middleware testing."""
    app = FastAPI()

    @app.get("/test")
    async def test_route() -> dict:
        return {"ok": True}

    return app


class TestSecurityHeadersMiddleware:
    """Tests for SecurityHeadersMiddleware."""

    @pytest.fixture
    def client(self) -> TestClient:
        app = _create_test_app()
        app.add_middleware(SecurityHeadersMiddleware)
        return TestClient(app)

    def test_headers_present(self, client: TestClient) -> None:
        response = client.get("/test")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "no-referrer"


class TestCors:
    """Tests for CORS configuration."""

    def _client(self, **overrides: str) -> TestClient:
        app = _create_test_app()
        setup_cors(app, Settings(database_url="sqlite+aiosqlite:///:memory:", **overrides))
        return TestClient(app)

    def test_configured_origin_allowed(self) -> None:
        client = self._client(cors_origins="https://calendar.example.com")
        response = client.get("/test", headers={"Origin": "https://calendar.example.com"})
        assert response.headers["access-control-allow-origin"] == "https://calendar.example.com"

    def test_regex_origin_allowed(self) -> None:
        client = self._client(cors_origin_regex=r"https://.*\.example\.com")
        response = client.get("/test", headers={"Origin": "https://preview.example.com"})
        assert response.headers["access-control-allow-origin"] == "https://preview.example.com"

    def test_unconfigured_origin_rejected(self) -> None:
        client = self._client()
        response = client.get("/test", headers={"Origin": "https://evil.example.net"})
        assert "access-control-allow-origin" not in response.headers
