"""Service health and build information endpoints.

GET /health, GET /info.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from place_resolver import __version__
from place_resolver.core.config import Settings, get_settings

health_router = APIRouter(tags=["health"])


@health_router.get("/health", status_code=200)
async def health_check() -> dict:
    """Liveness check."""
    return {"status": "healthy"}


@health_router.get("/info", status_code=200)
async def info(
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    """Return application version, environment, and resolver configuration."""
    return {
        "version": __version__,
        "environment": settings.environment,
        "google_maps_configured": bool(settings.google_maps_api_key and settings.google_maps_api_key.strip()),
        "search_mode": settings.resolver_search_mode,
        "api_audit_enabled": settings.api_audit_enabled,
    }
