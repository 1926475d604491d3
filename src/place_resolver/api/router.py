"""Root API router with versioned prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from place_resolver.api.middleware import SecurityHeadersMiddleware, setup_cors
from place_resolver.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from place_resolver.api.v1.health import health_router
    from place_resolver.api.v1.locations import locations_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(health_router)
    root_router.include_router(locations_router)
    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register CORS and security header middleware.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    app.add_middleware(SecurityHeadersMiddleware)
    setup_cors(app, settings)
