"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from place_resolver import __version__
from place_resolver.core.config import get_settings
from place_resolver.core.database import dispose_engine, init_engine
from place_resolver.core.logging import setup_logging
from place_resolver.lib.resolver.address import mask_api_key


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine on startup, dispose on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)

    if not settings.google_maps_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not set; addresses will resolve to empty results")
    else:
        logger.info(
            f"Resolver ready in {settings.environment} (key {mask_api_key(settings.google_maps_api_key)}, "
            f"mode={settings.resolver_search_mode}, audit={settings.api_audit_enabled})"
        )

    yield

    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Place Resolver",
        description="Address-to-venue resolution with tiered caching for calendar events",
        version=__version__,
        lifespan=lifespan,
    )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    from place_resolver.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
