"""FastAPI dependency injection for database sessions and the location resolver."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from place_resolver.core.config import Settings, get_settings
from place_resolver.core.database import get_session_factory
from place_resolver.lib.resolver import LocationResolver


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_resolver(settings: Annotated[Settings, Depends(get_settings)]) -> LocationResolver:
    """Build a location resolver wired to the application database."""
    from place_resolver.services.location_service import build_resolver

    return build_resolver(settings, get_session_factory())
