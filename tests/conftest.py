"""Shared test fixtures for settings, async database, and sessions."""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from place_resolver.core.config import Settings
from place_resolver.core.database import make_session_factory
from place_resolver.models.base import Base


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        google_maps_api_key="AIzaTEST-key-not-for-production",
        google_maps_timeout=2.0,
        enrich_batch_delay=0.0,
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine shared across sessions."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return make_session_factory(async_engine)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    async with session_factory() as session:
        yield session
