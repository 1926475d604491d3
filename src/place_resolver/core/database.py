"""Async database engine and session management.

Holds the process-wide async engine and session factory used by the cache
store, the audit recorder, and request-scoped sessions. SQLAlchemy 2.x with
asyncpg in production and aiosqlite in tests.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the current async engine.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _engine is None:
        msg = "Database engine not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the current session factory.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _session_factory is None:
        msg = "Session factory not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _session_factory


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build a session factory that keeps attributes loaded after commit."""
    return async_sessionmaker(engine, expire_on_commit=False)


def init_engine(database_url: str, *, schema: str | None = None, **kwargs: object) -> AsyncEngine:
    """Create and store the async engine and session factory.

    Cache reads and writes each check out their own connection, so batch
    enrichment fans out across the pool; pool defaults only apply to
    server databases.

    Args:
        database_url: Async connection string.
        schema: Optional PostgreSQL schema placed first on the search path.
        **kwargs: Additional arguments passed to create_async_engine.

    Returns:
        The created async engine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    is_sqlite = database_url.startswith("sqlite")
    if schema is not None and not is_sqlite:
        connect_args = kwargs.pop("connect_args", {})
        if not isinstance(connect_args, dict):
            msg = "connect_args must be a dict"
            raise TypeError(msg)
        connect_args["server_settings"] = {"search_path": f"{schema},public"}
        kwargs["connect_args"] = connect_args
    if not is_sqlite:
        kwargs.setdefault("pool_size", 10)
        kwargs.setdefault("max_overflow", 10)
        kwargs.setdefault("pool_pre_ping", True)
    _engine = create_async_engine(database_url, **kwargs)
    _session_factory = make_session_factory(_engine)
    return _engine


async def dispose_engine() -> None:
    """Dispose of the async engine and release connections."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
