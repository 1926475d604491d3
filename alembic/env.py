"""Alembic environment for the place-resolver schema (async SQLAlchemy)."""

import asyncio
from logging.config import fileConfig
from typing import Any

# Registers geography/geometry types so spatial expressions render in autogenerate
import geoalchemy2  # noqa: F401
from alembic import context
from sqlalchemy import pool, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from place_resolver.core.config import get_settings
from place_resolver.models import ApiAuditLog, LocationCache  # noqa: F401
from place_resolver.models.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Tables owned by the postgis extension
_EXTENSION_TABLES = frozenset({"spatial_ref_sys"})


def _include_object(obj, name, type_, reflected, compare_to) -> bool:  # type: ignore[no-untyped-def]
    """Skip extension-managed tables during autogenerate."""
    return not (type_ == "table" and name in _EXTENSION_TABLES)


def _context_options(schema: str | None, **options: Any) -> dict[str, Any]:
    """Options shared by offline and online migration runs."""
    options.update(target_metadata=target_metadata, compare_type=True, include_object=_include_object)
    if schema is not None:
        options["version_table_schema"] = schema
    return options


def run_migrations_offline() -> None:
    """Emit migration SQL without a database connection."""
    settings = get_settings()
    context.configure(
        **_context_options(
            settings.database_schema,
            url=settings.database_url,
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
        )
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection, schema: str | None) -> None:
    if schema is not None:
        connection.execute(text(f'SET search_path TO "{schema}", public'))
    context.configure(**_context_options(schema, connection=connection))

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Apply migrations over an async connection, creating the schema first."""
    settings = get_settings()
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = settings.database_url

    engine = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    schema = settings.database_schema
    try:
        async with engine.connect() as connection:
            if schema is not None:
                await connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{schema}"'))
                await connection.commit()
            await connection.run_sync(_run_sync, schema)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
