"""Database-backed location cache store.

Exact lookups and keyed upserts run against the ``location_cache`` table;
proximity lookups are delegated to PostGIS (``ST_DWithin`` / ``ST_Distance``
over a geography cast of the stored coordinates). Each operation opens its
own session so concurrent resolutions never share one. Any datastore failure
is reported as ``CacheUnavailableError``.
"""

from geoalchemy2 import Geography
from sqlalchemy import cast, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from place_resolver.lib.resolver.base import (
    PROXIMITY_RADIUS_METERS,
    BaseLocationCache,
    CacheUnavailableError,
    LocationCacheEntry,
)
from place_resolver.models.location_cache import LocationCache

_GEOGRAPHY = Geography(geometry_type="POINT", srid=4326)

# Driver connect failures (refused, timed out) surface as OSError, unwrapped by SQLAlchemy
_DATASTORE_ERRORS = (SQLAlchemyError, OSError)


def _point(longitude: object, latitude: object) -> object:
    return cast(func.ST_SetSRID(func.ST_MakePoint(longitude, latitude), 4326), _GEOGRAPHY)


def _to_entry(row: LocationCache, distance_meters: float | None = None) -> LocationCacheEntry:
    return LocationCacheEntry(
        address=row.address,
        location_name=row.location_name,
        formatted_address=row.formatted_address,
        latitude=row.latitude,
        longitude=row.longitude,
        distance_meters=distance_meters,
    )


def build_upsert(dialect_name: str, entry: LocationCacheEntry):  # type: ignore[no-untyped-def]
    """Build an INSERT .. ON CONFLICT (address) DO UPDATE statement.

    Args:
        dialect_name: SQLAlchemy dialect name of the target database.
        entry: Entry to write; its address is the conflict target.

    Returns:
        Executable insert statement (last write wins).
    """
    insert = sqlite_insert if dialect_name == "sqlite" else pg_insert
    stmt = insert(LocationCache).values(
        address=entry.address,
        location_name=entry.location_name,
        formatted_address=entry.formatted_address,
        latitude=entry.latitude,
        longitude=entry.longitude,
    )
    return stmt.on_conflict_do_update(
        index_elements=[LocationCache.address],
        set_={
            "location_name": stmt.excluded.location_name,
            "formatted_address": stmt.excluded.formatted_address,
            "latitude": stmt.excluded.latitude,
            "longitude": stmt.excluded.longitude,
            "updated_at": func.now(),
        },
    )


class SqlLocationCache(BaseLocationCache):
    """Location cache store backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_exact(self, normalized_address: str) -> LocationCacheEntry | None:
        """Look up a named cache entry by normalized address.

        Raises:
            CacheUnavailableError: If the database query fails.
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(LocationCache).where(
                        LocationCache.address == normalized_address,
                        LocationCache.location_name.is_not(None),
                        LocationCache.location_name != "",
                    )
                )
                row = result.scalar_one_or_none()
        except _DATASTORE_ERRORS as e:
            raise CacheUnavailableError(f"Exact cache lookup failed: {e}") from e
        return _to_entry(row) if row is not None else None

    async def get_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float = PROXIMITY_RADIUS_METERS,
    ) -> LocationCacheEntry | None:
        """Return the nearest named entry within ``radius_meters``.

        Rows are ordered by ascending distance and the first row wins.

        Raises:
            CacheUnavailableError: If the database query fails.
        """
        target = _point(longitude, latitude)
        stored = _point(LocationCache.longitude, LocationCache.latitude)
        distance = func.ST_Distance(stored, target).label("distance_meters")

        stmt = (
            select(LocationCache, distance)
            .where(
                LocationCache.latitude.is_not(None),
                LocationCache.longitude.is_not(None),
                LocationCache.location_name.is_not(None),
                LocationCache.location_name != "",
                func.ST_DWithin(stored, target, radius_meters),
            )
            .order_by(distance.asc())
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                first = result.first()
        except _DATASTORE_ERRORS as e:
            raise CacheUnavailableError(f"Proximity cache lookup failed: {e}") from e

        if first is None:
            return None
        row, distance_meters = first
        return _to_entry(row, float(distance_meters) if distance_meters is not None else None)

    async def upsert(self, entry: LocationCacheEntry) -> None:
        """Insert or replace the cache row for ``entry.address``.

        Raises:
            ValueError: If the entry has no location name.
            CacheUnavailableError: If the write fails.
        """
        if not entry.location_name:
            msg = "Refusing to cache an entry without a location name"
            raise ValueError(msg)
        try:
            async with self._session_factory() as session:
                stmt = build_upsert(session.get_bind().dialect.name, entry)
                await session.execute(stmt)
                await session.commit()
        except _DATASTORE_ERRORS as e:
            raise CacheUnavailableError(f"Cache write failed: {e}") from e
