"""In-process location cache store.

Keeps entries in a dict keyed by normalized address and answers proximity
lookups with haversine distance. Used for local runs without a database and
as the test double for the resolution engine.
"""

from dataclasses import replace

from place_resolver.lib.resolver.base import PROXIMITY_RADIUS_METERS, BaseLocationCache, LocationCacheEntry
from place_resolver.lib.resolver.distance import haversine_meters


class InMemoryLocationCache(BaseLocationCache):
    """Dict-backed cache store with last-write-wins upserts."""

    def __init__(self, entries: list[LocationCacheEntry] | None = None) -> None:
        self._entries: dict[str, LocationCacheEntry] = {}
        for entry in entries or []:
            self._entries[entry.address] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, address: object) -> bool:
        return address in self._entries

    @property
    def entries(self) -> dict[str, LocationCacheEntry]:
        return dict(self._entries)

    async def get_exact(self, normalized_address: str) -> LocationCacheEntry | None:
        entry = self._entries.get(normalized_address)
        if entry is None or not entry.location_name:
            return None
        return entry

    async def get_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float = PROXIMITY_RADIUS_METERS,
    ) -> LocationCacheEntry | None:
        best: LocationCacheEntry | None = None
        for entry in self._entries.values():
            if not entry.location_name or entry.latitude is None or entry.longitude is None:
                continue
            distance = haversine_meters(latitude, longitude, entry.latitude, entry.longitude)
            if distance > radius_meters:
                continue
            if best is None or distance < (best.distance_meters or 0.0):
                best = replace(entry, distance_meters=distance)
        return best

    async def upsert(self, entry: LocationCacheEntry) -> None:
        if not entry.location_name:
            msg = "Refusing to cache an entry without a location name"
            raise ValueError(msg)
        self._entries[entry.address] = replace(entry, distance_meters=None)
