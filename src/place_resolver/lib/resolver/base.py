"""Core types for address-to-place resolution.

Defines the result/candidate dataclasses, resolution states, capability
flags, error hierarchy, and the abstract cache store interface that the
resolution engine depends on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from place_resolver.core.config import Settings

# Proximity radius for cache reuse and candidate distance bounds (meters)
PROXIMITY_RADIUS_METERS = 50.0


class ResolutionState(StrEnum):
    """Terminal state reached by a single resolution call."""

    PROVIDED_OVERRIDE = "provided_override"
    EMPTY_INPUT = "empty_input"
    MISSING_KEY = "missing_key"
    EXACT_CACHE_HIT = "exact_cache_hit"
    PROXIMITY_CACHE_HIT = "proximity_cache_hit"
    UPSTREAM_RESOLVED = "upstream_resolved"
    UNRESOLVED = "unresolved"


class PlaceSearchMode(StrEnum):
    """Which places API strategy the engine uses on a cache miss."""

    TEXT = "text"
    NEARBY = "nearby"


@dataclass(frozen=True)
class GeocodeResult:
    """Outcome of a resolution. ``None`` in any field means "unknown"."""

    location_name: str | None = None
    formatted_address: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def empty(cls) -> GeocodeResult:
        """Return the all-null result."""
        return cls()

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class ForwardGeocode:
    """Coordinates and formatted address returned by the forward geocoder."""

    latitude: float
    longitude: float
    formatted_address: str | None = None

    def __post_init__(self) -> None:
        if not (-90 <= self.latitude <= 90):
            msg = f"latitude must be between -90 and 90, got {self.latitude}"
            raise ValueError(msg)
        if not (-180 <= self.longitude <= 180):
            msg = f"longitude must be between -180 and 180, got {self.longitude}"
            raise ValueError(msg)


@dataclass(frozen=True)
class PlaceCandidate:
    """A single place returned by an upstream search. Never persisted directly."""

    name: str
    types: frozenset[str] = field(default_factory=frozenset)
    formatted_address: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class LocationCacheEntry:
    """A persisted cache row keyed by normalized address."""

    address: str
    location_name: str | None
    formatted_address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    distance_meters: float | None = None

    def to_result(self) -> GeocodeResult:
        return GeocodeResult(
            location_name=self.location_name,
            formatted_address=self.formatted_address,
            latitude=self.latitude,
            longitude=self.longitude,
        )


@dataclass(frozen=True)
class ResolutionRequest:
    """Per-call resolution context. Not persisted."""

    address: str | None
    api_key: str | None
    correlation_id: str
    provided_location_name: str | None = None


@dataclass(frozen=True)
class ResolutionOutcome:
    """A result together with the state that produced it."""

    result: GeocodeResult
    state: ResolutionState


@dataclass(frozen=True)
class ResolutionOptions:
    """Capability flags selecting which variant of the fallback chain runs.

    Attributes:
        track_coordinates: Obtain an anchor coordinate via forward geocoding
            and keep coordinates on cached rows.
        use_proximity_cache: Consult cached rows within 50 m of the anchor.
        filter_nearby_results: Apply the place classifier and distance bound
            to nearby-search results instead of taking the first result.
        search_mode: Places strategy used after the cache tiers miss.
    """

    track_coordinates: bool = True
    use_proximity_cache: bool = True
    filter_nearby_results: bool = True
    search_mode: PlaceSearchMode = PlaceSearchMode.TEXT

    @classmethod
    def from_settings(cls, settings: Settings) -> ResolutionOptions:
        return cls(
            track_coordinates=settings.resolver_track_coordinates,
            use_proximity_cache=settings.resolver_use_proximity_cache,
            filter_nearby_results=settings.resolver_filter_nearby_results,
            search_mode=PlaceSearchMode(settings.resolver_search_mode),
        )


@dataclass(frozen=True)
class ApiAuditRecord:
    """One upstream (or cache-served) API usage event."""

    api_type: str
    request_query: str
    response_status: str
    cache_hit: bool
    correlation_id: str | None = None
    endpoint_url: str | None = None


# Audit collaborator: must swallow its own errors
ApiAuditSink = Callable[[ApiAuditRecord], Awaitable[None]]


class ResolverError(Exception):
    """Base class for location resolution errors."""


class UpstreamError(ResolverError):
    """Raised when an upstream API call fails or returns a non-OK status.

    Args:
        provider: Name of the failing upstream API.
        message: Human-readable error description.
        status: Upstream status field or HTTP status, when known.
    """

    def __init__(self, provider: str, message: str, status: str | None = None) -> None:
        self.provider = provider
        self.message = message
        self.status = status
        super().__init__(f"{provider}: {message}")


class CacheUnavailableError(ResolverError):
    """Raised by cache store adapters when the datastore cannot be reached."""


class BaseLocationCache(ABC):
    """Cache store interface: exact lookup, proximity lookup, and upsert."""

    @abstractmethod
    async def get_exact(self, normalized_address: str) -> LocationCacheEntry | None:
        """Return the entry for ``normalized_address`` if it has a location name."""

    @abstractmethod
    async def get_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float = PROXIMITY_RADIUS_METERS,
    ) -> LocationCacheEntry | None:
        """Return the nearest named entry within ``radius_meters``, if any."""

    @abstractmethod
    async def upsert(self, entry: LocationCacheEntry) -> None:
        """Insert or replace the entry keyed by its normalized address."""
