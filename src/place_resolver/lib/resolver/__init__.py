"""Location resolution library: address to place name with tiered caching.

Public API:
    - LocationResolver: Cache/upstream fallback-chain orchestrator
    - ResolutionRequest / ResolutionOptions / ResolutionState: Call context,
      capability flags, and terminal states
    - GeocodeResult / PlaceCandidate / LocationCacheEntry: Data types
    - BaseLocationCache: Cache store interface
    - SqlLocationCache / InMemoryLocationCache: Cache store implementations
    - GoogleGeocoder / GooglePlacesClient: Upstream API clients
    - is_acceptable_candidate: Place classifier
    - haversine_meters: Great-circle distance
    - normalize_address / mask_api_key: Key and diagnostics helpers
"""

from place_resolver.lib.resolver.address import mask_api_key, normalize_address
from place_resolver.lib.resolver.base import (
    PROXIMITY_RADIUS_METERS,
    ApiAuditRecord,
    ApiAuditSink,
    BaseLocationCache,
    CacheUnavailableError,
    ForwardGeocode,
    GeocodeResult,
    LocationCacheEntry,
    PlaceCandidate,
    PlaceSearchMode,
    ResolutionOptions,
    ResolutionOutcome,
    ResolutionRequest,
    ResolutionState,
    ResolverError,
    UpstreamError,
)
from place_resolver.lib.resolver.cache import SqlLocationCache
from place_resolver.lib.resolver.classifier import is_acceptable_candidate
from place_resolver.lib.resolver.distance import haversine_meters
from place_resolver.lib.resolver.engine import LocationResolver
from place_resolver.lib.resolver.geocoding import GoogleGeocoder
from place_resolver.lib.resolver.memory import InMemoryLocationCache
from place_resolver.lib.resolver.places import GooglePlacesClient

__all__ = [
    "PROXIMITY_RADIUS_METERS",
    "ApiAuditRecord",
    "ApiAuditSink",
    "BaseLocationCache",
    "CacheUnavailableError",
    "ForwardGeocode",
    "GeocodeResult",
    "GoogleGeocoder",
    "GooglePlacesClient",
    "InMemoryLocationCache",
    "LocationCacheEntry",
    "LocationResolver",
    "PlaceCandidate",
    "PlaceSearchMode",
    "ResolutionOptions",
    "ResolutionOutcome",
    "ResolutionRequest",
    "ResolutionState",
    "ResolverError",
    "SqlLocationCache",
    "UpstreamError",
    "haversine_meters",
    "is_acceptable_candidate",
    "mask_api_key",
    "normalize_address",
]
