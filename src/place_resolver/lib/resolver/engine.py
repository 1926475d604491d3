"""Resolution orchestrator for the cache/upstream fallback chain.

Resolution order for one address:

1. A caller-provided location name wins outright (no cache, no network).
2. Blank address or missing API key end immediately with an all-null result.
3. Exact cache lookup on the normalized address.
4. Anchor coordinate via forward geocoding, then a 50 m proximity cache
   lookup around it; a proximity hit is written back under this address.
5. Places search (text or nearby). An accepted candidate is cached and
   returned; otherwise the address is unresolved and nothing is cached.

A failing cache store never stops resolution: reads count as misses and
writes are dropped. ``LocationResolver.resolve`` never raises.
"""

from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from place_resolver.lib.resolver.address import is_blank, mask_api_key, normalize_address
from place_resolver.lib.resolver.base import (
    PROXIMITY_RADIUS_METERS,
    ApiAuditRecord,
    ApiAuditSink,
    BaseLocationCache,
    ForwardGeocode,
    GeocodeResult,
    LocationCacheEntry,
    PlaceCandidate,
    PlaceSearchMode,
    ResolutionOptions,
    ResolutionOutcome,
    ResolutionRequest,
    ResolutionState,
)
from place_resolver.lib.resolver.geocoding import GoogleGeocoder
from place_resolver.lib.resolver.google_client import DEFAULT_TIMEOUT
from place_resolver.lib.resolver.places import GooglePlacesClient

GeocoderFactory = Callable[[str], GoogleGeocoder]
PlacesFactory = Callable[[str], GooglePlacesClient]

_STATE_LEVELS: dict[ResolutionState, str] = {
    ResolutionState.PROVIDED_OVERRIDE: "DEBUG",
    ResolutionState.EMPTY_INPUT: "DEBUG",
    ResolutionState.MISSING_KEY: "ERROR",
    ResolutionState.EXACT_CACHE_HIT: "INFO",
    ResolutionState.PROXIMITY_CACHE_HIT: "INFO",
    ResolutionState.UPSTREAM_RESOLVED: "INFO",
    ResolutionState.UNRESOLVED: "INFO",
}


class LocationResolver:
    """Turns free-text addresses into place names with tiered caching.

    Args:
        cache: Cache store; ``None`` disables every cache tier.
        options: Capability flags selecting the resolution variant.
        audit: Optional API usage audit sink.
        timeout: Per-request timeout for upstream calls, in seconds.
        geocoder_factory: Builds a forward geocoder for an API key.
        places_factory: Builds a places client for an API key.
    """

    def __init__(
        self,
        cache: BaseLocationCache | None = None,
        *,
        options: ResolutionOptions | None = None,
        audit: ApiAuditSink | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        geocoder_factory: GeocoderFactory | None = None,
        places_factory: PlacesFactory | None = None,
    ) -> None:
        self._cache = cache
        self._options = options or ResolutionOptions()
        self._audit = audit
        self._geocoder_factory = geocoder_factory or (
            lambda key: GoogleGeocoder(api_key=key, timeout=timeout, audit=audit)
        )
        self._places_factory = places_factory or (
            lambda key: GooglePlacesClient(api_key=key, timeout=timeout, audit=audit)
        )

    @property
    def options(self) -> ResolutionOptions:
        return self._options

    async def resolve(self, request: ResolutionRequest) -> GeocodeResult:
        """Resolve an address to a place name and coordinates.

        Args:
            request: Address, optional provided name, API key, correlation ID.

        Returns:
            GeocodeResult; all fields are None when nothing could be resolved.
        """
        outcome = await self.resolve_with_state(request)
        return outcome.result

    async def resolve_with_state(self, request: ResolutionRequest) -> ResolutionOutcome:
        """Resolve an address and report the terminal state reached."""
        with logger.contextualize(correlation_id=request.correlation_id):
            try:
                outcome = await self._resolve(request)
            except Exception:
                logger.exception("Location resolution failed unexpectedly")
                outcome = ResolutionOutcome(GeocodeResult.empty(), ResolutionState.UNRESOLVED)

            logger.bind(state=outcome.state.value, json_output=True).log(
                _STATE_LEVELS[outcome.state],
                f"Resolution {outcome.state.value}: {outcome.result.location_name!r}",
            )
            return outcome

    async def _resolve(self, request: ResolutionRequest) -> ResolutionOutcome:
        if not is_blank(request.provided_location_name):
            name = request.provided_location_name.strip()  # type: ignore[union-attr]
            result = GeocodeResult(location_name=name, formatted_address=request.address or None)
            return ResolutionOutcome(result, ResolutionState.PROVIDED_OVERRIDE)

        if is_blank(request.address):
            return ResolutionOutcome(GeocodeResult.empty(), ResolutionState.EMPTY_INPUT)

        if is_blank(request.api_key):
            logger.error(f"Google Maps API key is not configured ({mask_api_key(request.api_key)})")
            return ResolutionOutcome(GeocodeResult.empty(), ResolutionState.MISSING_KEY)

        address = request.address.strip()  # type: ignore[union-attr]
        api_key = request.api_key.strip()  # type: ignore[union-attr]
        normalized = normalize_address(address)
        cid = request.correlation_id

        cached = await self._read_exact(normalized)
        if cached is not None:
            await self._record_cache_hit(address, cid)
            return ResolutionOutcome(cached.to_result(), ResolutionState.EXACT_CACHE_HIT)

        forward: ForwardGeocode | None = None
        if self._options.track_coordinates:
            forward = await self._geocoder_factory(api_key).forward_geocode(address, cid)
        anchor = (forward.latitude, forward.longitude) if forward is not None else None

        if anchor is not None and self._options.use_proximity_cache:
            nearby = await self._read_nearby(anchor)
            if nearby is not None:
                logger.debug(f"Proximity match {nearby.address!r} at {nearby.distance_meters}m")
                await self._write(replace(nearby, address=normalized, distance_meters=None))
                await self._record_cache_hit(address, cid)
                return ResolutionOutcome(nearby.to_result(), ResolutionState.PROXIMITY_CACHE_HIT)

        candidate = await self._find_place(self._places_factory(api_key), address, anchor, cid)
        if candidate is None:
            return ResolutionOutcome(GeocodeResult.empty(), ResolutionState.UNRESOLVED)

        result = self._result_from_candidate(candidate, forward)
        await self._write(
            LocationCacheEntry(
                address=normalized,
                location_name=result.location_name,
                formatted_address=result.formatted_address,
                latitude=result.latitude,
                longitude=result.longitude,
            )
        )
        return ResolutionOutcome(result, ResolutionState.UPSTREAM_RESOLVED)

    async def _find_place(
        self,
        places: GooglePlacesClient,
        address: str,
        anchor: tuple[float, float] | None,
        correlation_id: str,
    ) -> PlaceCandidate | None:
        if self._options.search_mode == PlaceSearchMode.NEARBY and anchor is not None:
            return await places.find_nearby(
                anchor,
                address,
                filter_results=self._options.filter_nearby_results,
                correlation_id=correlation_id,
            )
        return await places.find_by_text(address, anchor, correlation_id)

    def _result_from_candidate(self, candidate: PlaceCandidate, forward: ForwardGeocode | None) -> GeocodeResult:
        formatted = candidate.formatted_address or (forward.formatted_address if forward else None)
        if not self._options.track_coordinates:
            return GeocodeResult(location_name=candidate.name, formatted_address=formatted)

        latitude, longitude = candidate.latitude, candidate.longitude
        if (latitude is None or longitude is None) and forward is not None:
            latitude, longitude = forward.latitude, forward.longitude
        return GeocodeResult(
            location_name=candidate.name,
            formatted_address=formatted,
            latitude=latitude,
            longitude=longitude,
        )

    async def _read_exact(self, normalized: str) -> LocationCacheEntry | None:
        if self._cache is None:
            return None
        try:
            return await self._cache.get_exact(normalized)
        except Exception as e:
            logger.warning(f"Exact cache read treated as miss: {e!r}")
            return None

    async def _read_nearby(self, anchor: tuple[float, float]) -> LocationCacheEntry | None:
        if self._cache is None:
            return None
        try:
            return await self._cache.get_nearby(anchor[0], anchor[1], PROXIMITY_RADIUS_METERS)
        except Exception as e:
            logger.warning(f"Proximity cache read treated as miss: {e!r}")
            return None

    async def _write(self, entry: LocationCacheEntry) -> None:
        if self._cache is None or not entry.location_name:
            return
        try:
            await self._cache.upsert(entry)
        except Exception as e:
            logger.warning(f"Cache write dropped for {entry.address!r}: {e!r}")

    async def _record_cache_hit(self, address: str, correlation_id: str) -> None:
        if self._audit is None:
            return
        await self._audit(
            ApiAuditRecord(
                api_type="places",
                request_query=address,
                response_status="OK",
                cache_hit=True,
                correlation_id=correlation_id,
            )
        )
