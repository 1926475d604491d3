"""Google Places API client and place-finding strategies.

Two strategies are offered:

* **Text search** tries ``"place at <address>"`` and then the raw address,
  screening up to five results per query with the place classifier and a
  distance bound around the anchor coordinate.
* **Nearby search** looks around a known anchor coordinate; it either takes
  the first result or screens results like text search, depending on the
  caller's ``filter_results`` flag.
"""

from dataclasses import dataclass, field

from loguru import logger

from place_resolver.lib.resolver.base import PROXIMITY_RADIUS_METERS, PlaceCandidate, UpstreamError
from place_resolver.lib.resolver.classifier import rejection_reason
from place_resolver.lib.resolver.distance import within_radius
from place_resolver.lib.resolver.google_client import GoogleMapsClient, parse_location

TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"

# Results screened per query
MAX_CANDIDATES = 5


@dataclass
class PlacesResponse:
    """Status and parsed candidates from one Places API call."""

    status: str
    candidates: list[PlaceCandidate] = field(default_factory=list)
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "OK"


def build_text_queries(address: str) -> list[str]:
    """Return the ordered query strings tried by text search."""
    stripped = address.strip()
    return [f"place at {stripped}", stripped]


def parse_candidate(result: dict) -> PlaceCandidate:
    """Convert one Places API result into a PlaceCandidate."""
    lat, lng = parse_location(result)
    return PlaceCandidate(
        name=(result.get("name") or "").strip(),
        types=frozenset(result.get("types") or []),
        formatted_address=result.get("formatted_address") or result.get("vicinity"),
        latitude=lat,
        longitude=lng,
    )


class GooglePlacesClient(GoogleMapsClient):
    """Places API client. Search failures never propagate to the caller."""

    api_type = "places"

    async def text_search(self, query: str, correlation_id: str | None = None) -> PlacesResponse:
        """Run a Places text search.

        Args:
            query: Free-text query.
            correlation_id: Correlation ID for log and audit records.

        Returns:
            PlacesResponse; transport failures yield a non-OK status.
        """
        return await self._search(TEXT_SEARCH_URL, {"query": query}, query, correlation_id)

    async def nearby_search(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float = PROXIMITY_RADIUS_METERS,
        correlation_id: str | None = None,
    ) -> PlacesResponse:
        """Run a Places nearby search around a coordinate."""
        location = f"{latitude},{longitude}"
        params = {"location": location, "radius": int(radius_meters)}
        return await self._search(NEARBY_SEARCH_URL, params, location, correlation_id)

    async def find_by_text(
        self,
        address: str,
        anchor: tuple[float, float] | None = None,
        correlation_id: str | None = None,
    ) -> PlaceCandidate | None:
        """Find a named venue for an address via text search.

        Each query string is tried in order. ZERO_RESULTS, error statuses,
        and result sets with no acceptable candidate all move on to the next
        query; once the last query fails the address is unresolved.

        Args:
            address: Raw address string.
            anchor: Known (lat, lng) for the address; candidates farther than
                50 m from it are rejected.
            correlation_id: Correlation ID for log and audit records.

        Returns:
            The first accepted candidate, or None.
        """
        queries = build_text_queries(address)
        for index, query in enumerate(queries, start=1):
            response = await self.text_search(query, correlation_id)

            if not response.ok:
                if response.status == "ZERO_RESULTS":
                    logger.debug(f"Text search {index}/{len(queries)} found no places")
                else:
                    logger.warning(
                        f"Text search {index}/{len(queries)} returned {response.status}"
                        + (f": {response.error_message}" if response.error_message else "")
                    )
                continue

            candidate = self._first_acceptable(response.candidates, address, anchor)
            if candidate is not None:
                return candidate
            logger.debug(f"Text search {index}/{len(queries)} had no acceptable venue")

        return None

    async def find_nearby(
        self,
        anchor: tuple[float, float],
        address: str,
        *,
        filter_results: bool = True,
        correlation_id: str | None = None,
    ) -> PlaceCandidate | None:
        """Find a venue around an anchor coordinate via nearby search.

        Args:
            anchor: (lat, lng) to search around, within 50 m.
            address: Raw address, used by the classifier's name checks.
            filter_results: Screen results with the classifier and distance
                bound. When False the first named result is taken as-is.
            correlation_id: Correlation ID for log and audit records.

        Returns:
            The chosen candidate, or None.
        """
        response = await self.nearby_search(anchor[0], anchor[1], PROXIMITY_RADIUS_METERS, correlation_id)
        if not response.ok:
            logger.debug(f"Nearby search returned {response.status}")
            return None

        if not filter_results:
            first = response.candidates[0] if response.candidates else None
            if first is None or not first.name:
                return None
            return first

        return self._first_acceptable(response.candidates, address, anchor)

    def _first_acceptable(
        self,
        candidates: list[PlaceCandidate],
        address: str,
        anchor: tuple[float, float] | None,
    ) -> PlaceCandidate | None:
        for candidate in candidates[:MAX_CANDIDATES]:
            reason = rejection_reason(candidate, address)
            if reason is None and not within_radius(
                anchor, candidate.latitude, candidate.longitude, PROXIMITY_RADIUS_METERS
            ):
                reason = "outside proximity radius"
            if reason is not None:
                logger.debug(f"Rejected candidate {candidate.name!r}: {reason}")
                continue
            return candidate
        return None

    async def _search(
        self,
        url: str,
        params: dict,
        request_query: str,
        correlation_id: str | None,
    ) -> PlacesResponse:
        try:
            data = await self._get_json(url, params)
        except UpstreamError as e:
            response = PlacesResponse(status=e.status or "UNKNOWN", error_message=e.message)
        else:
            status = str(data.get("status", "UNKNOWN"))
            candidates = [parse_candidate(r) for r in data.get("results") or [] if isinstance(r, dict)]
            if status == "OK" and not candidates:
                status = "ZERO_RESULTS"
            response = PlacesResponse(status=status, candidates=candidates, error_message=data.get("error_message"))

        await self._record(
            url=url,
            request_query=request_query,
            response_status=response.status,
            correlation_id=correlation_id,
        )
        return response
