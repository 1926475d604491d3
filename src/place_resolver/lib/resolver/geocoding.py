"""Google Maps Geocoding API client (forward geocoding).

Uses the Geocoding API
(https://developers.google.com/maps/documentation/geocoding/)
to turn an address into an anchor coordinate and formatted address.
"""

from loguru import logger

from place_resolver.lib.resolver.base import ForwardGeocode, UpstreamError
from place_resolver.lib.resolver.google_client import GoogleMapsClient, parse_location

GEOCODE_API_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GoogleGeocoder(GoogleMapsClient):
    """Forward geocoder. Never raises: failures resolve to ``None``."""

    api_type = "geocoding"

    async def forward_geocode(self, address: str, correlation_id: str | None = None) -> ForwardGeocode | None:
        """Geocode an address to coordinates and a formatted address.

        Args:
            address: Raw address string.
            correlation_id: Correlation ID for log and audit records.

        Returns:
            ForwardGeocode, or None when the address is unresolved for any
            reason (ZERO_RESULTS, error status, transport failure).
        """
        status = "UNKNOWN"
        try:
            data = await self._get_json(GEOCODE_API_URL, {"address": address})
            status = str(data.get("status", "UNKNOWN"))
            return self._parse_response(data)
        except UpstreamError as e:
            status = e.status or status
            logger.warning(f"Forward geocode unresolved: {e.message} (status={status})")
            return None
        finally:
            await self._record(
                url=GEOCODE_API_URL,
                request_query=address,
                response_status=status,
                correlation_id=correlation_id,
            )

    def _parse_response(self, data: dict) -> ForwardGeocode | None:
        """Parse a Geocoding API response body.

        Args:
            data: Decoded JSON response.

        Returns:
            ForwardGeocode for the first result, or None on ZERO_RESULTS,
            empty results, or unusable geometry.

        Raises:
            UpstreamError: On any status other than OK and ZERO_RESULTS.
        """
        api_status = data.get("status", "UNKNOWN")

        if api_status == "ZERO_RESULTS":
            logger.debug("Forward geocode returned ZERO_RESULTS")
            return None

        if api_status != "OK":
            msg = data.get("error_message", api_status)
            raise UpstreamError(self.provider_name, f"API error: {msg}", api_status)

        results = data.get("results") or []
        if not results:
            return None

        best = results[0]
        lat, lng = parse_location(best)
        if lat is None or lng is None:
            logger.warning("Forward geocode result has no usable geometry")
            return None

        try:
            return ForwardGeocode(latitude=lat, longitude=lng, formatted_address=best.get("formatted_address"))
        except ValueError as e:
            logger.warning(f"Forward geocode returned invalid coordinates: {e}")
            return None
