"""Shared HTTP plumbing for Google Maps Platform web services.

Both the Geocoding API and the Places API answer with a JSON body carrying
a top-level ``status`` field; transport failures and HTTP errors are mapped
to ``UpstreamError`` here so callers only branch on the API status.
"""

from typing import Any

import httpx
from loguru import logger

from place_resolver.lib.resolver.address import mask_api_key
from place_resolver.lib.resolver.base import ApiAuditRecord, ApiAuditSink, UpstreamError

DEFAULT_TIMEOUT = 10.0

# Pseudo-statuses used when no API status could be read
STATUS_TRANSPORT_ERROR = "TRANSPORT_ERROR"


class GoogleMapsClient:
    """Base for Google Maps API clients: request, error mapping, audit."""

    api_type: str = ""
    provider_name: str = "google"

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        audit: ApiAuditSink | None = None,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._audit = audit

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    @property
    def masked_key(self) -> str:
        return mask_api_key(self._api_key)

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict:
        """Issue a GET and return the decoded JSON body.

        Args:
            url: Endpoint URL.
            params: Query parameters, excluding the API key.

        Returns:
            Decoded JSON response.

        Raises:
            UpstreamError: On timeout, connection, HTTP, or decoding errors.
        """
        query = {**params, "key": self._api_key}
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, params=query)
                response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"Google {self.api_type} request timed out (key {self.masked_key})")
            raise UpstreamError(self.provider_name, "Request timed out", STATUS_TRANSPORT_ERROR) from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Google {self.api_type} HTTP error {e.response.status_code}")
            raise UpstreamError(
                self.provider_name,
                f"Provider returned HTTP {e.response.status_code}",
                f"HTTP_{e.response.status_code}",
            ) from e
        except httpx.ConnectError as e:
            logger.warning(f"Google {self.api_type} connection error")
            raise UpstreamError(self.provider_name, "Connection failed", STATUS_TRANSPORT_ERROR) from e
        except Exception as e:
            logger.exception(f"Google {self.api_type} unexpected error")
            raise UpstreamError(self.provider_name, f"Unexpected error: {e}", STATUS_TRANSPORT_ERROR) from e

        if not isinstance(data, dict):
            raise UpstreamError(self.provider_name, "Response body is not a JSON object", STATUS_TRANSPORT_ERROR)
        return data

    async def _record(
        self,
        *,
        url: str,
        request_query: str,
        response_status: str,
        correlation_id: str | None,
    ) -> None:
        """Forward an audit record to the configured sink, if any."""
        if self._audit is None:
            return
        await self._audit(
            ApiAuditRecord(
                api_type=self.api_type,
                request_query=request_query,
                response_status=response_status,
                cache_hit=False,
                correlation_id=correlation_id,
                endpoint_url=url,
            )
        )


def parse_location(result: dict) -> tuple[float | None, float | None]:
    """Extract ``geometry.location.{lat,lng}`` from a result, tolerating gaps."""
    location = (result.get("geometry") or {}).get("location") or {}
    try:
        lat = float(location["lat"])
        lng = float(location["lng"])
    except (KeyError, TypeError, ValueError):
        return None, None
    return lat, lng
