"""Pydantic v2 schemas for location resolution and enrichment."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from place_resolver.schemas.common import PaginationMeta


class LocationResolveRequest(BaseModel):
    """Request to resolve one address to a place name."""

    address: str = Field(..., max_length=500, description="Freeform address to resolve")
    location_name: str | None = Field(
        default=None,
        max_length=255,
        description="Known venue name; when set it is returned without any lookup",
    )


class GeocodeResultResponse(BaseModel):
    """Resolved place. Null fields mean no enrichment is available."""

    model_config = {"from_attributes": True}

    location_name: str | None = None
    formatted_address: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class EnrichmentItemRequest(BaseModel):
    """One record in an enrichment batch."""

    key: str = Field(..., min_length=1, max_length=100)
    address: str | None = Field(default=None, max_length=500)
    location_name: str | None = Field(default=None, max_length=255)


class EnrichmentRequest(BaseModel):
    """Request to enrich a batch of records with place names."""

    items: list[EnrichmentItemRequest] = Field(..., min_length=1)
    concurrent: bool = True
    dry_run: bool = False


class EnrichmentItemResponse(BaseModel):
    """Per-item enrichment outcome."""

    model_config = {"from_attributes": True}

    key: str
    status: str
    location_name: str | None = None
    state: str | None = None


class EnrichmentSummaryResponse(BaseModel):
    """Aggregate enrichment counts."""

    model_config = {"from_attributes": True}

    batch_id: str
    processed: int
    enriched: int
    cached: int
    failed: int
    skipped: int
    dry_run: bool
    results: list[EnrichmentItemResponse] = []


class CacheStatsResponse(BaseModel):
    """Location cache statistics."""

    total_entries: int
    entries_with_coordinates: int
    oldest_entry: datetime | None = None
    newest_entry: datetime | None = None


class ApiUsageStatsResponse(BaseModel):
    """Upstream API usage for one API type."""

    api_type: str
    total_requests: int
    cache_hits: int
    upstream_calls: int
    cache_hit_rate: float
    estimated_cost_usd: float


class ApiAuditLogResponse(BaseModel):
    """One recorded upstream call or cache-served lookup."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    created_at: datetime
    api_type: str
    endpoint_url: str | None = None
    request_query: str | None = None
    response_status: str | None = None
    cache_hit: bool
    correlation_id: str | None = None


class PaginatedApiAuditLogResponse(BaseModel):
    """Paginated list of API audit records."""

    items: list[ApiAuditLogResponse]
    pagination: PaginationMeta
