"""Location API endpoints for resolution, batch enrichment, stats and audit."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from place_resolver.core.config import Settings, get_settings
from place_resolver.core.dependencies import get_async_session, get_resolver
from place_resolver.lib.resolver import LocationResolver
from place_resolver.schemas.common import PaginationMeta
from place_resolver.schemas.location import (
    ApiAuditLogResponse,
    ApiUsageStatsResponse,
    CacheStatsResponse,
    EnrichmentItemResponse,
    EnrichmentRequest,
    EnrichmentSummaryResponse,
    GeocodeResultResponse,
    LocationResolveRequest,
    PaginatedApiAuditLogResponse,
)
from place_resolver.services.audit_service import get_api_usage_stats, query_api_audit_logs
from place_resolver.services.location_service import (
    EnrichmentItem,
    enrich_locations,
    get_cache_stats,
    resolve_location,
)

locations_router = APIRouter(prefix="/locations", tags=["locations"])


@locations_router.post(
    "/resolve",
    response_model=GeocodeResultResponse,
)
async def resolve_location_endpoint(
    body: LocationResolveRequest,
    resolver: LocationResolver = Depends(get_resolver),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> GeocodeResultResponse:
    """Resolve an address to a venue name and coordinates.

    Unresolvable addresses return a result with all fields null.
    """
    result = await resolve_location(
        resolver,
        body.address,
        api_key=settings.google_maps_api_key,
        location_name=body.location_name,
    )
    return GeocodeResultResponse.model_validate(result)


@locations_router.post(
    "/enrich",
    response_model=EnrichmentSummaryResponse,
)
async def enrich_locations_endpoint(
    body: EnrichmentRequest,
    resolver: LocationResolver = Depends(get_resolver),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> EnrichmentSummaryResponse:
    """Resolve venue names for a batch of records."""
    if len(body.items) > settings.enrich_batch_size:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"At most {settings.enrich_batch_size} items may be enriched per request.",
        )

    summary = await enrich_locations(
        resolver,
        [EnrichmentItem(key=i.key, address=i.address, location_name=i.location_name) for i in body.items],
        api_key=settings.google_maps_api_key,
        concurrent=body.concurrent,
        delay=settings.enrich_batch_delay,
        dry_run=body.dry_run,
    )
    return EnrichmentSummaryResponse(
        batch_id=summary.batch_id,
        processed=summary.processed,
        enriched=summary.enriched,
        cached=summary.cached,
        failed=summary.failed,
        skipped=summary.skipped,
        dry_run=summary.dry_run,
        results=[
            EnrichmentItemResponse(
                key=r.key,
                status=r.status,
                location_name=r.location_name,
                state=r.state.value if r.state is not None else None,
            )
            for r in summary.results
        ],
    )


@locations_router.get(
    "/cache/stats",
    response_model=CacheStatsResponse,
)
async def cache_stats_endpoint(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> CacheStatsResponse:
    """Location cache size and age."""
    stats = await get_cache_stats(session)
    return CacheStatsResponse(**stats)


@locations_router.get(
    "/audit/stats",
    response_model=list[ApiUsageStatsResponse],
)
async def api_usage_stats_endpoint(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[ApiUsageStatsResponse]:
    """Upstream API usage, cache hit rate, and estimated cost per API type."""
    stats = await get_api_usage_stats(session)
    return [ApiUsageStatsResponse(**s) for s in stats]


@locations_router.get(
    "/audit",
    response_model=PaginatedApiAuditLogResponse,
)
async def list_api_audit_logs_endpoint(
    api_type: str | None = Query(None, description="Filter by API type (geocoding, places)"),
    cache_hit: bool | None = Query(None, description="Filter by cache-served vs upstream calls"),
    correlation_id: str | None = Query(None, description="Filter by correlation ID"),
    start_time: datetime | None = Query(None, description="Records created at or after this time"),
    end_time: datetime | None = Query(None, description="Records created at or before this time"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> PaginatedApiAuditLogResponse:
    """List recorded upstream calls, newest first."""
    records, total = await query_api_audit_logs(
        session,
        api_type=api_type,
        cache_hit=cache_hit,
        correlation_id=correlation_id,
        start_time=start_time,
        end_time=end_time,
        page=page,
        page_size=page_size,
    )
    return PaginatedApiAuditLogResponse(
        items=[ApiAuditLogResponse.model_validate(r) for r in records],
        pagination=PaginationMeta(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=(total + page_size - 1) // page_size if total > 0 else 0,
        ),
    )
