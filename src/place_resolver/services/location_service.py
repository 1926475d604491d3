"""Location service: resolver wiring, single lookups and batch enrichment."""

import asyncio
import uuid
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from place_resolver.core.config import Settings
from place_resolver.lib.resolver import (
    ApiAuditSink,
    GeocodeResult,
    LocationResolver,
    ResolutionOptions,
    ResolutionRequest,
    ResolutionState,
    SqlLocationCache,
)
from place_resolver.lib.resolver.address import is_blank
from place_resolver.models.location_cache import LocationCache
from place_resolver.services.audit_service import AuditRecorder

_CACHE_STATES = frozenset({ResolutionState.EXACT_CACHE_HIT, ResolutionState.PROXIMITY_CACHE_HIT})

# Persists an enriched name for an item key (e.g. updates an event row)
ApplyLocationName = Callable[[str, str], Awaitable[None]]


@dataclass(frozen=True)
class EnrichmentItem:
    """One record to enrich: a caller key, its address, and any existing name."""

    key: str
    address: str | None
    location_name: str | None = None


@dataclass
class EnrichmentItemResult:
    """Per-item enrichment outcome."""

    key: str
    status: str
    location_name: str | None = None
    state: ResolutionState | None = None


@dataclass
class EnrichmentSummary:
    """Aggregate counts for an enrichment batch."""

    batch_id: str
    processed: int = 0
    enriched: int = 0
    cached: int = 0
    failed: int = 0
    skipped: int = 0
    dry_run: bool = False
    results: list[EnrichmentItemResult] = field(default_factory=list)


def build_resolver(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    audit: ApiAuditSink | None = None,
) -> LocationResolver:
    """Build a resolver backed by the database cache store.

    Args:
        settings: Application settings (capability flags, timeout, audit flag).
        session_factory: Session factory shared by the cache store and audit.
        audit: Audit sink; defaults to a database recorder when auditing is
            enabled in settings.

    Returns:
        Configured LocationResolver.
    """
    if audit is None and settings.api_audit_enabled:
        audit = AuditRecorder(session_factory)
    return LocationResolver(
        SqlLocationCache(session_factory),
        options=ResolutionOptions.from_settings(settings),
        audit=audit,
        timeout=settings.google_maps_timeout,
    )


async def resolve_location(
    resolver: LocationResolver,
    address: str | None,
    *,
    api_key: str | None,
    location_name: str | None = None,
    correlation_id: str | None = None,
) -> GeocodeResult:
    """Resolve a single address.

    Args:
        resolver: Configured resolver.
        address: Raw address.
        api_key: Google Maps API key.
        location_name: Caller-provided name that short-circuits resolution.
        correlation_id: Correlation ID; a random one is assigned when absent.

    Returns:
        GeocodeResult (all-null when nothing could be resolved).
    """
    request = ResolutionRequest(
        address=address,
        api_key=api_key,
        correlation_id=correlation_id or uuid.uuid4().hex,
        provided_location_name=location_name,
    )
    return await resolver.resolve(request)


async def enrich_locations(
    resolver: LocationResolver,
    items: Sequence[EnrichmentItem],
    *,
    api_key: str | None,
    concurrent: bool = True,
    delay: float = 0.1,
    dry_run: bool = False,
    batch_id: str | None = None,
    apply: ApplyLocationName | None = None,
) -> EnrichmentSummary:
    """Resolve place names for a batch of records.

    Items with a blank address or an existing non-blank name are skipped.
    In concurrent mode every remaining item is resolved at once; otherwise
    items run one after another with ``delay`` seconds between them.

    Args:
        resolver: Configured resolver.
        items: Records to enrich.
        api_key: Google Maps API key.
        concurrent: Fan out all resolutions at once.
        delay: Pause between sequential items, in seconds.
        dry_run: Resolve but do not call ``apply``.
        batch_id: Prefix for per-item correlation IDs.
        apply: Callback persisting a resolved name for an item key.

    Returns:
        EnrichmentSummary with aggregate counts and per-item results.
    """
    summary = EnrichmentSummary(batch_id=batch_id or uuid.uuid4().hex[:12], dry_run=dry_run)

    pending: list[EnrichmentItem] = []
    for item in items:
        if is_blank(item.address) or not is_blank(item.location_name):
            summary.skipped += 1
            summary.results.append(EnrichmentItemResult(key=item.key, status="skipped"))
            continue
        pending.append(item)

    logger.info(
        f"Enrichment batch {summary.batch_id}: {len(pending)} to resolve, "
        f"{summary.skipped} skipped ({'concurrent' if concurrent else 'sequential'})"
    )

    async def _run(item: EnrichmentItem) -> EnrichmentItemResult:
        request = ResolutionRequest(
            address=item.address,
            api_key=api_key,
            correlation_id=f"{summary.batch_id}:{item.key}",
        )
        outcome = await resolver.resolve_with_state(request)
        name = outcome.result.location_name
        if is_blank(name):
            return EnrichmentItemResult(key=item.key, status="failed", state=outcome.state)

        if apply is not None and not dry_run:
            try:
                await apply(item.key, name)  # type: ignore[arg-type]
            except Exception as e:
                logger.warning(f"Enrichment apply failed for {item.key}: {e}")
                return EnrichmentItemResult(key=item.key, status="failed", location_name=name, state=outcome.state)
        return EnrichmentItemResult(key=item.key, status="enriched", location_name=name, state=outcome.state)

    if concurrent:
        item_results = list(await asyncio.gather(*(_run(item) for item in pending)))
    else:
        item_results = []
        for index, item in enumerate(pending):
            if index > 0 and delay > 0:
                await asyncio.sleep(delay)
            item_results.append(await _run(item))

    for item_result in item_results:
        summary.processed += 1
        if item_result.status == "enriched":
            summary.enriched += 1
        else:
            summary.failed += 1
        if item_result.state in _CACHE_STATES:
            summary.cached += 1
        summary.results.append(item_result)

    logger.info(
        f"Enrichment batch {summary.batch_id} completed: {summary.processed} processed, "
        f"{summary.enriched} enriched, {summary.cached} cache hits, "
        f"{summary.failed} failed, {summary.skipped} skipped"
    )
    return summary


async def get_cache_stats(session: AsyncSession) -> dict:
    """Get location cache statistics."""
    result = await session.execute(
        select(
            func.count(LocationCache.address).label("total_entries"),
            func.count(LocationCache.latitude).label("entries_with_coordinates"),
            func.min(LocationCache.updated_at).label("oldest_entry"),
            func.max(LocationCache.updated_at).label("newest_entry"),
        )
    )
    row = result.one()
    return {
        "total_entries": row.total_entries,
        "entries_with_coordinates": row.entries_with_coordinates,
        "oldest_entry": row.oldest_entry,
        "newest_entry": row.newest_entry,
    }
