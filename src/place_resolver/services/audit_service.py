"""API usage audit service.

Records one immutable row per upstream Google API call (and per cache-served
lookup) for cost monitoring, and reports usage and cache hit rates.
"""

from datetime import datetime

from loguru import logger
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from place_resolver.lib.resolver.base import ApiAuditRecord
from place_resolver.models.api_audit_log import ApiAuditLog

# Estimated list price per 1000 billable requests, in USD
COST_PER_THOUSAND: dict[str, float] = {
    "geocoding": 5.0,
    "places": 17.0,
}


async def log_api_call(session: AsyncSession, record: ApiAuditRecord) -> ApiAuditLog:
    """Create an immutable API audit log record.

    Args:
        session: The database session.
        record: The API usage event.

    Returns:
        The created ApiAuditLog record.
    """
    audit_log = ApiAuditLog(
        api_type=record.api_type,
        endpoint_url=record.endpoint_url,
        request_query=record.request_query,
        response_status=record.response_status,
        cache_hit=record.cache_hit,
        correlation_id=record.correlation_id,
    )
    session.add(audit_log)
    await session.commit()
    return audit_log


class AuditRecorder:
    """Audit sink handed to the resolver.

    Opens its own session per record and never lets an error escape, so
    auditing can never fail or block a resolution.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], *, enabled: bool = True) -> None:
        self._session_factory = session_factory
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def __call__(self, record: ApiAuditRecord) -> None:
        if not self._enabled:
            return
        try:
            async with self._session_factory() as session:
                await log_api_call(session, record)
        except Exception as e:
            logger.warning(f"API audit logging failed: {e}")


async def query_api_audit_logs(
    session: AsyncSession,
    *,
    api_type: str | None = None,
    cache_hit: bool | None = None,
    correlation_id: str | None = None,
    start_time: datetime | None = None,
    end_time: datetime | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[ApiAuditLog], int]:
    """Query API audit logs with optional filters.

    Args:
        session: The database session.
        api_type: Filter by API type (geocoding, places).
        cache_hit: Filter by cache-served vs upstream calls.
        correlation_id: Filter by correlation ID.
        start_time: Filter records after this timestamp.
        end_time: Filter records before this timestamp.
        page: Page number (1-based).
        page_size: Items per page.

    Returns:
        Tuple of (audit log records, total count).
    """
    conditions = []
    if api_type is not None:
        conditions.append(ApiAuditLog.api_type == api_type)
    if cache_hit is not None:
        conditions.append(ApiAuditLog.cache_hit.is_(cache_hit))
    if correlation_id is not None:
        conditions.append(ApiAuditLog.correlation_id == correlation_id)
    if start_time is not None:
        conditions.append(ApiAuditLog.created_at >= start_time)
    if end_time is not None:
        conditions.append(ApiAuditLog.created_at <= end_time)

    count_query = select(func.count(ApiAuditLog.id)).where(*conditions)
    total = (await session.execute(count_query)).scalar_one()

    offset = (page - 1) * page_size
    query = (
        select(ApiAuditLog)
        .where(*conditions)
        .order_by(ApiAuditLog.created_at.desc())
        .offset(offset)
        .limit(page_size)
    )
    result = await session.execute(query)
    return list(result.scalars().all()), total


async def get_api_usage_stats(session: AsyncSession) -> list[dict]:
    """Summarize API usage per API type.

    Returns:
        One dict per api_type with total requests, cache hits, upstream
        calls, cache hit rate (percent), and estimated upstream cost.
    """
    cache_hits = func.sum(case((ApiAuditLog.cache_hit.is_(True), 1), else_=0))
    result = await session.execute(
        select(
            ApiAuditLog.api_type,
            func.count(ApiAuditLog.id).label("total_requests"),
            cache_hits.label("cache_hits"),
        )
        .group_by(ApiAuditLog.api_type)
        .order_by(ApiAuditLog.api_type)
    )

    stats: list[dict] = []
    for row in result.all():
        total = int(row.total_requests or 0)
        hits = int(row.cache_hits or 0)
        upstream = total - hits
        stats.append(
            {
                "api_type": row.api_type,
                "total_requests": total,
                "cache_hits": hits,
                "upstream_calls": upstream,
                "cache_hit_rate": round(100.0 * hits / total, 2) if total else 0.0,
                "estimated_cost_usd": round(upstream * COST_PER_THOUSAND.get(row.api_type, 0.0) / 1000, 4),
            }
        )
    return stats
