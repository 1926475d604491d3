"""Tests for the API usage audit service."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from place_resolver.lib.resolver.base import ApiAuditRecord
from place_resolver.models.api_audit_log import ApiAuditLog
from place_resolver.services.audit_service import (
    AuditRecorder,
    get_api_usage_stats,
    log_api_call,
    query_api_audit_logs,
)


def _record(api_type: str = "places", cache_hit: bool = False, correlation_id: str | None = "cid-1"):
    return ApiAuditRecord(
        api_type=api_type,
        request_query="1950 Washington St, Grafton, WI",
        response_status="OK",
        cache_hit=cache_hit,
        correlation_id=correlation_id,
        endpoint_url=None if cache_hit else "https://maps.googleapis.com/maps/api/place/textsearch/json",
    )


class TestLogApiCall:
    """Tests for log_api_call."""

    async def test_creates_record(self) -> None:
        session = AsyncMock()
        session.add = MagicMock()

        result = await log_api_call(session, _record())

        session.add.assert_called_once()
        session.commit.assert_awaited_once()
        assert isinstance(result, ApiAuditLog)
        assert result.api_type == "places"
        assert result.cache_hit is False
        assert result.correlation_id == "cid-1"


class TestAuditRecorder:
    """Tests for the resolver audit sink."""

    async def test_persists_record(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        recorder = AuditRecorder(session_factory)
        await recorder(_record())

        async with session_factory() as session:
            logs, total = await query_api_audit_logs(session)
        assert total == 1
        assert logs[0].request_query == "1950 Washington St, Grafton, WI"

    async def test_disabled_records_nothing(self) -> None:
        factory = MagicMock()
        recorder = AuditRecorder(factory, enabled=False)
        await recorder(_record())
        factory.assert_not_called()
        assert recorder.enabled is False

    async def test_errors_are_swallowed(self) -> None:
        factory = MagicMock(side_effect=RuntimeError("database down"))
        await AuditRecorder(factory)(_record())


class TestQueryApiAuditLogs:
    """Tests for query_api_audit_logs."""

    async def test_filters_and_pagination(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        recorder = AuditRecorder(session_factory)
        for _ in range(3):
            await recorder(_record(api_type="places"))
        await recorder(_record(api_type="geocoding", correlation_id="cid-2"))
        await recorder(_record(api_type="places", cache_hit=True))

        async with session_factory() as session:
            places, places_total = await query_api_audit_logs(session, api_type="places", page_size=2)
            hits, hits_total = await query_api_audit_logs(session, cache_hit=True)
            by_cid, cid_total = await query_api_audit_logs(session, correlation_id="cid-2")

        assert places_total == 4
        assert len(places) == 2
        assert hits_total == 1
        assert hits[0].cache_hit is True
        assert cid_total == 1
        assert by_cid[0].api_type == "geocoding"


class TestGetApiUsageStats:
    """Tests for get_api_usage_stats."""

    async def test_stats_per_api_type(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        recorder = AuditRecorder(session_factory)
        for _ in range(3):
            await recorder(_record(api_type="places"))
        await recorder(_record(api_type="places", cache_hit=True))
        await recorder(_record(api_type="geocoding"))

        async with session_factory() as session:
            stats = await get_api_usage_stats(session)

        by_type = {s["api_type"]: s for s in stats}
        assert by_type["places"]["total_requests"] == 4
        assert by_type["places"]["cache_hits"] == 1
        assert by_type["places"]["upstream_calls"] == 3
        assert by_type["places"]["cache_hit_rate"] == pytest.approx(25.0)
        assert by_type["places"]["estimated_cost_usd"] == pytest.approx(0.051)
        assert by_type["geocoding"]["estimated_cost_usd"] == pytest.approx(0.005)

    async def test_empty(self, async_session: AsyncSession) -> None:
        assert await get_api_usage_stats(async_session) == []
