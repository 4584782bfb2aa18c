"""
Tests for query statistics and QueryMetricsCollector.
"""

import logging

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from docservice.core.metrics import QueryMetricsCollector
from docservice.db.models import Author, Document
from docservice.db.statistics import QueryStatistics, QueryStats


class TestQueryStatistics:
    """Test the cumulative counter set."""

    def test_starts_at_zero(self):
        assert QueryStatistics().snapshot() == QueryStats()

    def test_record_query_tracks_count_and_max_time(self):
        statistics = QueryStatistics()
        statistics.record_query(5.0)
        statistics.record_query(12.5)
        statistics.record_query(3.0)

        snapshot = statistics.snapshot()
        assert snapshot.query_count == 3
        assert snapshot.max_query_time_ms == 12.5

    def test_record_loads(self):
        statistics = QueryStatistics()
        statistics.record_entity_load()
        statistics.record_entity_load()
        statistics.record_collection_load()

        snapshot = statistics.snapshot()
        assert snapshot.entity_load_count == 2
        assert snapshot.collection_load_count == 1

    def test_snapshot_is_immutable_copy(self):
        statistics = QueryStatistics()
        before = statistics.snapshot()
        statistics.record_query(1.0)

        assert before.query_count == 0
        assert statistics.snapshot().query_count == 1


class TestEngineInstrumentation:
    """Test that engine and ORM listeners feed the counters."""

    @pytest.mark.asyncio
    async def test_each_statement_is_counted(self, session, collector):
        before = collector.snapshot()
        await session.execute(text("SELECT 1"))
        await session.execute(text("SELECT 2"))
        stats = collector.diff(before, collector.snapshot())

        assert stats.query_count == 2
        assert stats.entity_load_count == 0

    @pytest.mark.asyncio
    async def test_entity_loads_are_counted(self, library, session, collector):
        await library(documents=3)

        before = collector.snapshot()
        result = await session.execute(select(Author))
        authors = result.scalars().all()
        stats = collector.diff(before, collector.snapshot())

        assert len(authors) == 3
        assert stats.query_count == 1
        assert stats.entity_load_count == 3

    @pytest.mark.asyncio
    async def test_identity_map_hits_are_not_entity_loads(self, library, session, collector):
        await library(documents=2)
        # Identity map хранит слабые ссылки: объекты должны оставаться живыми
        authors = (await session.execute(select(Author))).scalars().all()

        before = collector.snapshot()
        again = (await session.execute(select(Author))).scalars().all()
        stats = collector.diff(before, collector.snapshot())

        assert {id(author) for author in again} == {id(author) for author in authors}
        assert stats.query_count == 1
        assert stats.entity_load_count == 0

    @pytest.mark.asyncio
    async def test_lazy_collection_load_is_counted(self, library, session, collector):
        ids = await library(documents=1)
        document = await session.get(Document, ids[0])

        before = collector.snapshot()
        tags = await document.awaitable_attrs.tags
        stats = collector.diff(before, collector.snapshot())

        assert len(tags) == 2
        assert stats.query_count == 1
        assert stats.collection_load_count == 1

    @pytest.mark.asyncio
    async def test_many_to_one_load_is_not_a_collection_load(self, library, session, collector):
        ids = await library(documents=1)
        document = await session.get(Document, ids[0])

        before = collector.snapshot()
        await document.awaitable_attrs.author
        stats = collector.diff(before, collector.snapshot())

        assert stats.query_count == 1
        assert stats.collection_load_count == 0

    @pytest.mark.asyncio
    async def test_failed_statement_does_not_break_timing(self, session, collector):
        with pytest.raises(OperationalError):
            await session.execute(text("SELECT * FROM missing_table"))
        await session.rollback()

        before = collector.snapshot()
        await session.execute(text("SELECT 1"))
        stats = collector.diff(before, collector.snapshot())

        assert stats.query_count == 1


class TestQueryMetricsCollector:
    """Test snapshot/diff/report."""

    def test_diff_is_element_wise(self):
        collector = QueryMetricsCollector(QueryStatistics())
        before = QueryStats(query_count=4, entity_load_count=10, collection_load_count=1, max_query_time_ms=2.0)
        after = QueryStats(query_count=9, entity_load_count=15, collection_load_count=3, max_query_time_ms=5.5)

        assert collector.diff(before, after) == QueryStats(
            query_count=5, entity_load_count=5, collection_load_count=2, max_query_time_ms=3.5
        )

    def test_diff_rejects_reversed_snapshots(self):
        collector = QueryMetricsCollector(QueryStatistics())
        before = QueryStats(query_count=1)

        with pytest.raises(ValueError, match="query_count"):
            collector.diff(before, QueryStats())

    def test_snapshot_reads_statistics(self):
        statistics = QueryStatistics()
        collector = QueryMetricsCollector(statistics)
        statistics.record_query(1.0)

        assert collector.snapshot().query_count == 1

    def test_report_logs_and_keeps_counters(self, caplog):
        statistics = QueryStatistics()
        statistics.record_query(1.0)
        collector = QueryMetricsCollector(statistics)
        before = collector.snapshot()

        with caplog.at_level(logging.INFO, logger="docservice.core.metrics"):
            collector.report("GET /documents (naive)", QueryStats(query_count=21, max_query_time_ms=1.25))

        assert "=== Query Metrics for GET /documents (naive) ===" in caplog.text
        assert "Total Queries Executed: 21" in caplog.text
        assert "Max Query Time: 1.25 ms" in caplog.text
        assert collector.snapshot() == before

    @pytest.mark.asyncio
    async def test_for_session_uses_session_statistics(self, session, statistics):
        collector = QueryMetricsCollector.for_session(session)
        assert collector.statistics is statistics

    @pytest.mark.asyncio
    async def test_for_session_without_statistics(self, engine):
        async with AsyncSession(engine) as bare_session:
            with pytest.raises(RuntimeError, match="not installed"):
                QueryMetricsCollector.for_session(bare_session)
