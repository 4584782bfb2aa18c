import logging
from dataclasses import fields

from sqlalchemy.ext.asyncio import AsyncSession

from docservice.db.statistics import STATISTICS_INFO_KEY, QueryStatistics, QueryStats

logger = logging.getLogger(__name__)


class QueryMetricsCollector:
    """Снимки и разности статистики запросов вокруг одной операции.

    Собственного состояния не хранит: все счетчики принадлежат QueryStatistics.
    """

    def __init__(self, statistics: QueryStatistics):
        self.statistics = statistics

    @classmethod
    def for_session(cls, session: AsyncSession) -> "QueryMetricsCollector":
        """Коллектор статистики движка, к которому привязана сессия"""
        statistics = session.info.get(STATISTICS_INFO_KEY)
        if statistics is None:
            raise RuntimeError("Query statistics are not installed for this session")
        return cls(statistics)

    def snapshot(self) -> QueryStats:
        """Текущие накопительные значения счетчиков"""
        return self.statistics.snapshot()

    def diff(self, before: QueryStats, after: QueryStats) -> QueryStats:
        """Поэлементная разность after - before"""
        values = {}
        for field in fields(QueryStats):
            delta = getattr(after, field.name) - getattr(before, field.name)
            if delta < 0:
                raise ValueError(f"Snapshot 'after' precedes 'before' ({field.name} decreased)")
            values[field.name] = delta
        return QueryStats(**values)

    def report(self, label: str, stats: QueryStats) -> None:
        """Вывод статистики в лог"""
        logger.info("=== Query Metrics for %s ===", label)
        logger.info("Total Queries Executed: %d", stats.query_count)
        logger.info("Entities Loaded: %d", stats.entity_load_count)
        logger.info("Collections Loaded: %d", stats.collection_load_count)
        logger.info("Max Query Time: %.2f ms", stats.max_query_time_ms)
        logger.info("=====================================")
