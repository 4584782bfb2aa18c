"""
Накопительная статистика выполнения запросов.

Счетчики живут весь срок процесса и никогда не сбрасываются: стоимость одной
операции считается как разность двух снимков (см. QueryMetricsCollector).

- query_count: каждый оператор, выполненный через курсор движка;
- entity_load_count: каждая ORM-сущность, материализованная из строки;
- collection_load_count: каждая загрузка связи-коллекции (ленивая или жадная);
- max_query_time_ms: максимальное время одного оператора.

Слушатели курсора вешаются на конкретный движок (install_statistics), ORM-слушатели
зарегистрированы один раз на уровне модуля и находят статистику через session.info.
"""

import threading
import time
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import Mapper, RelationshipProperty, Session

STATISTICS_INFO_KEY = "query_statistics"

_QUERY_START_KEY = "docservice_query_start"


@dataclass(frozen=True)
class QueryStats:
    """Снимок (или разность снимков) счетчиков выполнения запросов"""
    query_count: int = 0
    entity_load_count: int = 0
    collection_load_count: int = 0
    max_query_time_ms: float = 0.0


class QueryStatistics:
    """Потокобезопасный набор накопительных счетчиков"""

    def __init__(self):
        self._lock = threading.Lock()
        self._query_count = 0
        self._entity_load_count = 0
        self._collection_load_count = 0
        self._max_query_time_ms = 0.0

    def record_query(self, elapsed_ms: float) -> None:
        with self._lock:
            self._query_count += 1
            if elapsed_ms > self._max_query_time_ms:
                self._max_query_time_ms = elapsed_ms

    def record_entity_load(self) -> None:
        with self._lock:
            self._entity_load_count += 1

    def record_collection_load(self) -> None:
        with self._lock:
            self._collection_load_count += 1

    def snapshot(self) -> QueryStats:
        with self._lock:
            return QueryStats(
                query_count=self._query_count,
                entity_load_count=self._entity_load_count,
                collection_load_count=self._collection_load_count,
                max_query_time_ms=self._max_query_time_ms,
            )


def install_statistics(
    engine: Union[AsyncEngine, Engine],
    statistics: Optional[QueryStatistics] = None,
) -> QueryStatistics:
    """Подключение подсчета запросов к движку"""
    sync_engine = engine.sync_engine if isinstance(engine, AsyncEngine) else engine
    statistics = statistics or QueryStatistics()

    @event.listens_for(sync_engine, "before_cursor_execute")
    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault(_QUERY_START_KEY, []).append(time.perf_counter())

    @event.listens_for(sync_engine, "after_cursor_execute")
    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        started = conn.info[_QUERY_START_KEY].pop()
        statistics.record_query((time.perf_counter() - started) * 1000)

    @event.listens_for(sync_engine, "handle_error")
    def _handle_error(exception_context):
        # Упавший оператор не доходит до after_cursor_execute
        conn = exception_context.connection
        if conn is not None and conn.info.get(_QUERY_START_KEY):
            conn.info[_QUERY_START_KEY].pop()

    return statistics


def _statistics_for(session: Optional[Session]) -> Optional[QueryStatistics]:
    if session is None:
        return None
    return session.info.get(STATISTICS_INFO_KEY)


def _loaded_relationship(path) -> Optional[RelationshipProperty]:
    """Связь, ради которой выполняется загрузка, по пути стратегии загрузчика"""
    prop = getattr(path, "prop", None)
    if isinstance(prop, RelationshipProperty):
        return prop
    for element in reversed(getattr(path, "path", ())):
        if isinstance(element, RelationshipProperty):
            return element
    return None


@event.listens_for(Mapper, "load")
def _count_entity_load(target, context):
    statistics = _statistics_for(context.session)
    if statistics is not None:
        statistics.record_entity_load()


@event.listens_for(Session, "do_orm_execute")
def _count_collection_load(orm_execute_state):
    if not orm_execute_state.is_relationship_load:
        return
    statistics = _statistics_for(orm_execute_state.session)
    if statistics is None:
        return
    relationship = _loaded_relationship(orm_execute_state.loader_strategy_path)
    if relationship is not None and relationship.uselist:
        statistics.record_collection_load()
