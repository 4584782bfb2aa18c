from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from docservice.core.config import settings
from docservice.db.base import Base
from docservice.db.statistics import STATISTICS_INFO_KEY, QueryStatistics, install_statistics


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite по умолчанию не проверяет внешние ключи и не выполняет ON DELETE CASCADE"""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine_from_url(url: str, echo: bool = False) -> AsyncEngine:
    """Асинхронный движок с подключенной статистикой запросов"""
    engine = create_async_engine(url, future=True, echo=echo)
    if engine.dialect.name == "sqlite":
        enable_sqlite_foreign_keys(engine)
    return engine


def create_session_factory(engine: AsyncEngine, statistics: QueryStatistics) -> async_sessionmaker:
    """Фабрика сессий; каждая сессия - отдельная единица работы со своей identity map"""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        info={STATISTICS_INFO_KEY: statistics},
    )


# Асинхронный движок
engine = create_engine_from_url(settings.database_url, echo=settings.database_echo)

# Статистика запросов процесса
query_statistics = install_statistics(engine)

# Сессии
SessionLocal = create_session_factory(engine, query_statistics)


# Функция для dependency injection в FastAPI
async def get_db():
    async with SessionLocal() as session:
        yield session


async def init_models(bind: AsyncEngine = engine) -> None:
    """Создание таблиц и индексов (для локального запуска и тестов; в PostgreSQL - alembic)"""
    import docservice.db.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
