import os
from datetime import datetime, timedelta

# Модули приложения читают настройки при импорте: держим их в памяти и без Redis
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CACHE_URL", "")

import pytest
import pytest_asyncio

from docservice.core.db import create_engine_from_url, create_session_factory, init_models
from docservice.core.metrics import QueryMetricsCollector
from docservice.db.models import Author, Document, PermissionType, Tag
from docservice.db.statistics import install_statistics

BASE_TIME = datetime(2024, 6, 1, 12, 0, 0)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_engine_from_url(f"sqlite+aiosqlite:///{tmp_path / 'docservice_test.db'}")
    yield engine
    await engine.dispose()


@pytest.fixture
def statistics(engine):
    return install_statistics(engine)


@pytest_asyncio.fixture
async def session_factory(engine, statistics):
    await init_models(engine)
    return create_session_factory(engine, statistics)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def collector(statistics):
    return QueryMetricsCollector(statistics)


@pytest.fixture
def library(session_factory):
    """Фабрика тестовых данных.

    Документ i (с нуля) создан на i часов раньше BASE_TIME и принадлежит автору
    i % authors; у каждого документа одинаковые теги и права.
    Возвращает идентификаторы документов в порядке создания.
    """

    async def create(
        documents: int,
        authors: int = None,
        tags_per_document: int = 2,
        permission_types=(PermissionType.READ,),
    ):
        authors = authors or documents
        async with session_factory() as session:
            author_rows = [Author(name=f"Author {i}") for i in range(1, authors + 1)]
            tag_rows = [Tag(name=f"Tag {i}") for i in range(1, tags_per_document + 1)]
            session.add_all(author_rows + tag_rows)

            created = []
            for i in range(documents):
                document = Document(
                    title=f"Document {i + 1}",
                    created_at=BASE_TIME - timedelta(hours=i),
                    author=author_rows[i % authors],
                )
                for tag in tag_rows:
                    document.add_tag(tag)
                for permission_type in permission_types:
                    document.add_permission(permission_type)
                created.append(document)

            session.add_all(created)
            await session.commit()
            return [document.id for document in created]

    return create
