"""
Начальное заполнение базы демонстрационными данными.

Данных должно быть достаточно, чтобы разница между наивной и оптимизированными
выборками была хорошо видна в метриках: по умолчанию 100 документов, 20 авторов
и 15 тегов, у каждого документа 2-5 тегов и 1-3 права доступа.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from docservice.db.models import Author, Document, PermissionType, Tag
from docservice.db.repositories import AuthorRepository, DocumentRepository, TagRepository

logger = logging.getLogger(__name__)

SAMPLE_TITLES = [
    "Getting Started with SQLAlchemy",
    "Lazy Loading Pitfalls",
    "Indexing Strategies for PostgreSQL",
    "Designing Pagination APIs",
    "Async IO in Web Services",
    "Connection Pool Tuning",
    "Caching Read-Heavy Endpoints",
    "Query Plans Explained",
    "Schema Migrations with Alembic",
    "Projection Queries and DTOs",
    "Profiling Database Access",
    "Eager Loading Techniques",
    "Testing Data Access Layers",
    "Observability for ORMs",
    "Scaling Relational Reads",
]

TAG_NAMES = [
    "Python", "SQLAlchemy", "PostgreSQL", "Performance", "Database",
    "API", "FastAPI", "Async", "Caching", "Testing",
    "Architecture", "Design", "Security", "Scalability", "Best-Practices",
]

MIN_TAGS_PER_DOCUMENT = 2
MAX_TAGS_PER_DOCUMENT = 5
MIN_PERMISSIONS_PER_DOCUMENT = 1
MAX_PERMISSIONS_PER_DOCUMENT = 3


@dataclass
class SeedResult:
    authors: int = 0
    tags: int = 0
    documents: int = 0
    skipped: bool = False


def tag_names(count: int) -> List[str]:
    """Уникальные имена тегов: сначала фиксированный список, затем Tag-<n>"""
    names = TAG_NAMES[:count]
    names.extend(f"Tag-{i}" for i in range(len(names) + 1, count + 1))
    return names


class DataInitializer:
    """Заполнение базы авторами, тегами и документами"""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        documents: int = 100,
        authors: int = 20,
        tags: int = 15,
        rng: Optional[random.Random] = None,
    ):
        if authors < 1:
            raise ValueError("At least one author is required")
        if tags < MIN_TAGS_PER_DOCUMENT:
            raise ValueError(f"At least {MIN_TAGS_PER_DOCUMENT} tags are required")
        self.session_factory = session_factory
        self.document_count = documents
        self.author_count = authors
        self.tag_count = tags
        self.rng = rng or random.Random()

    async def run(self) -> SeedResult:
        logger.info("Starting data initialization...")

        async with self.session_factory() as session:
            if await DocumentRepository(session).count() > 0:
                logger.info("Data already exists. Skipping initialization.")
                return SeedResult(skipped=True)

            authors = await AuthorRepository(session).create_many(
                f"Author {i}" for i in range(1, self.author_count + 1)
            )
            logger.info("Created %d authors", len(authors))

            tags = await TagRepository(session).create_many(tag_names(self.tag_count))
            logger.info("Created %d tags", len(tags))

            self._create_documents(session, authors, tags)
            await session.commit()

        logger.info("Data initialization completed successfully!")
        return SeedResult(authors=len(authors), tags=len(tags), documents=self.document_count)

    def _create_documents(self, session, authors: List[Author], tags: List[Tag]) -> None:
        now = datetime.now()
        permission_types = list(PermissionType)

        for i in range(1, self.document_count + 1):
            document = Document(
                title=f"{SAMPLE_TITLES[i % len(SAMPLE_TITLES)]} - Part {i}",
                created_at=now - timedelta(days=self.rng.randrange(365)),
                author=self.rng.choice(authors),
            )

            tag_count = self.rng.randint(MIN_TAGS_PER_DOCUMENT, min(MAX_TAGS_PER_DOCUMENT, len(tags)))
            for tag in self.rng.sample(tags, tag_count):
                document.add_tag(tag)

            permission_count = self.rng.randint(MIN_PERMISSIONS_PER_DOCUMENT, MAX_PERMISSIONS_PER_DOCUMENT)
            for _ in range(permission_count):
                document.add_permission(self.rng.choice(permission_types))

            session.add(document)

            if i % 10 == 0:
                logger.debug("Created %d documents...", i)
