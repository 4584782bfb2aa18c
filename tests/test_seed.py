"""
Tests for DataInitializer.
"""

import random

import pytest
from sqlalchemy import func, select

from docservice.db.models import Author, Document, Permission, Tag, document_tags
from docservice.db.seed import DataInitializer, tag_names


class TestTagNames:
    """Test tag name generation."""

    def test_fixed_list_first(self):
        assert tag_names(3) == ["Python", "SQLAlchemy", "PostgreSQL"]

    def test_generated_names_beyond_list(self):
        names = tag_names(17)
        assert names[15:] == ["Tag-16", "Tag-17"]
        assert len(set(names)) == 17


class TestDataInitializer:
    """Test seeding invariants."""

    @pytest.mark.asyncio
    async def test_default_dataset(self, session_factory, session):
        initializer = DataInitializer(
            session_factory, documents=100, authors=20, tags=15, rng=random.Random(7)
        )

        result = await initializer.run()

        assert (result.documents, result.authors, result.tags) == (100, 20, 15)
        assert await session.scalar(select(func.count(Document.id))) == 100
        assert await session.scalar(select(func.count(Author.id))) == 20

        tag_rows = (await session.execute(select(Tag.name))).scalars().all()
        assert len(tag_rows) == 15
        assert len(set(tag_rows)) == 15

        orphaned = await session.scalar(
            select(func.count(Document.id))
            .outerjoin(Author, Document.author_id == Author.id)
            .where(Author.id.is_(None))
        )
        assert orphaned == 0

        tag_counts = (
            await session.execute(
                select(func.count(document_tags.c.tag_id)).group_by(document_tags.c.document_id)
            )
        ).scalars().all()
        assert len(tag_counts) == 100
        assert all(2 <= count <= 5 for count in tag_counts)

        permission_counts = (
            await session.execute(
                select(func.count(Permission.id)).group_by(Permission.document_id)
            )
        ).scalars().all()
        assert len(permission_counts) == 100
        assert all(1 <= count <= 3 for count in permission_counts)

    @pytest.mark.asyncio
    async def test_skips_when_documents_exist(self, session_factory, session):
        await DataInitializer(session_factory, documents=5, authors=2, tags=3).run()

        result = await DataInitializer(session_factory, documents=5, authors=2, tags=3).run()

        assert result.skipped is True
        assert await session.scalar(select(func.count(Document.id))) == 5

    @pytest.mark.asyncio
    async def test_titles_are_numbered_in_creation_order(self, session_factory, session):
        await DataInitializer(session_factory, documents=10, authors=3, tags=5, rng=random.Random(1)).run()

        rows = (await session.execute(select(Document.title).order_by(Document.id))).scalars().all()

        assert rows[0].endswith(" - Part 1")
        assert rows[-1].endswith(" - Part 10")

    def test_requires_enough_tags(self):
        with pytest.raises(ValueError):
            DataInitializer(None, tags=1)
