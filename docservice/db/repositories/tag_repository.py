from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from docservice.db.models import Tag


class TagRepository:
    """Репозиторий для работы с тегами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, names: Iterable[str]) -> List[Tag]:
        """Создание тегов; имена тегов уникальны"""
        tags = [Tag(name=name) for name in names]
        self.session.add_all(tags)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Tag names must be unique")
        return tags

    async def list_all(self) -> List[Tag]:
        result = await self.session.execute(select(Tag).order_by(Tag.id))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Tag.id)))
        return result.scalar()
