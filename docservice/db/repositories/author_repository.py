from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docservice.db.models import Author


class AuthorRepository:
    """Репозиторий для работы с авторами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, names: Iterable[str]) -> List[Author]:
        """Создание авторов; идентификаторы присваиваются при flush"""
        authors = [Author(name=name) for name in names]
        self.session.add_all(authors)
        await self.session.flush()
        return authors

    async def list_all(self) -> List[Author]:
        result = await self.session.execute(select(Author).order_by(Author.id))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Author.id)))
        return result.scalar()
