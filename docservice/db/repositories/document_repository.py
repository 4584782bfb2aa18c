from typing import List, Optional, Set

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from docservice.core.pagination import Page, PageRequest
from docservice.db.models import Author, Document, Permission, Tag, document_tags
from docservice.domains.documents.schemas import DocumentSummary

# Поля, по которым разрешена сортировка страниц
SORTABLE_COLUMNS = {
    "id": Document.id,
    "title": Document.title,
    "created_at": Document.created_at,
}


def _apply_page(stmt, page_request: PageRequest):
    """ORDER BY (если задан) и LIMIT size + 1 / OFFSET.

    При сортировке id добавляется вторым ключом: без него строки с одинаковым
    значением поля могут попасть на две страницы или ни на одну.
    """
    sort = page_request.sort
    if sort is not None:
        column = SORTABLE_COLUMNS.get(sort.field)
        if column is None:
            raise ValueError(f"Unsupported sort field: {sort.field}")
        stmt = stmt.order_by(column.desc() if sort.descending else column.asc())
        if column is not Document.id:
            stmt = stmt.order_by(Document.id.desc() if sort.descending else Document.id.asc())
    return stmt.offset(page_request.offset).limit(page_request.size + 1)


class DocumentRepository:
    """Репозиторий документов: стратегии выборки одного и того же графа"""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Ленивая стратегия ─────────────────────────────────

    async def list_documents(self, page_request: PageRequest) -> Page[Document]:
        """Страница документов одним запросом; связи не загружаются"""
        result = await self.session.execute(_apply_page(select(Document), page_request))
        return Page[Document].from_rows(result.scalars().all(), page_request)

    async def resolve_author(self, document: Document) -> Author:
        """Автор документа.

        Первое обращение - отдельный запрос, если автор еще не в identity map сессии;
        повторные обращения в той же сессии запросов не выполняют.
        """
        return await document.awaitable_attrs.author

    async def resolve_tags(self, document: Document) -> Set[Tag]:
        """Теги документа; запрос при первом обращении"""
        return await document.awaitable_attrs.tags

    async def resolve_permissions(self, document: Document) -> List[Permission]:
        """Права документа в порядке добавления; запрос при первом обращении"""
        return await document.awaitable_attrs.permissions

    # ── Сущности с автором ────────────────────────────────

    async def list_documents_with_author(self, page_request: PageRequest) -> Page[Document]:
        """Страница документов с автором через JOIN одним запросом"""
        stmt = select(Document).options(joinedload(Document.author, innerjoin=True))
        result = await self.session.execute(_apply_page(stmt, page_request))
        return Page[Document].from_rows(result.scalars().all(), page_request)

    # ── Проекция с JOIN ───────────────────────────────────

    async def list_document_summaries(self, page_request: PageRequest) -> Page[DocumentSummary]:
        """Страница проекций одним запросом JOIN documents/authors"""
        stmt = (
            select(
                Document.id,
                Document.title,
                Document.created_at,
                Author.id.label("author_id"),
                Author.name.label("author_name"),
            )
            .join(Author, Document.author_id == Author.id)
        )
        result = await self.session.execute(_apply_page(stmt, page_request))
        summaries = [DocumentSummary(**row._asdict()) for row in result.all()]
        return Page[DocumentSummary].from_rows(summaries, page_request)

    # ── Полный граф ───────────────────────────────────────

    async def get_document_detail(self, document_id: int) -> Optional[Document]:
        """Документ с автором, тегами и правами.

        Автор приходит в основном запросе через JOIN, каждая коллекция - одним
        дополнительным SELECT ... IN, без декартова произведения тегов и прав.
        """
        result = await self.session.execute(
            select(Document)
            .options(
                joinedload(Document.author),
                selectinload(Document.tags),
                selectinload(Document.permissions),
            )
            .where(Document.id == document_id)
        )
        return result.scalar_one_or_none()

    # ── Вспомогательные выборки ───────────────────────────

    async def count(self) -> int:
        """Подсчет количества документов"""
        result = await self.session.execute(select(func.count(Document.id)))
        return result.scalar()

    async def list_by_author(self, author_id: int) -> List[Document]:
        """Документы автора (обратная сторона связи document -> author)"""
        result = await self.session.execute(
            select(Document).where(Document.author_id == author_id).order_by(Document.id)
        )
        return list(result.scalars().all())

    async def list_by_tag(self, tag_id: int) -> List[Document]:
        """Документы с тегом (обратная сторона связи document -> tags)"""
        result = await self.session.execute(
            select(Document)
            .join(document_tags, document_tags.c.document_id == Document.id)
            .where(document_tags.c.tag_id == tag_id)
            .order_by(Document.id)
        )
        return list(result.scalars().all())
