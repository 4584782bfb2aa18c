import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from docservice.core.cache import CacheUnavailableError, NullResultCache, ResultCache
from docservice.core.metrics import QueryMetricsCollector
from docservice.core.pagination import Page, PageRequest, Sort
from docservice.db.models import Document
from docservice.db.repositories.document_repository import DocumentRepository
from docservice.domains.documents.exceptions import DocumentNotFoundError
from docservice.domains.documents.schemas import AuthorSummary, DocumentDetail, DocumentSummary

logger = logging.getLogger(__name__)

SUMMARIES_CACHE = "documents"
DETAILS_CACHE = "documentDetails"

ModelT = TypeVar("ModelT", bound=BaseModel)


class DocumentService:
    """Сервис чтения документов.

    find_all_naive оставляет N+1 запросов намеренно: это эталон для сравнения
    с оптимизированными выборками.
    """

    def __init__(
        self,
        session: AsyncSession,
        cache: Optional[ResultCache] = None,
        metrics: Optional[QueryMetricsCollector] = None,
    ):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.cache = cache if cache is not None else NullResultCache()
        self.metrics = metrics if metrics is not None else QueryMetricsCollector.for_session(session)

    async def find_all_naive(self, page_request: PageRequest) -> Page[Document]:
        """Страница сущностей с ленивой загрузкой автора (1 + N запросов)"""
        logger.warning("Using NAIVE implementation - expect N+1 queries!")
        before = self.metrics.snapshot()

        documents = await self.document_repository.list_documents(page_request)

        # Обращение к author.name для каждого документа - отдельный запрос на автора
        for document in documents.content:
            author = await self.document_repository.resolve_author(document)
            logger.debug("Document %s by %s", document.id, author.name)

        after = self.metrics.snapshot()
        self.metrics.report("GET /documents (naive)", self.metrics.diff(before, after))
        return documents

    async def find_all_with_author(self, page_request: PageRequest) -> Page[Document]:
        """Страница сущностей с автором в том же запросе (JOIN)"""
        before = self.metrics.snapshot()

        documents = await self.document_repository.list_documents_with_author(page_request)

        # Автор уже загружен, обращение запросов не выполняет
        for document in documents.content:
            logger.debug("Document %s by %s", document.id, document.author.name)

        after = self.metrics.snapshot()
        self.metrics.report("GET /documents (eager author)", self.metrics.diff(before, after))
        return documents

    async def find_all_optimized(self, page_request: PageRequest) -> Page[DocumentSummary]:
        """Страница проекций одним запросом, с кэшированием по номеру и размеру страницы"""
        cache_key = f"{SUMMARIES_CACHE}:{page_request.page}-{page_request.size}"
        cached = await self._cache_get(cache_key, Page[DocumentSummary])
        if cached is not None:
            return cached

        logger.info("Using OPTIMIZED implementation with DTO projection and join")
        before = self.metrics.snapshot()

        # Сортировка всегда по дате создания, новые первыми
        sorted_request = page_request.with_sort(Sort("created_at", descending=True))
        summaries = await self.document_repository.list_document_summaries(sorted_request)

        after = self.metrics.snapshot()
        self.metrics.report("GET /documents/optimized", self.metrics.diff(before, after))

        await self._cache_set(cache_key, summaries.model_dump_json())
        return summaries

    async def find_by_id_optimized(self, document_id: int) -> DocumentDetail:
        """Документ со всеми связями за постоянное число запросов"""
        cache_key = f"{DETAILS_CACHE}:{document_id}"
        cached = await self._cache_get(cache_key, DocumentDetail)
        if cached is not None:
            return cached

        logger.info("Fetching document %s with optimized query", document_id)
        before = self.metrics.snapshot()

        document = await self.document_repository.get_document_detail(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)

        # Все связи уже загружены, дополнительных запросов нет
        detail = DocumentDetail(
            id=document.id,
            title=document.title,
            created_at=document.created_at,
            author=AuthorSummary(id=document.author.id, name=document.author.name),
            tag_names={tag.name for tag in document.tags},
            permission_types=[permission.type.name for permission in document.permissions],
        )

        after = self.metrics.snapshot()
        self.metrics.report(f"GET /documents/{document_id}", self.metrics.diff(before, after))

        await self._cache_set(cache_key, detail.model_dump_json())
        return detail

    async def _cache_get(self, key: str, model: Type[ModelT]) -> Optional[ModelT]:
        """Значение из кэша или None, если его нет или прочитать не удалось"""
        try:
            cached = await self.cache.get(key)
        except CacheUnavailableError as e:
            logger.warning("Cache read failed, querying storage directly: %s", e)
            return None
        if cached is None:
            return None

        try:
            value = model.model_validate_json(cached)
        except ValidationError as e:
            # Запись устарела или повреждена; после запроса она будет перезаписана
            logger.warning("Cached value for %s is unreadable, querying storage directly: %s", key, e)
            return None

        logger.debug("Cache hit for %s", key)
        return value

    async def _cache_set(self, key: str, value: str) -> None:
        try:
            await self.cache.set(key, value)
        except CacheUnavailableError as e:
            logger.warning("Cache write failed, result not cached: %s", e)
