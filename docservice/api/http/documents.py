import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from docservice.core.cache import ResultCache, get_result_cache
from docservice.core.config import settings
from docservice.core.db import get_db
from docservice.core.pagination import Page, PageRequest
from docservice.domains.documents.exceptions import DocumentNotFoundError
from docservice.domains.documents.schemas import (
    DocumentDetail, DocumentResponse, DocumentSummary, QueryMetricsResponse
)
from docservice.domains.documents.services import DocumentService

router = APIRouter(prefix="/documents", tags=["documents"])


def get_document_service(
    db: AsyncSession = Depends(get_db),
    cache: ResultCache = Depends(get_result_cache),
) -> DocumentService:
    return DocumentService(db, cache=cache)


def page_request(
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> PageRequest:
    return PageRequest(page=page, size=size)


@router.get("", response_model=Page[DocumentResponse])
async def get_all_documents(
    pageable: PageRequest = Depends(page_request),
    document_service: DocumentService = Depends(get_document_service),
):
    """Наивный список: сущности целиком, 1 + N запросов"""
    documents = await document_service.find_all_naive(pageable)
    return documents.map(DocumentResponse.model_validate)


@router.get("/optimized", response_model=Page[DocumentSummary])
async def get_all_documents_optimized(
    pageable: PageRequest = Depends(page_request),
    document_service: DocumentService = Depends(get_document_service),
):
    """Оптимизированный список: проекция одним запросом, с кэшем"""
    return await document_service.find_all_optimized(pageable)


@router.get("/metrics/compare", response_model=List[QueryMetricsResponse])
async def compare_document_queries(
    pageable: PageRequest = Depends(page_request),
    document_service: DocumentService = Depends(get_document_service),
):
    """Стоимость наивного, жадного и оптимизированного списка для одной и той же страницы"""
    metrics = document_service.metrics
    measurements = []

    for endpoint, call in (
        ("GET /documents", document_service.find_all_naive),
        ("GET /documents (eager author)", document_service.find_all_with_author),
        ("GET /documents/optimized", document_service.find_all_optimized),
    ):
        before = metrics.snapshot()
        started = time.perf_counter()
        await call(pageable)
        elapsed_ms = (time.perf_counter() - started) * 1000
        stats = metrics.diff(before, metrics.snapshot())

        measurements.append(
            QueryMetricsResponse(
                endpoint=endpoint,
                query_count=stats.query_count,
                entity_load_count=stats.entity_load_count,
                collection_load_count=stats.collection_load_count,
                execution_time_ms=round(elapsed_ms, 3),
            )
        )

    return measurements


@router.get("/{document_id}", response_model=DocumentDetail)
async def get_document(
    document_id: int,
    document_service: DocumentService = Depends(get_document_service),
):
    """Документ со всеми связями"""
    try:
        return await document_service.find_by_id_optimized(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
