from datetime import datetime
from typing import List, Set

from pydantic import BaseModel, ConfigDict


class AuthorSummary(BaseModel):
    """Автор в ответах API"""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class DocumentResponse(BaseModel):
    """Документ из наивной выборки (сущность целиком, без коллекций)"""
    id: int
    title: str
    created_at: datetime
    author: AuthorSummary

    model_config = ConfigDict(from_attributes=True)


class DocumentSummary(BaseModel):
    """Проекция для списка документов: одна строка JOIN documents/authors"""
    id: int
    title: str
    created_at: datetime
    author_id: int
    author_name: str


class DocumentDetail(BaseModel):
    """Документ со всеми связями"""
    id: int
    title: str
    created_at: datetime
    author: AuthorSummary
    tag_names: Set[str]
    permission_types: List[str]


class QueryMetricsResponse(BaseModel):
    """Стоимость одного вызова в запросах и времени"""
    endpoint: str
    query_count: int
    entity_load_count: int
    collection_load_count: int
    execution_time_ms: float
