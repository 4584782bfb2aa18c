from docservice.domains.documents.schemas import (
    AuthorSummary, DocumentResponse, DocumentSummary, DocumentDetail, QueryMetricsResponse
)
from docservice.domains.documents.exceptions import DocumentNotFoundError

__all__ = [
    "AuthorSummary", "DocumentResponse", "DocumentSummary", "DocumentDetail",
    "QueryMetricsResponse",
    "DocumentNotFoundError"
]
