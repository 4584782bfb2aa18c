from docservice.api.http.health import router as health_router
from docservice.api.http.documents import router as documents_router

__all__ = [
    "health_router",
    "documents_router"
]
