import logging
import random
from contextlib import asynccontextmanager

from fastapi import FastAPI

from docservice.api.http.documents import router as documents_router
from docservice.api.http.health import router as health_router
from docservice.core.cache import result_cache
from docservice.core.config import settings
from docservice.core.db import SessionLocal, engine, init_models
from docservice.core.logging_config import configure_logging
from docservice.db.seed import DataInitializer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    await init_models()

    if settings.seed_on_startup:
        initializer = DataInitializer(
            SessionLocal,
            documents=settings.seed_documents,
            authors=settings.seed_authors,
            tags=settings.seed_tags,
            rng=random.Random(settings.seed_random_seed),
        )
        await initializer.run()

    yield

    await result_cache.close()
    await engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title="DocService",
    description="Сравнение стратегий выборки документов: N+1, проекция с JOIN, жадная загрузка",
    version="1.0.0",
    lifespan=lifespan,
)

# Подключаем роутеры
app.include_router(health_router)
app.include_router(documents_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "DocService API",
        "version": "1.0.0",
        "endpoints": {
            "naive": "/documents?page=0&size=20",
            "optimized": "/documents/optimized?page=0&size=20",
            "detail": "/documents/{id}",
            "compare": "/documents/metrics/compare?page=0&size=20",
        },
        "docs": "/docs",
        "health": "/health"
    }
