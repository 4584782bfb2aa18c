from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from docservice.core.db import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    """Проверка доступности сервиса и базы данных"""
    await db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
