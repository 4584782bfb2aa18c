from sqlalchemy import BigInteger, Integer
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase

# BIGSERIAL в PostgreSQL; SQLite автоинкрементирует только INTEGER PRIMARY KEY
BigIntegerId = BigInteger().with_variant(Integer(), "sqlite")


class Base(AsyncAttrs, DeclarativeBase):
    """Базовый класс моделей.

    AsyncAttrs дает доступ к ленивым связям через ``await obj.awaitable_attrs.<name>``.
    """
