"""
Кэш результатов чтения.

Значения - JSON-строки (pydantic model_dump_json), ключи - строки вида
``documents:0-20`` или ``documentDetails:42``. Вытеснение целиком на стороне
бэкенда: TTLCache ограничен размером и временем жизни, в Redis ключи пишутся с TTL.
Ошибки бэкенда поднимаются как CacheUnavailableError; сервис в этом случае
идет в базу напрямую.
"""

import asyncio
import logging
import threading
import time
from typing import Callable, Optional

import redis.asyncio as redis
from cachetools import TTLCache
from redis.exceptions import RedisError

from docservice.core.config import Settings, settings

logger = logging.getLogger(__name__)


class CacheUnavailableError(RuntimeError):
    """Бэкенд кэша недоступен"""


class ResultCache:
    """Интерфейс кэша результатов"""

    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def clear(self) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class NullResultCache(ResultCache):
    """Кэширование выключено"""

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str) -> None:
        pass

    async def clear(self) -> None:
        pass


class MemoryResultCache(ResultCache):
    """Кэш в памяти процесса, общий для всех запросов"""

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 600,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._cache = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=timer)
        # TTLCache не потокобезопасен
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._cache.get(key)

    async def set(self, key: str, value: str) -> None:
        with self._lock:
            self._cache[key] = value

    async def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class RedisResultCache(ResultCache):
    """Кэш в Redis; ключи пишутся с префиксом и TTL"""

    def __init__(
        self,
        url: Optional[str] = None,
        ttl_seconds: int = 600,
        prefix: str = "docservice:",
        client: Optional[redis.Redis] = None,
    ):
        if client is None and not url:
            raise ValueError("Either url or client is required")
        self._client = client or redis.from_url(url, decode_responses=True)
        self._ttl_seconds = ttl_seconds
        self._prefix = prefix

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._client.get(self._prefix + key)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise CacheUnavailableError(f"Redis GET failed for {key}: {e}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            await self._client.set(self._prefix + key, value, ex=self._ttl_seconds)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise CacheUnavailableError(f"Redis SET failed for {key}: {e}") from e

    async def clear(self) -> None:
        try:
            async for key in self._client.scan_iter(match=f"{self._prefix}*"):
                await self._client.delete(key)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise CacheUnavailableError(f"Redis clear failed: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()


def build_result_cache(config: Settings = settings) -> ResultCache:
    """Выбор бэкенда кэша по настройкам"""
    if not config.cache_enabled:
        logger.info("Result cache disabled")
        return NullResultCache()
    if config.cache_url:
        logger.info("Using Redis result cache")
        return RedisResultCache(url=config.cache_url, ttl_seconds=config.cache_ttl_seconds)
    logger.info(
        "Using in-memory result cache (max_size=%d, ttl=%ds)",
        config.cache_max_size,
        config.cache_ttl_seconds,
    )
    return MemoryResultCache(max_size=config.cache_max_size, ttl_seconds=config.cache_ttl_seconds)


result_cache = build_result_cache()


def get_result_cache() -> ResultCache:
    return result_cache
