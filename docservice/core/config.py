from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./docservice.db"
    database_echo: bool = False

    # Кэш результатов: пустой cache_url - кэш в памяти процесса, redis://... - Redis
    cache_enabled: bool = True
    cache_url: str = ""
    cache_max_size: int = 1000
    cache_ttl_seconds: int = 600

    default_page_size: int = 20
    max_page_size: int = 100

    # Начальное заполнение данными для демонстрации N+1
    seed_on_startup: bool = False
    seed_documents: int = 100
    seed_authors: int = 20
    seed_tags: int = 15
    seed_random_seed: Optional[int] = None

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
