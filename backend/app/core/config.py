from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Trade Journal"
    debug: bool = False
    log_level: str = "INFO"
    storage_backend: Literal["memory", "database"] = "memory"
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/tradej"
    default_timezone: str = "America/New_York"
    stats_window_days: int = 30
    seed_example_notes: bool = True
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
