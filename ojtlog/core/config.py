"""Environment-driven configuration.

The ``Settings`` class centralises every environment variable the service
relies on. They are read once, the first time ``get_settings`` is called, and
every attribute carries a default so the app can boot in development without
extra setup.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "OJT Log"
    # Local folder for the SQLite database and the JSON local store.
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2] / "data")
    LOCAL_STORE_FILE: str = "local_store.json"
    # Empty means "SQLite file under DATA_DIR"; see ``database_url``.
    DB_URL: str = Field(default="", validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    LOG_LEVEL: str = "INFO"
    METRICS_ENABLED: bool = True

    # Bearer tokens are HS256 JWTs whose ``sub`` is the user id.
    JWT_SECRET: str = "change-me"
    JWT_AUDIENCE: str = "ojt-log-clients"
    JWT_ISSUER: str = "ojt-log"
    JWT_ACCESS_TTL_MIN: int = 60

    LOG_CACHE_TTL_SECONDS: float = 30.0
    LOG_PAGE_SIZE: int = 20
    BREAK_START: str = "12:00"
    BREAK_END: str = "13:00"
    DEFAULT_TARGET_HOURS: float = 500.0

    @field_validator("LOG_PAGE_SIZE")
    @classmethod
    def _positive_page_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("LOG_PAGE_SIZE must be at least 1")
        return value

    @field_validator("LOG_CACHE_TTL_SECONDS", "DEFAULT_TARGET_HOURS")
    @classmethod
    def _positive_number(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @property
    def database_url(self) -> str:
        return self.DB_URL or f"sqlite+aiosqlite:///{self.DATA_DIR / 'ojt_logs.db'}"

    @property
    def local_store_path(self) -> Path:
        return self.DATA_DIR / self.LOCAL_STORE_FILE


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = Settings()
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return settings


settings = get_settings()
