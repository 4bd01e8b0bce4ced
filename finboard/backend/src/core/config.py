"""Application configuration utilities."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings derived from environment variables."""

    database_url: str = Field(
        default="sqlite:///./finboard.db", alias="DATABASE_URL"
    )
    rest_store_url: str | None = Field(default=None, alias="REST_STORE_URL")
    rest_store_key: str | None = Field(default=None, alias="REST_STORE_KEY")
    rest_store_timeout: float = Field(default=10.0, alias="REST_STORE_TIMEOUT")
    currency_code: str = Field(default="USD", alias="CURRENCY_CODE")
    currency_locale: str = Field(default="en_US", alias="CURRENCY_LOCALE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def rest_store_enabled(self) -> bool:
        """Return ``True`` when a REST row store endpoint is configured."""

        return bool(self.rest_store_url)


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
