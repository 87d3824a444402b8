# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./tickets.db")
    APP_NAME: str = "Ticket API"
    APP_DESC: str = "Ticket record management service"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # comma-separated, "*" allows all
    CORS_ORIGINS: str = "*"

    # Pagination
    DEFAULT_PAGE_SIZE: int = Field(default=10, ge=1)
    MAX_PAGE_SIZE: int = Field(default=100, ge=1)

    # Transient persistence errors
    PERSISTENCE_MAX_RETRIES: int = Field(default=3, ge=1)
    PERSISTENCE_RETRY_DELAY: float = Field(default=0.05, ge=0)

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
