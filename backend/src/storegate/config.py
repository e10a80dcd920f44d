"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    env: Literal["development", "production", "testing"] = "production"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_logs: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "https://localhost:3000"]
    )

    # Remote store backend
    api_url: str | None = Field(default=None, description="Base URL of the remote store API")
    request_timeout: float = Field(
        default=30.0, gt=0, le=300, description="Seconds allowed for a proxied CRUD call"
    )

    # Health gate
    health_cache_ttl: float = Field(
        default=30.0, ge=0, description="Seconds a successful health check stays cached"
    )
    health_check_timeout: float = Field(
        default=60.0, gt=0, le=300, description="Seconds allowed for a health check (cold starts)"
    )

    # Wake-retry protocol
    wake_retry_interval: float = Field(
        default=5.0, ge=0, description="Seconds between health polls while the backend wakes"
    )
    wake_max_retries: int = Field(default=12, ge=1, le=100)

    @field_validator("api_url")
    @classmethod
    def normalize_api_url(cls, v: str | None) -> str | None:
        """Treat an empty URL as unset and drop any trailing slash."""
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @property
    def is_backend_configured(self) -> bool:
        """Whether a remote backend URL is available."""
        return self.api_url is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
