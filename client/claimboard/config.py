"""Application configuration using Pydantic settings."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root directory (client/)
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Points Claiming System"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Ledger service
    api_base_url: str = "http://localhost:4000/api"
    request_timeout_seconds: float = 10.0

    # History
    history_page_size: int = 5

    # Notifications
    notification_ttl_seconds: float = 3.0

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator(
        "request_timeout_seconds",
        "history_page_size",
        "notification_ttl_seconds",
    )
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
