"""Centralized application configuration using Pydantic settings."""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the hotel booking manager."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    database_url: str = Field(
        default="sqlite:///./hotel_booking.db",
        description="SQLAlchemy database URL. Defaults to a local SQLite file.",
    )
    run_db_migrations: bool = Field(
        default=True,
        description="Whether the front desk service should create tables on startup.",
    )
    log_dir: str = Field(default="logs", description="Directory for audit log files")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    default_rate_limit: str = Field(default="60/minute", description="Global rate limiting rule")
    rate_limiting_enabled: bool = Field(default=True, description="Toggle to disable SlowAPI limits (useful in tests)")
    room_cache_ttl: int = Field(default=60, description="TTL (s) for cached room listings")

    front_desk_port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()
