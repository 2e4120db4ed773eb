"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from backend.reflow.models.common import parse_clock


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (unset -> in-memory store)
    database_url: str | None = None

    # Scheduling defaults
    default_day_start: str = "09:00"
    default_buffer_minutes: int = 30

    # Route heuristic is sized for small days
    max_activities_per_day: int = 30

    # Generated activity ids
    activity_id_prefix: str = "act"

    # Seed the dev trip when the store is created
    seed_dev_data: bool = False

    @field_validator("default_day_start")
    @classmethod
    def validate_day_start(cls, v: str) -> str:
        """Ensure the default day start is an HH:MM clock value."""
        parse_clock(v)
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
