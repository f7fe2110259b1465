"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    gemini_api_key: str | None = None
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    gemini_models_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    default_model: str = "gemini-1.5-flash"
    analysis_timeout_seconds: float = 60.0
    daily_rate_limit: int = 10
    rate_limit_sweep_seconds: int = 3600
    timezone: str = "UTC"
    default_goal_calories: int = 2000
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_goal_calories(raw: str | None) -> int | None:
    """Parse a stored goal calories preference."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned.isdigit():
        return None
    value = int(cleaned)
    return value or None
