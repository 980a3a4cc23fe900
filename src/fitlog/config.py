"""Application configuration."""

import os
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["memory", "supabase"] = "memory"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    owner_id: str = "default"
    openai_api_key: str | None = None
    openai_text_model: str = "gpt-5-mini"
    openai_image_model: str = "gpt-5.2"
    openai_store: bool = False
    timezone: str = "UTC"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timezone(raw: str | None) -> str:
    """Return a valid IANA timezone name, falling back to UTC."""
    if raw is None:
        return "UTC"
    cleaned = raw.strip()
    if not cleaned:
        return "UTC"
    try:
        ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError):
        return "UTC"
    return cleaned
