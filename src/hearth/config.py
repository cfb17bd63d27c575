"""
Hearth configuration.

Values come from ``HEARTH_*`` environment variables or a local ``.env`` file.
The AI backend is optional: without an endpoint the parser runs rules only.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HearthSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HEARTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # AI parsing backend
    ai_endpoint: Optional[str] = None
    ai_user_id: Optional[str] = None
    ai_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    # Calendar
    calendar_id: Optional[str] = None

    # Planning
    expiring_soon_days: int = Field(default=7, ge=0)
    match_typo_threshold: Optional[float] = Field(default=None, ge=0, le=100)
    suggestion_pool_size: int = Field(default=5, ge=1)

    # Optional directory overriding the packaged YAML keyword tables
    templates_path: Optional[str] = None

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @property
    def ai_enabled(self) -> bool:
        return bool(self.ai_endpoint)


@lru_cache
def get_settings() -> HearthSettings:
    """Cached settings instance."""
    return HearthSettings()
