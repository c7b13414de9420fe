"""Application settings and configuration management."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interviews.db")
    LLM_CONFIG_PATH: str = Field(default="app_config.json")

    START_WINDOW_MINUTES: int = Field(default=5, ge=0)
    PUBLIC_FEED_LIMIT: int = Field(default=20, ge=1)
    DASHBOARD_WORKERS: int = Field(default=4, ge=1)

    ANALYTICS_TOP_TECH: int = 5
    RECENT_ACTIVITY: int = 5

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
