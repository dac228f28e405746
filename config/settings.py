"""Application settings and configuration management."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    GEMINI_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-pro"

    # "direct" calls the model from this process, "proxy" goes through /api/gemini
    AI_TRANSPORT: Literal["direct", "proxy"] = "proxy"
    PROXY_URL: str = "http://localhost:8000/api/gemini"
    AI_TIMEOUT_S: float = Field(default=30.0, ge=0.1)
    AI_OVERALL_TIMEOUT_S: float = Field(default=45.0, ge=0.1)

    DB_PATH: str = Field(default="data/interviews.db")
    SNAPSHOT_DIR: str = Field(default="data/snapshots")

    DEFAULT_JOB_ROLE: str = "Full-Stack Developer"

    # Controllers kept in memory by the session API; older clients reload from snapshots
    SESSION_CACHE_SIZE: int = Field(default=256, ge=1)

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
