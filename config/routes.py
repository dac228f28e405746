"""Endpoint configuration for the generative-language service."""
from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field

from .settings import Settings


class GeminiRoute(BaseModel):
    """Direct text-completion endpoint configuration."""

    name: str = "gemini"
    base_url: str
    model: str
    timeout_s: float = Field(ge=0.1)
    api_key_env: str | None = "GEMINI_API_KEY"
    api_key: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"


class ProxyRoute(BaseModel):
    """Same-origin proxy endpoint configuration."""

    url: str
    timeout_s: float = Field(ge=0.1)


def gemini_route(cfg: Settings) -> GeminiRoute:
    """Build the direct route from application settings."""

    return GeminiRoute(
        base_url=cfg.GEMINI_BASE_URL,
        model=cfg.GEMINI_MODEL,
        timeout_s=cfg.AI_TIMEOUT_S,
        api_key=cfg.GEMINI_API_KEY,
    )


def proxy_route(cfg: Settings) -> ProxyRoute:
    return ProxyRoute(url=cfg.PROXY_URL, timeout_s=cfg.AI_TIMEOUT_S)
