"""Configuration package for the interview practice service."""
from .routes import GeminiRoute, ProxyRoute, gemini_route, proxy_route
from .settings import Settings, settings

__all__ = [
    "GeminiRoute",
    "ProxyRoute",
    "gemini_route",
    "proxy_route",
    "Settings",
    "settings",
]
