from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import (
    GeminiClient,
    HttpClient,
    HttpResponse,
    LlmGatewayError,
    ProxyClient,
    TextCompletion,
)

__all__ = [
    "GeminiClient",
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "ProxyClient",
    "TextCompletion",
]
