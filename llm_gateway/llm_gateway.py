from __future__ import annotations  # Outbound gateway to the generative-language service

import logging
import os
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Tuple

import httpx

from config import GeminiRoute, ProxyRoute


logger = logging.getLogger(__name__)  # Module logger setup


class HttpClient(Protocol):  # Minimal async HTTP client protocol
    async def post(
        self,
        url: str,
        *,
        json: Dict[str, Any],
        headers: Dict[str, str],
        params: Optional[Dict[str, str]] = None,
        timeout: float,
    ) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class TextCompletion(Protocol):  # Single-prompt text completion
    async def generate(self, prompt: str) -> str: ...


class GeminiClient:  # Direct call to the generateContent endpoint
    def __init__(self, route: GeminiRoute, client: Optional[HttpClient] = None) -> None:
        self.route = route
        self._client = client

    def _api_key(self) -> Optional[str]:
        if self.route.api_key:
            return self.route.api_key
        if self.route.api_key_env:
            return os.getenv(self.route.api_key_env)
        return None

    async def generate(self, prompt: str) -> str:  # Send prompt and return the completion text
        api_key = self._api_key()
        if not api_key:
            raise LlmGatewayError("API key not configured")
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        headers = {"Content-Type": "application/json"}
        headers.update(self.route.extra_headers)
        logger.info(
            "LLM request send route=%s model=%s preview=%s",
            self.route.name,
            self.route.model,
            _preview(prompt),
        )
        data = await _post_json(
            self.route.url,
            payload,
            headers,
            self.route.timeout_s,
            self._client,
            params={"key": api_key},
        )
        text = _extract_text(data)
        logger.info("LLM request done route=%s model=%s chars=%d", self.route.name, self.route.model, len(text))
        return text


class ProxyClient:  # Same-origin proxy that holds the credential server-side
    def __init__(self, route: ProxyRoute, client: Optional[HttpClient] = None) -> None:
        self.route = route
        self._client = client

    async def post(self, action: str, fields: Dict[str, Any]) -> Dict[str, Any]:  # Dispatch an action to the proxy
        payload: Dict[str, Any] = {"action": action}
        payload.update(fields)
        logger.info("Proxy request send action=%s url=%s", action, self.route.url)
        data = await _post_json(
            self.route.url,
            payload,
            {"Content-Type": "application/json"},
            self.route.timeout_s,
            self._client,
        )
        if not isinstance(data, dict):
            raise LlmGatewayError("Proxy payload was not a JSON object")
        return data


async def _post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: float,
    client: Optional[HttpClient],
    params: Optional[Dict[str, str]] = None,
) -> Any:  # POST JSON and decode the reply
    try:
        response, close_cb = await _post(url, payload, headers, timeout, client, params)
    except LlmGatewayError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.error("LLM transport failure: %s", exc)
        raise LlmGatewayError("LLM transport failed") from exc
    try:
        if response.status_code >= 400:
            logger.error("LLM error status: %s", response.status_code)
            raise LlmGatewayError(f"LLM returned status {response.status_code}")
        try:
            return response.json()
        except Exception as exc:  # noqa: BLE001
            logger.error("Invalid JSON payload from LLM: %s", exc)
            raise LlmGatewayError("LLM payload was not JSON") from exc
    finally:
        await _close_safely(close_cb)


async def _post(
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: float,
    client: Optional[HttpClient],
    params: Optional[Dict[str, str]],
) -> Tuple[HttpResponse, Optional[Callable[[], Awaitable[None]]]]:  # Dispatch HTTP request
    if client is not None:
        response = await client.post(url, json=payload, headers=headers, params=params, timeout=timeout)
        return response, None
    http_client = httpx.AsyncClient(timeout=timeout)
    try:
        response = await http_client.post(url, json=payload, headers=headers, params=params)
    except Exception:
        await http_client.aclose()
        raise
    return response, http_client.aclose


async def _close_safely(close_cb: Optional[Callable[[], Awaitable[None]]]) -> None:  # Close owned HTTP client
    if close_cb is not None:
        await close_cb()


def _preview(text: str) -> str:  # Build preview string for logging
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line if len(line) <= 120 else line[:117] + "..."
    return ""


def _extract_text(data: Any) -> str:  # Extract completion text from a generateContent reply
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise LlmGatewayError("LLM response missing content") from exc
    if not isinstance(text, str):
        raise LlmGatewayError("LLM response missing content")
    return text
