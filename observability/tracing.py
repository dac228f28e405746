"""Timing helper for outbound AI calls."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator, Optional

from .logger import log_event


@contextmanager
def span(op: str, session_id: Optional[str]) -> Iterator[None]:
    start = time.monotonic()
    try:
        yield
    finally:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        log_event("ai_call", session_id, op=op, ms=elapsed_ms)


__all__ = ["span"]
