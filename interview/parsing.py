"""Extract scores and summaries from free-form model replies."""
from __future__ import annotations

import re
from typing import Any

from interview.types import SummaryResult

DEFAULT_SCORE = 5
DEFAULT_FINAL_SCORE = 50

_SCORE_RE = re.compile(r"(\d+)\s*/\s*10\b")
_FINAL_SCORE_RE = re.compile(r"final score:\s*(\d+)", re.IGNORECASE)


def _drop_line(text: str, pos: int) -> str:
    """Remove the line of ``text`` that contains offset ``pos``, newline included."""
    start = text.rfind("\n", 0, pos) + 1
    end = text.find("\n", pos)
    if end == -1:
        return text[:start]
    return text[:start] + text[end + 1:]


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def parse_score(response_text: Any) -> int:
    """Return the first ``N/10`` score in ``response_text``, or 5."""

    if not isinstance(response_text, str):
        return DEFAULT_SCORE
    match = _SCORE_RE.search(response_text)
    if not match:
        return DEFAULT_SCORE
    return _clamp(int(match.group(1)), 0, 10)


def parse_final_summary(response_text: Any) -> SummaryResult:
    """Split a summary reply into the final score and the remaining prose.

    The line holding the matched ``Final Score: N`` is removed from the summary
    text, other mentions of a final score are kept. Missing or
    unparseable scores fall back to 50; non-string input yields an empty
    summary.
    """

    if not isinstance(response_text, str):
        return SummaryResult(final_score=DEFAULT_FINAL_SCORE, summary="")
    match = _FINAL_SCORE_RE.search(response_text)
    if not match:
        return SummaryResult(final_score=DEFAULT_FINAL_SCORE, summary=response_text.strip())
    final_score = _clamp(int(match.group(1)), 0, 100)
    summary = _drop_line(response_text, match.start()).strip()
    return SummaryResult(final_score=final_score, summary=summary)


__all__ = ["DEFAULT_SCORE", "DEFAULT_FINAL_SCORE", "parse_score", "parse_final_summary"]
