"""AI gateway: every operation returns a usable result, AI-derived or heuristic."""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, List, Optional, TypeVar

from interview.backends import AIBackend
from interview.fallbacks import fallback_question, fallback_summary, heuristic_score
from interview.types import QUESTION_COUNT, QUESTION_PLAN, Question, SummaryResult, Transcript, time_limit_for

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_S = 45.0


class AIGateway:
    """Route interview operations to a backend and degrade to fallbacks.

    Transport errors, malformed replies and timeouts are logged and replaced
    with fallback content; nothing raised by the backend reaches the caller.
    """

    def __init__(
        self,
        backend: AIBackend,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.backend = backend
        self.timeout_s = timeout_s
        self.rng = rng or random.Random()

    async def _bounded(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout_s)
        except asyncio.TimeoutError:
            logger.warning("AI %s timed out after %.1fs; using fallback", operation, self.timeout_s)
            raise

    async def generate_question(
        self,
        difficulty: str,
        question_number: int,
        resume_context: str = "",
        job_role: str = "",
        company_name: str = "",
        fallback_offset: Optional[int] = None,
    ) -> Question:
        try:
            text = await self._bounded(
                "generateQuestion",
                self.backend.generate_question(
                    difficulty, question_number, resume_context or "", job_role, company_name or ""
                ),
            )
            if not text or not text.strip():
                raise ValueError("empty question text")
            return Question(text=text.strip(), difficulty=difficulty, time_limit=time_limit_for(difficulty))
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Question generation failed (q%d %s, role=%s): %s", question_number, difficulty, job_role, exc
            )
            offset = self._draw_offset() if fallback_offset is None else fallback_offset
            return fallback_question(job_role, difficulty, question_number, offset)

    async def generate_question_set(
        self,
        resume_context: str = "",
        job_role: str = "",
        company_name: str = "",
    ) -> List[Question]:
        """Generate all six questions concurrently, returned in asking order.

        Fallback questions share one offset so a tier never repeats a text.
        """

        offset = self._draw_offset()
        calls = [
            self.generate_question(difficulty, number, resume_context, job_role, company_name, offset)
            for number, difficulty in enumerate(QUESTION_PLAN, start=1)
        ]
        return list(await asyncio.gather(*calls))

    def _draw_offset(self) -> int:
        return self.rng.randrange(QUESTION_COUNT)

    async def evaluate_answer(self, question: str, answer: str) -> int:
        try:
            score = await self._bounded("evaluateAnswer", self.backend.evaluate_answer(question, answer))
            return max(0, min(10, int(score)))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Answer evaluation failed: %s", exc)
            return heuristic_score(answer)

    async def summarize_interview(self, transcript: Transcript) -> SummaryResult:
        try:
            return await self._bounded("summarizeInterview", self.backend.summarize_interview(transcript))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Interview summary failed: %s", exc)
            return fallback_summary(transcript.scores)


__all__ = ["AIGateway", "DEFAULT_TIMEOUT_S"]
