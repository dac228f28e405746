"""Transport strategies behind the AI gateway.

Both backends expose the same three coroutines. ``DirectBackend`` builds the
prompt locally, sends it through a :class:`~llm_gateway.TextCompletion` and
parses the raw text. ``ProxyBackend`` delegates prompt building and parsing to
the ``/api/gemini`` proxy and only validates the JSON it gets back. Which one
is used is decided once, by :func:`build_backend`.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from pydantic import BaseModel, ValidationError

from config import Settings, gemini_route, proxy_route
from interview.parsing import parse_final_summary, parse_score
from interview.prompts import build_evaluation_prompt, build_question_prompt, build_summary_prompt
from interview.types import Question, SummaryResult, Transcript
from llm_gateway import GeminiClient, HttpClient, LlmGatewayError, ProxyClient, TextCompletion


class AIBackend(Protocol):
    async def generate_question(
        self,
        difficulty: str,
        question_number: int,
        resume_context: str,
        job_role: str,
        company_name: str,
    ) -> str: ...

    async def evaluate_answer(self, question: str, answer: str) -> int: ...

    async def summarize_interview(self, transcript: Transcript) -> SummaryResult: ...


class DirectBackend:
    def __init__(self, completion: TextCompletion) -> None:
        self.completion = completion

    async def generate_question(
        self,
        difficulty: str,
        question_number: int,
        resume_context: str,
        job_role: str,
        company_name: str,
    ) -> str:
        prompt = build_question_prompt(job_role, difficulty, question_number, resume_context, company_name)
        text = await self.completion.generate(prompt)
        return text.strip()

    async def evaluate_answer(self, question: str, answer: str) -> int:
        text = await self.completion.generate(build_evaluation_prompt(question, answer))
        return parse_score(text)

    async def summarize_interview(self, transcript: Transcript) -> SummaryResult:
        text = await self.completion.generate(build_summary_prompt(transcript))
        return parse_final_summary(text)


class _QuestionReply(BaseModel):
    question: Question


class _ScoreReply(BaseModel):
    score: int


class _SummaryReply(BaseModel):
    finalScore: int
    summary: str


class ProxyBackend:
    def __init__(self, client: ProxyClient) -> None:
        self.client = client

    async def _call(self, action: str, fields: Dict[str, Any], schema: type[BaseModel]) -> Any:
        data = await self.client.post(action, fields)
        try:
            return schema.model_validate(data)
        except ValidationError as exc:
            raise LlmGatewayError(f"Proxy reply for {action} did not match schema") from exc

    async def generate_question(
        self,
        difficulty: str,
        question_number: int,
        resume_context: str,
        job_role: str,
        company_name: str,
    ) -> str:
        reply = await self._call(
            "generateQuestion",
            {
                "difficulty": difficulty,
                "questionNumber": question_number,
                "role": job_role,
                "resumeContext": resume_context,
                "companyName": company_name,
            },
            _QuestionReply,
        )
        return reply.question.text.strip()

    async def evaluate_answer(self, question: str, answer: str) -> int:
        reply = await self._call("evaluateAnswer", {"question": question, "answer": answer}, _ScoreReply)
        return max(0, min(10, reply.score))

    async def summarize_interview(self, transcript: Transcript) -> SummaryResult:
        reply = await self._call(
            "summarizeInterview",
            {"transcript": transcript.model_dump()},
            _SummaryReply,
        )
        return SummaryResult(final_score=max(0, min(100, reply.finalScore)), summary=reply.summary)


def build_backend(cfg: Settings, client: Optional[HttpClient] = None) -> AIBackend:
    """Select the transport for this deployment."""

    if cfg.AI_TRANSPORT == "direct":
        return DirectBackend(GeminiClient(gemini_route(cfg), client=client))
    return ProxyBackend(ProxyClient(proxy_route(cfg), client=client))


__all__ = ["AIBackend", "DirectBackend", "ProxyBackend", "build_backend"]
