"""Server-side proxy that keeps the model credential off the client."""
from __future__ import annotations

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException

from api.schemas import ProxyReq, QuestionResp, ScoreResp, SummaryResp
from config import gemini_route
from config.settings import settings
from interview.backends import DirectBackend
from interview.types import Question, time_limit_for
from llm_gateway import GeminiClient, TextCompletion

logger = logging.getLogger(__name__)

router = APIRouter()

ACTIONS = ("generateQuestion", "evaluateAnswer", "summarizeInterview")


def get_completion() -> Optional[TextCompletion]:
    """Model client built from the server-side key, or None when unset."""

    if not settings.GEMINI_API_KEY:
        return None
    return GeminiClient(gemini_route(settings))


@router.post("/api/gemini", response_model=Union[QuestionResp, ScoreResp, SummaryResp])
async def gemini_proxy(
    payload: ProxyReq,
    completion: Optional[TextCompletion] = Depends(get_completion),
) -> Union[QuestionResp, ScoreResp, SummaryResp]:  # Forward one interview action to the model
    if completion is None:
        raise HTTPException(status_code=500, detail="API key not configured")
    if payload.action not in ACTIONS:
        raise HTTPException(status_code=400, detail="Invalid action")

    backend = DirectBackend(completion)
    try:
        if payload.action == "generateQuestion":
            if payload.difficulty is None:
                raise HTTPException(status_code=400, detail="difficulty is required")
            text = await backend.generate_question(
                payload.difficulty,
                payload.questionNumber or 1,
                payload.resumeContext or "",
                payload.role or settings.DEFAULT_JOB_ROLE,
                payload.companyName or "",
            )
            if not text:
                raise ValueError("model returned an empty question")
            return QuestionResp(
                question=Question(
                    text=text,
                    difficulty=payload.difficulty,
                    time_limit=time_limit_for(payload.difficulty),
                )
            )
        if payload.action == "evaluateAnswer":
            score = await backend.evaluate_answer(payload.question or "", payload.answer or "")
            return ScoreResp(score=score)
        if payload.transcript is None:
            raise HTTPException(status_code=400, detail="transcript is required")
        result = await backend.summarize_interview(payload.transcript)
        return SummaryResp(finalScore=result.final_score, summary=result.summary)
    except HTTPException:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Model request failed for action %s", payload.action)
        raise HTTPException(status_code=500, detail="Failed to process request") from exc
