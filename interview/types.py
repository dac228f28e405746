"""Shared type definitions for interview sessions."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Difficulty = Literal["easy", "medium", "hard"]

TIME_LIMITS: Dict[str, int] = {"easy": 20, "medium": 60, "hard": 120}

# Two per tier, in asking order.
QUESTION_PLAN: List[Difficulty] = ["easy", "easy", "medium", "medium", "hard", "hard"]
QUESTION_COUNT = len(QUESTION_PLAN)

NO_ANSWER_TEXT = "No answer provided (time expired)"


def time_limit_for(difficulty: str) -> int:
    return TIME_LIMITS[difficulty]


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_RESUME_UPLOAD = "awaiting_resume_upload"
    READY_TO_START = "ready_to_start"
    ACTIVE = "active"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = list(SessionStatus)


class CandidateProfile(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    company_name: str = ""
    resume_text: str = ""

    def is_complete(self) -> bool:
        return bool(self.name.strip() and self.email.strip() and self.phone.strip())

    def has_any(self) -> bool:
        return any(value.strip() for value in self.model_dump().values())


class Question(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    difficulty: Difficulty
    time_limit: int = Field(alias="timeLimit", ge=0)


class QAPair(BaseModel):
    question: str
    answer: str


class Transcript(BaseModel):
    qa: List[QAPair] = Field(default_factory=list)
    scores: List[int] = Field(default_factory=list)


class SummaryResult(BaseModel):
    final_score: int = Field(ge=0, le=100)
    summary: str


class InterviewSession(BaseModel):
    """Serializable state of one candidate attempt."""

    session_id: Optional[str] = None
    candidate: CandidateProfile = Field(default_factory=CandidateProfile)
    job_role: str = ""
    questions: List[Question] = Field(default_factory=list)
    current_question_index: int = Field(default=0, ge=0, lt=QUESTION_COUNT)
    answers: Dict[int, str] = Field(default_factory=dict)
    scores: Dict[int, int] = Field(default_factory=dict)
    time_remaining: int = Field(default=0, ge=0)
    status: SessionStatus = SessionStatus.NOT_STARTED
    final_score: Optional[int] = Field(default=None, ge=0, le=100)
    summary: Optional[str] = None


class InterviewRecord(BaseModel):
    """Completed interview as stored for the dashboard."""

    record_id: Optional[str] = None
    candidate_name: str
    candidate_email: str
    candidate_phone: str
    company_name: str = ""
    job_role: str
    questions: List[Question]
    answers: List[str]
    scores: List[int]
    final_score: int
    summary: str
    completed_at: str


__all__ = [
    "Difficulty",
    "TIME_LIMITS",
    "QUESTION_PLAN",
    "QUESTION_COUNT",
    "NO_ANSWER_TEXT",
    "time_limit_for",
    "SessionStatus",
    "CandidateProfile",
    "Question",
    "QAPair",
    "Transcript",
    "SummaryResult",
    "InterviewSession",
    "InterviewRecord",
]
