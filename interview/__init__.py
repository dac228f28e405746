"""Interview session domain: types, prompts, parsing, fallbacks and transitions."""
from .backends import AIBackend, DirectBackend, ProxyBackend, build_backend
from .gateway import AIGateway
from .session import InterviewStateError
from .types import (
    NO_ANSWER_TEXT,
    QUESTION_COUNT,
    CandidateProfile,
    InterviewRecord,
    InterviewSession,
    Question,
    SessionStatus,
    SummaryResult,
    Transcript,
)

__all__ = [
    "AIBackend",
    "DirectBackend",
    "ProxyBackend",
    "build_backend",
    "AIGateway",
    "InterviewStateError",
    "NO_ANSWER_TEXT",
    "QUESTION_COUNT",
    "CandidateProfile",
    "InterviewRecord",
    "InterviewSession",
    "Question",
    "SessionStatus",
    "SummaryResult",
    "Transcript",
]
