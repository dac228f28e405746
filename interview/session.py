"""Interview session transitions.

Each transition takes an :class:`InterviewSession` and returns a new one; the
input value is never mutated. Precondition failures raise
:class:`InterviewStateError` and leave the caller's session untouched.
Duplicate or out-of-turn answer submissions are ignored rather than raised so
a double click or a late timer event cannot break the interview.
"""
from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from interview.types import (
    QUESTION_COUNT,
    QUESTION_PLAN,
    CandidateProfile,
    InterviewRecord,
    InterviewSession,
    QAPair,
    Question,
    SessionStatus,
    Transcript,
)

logger = logging.getLogger(__name__)


class InterviewStateError(ValueError):
    """Raised when a transition's preconditions are not met."""


def new_session_id() -> str:
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def is_profile_complete(session: InterviewSession) -> bool:
    return session.candidate.is_complete()


def all_answered(session: InterviewSession) -> bool:
    return all(index in session.answers for index in range(QUESTION_COUNT))


def is_resumable(session: InterviewSession) -> bool:
    """True for a started interview that has not been completed."""

    return session.status == SessionStatus.ACTIVE and len(session.questions) == QUESTION_COUNT


def current_question(session: InterviewSession) -> Optional[Question]:
    if session.status != SessionStatus.ACTIVE or not session.questions:
        return None
    return session.questions[session.current_question_index]


def _profile_status(session: InterviewSession, profile: CandidateProfile) -> SessionStatus:
    if profile.is_complete():
        target = SessionStatus.READY_TO_START
    elif profile.has_any():
        target = SessionStatus.AWAITING_RESUME_UPLOAD
    else:
        target = SessionStatus.NOT_STARTED
    return target if target.rank > session.status.rank else session.status


def set_candidate_info(session: InterviewSession, profile: CandidateProfile) -> InterviewSession:
    """Merge non-empty profile fields into the session's candidate."""

    if session.status in (SessionStatus.ACTIVE, SessionStatus.COMPLETED):
        raise InterviewStateError("Candidate details cannot change once the interview has started.")
    merged = session.candidate.model_dump()
    for key, value in profile.model_dump().items():
        if isinstance(value, str) and value.strip():
            merged[key] = value
    candidate = CandidateProfile(**merged)
    return session.model_copy(
        update={"candidate": candidate, "status": _profile_status(session, candidate)},
        deep=True,
    )


def set_job_role(session: InterviewSession, role: str) -> InterviewSession:
    if session.status in (SessionStatus.ACTIVE, SessionStatus.COMPLETED):
        raise InterviewStateError("Job role cannot change once the interview has started.")
    if not role or not role.strip():
        raise InterviewStateError("Please select the job role you are interviewing for!")
    return session.model_copy(update={"job_role": role.strip()}, deep=True)


def check_can_start(session: InterviewSession) -> None:
    """Raise unless the session has everything needed to start."""

    if session.status in (SessionStatus.ACTIVE, SessionStatus.COMPLETED):
        raise InterviewStateError("Interview already started; reset it to begin a new one.")
    if not is_profile_complete(session):
        raise InterviewStateError("Please upload your resume and provide all required information first!")
    if not session.job_role:
        raise InterviewStateError("Please select the job role you are interviewing for!")


def start_interview(
    session: InterviewSession,
    questions: Sequence[Question],
    initial_time_limit: int,
    session_id: Optional[str] = None,
) -> InterviewSession:
    check_can_start(session)
    if len(questions) != QUESTION_COUNT:
        raise InterviewStateError(f"An interview needs exactly {QUESTION_COUNT} questions, got {len(questions)}.")
    if [question.difficulty for question in questions] != QUESTION_PLAN:
        raise InterviewStateError("Questions must be ordered easy, easy, medium, medium, hard, hard.")
    return session.model_copy(
        update={
            "session_id": session_id or new_session_id(),
            "questions": [question.model_copy() for question in questions],
            "current_question_index": 0,
            "answers": {},
            "scores": {},
            "time_remaining": max(0, int(initial_time_limit)),
            "status": SessionStatus.ACTIVE,
            "final_score": None,
            "summary": None,
        },
        deep=True,
    )


def tick(session: InterviewSession) -> InterviewSession:
    """Count the timer down by one second; never below zero."""

    if session.status != SessionStatus.ACTIVE:
        return session
    if session.current_question_index in session.answers:
        return session
    if session.time_remaining <= 0:
        return session
    return session.model_copy(update={"time_remaining": session.time_remaining - 1})


def timer_expired(session: InterviewSession) -> bool:
    return (
        session.status == SessionStatus.ACTIVE
        and session.time_remaining == 0
        and session.current_question_index not in session.answers
    )


def submit_answer(session: InterviewSession, index: int, answer: str, score: int) -> InterviewSession:
    """Record the answer for ``index`` and advance to the next question.

    Only the current, unanswered question of an active session is accepted;
    anything else returns ``session`` unchanged.
    """

    if session.status != SessionStatus.ACTIVE:
        logger.warning("Ignoring answer for q%d: session is %s", index, session.status.value)
        return session
    if index != session.current_question_index or index in session.answers:
        logger.warning(
            "Ignoring duplicate or out-of-turn answer for q%d (current=%d)",
            index,
            session.current_question_index,
        )
        return session

    answers = dict(session.answers)
    scores = dict(session.scores)
    answers[index] = answer
    scores[index] = max(0, min(10, int(score)))
    update = {"answers": answers, "scores": scores}
    if index < QUESTION_COUNT - 1:
        next_index = index + 1
        update["current_question_index"] = next_index
        update["time_remaining"] = session.questions[next_index].time_limit
    else:
        # Last answer: wait on the summary with the clock stopped.
        update["time_remaining"] = 0
    return session.model_copy(update=update, deep=True)


def complete_interview(session: InterviewSession, final_score: int, summary: str) -> InterviewSession:
    if session.status != SessionStatus.ACTIVE:
        raise InterviewStateError(f"Cannot complete an interview in status {session.status.value}.")
    if not all_answered(session):
        raise InterviewStateError("All questions must be answered before completing the interview.")
    return session.model_copy(
        update={
            "status": SessionStatus.COMPLETED,
            "final_score": max(0, min(100, int(final_score))),
            "summary": summary,
            "time_remaining": 0,
        },
        deep=True,
    )


def reset_interview(default_job_role: str = "") -> InterviewSession:
    return InterviewSession(job_role=default_job_role)


def build_transcript(session: InterviewSession) -> Transcript:
    qa: List[QAPair] = []
    scores: List[int] = []
    for index, question in enumerate(session.questions):
        if index not in session.answers:
            continue
        qa.append(QAPair(question=question.text, answer=session.answers[index]))
        scores.append(session.scores.get(index, 0))
    return Transcript(qa=qa, scores=scores)


def to_record(session: InterviewSession, completed_at: Optional[datetime] = None) -> InterviewRecord:
    if session.status != SessionStatus.COMPLETED:
        raise InterviewStateError("Only completed interviews produce a record.")
    stamp = completed_at or datetime.now(timezone.utc)
    candidate = session.candidate
    return InterviewRecord(
        candidate_name=candidate.name,
        candidate_email=candidate.email,
        candidate_phone=candidate.phone,
        company_name=candidate.company_name,
        job_role=session.job_role,
        questions=list(session.questions),
        answers=[session.answers[index] for index in range(QUESTION_COUNT)],
        scores=[session.scores[index] for index in range(QUESTION_COUNT)],
        final_score=session.final_score or 0,
        summary=session.summary or "",
        completed_at=stamp.isoformat(timespec="seconds"),
    )


__all__ = [
    "InterviewStateError",
    "new_session_id",
    "is_profile_complete",
    "all_answered",
    "is_resumable",
    "current_question",
    "set_candidate_info",
    "set_job_role",
    "check_can_start",
    "start_interview",
    "tick",
    "timer_expired",
    "submit_answer",
    "complete_interview",
    "reset_interview",
    "build_transcript",
    "to_record",
]
