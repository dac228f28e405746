"""Event-driven driver for one interview session.

The controller owns the current :class:`InterviewSession`, applies the pure
transitions from :mod:`interview.session` in response to user actions and
timer ticks, calls the AI gateway, and persists every change. Manual answers
and timer-forced answers share a single in-flight guard: while one submission
is being evaluated, the other is dropped. The guard belongs to the session
that raised it, so a reset releases it for the next interview.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from config.settings import settings
from interview import session as transitions
from interview.gateway import AIGateway
from interview.session import InterviewStateError
from interview.types import NO_ANSWER_TEXT, CandidateProfile, InterviewRecord, InterviewSession, SessionStatus
from observability import log_event, span
from storage.records import InterviewRecordStore
from storage.snapshots import SessionSnapshotStore

logger = logging.getLogger(__name__)


class InterviewController:
    def __init__(
        self,
        gateway: AIGateway,
        *,
        snapshots: Optional[SessionSnapshotStore] = None,
        records: Optional[InterviewRecordStore] = None,
        session: Optional[InterviewSession] = None,
        default_job_role: Optional[str] = None,
    ) -> None:
        self.gateway = gateway
        self.snapshots = snapshots
        self.records = records
        self.default_job_role = settings.DEFAULT_JOB_ROLE if default_job_role is None else default_job_role
        self._session = session or transitions.reset_interview(self.default_job_role)
        self._draft = ""
        self._in_flight_for: Optional[str] = None
        self._starting = False
        self.last_record: Optional[InterviewRecord] = None

    @property
    def session(self) -> InterviewSession:
        return self._session

    @property
    def in_flight(self) -> bool:
        """True while an answer for the current session is being scored."""

        return self._in_flight_for is not None and self._in_flight_for == self._session.session_id

    @property
    def draft(self) -> str:
        return self._draft

    # -- persistence -------------------------------------------------------

    def _commit(self, session: InterviewSession) -> InterviewSession:
        self._session = session
        if self.snapshots is None:
            return session
        try:
            self.snapshots.save(session)
        except OSError as exc:
            logger.warning("Session snapshot write failed for %s: %s", session.session_id, exc)
        return session

    def load_resumable(self) -> Optional[InterviewSession]:
        """Adopt an unfinished snapshot, if one exists."""

        if self.snapshots is None:
            return None
        stored = self.snapshots.load_resumable()
        if stored is None:
            return None
        self._session = stored
        self._draft = ""
        log_event("session_resumed", stored.session_id, question=stored.current_question_index + 1)
        return stored

    # -- profile -----------------------------------------------------------

    def set_candidate_info(self, profile: CandidateProfile) -> InterviewSession:
        session = transitions.set_candidate_info(self._session, profile)
        log_event("profile_updated", session.session_id, status=session.status.value)
        return self._commit(session)

    def set_job_role(self, role: str) -> InterviewSession:
        return self._commit(transitions.set_job_role(self._session, role))

    def update_draft(self, text: str) -> None:
        self._draft = text or ""

    # -- lifecycle ---------------------------------------------------------

    async def start(self) -> InterviewSession:
        """Generate the question set and begin the interview."""

        transitions.check_can_start(self._session)
        if self._starting:
            raise InterviewStateError("Interview is already starting.")
        self._starting = True
        try:
            candidate = self._session.candidate
            with span("generate_question_set", self._session.session_id):
                questions = await self.gateway.generate_question_set(
                    candidate.resume_text,
                    self._session.job_role,
                    candidate.company_name,
                )
            session = transitions.start_interview(self._session, questions, questions[0].time_limit)
        finally:
            self._starting = False
        self._draft = ""
        log_event("session_started", session.session_id, status=session.status.value, question=1)
        return self._commit(session)

    async def submit(self, answer: str) -> InterviewSession:
        """Submit the candidate's answer to the current question."""

        if not answer or not answer.strip():
            raise InterviewStateError("Please provide an answer before submitting!")
        if self._session.status != SessionStatus.ACTIVE:
            raise InterviewStateError("There is no active interview to answer.")
        return await self._process(answer, source="manual")

    async def tick(self) -> InterviewSession:
        """Advance the countdown; an expired timer forces a submission."""

        session = transitions.tick(self._session)
        if session is not self._session:
            self._commit(session)
        if not transitions.timer_expired(self._session):
            return self._session
        if self.in_flight:
            logger.info("Timer expired during an in-flight submission; forced submit suppressed")
            return self._session
        answer = self._draft.strip() or NO_ANSWER_TEXT
        return await self._process(answer, source="timeout")

    async def _process(self, answer: str, *, source: str) -> InterviewSession:
        if self.in_flight:
            logger.info("Submission (%s) dropped: another submission is in flight", source)
            return self._session
        session = self._session
        index = session.current_question_index
        if session.status != SessionStatus.ACTIVE or index in session.answers:
            return session

        self._in_flight_for = session.session_id
        try:
            question = session.questions[index]
            with span("evaluate_answer", session.session_id):
                score = await self.gateway.evaluate_answer(question.text, answer)
            if self._session.session_id != session.session_id:
                logger.info("Session %s was replaced while scoring; dropping answer", session.session_id)
                return self._session
            updated = transitions.submit_answer(self._session, index, answer, score)
            if updated is self._session:
                return updated
            self._draft = ""
            log_event("answer_submitted", updated.session_id, question=index + 1, score=score, source=source)
            self._commit(updated)
            if transitions.all_answered(updated):
                await self._finish()
            return self._session
        finally:
            if self._in_flight_for == session.session_id:
                self._in_flight_for = None

    async def _finish(self) -> None:
        session = self._session
        transcript = transitions.build_transcript(session)
        with span("summarize_interview", session.session_id):
            result = await self.gateway.summarize_interview(transcript)
        if self._session.session_id != session.session_id:
            return
        completed = transitions.complete_interview(self._session, result.final_score, result.summary)
        log_event(
            "session_completed",
            completed.session_id,
            status=completed.status.value,
            final_score=completed.final_score,
        )
        self._commit(completed)
        self._write_record(completed)

    def _write_record(self, session: InterviewSession) -> None:
        record = transitions.to_record(session)
        if self.records is None:
            self.last_record = record
            return
        try:
            self.last_record = self.records.insert_record(record, session_id=session.session_id)
        except sqlite3.Error as exc:
            logger.error("Interview record write failed for %s: %s", session.session_id, exc)
            self.last_record = record

    def reset(self) -> InterviewSession:
        previous = self._session.session_id
        self._draft = ""
        self.last_record = None
        log_event("session_reset", previous)
        return self._commit(transitions.reset_interview(self.default_job_role))


__all__ = ["InterviewController"]
