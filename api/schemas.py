"""Pydantic schemas for the interview practice API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from interview.types import Difficulty, InterviewRecord, InterviewSession, Question, Transcript


class ProxyReq(BaseModel):  # Body accepted by the /api/gemini proxy
    action: str
    difficulty: Optional[Difficulty] = None
    questionNumber: Optional[int] = Field(default=None, ge=1)
    role: Optional[str] = None
    resumeContext: Optional[str] = None
    companyName: Optional[str] = None
    question: Optional[str] = None
    answer: Optional[str] = None
    transcript: Optional[Transcript] = None


class QuestionResp(BaseModel):
    question: Question


class ScoreResp(BaseModel):
    score: int


class SummaryResp(BaseModel):
    finalScore: int
    summary: str


class ProfileReq(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    companyName: str = ""
    resumeText: str = ""


class JobRoleReq(BaseModel):
    jobRole: str


class AnswerReq(BaseModel):
    answer: str


class DraftReq(BaseModel):
    text: str = ""


class SessionResp(BaseModel):
    session: InterviewSession
    current_question: Optional[Question] = None
    question_number: Optional[int] = None
    in_flight: bool = False
    resumable: bool = False


class RecordListResp(BaseModel):
    records: List[InterviewRecord] = Field(default_factory=list)


class JobRolesResp(BaseModel):
    roles: List[str]
    default: str
