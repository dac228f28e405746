import os
import sys
import tempfile
from pathlib import Path

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import settings
from interview.types import SummaryResult, Transcript
from llm_gateway import LlmGatewayError
from storage.migrate import migrate


@pytest.fixture(autouse=True)
def tmp_storage(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    monkeypatch.setattr(settings, "SNAPSHOT_DIR", os.path.join(td.name, "snapshots"), raising=False)
    migrate(db_path)
    try:
        yield td.name
    finally:
        td.cleanup()


class FakeBackend:
    """Scriptable backend; ``fail`` makes every call raise a transport error."""

    def __init__(self, *, fail=False, score=8, summary=None, scores=None):
        self.fail = fail
        self.score = score
        self.scores = list(scores) if scores else None
        self.summary = summary or SummaryResult(final_score=88, summary="Strong candidate.")
        self.question_calls = []
        self.evaluate_calls = []
        self.summary_calls = []

    async def generate_question(self, difficulty, question_number, resume_context, job_role, company_name):
        self.question_calls.append((difficulty, question_number, job_role))
        if self.fail:
            raise LlmGatewayError("offline")
        return f"{job_role} {difficulty} question {question_number}"

    async def evaluate_answer(self, question, answer):
        self.evaluate_calls.append((question, answer))
        if self.fail:
            raise LlmGatewayError("offline")
        if self.scores:
            return self.scores.pop(0)
        return self.score

    async def summarize_interview(self, transcript: Transcript):
        self.summary_calls.append(transcript)
        if self.fail:
            raise LlmGatewayError("offline")
        return self.summary


@pytest.fixture
def fake_backend():
    return FakeBackend
