import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.proxy import get_completion, router
from llm_gateway import LlmGatewayError


class ScriptedCompletion:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


app = FastAPI()
app.include_router(router)
client = TestClient(app)


@pytest.fixture
def completion():
    scripted = ScriptedCompletion()
    app.dependency_overrides[get_completion] = lambda: scripted
    try:
        yield scripted
    finally:
        app.dependency_overrides.clear()


def test_get_not_allowed():
    assert client.get("/api/gemini").status_code == 405


def test_missing_key_is_server_error(monkeypatch):
    from config.settings import settings

    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
    resp = client.post("/api/gemini", json={"action": "evaluateAnswer", "question": "Q", "answer": "A"})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "API key not configured"


def test_unknown_action_rejected(completion):
    resp = client.post("/api/gemini", json={"action": "writePoem"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid action"
    assert completion.prompts == []


def test_generate_question(completion):
    completion.reply = "How would you shard a users table?"
    resp = client.post(
        "/api/gemini",
        json={
            "action": "generateQuestion",
            "difficulty": "hard",
            "questionNumber": 5,
            "role": "Backend Developer",
            "resumeContext": "Postgres at scale",
            "companyName": "Acme",
        },
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "question": {"text": "How would you shard a users table?", "difficulty": "hard", "timeLimit": 120}
    }
    assert "Postgres at scale" in completion.prompts[0]
    assert "question 5/6" in completion.prompts[0]


def test_generate_question_requires_difficulty(completion):
    resp = client.post("/api/gemini", json={"action": "generateQuestion"})
    assert resp.status_code == 400


def test_evaluate_answer(completion):
    completion.reply = "Score: 7/10. Good coverage."
    resp = client.post("/api/gemini", json={"action": "evaluateAnswer", "question": "Q", "answer": "A"})
    assert resp.status_code == 200
    assert resp.json() == {"score": 7}


def test_summarize_interview(completion):
    completion.reply = "Final Score: 82\nConfident and precise."
    resp = client.post(
        "/api/gemini",
        json={
            "action": "summarizeInterview",
            "transcript": {"qa": [{"question": "Q", "answer": "A"}], "scores": [8]},
        },
    )
    assert resp.status_code == 200
    assert resp.json() == {"finalScore": 82, "summary": "Confident and precise."}


def test_model_failure_is_generic_server_error(completion):
    completion.error = LlmGatewayError("LLM returned status 503")
    resp = client.post("/api/gemini", json={"action": "evaluateAnswer", "question": "Q", "answer": "A"})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to process request"
