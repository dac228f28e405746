import asyncio
import random

import pytest

from interview.fallbacks import GENERIC_BANK, ROLE_BANKS
from interview.gateway import AIGateway
from interview.types import QUESTION_PLAN, QAPair, SummaryResult, Transcript


class SlowBackend:
    def __init__(self, delay):
        self.delay = delay

    async def generate_question(self, difficulty, question_number, resume_context, job_role, company_name):
        await asyncio.sleep(self.delay)
        return "late question"

    async def evaluate_answer(self, question, answer):
        await asyncio.sleep(self.delay)
        return 10

    async def summarize_interview(self, transcript):
        await asyncio.sleep(self.delay)
        return SummaryResult(final_score=99, summary="late")


class StaggeredBackend:
    """Later questions finish first."""

    async def generate_question(self, difficulty, question_number, resume_context, job_role, company_name):
        await asyncio.sleep(0.01 * (7 - question_number))
        return f"Q{question_number} ({difficulty})"


def test_question_set_follows_plan(fake_backend):
    backend = fake_backend()
    gateway = AIGateway(backend)
    questions = asyncio.run(gateway.generate_question_set("resume", "Backend Developer", "Acme"))
    assert [q.difficulty for q in questions] == QUESTION_PLAN
    assert [q.time_limit for q in questions] == [20, 20, 60, 60, 120, 120]
    assert questions[0].text == "Backend Developer easy question 1"
    assert len(backend.question_calls) == 6


def test_question_set_order_survives_out_of_order_completion():
    gateway = AIGateway(StaggeredBackend())
    questions = asyncio.run(gateway.generate_question_set(job_role="Data Scientist"))
    assert [q.text for q in questions] == [f"Q{n} ({d})" for n, d in enumerate(QUESTION_PLAN, start=1)]


def test_failed_questions_fall_back_to_role_bank(fake_backend):
    gateway = AIGateway(fake_backend(fail=True), rng=random.Random(0))
    questions = asyncio.run(gateway.generate_question_set(job_role="DevOps Engineer"))
    bank = ROLE_BANKS["DevOps Engineer"]
    assert [q.difficulty for q in questions] == QUESTION_PLAN
    for question in questions:
        assert question.text in bank[question.difficulty]


@pytest.mark.parametrize("role", ["Full-Stack Developer", "Data Analyst", "Astronaut"])
def test_offline_question_set_never_repeats(fake_backend, role):
    for seed in range(50):
        gateway = AIGateway(fake_backend(fail=True), rng=random.Random(seed))
        questions = asyncio.run(gateway.generate_question_set("", role, ""))
        assert len({q.text for q in questions}) == 6


def test_blank_question_text_falls_back(fake_backend):
    backend = fake_backend()

    async def blank(*_args):
        return "   "

    backend.generate_question = blank
    gateway = AIGateway(backend, rng=random.Random(0))
    question = asyncio.run(gateway.generate_question("medium", 3, job_role="Astronaut"))
    assert question.text in GENERIC_BANK["medium"]
    assert question.time_limit == 60


def test_evaluate_answer_failure_uses_heuristic(fake_backend):
    gateway = AIGateway(fake_backend(fail=True))
    assert asyncio.run(gateway.evaluate_answer("Q", "")) == 2
    assert asyncio.run(gateway.evaluate_answer("Q", "a" * 30)) == 5
    assert asyncio.run(gateway.evaluate_answer("Q", "a" * 80)) == 7


def test_evaluate_answer_clamps_backend_score(fake_backend):
    gateway = AIGateway(fake_backend(score=14))
    assert asyncio.run(gateway.evaluate_answer("Q", "answer")) == 10


def test_slow_backend_times_out_to_fallbacks():
    gateway = AIGateway(SlowBackend(delay=1.0), timeout_s=0.05, rng=random.Random(0))
    question = asyncio.run(gateway.generate_question("hard", 6, job_role="Frontend Developer"))
    assert question.text in ROLE_BANKS["Frontend Developer"]["hard"]
    assert asyncio.run(gateway.evaluate_answer("Q", "a" * 80)) == 7
    result = asyncio.run(gateway.summarize_interview(Transcript(scores=[5, 5])))
    assert result.final_score == 50


def test_summary_failure_uses_score_average(fake_backend):
    gateway = AIGateway(fake_backend(fail=True))
    transcript = Transcript(
        qa=[QAPair(question=f"Q{i}", answer="A") for i in range(6)],
        scores=[8, 7, 9, 6, 8, 7],
    )
    result = asyncio.run(gateway.summarize_interview(transcript))
    assert result.final_score == 75
    assert result.summary.startswith("Good performance")


def test_summary_success_passes_through(fake_backend):
    gateway = AIGateway(fake_backend())
    result = asyncio.run(gateway.summarize_interview(Transcript(scores=[1])))
    assert result == SummaryResult(final_score=88, summary="Strong candidate.")
