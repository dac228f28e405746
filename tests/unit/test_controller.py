import asyncio
import os

import pytest

from interview import session as sm
from interview.gateway import AIGateway
from interview.session import InterviewStateError
from interview.types import NO_ANSWER_TEXT, CandidateProfile, SessionStatus
from services.sessions import InterviewController
from storage.records import InterviewRecordStore
from storage.snapshots import SessionSnapshotStore

PROFILE = CandidateProfile(
    name="Grace Hopper",
    email="grace@example.com",
    phone="555-0199",
    company_name="Navy Labs",
    resume_text="Compilers, COBOL, distributed teams.",
)


class GatedBackend:
    """Evaluation blocks until ``release`` is set."""

    def __init__(self, fake_backend, gated_answers=None):
        self.inner = fake_backend()
        self.release = asyncio.Event()
        self.evaluations = 0
        self.gated_answers = gated_answers

    async def generate_question(self, *args):
        return await self.inner.generate_question(*args)

    async def evaluate_answer(self, question, answer):
        self.evaluations += 1
        if self.gated_answers is None or answer in self.gated_answers:
            await self.release.wait()
        return 6

    async def summarize_interview(self, transcript):
        return await self.inner.summarize_interview(transcript)


def _controller(backend, tmp_storage, records=True):
    snapshots = SessionSnapshotStore(os.path.join(tmp_storage, "snapshots", "client.json"))
    return InterviewController(
        AIGateway(backend, timeout_s=5.0),
        snapshots=snapshots,
        records=InterviewRecordStore() if records else None,
        default_job_role="Backend Developer",
    )


def _prepared(controller):
    controller.set_candidate_info(PROFILE)
    controller.set_job_role("Backend Developer")
    return controller


def test_start_generates_questions_and_snapshots(fake_backend, tmp_storage):
    backend = fake_backend()
    controller = _prepared(_controller(backend, tmp_storage))
    session = asyncio.run(controller.start())
    assert session.status == SessionStatus.ACTIVE
    assert session.time_remaining == 20
    assert session.questions[0].text == "Backend Developer easy question 1"
    stored = controller.snapshots.load()
    assert stored == session


def test_start_without_profile_rejected(fake_backend, tmp_storage):
    controller = _controller(fake_backend(), tmp_storage)
    with pytest.raises(InterviewStateError):
        asyncio.run(controller.start())
    assert controller.session.status == SessionStatus.NOT_STARTED


def test_empty_answer_rejected(fake_backend, tmp_storage):
    controller = _prepared(_controller(fake_backend(), tmp_storage))
    asyncio.run(controller.start())
    with pytest.raises(InterviewStateError, match="provide an answer"):
        asyncio.run(controller.submit("   "))
    assert controller.session.answers == {}


def test_submit_before_start_rejected(fake_backend, tmp_storage):
    controller = _prepared(_controller(fake_backend(), tmp_storage))
    with pytest.raises(InterviewStateError):
        asyncio.run(controller.submit("an answer"))


def test_timeout_records_sentinel_once(fake_backend, tmp_storage):
    backend = fake_backend(score=3)
    controller = _prepared(_controller(backend, tmp_storage))

    async def scenario():
        await controller.start()
        for _ in range(20):
            await controller.tick()
        await controller.tick()

    asyncio.run(scenario())
    session = controller.session
    assert session.answers == {0: NO_ANSWER_TEXT}
    assert session.scores == {0: 3}
    assert session.current_question_index == 1
    assert session.time_remaining == 19
    assert len(backend.evaluate_calls) == 1


def test_timeout_submits_draft_when_present(fake_backend, tmp_storage):
    controller = _prepared(_controller(fake_backend(), tmp_storage))

    async def scenario():
        await controller.start()
        controller.update_draft("half-written answer")
        for _ in range(20):
            await controller.tick()

    asyncio.run(scenario())
    assert controller.session.answers == {0: "half-written answer"}
    assert controller.draft == ""


def test_timer_expiry_during_manual_submit_is_suppressed(fake_backend, tmp_storage):
    backend = GatedBackend(fake_backend)
    controller = _prepared(_controller(backend, tmp_storage))

    async def scenario():
        await controller.start()
        for _ in range(19):
            await controller.tick()
        assert controller.session.time_remaining == 1
        pending = asyncio.create_task(controller.submit("manual answer"))
        await asyncio.sleep(0)
        assert controller.in_flight
        await controller.tick()
        assert controller.session.time_remaining == 0
        await controller.submit("double click")
        backend.release.set()
        await pending

    asyncio.run(scenario())
    session = controller.session
    assert backend.evaluations == 1
    assert session.answers == {0: "manual answer"}
    assert session.current_question_index == 1
    assert session.time_remaining == 20
    assert not controller.in_flight


def test_full_session_with_summary_fallback(fake_backend, tmp_storage):
    backend = fake_backend(scores=[8, 7, 9, 6, 8, 7])

    async def no_summary(transcript):
        raise RuntimeError("summary service down")

    backend.summarize_interview = no_summary
    controller = _prepared(_controller(backend, tmp_storage))

    async def scenario():
        await controller.start()
        for index in range(6):
            await controller.submit(f"detailed answer number {index}")

    asyncio.run(scenario())
    session = controller.session
    assert session.status == SessionStatus.COMPLETED
    assert session.scores == {0: 8, 1: 7, 2: 9, 3: 6, 4: 8, 5: 7}
    assert session.final_score == 75
    assert session.summary.startswith("Good performance")
    assert not sm.is_resumable(session)

    record = controller.last_record
    assert record is not None and record.record_id
    stored = InterviewRecordStore().get_record(record.record_id)
    assert stored.final_score == 75
    assert stored.candidate_name == "Grace Hopper"
    assert stored.company_name == "Navy Labs"
    assert stored.answers[5] == "detailed answer number 5"


def test_submit_after_completion_rejected(fake_backend, tmp_storage):
    controller = _prepared(_controller(fake_backend(), tmp_storage, records=False))

    async def scenario():
        await controller.start()
        for index in range(6):
            await controller.submit(f"answer {index}")

    asyncio.run(scenario())
    assert controller.session.final_score == 88
    assert controller.last_record.record_id is None
    with pytest.raises(InterviewStateError):
        asyncio.run(controller.submit("late"))


def test_resume_from_snapshot(fake_backend, tmp_storage):
    first = _prepared(_controller(fake_backend(), tmp_storage))

    async def scenario():
        await first.start()
        await first.submit("answer one")
        await first.tick()

    asyncio.run(scenario())
    second = _controller(fake_backend(), tmp_storage)
    resumed = second.load_resumable()
    assert resumed == first.session
    assert second.session.current_question_index == 1
    assert second.session.time_remaining == 19


def test_completed_snapshot_is_not_resumed(fake_backend, tmp_storage):
    first = _prepared(_controller(fake_backend(), tmp_storage))

    async def scenario():
        await first.start()
        for index in range(6):
            await first.submit(f"answer {index}")

    asyncio.run(scenario())
    second = _controller(fake_backend(), tmp_storage)
    assert second.load_resumable() is None
    assert second.session.status == SessionStatus.NOT_STARTED


@pytest.mark.parametrize("stage", ["blank", "partial", "ready", "active", "completed"])
def test_reset_from_every_state(fake_backend, tmp_storage, stage):
    controller = _controller(fake_backend(), tmp_storage)

    async def advance():
        if stage == "partial":
            controller.set_candidate_info(CandidateProfile(name="Grace"))
        if stage in ("ready", "active", "completed"):
            _prepared(controller)
        if stage in ("active", "completed"):
            await controller.start()
        if stage == "completed":
            for index in range(6):
                await controller.submit(f"answer {index}")

    asyncio.run(advance())
    controller.update_draft("leftover")
    session = controller.reset()
    assert session.status == SessionStatus.NOT_STARTED
    assert session.candidate == CandidateProfile()
    assert session.job_role == "Backend Developer"
    assert session.questions == []
    assert controller.draft == ""
    assert controller.snapshots.load() == session


def test_stale_evaluation_after_reset_is_dropped(fake_backend, tmp_storage):
    backend = GatedBackend(fake_backend)
    controller = _prepared(_controller(backend, tmp_storage))

    async def scenario():
        await controller.start()
        pending = asyncio.create_task(controller.submit("answer"))
        await asyncio.sleep(0)
        controller.reset()
        backend.release.set()
        await pending

    asyncio.run(scenario())
    assert controller.session.status == SessionStatus.NOT_STARTED
    assert controller.session.answers == {}


def test_pending_evaluation_does_not_block_restarted_session(fake_backend, tmp_storage):
    backend = GatedBackend(fake_backend, gated_answers={"old session answer"})
    controller = _prepared(_controller(backend, tmp_storage))

    async def scenario():
        await controller.start()
        old_id = controller.session.session_id
        pending = asyncio.create_task(controller.submit("old session answer"))
        await asyncio.sleep(0)
        controller.reset()
        assert not controller.in_flight
        _prepared(controller)
        await controller.start()
        assert controller.session.session_id != old_id
        await controller.submit("new session answer")
        backend.release.set()
        await pending

    asyncio.run(scenario())
    session = controller.session
    assert session.answers == {0: "new session answer"}
    assert session.current_question_index == 1
    assert backend.evaluations == 2
    assert not controller.in_flight
