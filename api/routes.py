"""FastAPI routes for interview session control and completed records."""
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from api.schemas import AnswerReq, DraftReq, JobRoleReq, JobRolesResp, ProfileReq, RecordListResp, SessionResp
from config.settings import settings
from interview.backends import build_backend
from interview.gateway import AIGateway
from interview.prompts import known_roles
from interview.session import InterviewStateError, current_question, is_resumable
from interview.types import CandidateProfile, InterviewRecord
from services.sessions import InterviewController
from storage.records import InterviewRecordStore
from storage.report_pdf import generate_record_pdf
from storage.snapshots import SessionSnapshotStore, snapshot_path

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interview-sessions")
records_router = APIRouter(prefix="/api/interviews")
roles_router = APIRouter(prefix="/api/job-roles")


def default_gateway() -> AIGateway:
    return AIGateway(build_backend(settings), timeout_s=settings.AI_OVERALL_TIMEOUT_S)


class SessionRegistry:
    """Recently used controllers, keyed by browser client.

    At most ``max_clients`` controllers stay in memory; the least recently
    used one is evicted first. A client whose controller was evicted gets a
    new one rehydrated from its snapshot.
    """

    def __init__(
        self,
        gateway_factory: Callable[[], AIGateway] = default_gateway,
        max_clients: Optional[int] = None,
    ) -> None:
        self.gateway_factory = gateway_factory
        self.max_clients = max(1, max_clients if max_clients is not None else settings.SESSION_CACHE_SIZE)
        self._controllers: "OrderedDict[str, InterviewController]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._controllers

    def get(self, client_id: str) -> InterviewController:
        controller = self._controllers.get(client_id)
        if controller is not None:
            self._controllers.move_to_end(client_id)
            return controller
        controller = InterviewController(
            self.gateway_factory(),
            snapshots=SessionSnapshotStore(snapshot_path(settings.SNAPSHOT_DIR, client_id)),
            records=InterviewRecordStore(),
        )
        controller.load_resumable()
        self._controllers[client_id] = controller
        while len(self._controllers) > self.max_clients:
            evicted, _ = self._controllers.popitem(last=False)
            logger.info("Evicted idle session controller for client %s", evicted)
        return controller

    def forget(self, client_id: str) -> None:
        self._controllers.pop(client_id, None)


_registry: Optional[SessionRegistry] = None


def get_registry() -> SessionRegistry:
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


def get_record_store() -> InterviewRecordStore:
    return InterviewRecordStore()


def _view(controller: InterviewController) -> SessionResp:
    session = controller.session
    question = current_question(session)
    return SessionResp(
        session=session,
        current_question=question,
        question_number=session.current_question_index + 1 if question else None,
        in_flight=controller.in_flight,
        resumable=is_resumable(session),
    )


def _conflict(exc: InterviewStateError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(exc))


@router.get("/{client_id}", response_model=SessionResp)
def read_session(client_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResp:
    return _view(registry.get(client_id))


@router.get("/{client_id}/resume", response_model=SessionResp)
def read_resumable(client_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResp:
    controller = registry.get(client_id)
    if not is_resumable(controller.session):
        raise HTTPException(status_code=404, detail="No unfinished interview session")
    return _view(controller)


@router.put("/{client_id}/profile", response_model=SessionResp)
def update_profile(
    client_id: str,
    payload: ProfileReq,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResp:
    controller = registry.get(client_id)
    profile = CandidateProfile(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        company_name=payload.companyName,
        resume_text=payload.resumeText,
    )
    try:
        controller.set_candidate_info(profile)
    except InterviewStateError as exc:
        raise _conflict(exc) from exc
    return _view(controller)


@router.put("/{client_id}/job-role", response_model=SessionResp)
def update_job_role(
    client_id: str,
    payload: JobRoleReq,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResp:
    controller = registry.get(client_id)
    try:
        controller.set_job_role(payload.jobRole)
    except InterviewStateError as exc:
        raise _conflict(exc) from exc
    return _view(controller)


@router.post("/{client_id}/start", response_model=SessionResp)
async def start_session(client_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResp:
    controller = registry.get(client_id)
    try:
        await controller.start()
    except InterviewStateError as exc:
        raise _conflict(exc) from exc
    return _view(controller)


@router.post("/{client_id}/draft", response_model=SessionResp)
def save_draft(
    client_id: str,
    payload: DraftReq,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResp:
    controller = registry.get(client_id)
    controller.update_draft(payload.text)
    return _view(controller)


@router.post("/{client_id}/answer", response_model=SessionResp)
async def submit_answer(
    client_id: str,
    payload: AnswerReq,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResp:
    controller = registry.get(client_id)
    try:
        await controller.submit(payload.answer)
    except InterviewStateError as exc:
        raise _conflict(exc) from exc
    return _view(controller)


@router.post("/{client_id}/tick", response_model=SessionResp)
async def tick_session(client_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResp:
    controller = registry.get(client_id)
    await controller.tick()
    return _view(controller)


@router.post("/{client_id}/reset", response_model=SessionResp)
def reset_session(client_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResp:
    controller = registry.get(client_id)
    controller.reset()
    view = _view(controller)
    # The blank snapshot is enough to rebuild this client on its next request.
    registry.forget(client_id)
    return view


@records_router.get("", response_model=RecordListResp)
def list_records(
    search: Optional[str] = None,
    store: InterviewRecordStore = Depends(get_record_store),
) -> RecordListResp:  # Ranked by final score, filtered by name or email
    return RecordListResp(records=store.list_records(search=search))


@records_router.get("/{record_id}", response_model=InterviewRecord)
def read_record(record_id: str, store: InterviewRecordStore = Depends(get_record_store)) -> InterviewRecord:
    record = store.get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Interview record not found")
    return record


@records_router.get("/{record_id}/pdf")
def download_record_pdf(record_id: str, store: InterviewRecordStore = Depends(get_record_store)) -> Response:
    record = store.get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Interview record not found")
    stem = record.candidate_name or record_id
    safe = "".join(ch if ch.isascii() and (ch.isalnum() or ch in "-_") else "_" for ch in stem)
    filename = f"interview-{safe}.pdf"
    return Response(
        content=generate_record_pdf(record),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@roles_router.get("", response_model=JobRolesResp)
def list_job_roles() -> JobRolesResp:
    return JobRolesResp(roles=known_roles(), default=settings.DEFAULT_JOB_ROLE)
