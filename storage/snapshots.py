"""Versioned session snapshots for resume-after-reload."""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from interview.session import is_resumable
from interview.types import InterviewSession

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SessionSnapshotStore:
    """Persist the whole session as one JSON document.

    Writes go to a temporary file that replaces the snapshot atomically, so a
    reader sees either the previous snapshot or the new one.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def save(self, session: InterviewSession) -> str:
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        document = {
            "version": SNAPSHOT_VERSION,
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "session": session.model_dump(mode="json"),
        }
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump(document, handle, ensure_ascii=False)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, self.path)
        return self.path

    def load(self) -> Optional[InterviewSession]:
        """Return the stored session, or None when missing or unreadable."""

        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                document = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable session snapshot %s: %s", self.path, exc)
            return None
        if not isinstance(document, dict) or document.get("version") != SNAPSHOT_VERSION:
            logger.warning("Discarding session snapshot %s with unsupported version", self.path)
            return None
        try:
            return InterviewSession.model_validate(document.get("session"))
        except ValidationError as exc:
            logger.warning("Invalid session snapshot %s: %s", self.path, exc)
            return None

    def load_resumable(self) -> Optional[InterviewSession]:
        session = self.load()
        if session is None or not is_resumable(session):
            return None
        return session


def snapshot_path(base_dir: str, client_id: str) -> str:
    safe = "".join(ch for ch in client_id if ch.isalnum() or ch in "-_") or "default"
    return os.path.join(base_dir, f"{safe}.json")


__all__ = ["SNAPSHOT_VERSION", "SessionSnapshotStore", "snapshot_path"]
