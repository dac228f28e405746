"""Persistence: session snapshots, interview records and record exports."""
from .records import InterviewRecordStore
from .report_pdf import generate_record_pdf
from .snapshots import SNAPSHOT_VERSION, SessionSnapshotStore, snapshot_path

__all__ = [
    "InterviewRecordStore",
    "generate_record_pdf",
    "SNAPSHOT_VERSION",
    "SessionSnapshotStore",
    "snapshot_path",
]
