from __future__ import annotations  # Completed interview record storage

import json
import sqlite3
from typing import List, Optional
from uuid import uuid4

from interview.types import InterviewRecord, Question

from .migrate import migrate
from .sqlite import get_conn


class InterviewRecordStore:  # SQLite-backed storage of completed interviews
    def __init__(self, db_path: Optional[str] = None) -> None:  # Initialize store and schema
        self._db_path = db_path
        migrate(db_path)

    def insert_record(self, record: InterviewRecord, *, session_id: Optional[str] = None) -> InterviewRecord:  # Persist a record
        record_id = record.record_id or uuid4().hex
        with get_conn(self._db_path) as conn:
            conn.execute(
                """
                INSERT INTO interview_records (
                    record_id, session_id, candidate_name, candidate_email, candidate_phone,
                    company_name, job_role, questions_json, answers_json, scores_json,
                    final_score, summary, completed_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record_id,
                    session_id,
                    record.candidate_name,
                    record.candidate_email,
                    record.candidate_phone,
                    record.company_name,
                    record.job_role,
                    json.dumps([question.model_dump(by_alias=True) for question in record.questions]),
                    json.dumps(record.answers),
                    json.dumps(record.scores),
                    record.final_score,
                    record.summary,
                    record.completed_at,
                ),
            )
        return record.model_copy(update={"record_id": record_id})

    def list_records(self, search: Optional[str] = None, limit: Optional[int] = None) -> List[InterviewRecord]:  # Rank by final score
        query = """
            SELECT * FROM interview_records
        """
        params: list = []
        term = (search or "").strip().lower()
        if term:
            query += " WHERE instr(lower(candidate_name), ?) > 0 OR instr(lower(candidate_email), ?) > 0"
            params.extend([term, term])
        query += " ORDER BY final_score DESC, completed_at ASC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(int(limit))
        with get_conn(self._db_path) as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_record(row) for row in rows]

    def get_record(self, record_id: str) -> Optional[InterviewRecord]:  # Fetch one record
        with get_conn(self._db_path) as conn:
            row = conn.execute(
                "SELECT * FROM interview_records WHERE record_id = ?",
                (record_id,),
            ).fetchone()
        return _row_to_record(row) if row else None


def _row_to_record(row: sqlite3.Row) -> InterviewRecord:  # Map a table row to the model
    return InterviewRecord(
        record_id=row["record_id"],
        candidate_name=row["candidate_name"],
        candidate_email=row["candidate_email"],
        candidate_phone=row["candidate_phone"],
        company_name=row["company_name"],
        job_role=row["job_role"],
        questions=[Question.model_validate(item) for item in json.loads(row["questions_json"])],
        answers=json.loads(row["answers_json"]),
        scores=json.loads(row["scores_json"]),
        final_score=row["final_score"],
        summary=row["summary"],
        completed_at=row["completed_at"],
    )


__all__ = ["InterviewRecordStore"]
