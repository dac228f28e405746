"""Lightweight CLI helpers for inspecting completed interview records."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from storage.records import InterviewRecordStore
from storage.report_pdf import generate_record_pdf, score_band


def list_records(search: Optional[str] = None, limit: int = 20) -> None:
    store = InterviewRecordStore()
    for rank, record in enumerate(store.list_records(search=search, limit=limit), start=1):
        print(
            f"#{rank:<3} {record.final_score:>3}/100 {score_band(record.final_score):<18} "
            f"{record.candidate_name} <{record.candidate_email}> {record.job_role} "
            f"[{record.completed_at}] id={record.record_id}"
        )


def export_pdf(record_id: str, output: Path) -> bool:
    store = InterviewRecordStore()
    record = store.get_record(record_id)
    if record is None:
        print(f"No interview record with id {record_id}")
        return False
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(generate_record_pdf(record))
    print(f"Wrote {output}")
    return True


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect completed interview records")
    parser.add_argument("--list", type=int, metavar="N", help="Show the top N records by final score")
    parser.add_argument("--search", help="Filter by candidate name or email")
    parser.add_argument("--export", metavar="RECORD_ID", help="Export one record as PDF")
    parser.add_argument("--output", type=Path, default=Path("interview-report.pdf"), help="PDF output path")
    args = parser.parse_args(argv)

    if args.list or args.search:
        list_records(args.search, args.list or 20)
    if args.export:
        return 0 if export_pdf(args.export, args.output) else 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
