from __future__ import annotations  # PDF rendering for completed interview records

import os
from datetime import datetime
from typing import Any, List, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from interview.types import InterviewRecord

DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color

DIFFICULTY_COLORS = {
    "easy": (46, 160, 67),
    "medium": (230, 140, 20),
    "hard": (210, 50, 50),
}


def _format_datetime(value: str | None) -> str:  # Format ISO timestamp for display
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(value[:-1] + "+00:00" if value.endswith("Z") else value)
    except ValueError:
        return value
    return parsed.strftime("%d %b %Y, %I:%M %p").lstrip("0").replace(" 0", " ")


def score_band(final_score: int) -> str:  # Dashboard label for a final score
    if final_score >= 80:
        return "Excellent"
    if final_score >= 60:
        return "Good"
    if final_score >= 40:
        return "Average"
    return "Below expectations"


class RecordPDF(FPDF):  # PDF with header banner and page footer
    def __init__(self, title: str) -> None:
        super().__init__()
        self.header_title = title
        self._font_regular = "Helvetica"
        self._font_bold = "Helvetica"
        self._supports_unicode = False

    def use_unicode_font(self) -> None:  # Register DejaVu when the system has it
        if not (os.path.exists(DEJAVU_SANS) and os.path.exists(DEJAVU_SANS_BOLD)):
            return
        self.add_font("DejaVu", "", DEJAVU_SANS)
        self.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        self._font_regular = "DejaVu"
        self._font_bold = "DejaVu"
        self._supports_unicode = True

    def prepare_text(self, text: Any) -> str:  # Sanitize text for non-unicode fonts
        value = "" if text is None else str(text)
        if self._supports_unicode:
            return value
        return value.encode("latin-1", "replace").decode("latin-1")

    def header(self) -> None:
        if self.page_no() != 1:
            return
        self.set_fill_color(*ACCENT)
        self.rect(0, 0, self.w, 20, style="F")
        self.set_text_color(255, 255, 255)
        self.set_font(self._font_bold, "B", 15)
        self.set_xy(self.l_margin, 6)
        self.cell(0, 8, self.prepare_text(self.header_title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_text_color(*TEXT)
        self.ln(8)

    def footer(self) -> None:
        self.set_y(-12)
        self.set_font(self._font_regular, "", 8)
        self.set_text_color(*MUTED)
        self.cell(0, 6, f"Page {self.page_no()}/{{nb}}", align="C")


def _effective_width(pdf: FPDF) -> float:
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


def _section_title(pdf: RecordPDF, title: str) -> None:
    pdf.set_text_color(*TEXT)
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf._font_bold, "B", 13)
    pdf.cell(0, 9, pdf.prepare_text(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)


def _meta_rows(pdf: RecordPDF, rows: List[Tuple[str, str]]) -> None:
    label_width = 40
    for label, value in rows:
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf._font_regular, "", 10)
        pdf.cell(label_width, 6, pdf.prepare_text(label), new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf._font_bold, "B", 10)
        pdf.cell(0, 6, pdf.prepare_text(value or "-"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


def generate_record_pdf(record: InterviewRecord) -> bytes:  # Build PDF payload for one record
    pdf = RecordPDF(f"{record.job_role} Interview - {record.candidate_name}")
    pdf.use_unicode_font()
    pdf.alias_nb_pages()
    pdf.set_margins(15, 22, 15)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()
    width = _effective_width(pdf)

    _section_title(pdf, "Candidate")
    _meta_rows(
        pdf,
        [
            ("Name", record.candidate_name),
            ("Email", record.candidate_email),
            ("Phone", record.candidate_phone),
            ("Company", record.company_name),
            ("Role", record.job_role),
            ("Completed", _format_datetime(record.completed_at)),
        ],
    )

    _section_title(pdf, "Result")
    pdf.set_font(pdf._font_bold, "B", 22)
    pdf.set_text_color(*ACCENT)
    pdf.cell(0, 12, f"{record.final_score}/100", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(pdf._font_regular, "", 10)
    pdf.set_text_color(*MUTED)
    pdf.cell(0, 6, score_band(record.final_score), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf._font_regular, "", 11)
    pdf.multi_cell(width, 6, pdf.prepare_text(record.summary), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(3)

    _section_title(pdf, "Questions")
    for index, question in enumerate(record.questions):
        answer = record.answers[index] if index < len(record.answers) else ""
        score = record.scores[index] if index < len(record.scores) else None
        pdf.set_x(pdf.l_margin)
        pdf.set_font(pdf._font_bold, "B", 10)
        pdf.set_text_color(*DIFFICULTY_COLORS.get(question.difficulty, MUTED))
        label = f"Q{index + 1} - {question.difficulty.upper()} ({question.time_limit}s)"
        if score is not None:
            label += f" - {score}/10"
        pdf.cell(0, 6, label, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf._font_bold, "B", 11)
        pdf.multi_cell(width, 6, pdf.prepare_text(question.text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font(pdf._font_regular, "", 10)
        pdf.set_text_color(*MUTED)
        pdf.multi_cell(width, 5, pdf.prepare_text(answer or "-"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(3)

    return bytes(pdf.output())


__all__ = ["generate_record_pdf", "score_band"]
