from __future__ import annotations

from datetime import datetime
from io import BytesIO

import fitz

from src.config.logger import get_logger
from src.parser.models import Condition, DiagnosisResult, Test, Treatment

logger = get_logger(__name__)

_TITLE_SIZE = 22
_SUBTITLE_SIZE = 11
_HEADING_SIZE = 14
_BODY_SIZE = 11
_LINE_HEIGHT = 18
_PAGE_WIDTH = 595
_PAGE_HEIGHT = 842
_MARGIN_X = 50
_MARGIN_TOP = 60
_MARGIN_BOTTOM = 60
_META_COLOR = (0.35, 0.35, 0.35)
_TEXT_COLOR = (0.1, 0.1, 0.1)
_RULE_COLOR = (0.75, 0.75, 0.75)
_WARNING_COLOR = (0.86, 0.15, 0.15)

UNICODE_FONT = "china-s"
REPORT_TITLE = "Diagnosis Report"
DISCLAIMER = (
    "Important Notice: This AI-powered analysis is not a substitute for professional "
    "medical advice. Always consult with a healthcare professional for proper diagnosis "
    "and treatment."
)


def confidence_label(condition: Condition) -> str:
    level = condition.confidence.level
    if condition.confidence.percentage is not None:
        return f"{level} ({condition.confidence.percentage}%)"
    return level


def _condition_lines(condition: Condition) -> list[str]:
    return [f"{condition.name} [{confidence_label(condition)}]", f"    {condition.reasoning}"]


def _test_lines(test: Test) -> list[str]:
    lines = [test.name]
    if test.purpose:
        lines.append(f"    Purpose: {test.purpose}")
    if test.urgency:
        lines.append(f"    Urgency: {test.urgency}")
    return lines


def _treatment_lines(treatment: Treatment) -> list[str]:
    lines = [treatment.action]
    if treatment.explanation:
        lines.append(f"    {treatment.explanation}")
    return lines


def build_sections(result: DiagnosisResult) -> list[tuple[str, list[list[str]]]]:
    """Report sections as (heading, items); each item is its wrapped lines."""
    sections: list[tuple[str, list[list[str]]]] = [
        ("Possible Conditions", [_condition_lines(c) for c in result.conditions]),
        ("Recommended Tests", [_test_lines(t) for t in result.tests]),
        ("Treatment Recommendations", [_treatment_lines(t) for t in result.treatments]),
    ]
    if result.warning_signs:
        sections.append(("When to See a Doctor", [[w] for w in result.warning_signs]))
    sections.append(("Medical Reasoning", [[r] for r in result.reasoning_tree]))
    return sections


def _draw_wrapped_text(
    page: fitz.Page,
    text: str,
    x: float,
    y: float,
    width: float,
    fontsize: int,
    fontname: str,
    *,
    align: int = 0,
    color: tuple[float, float, float] = _TEXT_COLOR,
) -> float:
    rect = fitz.Rect(x, y, x + width, _PAGE_HEIGHT - _MARGIN_BOTTOM)
    if _needs_unicode_font(text):
        fontname = _unicode_font(fontname)
    overflow = page.insert_textbox(
        rect,
        text,
        fontsize=fontsize,
        fontname=fontname,
        align=align,
        color=color,
    )
    used_height = (rect.height - overflow) if overflow >= 0 else rect.height
    return max(_LINE_HEIGHT, used_height)


def _needs_unicode_font(text: str) -> bool:
    return any(ord(ch) > 0xFF for ch in text)


def _pick_font(primary: str, probe: str, fallback: str) -> str:
    try:
        _ = fitz.get_text_length(probe, fontname=primary, fontsize=_BODY_SIZE)
        return primary
    except Exception:
        logger.warning("[report_pdf] font %s unavailable, fallback to %s", primary, fallback)
        return fallback


def _unicode_font(latin_font: str) -> str:
    # Base-14 fonts only encode Latin-1; arrows and CJK need the built-in CID font.
    try:
        _ = fitz.get_text_length("\u2192", fontname=UNICODE_FONT, fontsize=_BODY_SIZE)
        return UNICODE_FONT
    except Exception:
        logger.warning("[report_pdf] fallback to %s due to unavailable unicode font", latin_font)
        return latin_font


def build_diagnosis_pdf_bytes(
    result: DiagnosisResult,
    symptoms: str = "",
    session_id: str = "",
    generated_at: datetime | None = None,
) -> bytes:
    created_at = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M")
    report_no = (session_id or "").strip()[:8] or "N/A"

    heading_font = _pick_font("Times-Bold", "Heading", "helv")
    body_font = _pick_font("Times-Roman", "Body", "helv")
    meta_font = _pick_font("Helvetica", "Meta", body_font)

    doc = fitz.open()
    page = doc.new_page(width=_PAGE_WIDTH, height=_PAGE_HEIGHT)
    y = _MARGIN_TOP
    text_width = _PAGE_WIDTH - _MARGIN_X * 2

    def ensure_space(need: float) -> None:
        nonlocal page, y
        if y + need <= _PAGE_HEIGHT - _MARGIN_BOTTOM:
            return
        page = doc.new_page(width=_PAGE_WIDTH, height=_PAGE_HEIGHT)
        y = _MARGIN_TOP

    def rule(width: float) -> None:
        page.draw_line(
            fitz.Point(_MARGIN_X, y),
            fitz.Point(_PAGE_WIDTH - _MARGIN_X, y),
            color=_RULE_COLOR,
            width=width,
        )

    y += _draw_wrapped_text(page, REPORT_TITLE, _MARGIN_X, y, text_width, _TITLE_SIZE, heading_font)
    y += 10
    subtitle = f"Generated on: {created_at}    Report ID: {report_no}"
    y += _draw_wrapped_text(page, subtitle, _MARGIN_X, y, text_width, _SUBTITLE_SIZE, meta_font, color=_META_COLOR)
    y += 8
    rule(0.8)
    y += 14

    if symptoms.strip():
        ensure_space(60)
        y += _draw_wrapped_text(page, "Reported Symptoms", _MARGIN_X, y, text_width, _HEADING_SIZE, heading_font)
        y += 6
        y += _draw_wrapped_text(page, symptoms.strip(), _MARGIN_X, y, text_width, _BODY_SIZE, body_font)
        y += 16

    for heading, items in build_sections(result):
        color = _WARNING_COLOR if heading == "When to See a Doctor" else _TEXT_COLOR
        ensure_space(60)
        y += _draw_wrapped_text(page, heading, _MARGIN_X, y, text_width, _HEADING_SIZE, heading_font, color=color)
        y += 6
        rule(0.6)
        y += 6
        for lines in items:
            ensure_space(40)
            y += _draw_wrapped_text(
                page,
                "- " + "\n".join(lines),
                _MARGIN_X + 8,
                y,
                text_width - 8,
                _BODY_SIZE,
                body_font,
            )
        y += 12

    ensure_space(60)
    y += _draw_wrapped_text(page, DISCLAIMER, _MARGIN_X, y, text_width, 9, meta_font, color=_META_COLOR)

    for i, p in enumerate(doc, start=1):
        footer = f"Page {i} of {doc.page_count}"
        p.insert_textbox(
            fitz.Rect(_MARGIN_X, _PAGE_HEIGHT - 34, _PAGE_WIDTH - _MARGIN_X, _PAGE_HEIGHT - 18),
            footer,
            fontsize=9,
            fontname=meta_font,
            align=1,
            color=_META_COLOR,
        )

    buffer = BytesIO()
    doc.save(buffer)
    doc.close()
    return buffer.getvalue()
