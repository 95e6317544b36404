"""PDF rendering tests: section order, placeholders, escaping, determinism."""

from datetime import datetime

import pytest
from reportlab.platypus import Paragraph

from rentinspect.services.pdf_generator import (
    COMMENT_PLACEHOLDER,
    DATE_PLACEHOLDER,
    REPORT_HEADING,
    SUMMARY_PLACEHOLDER,
    PDFGenerator,
)


@pytest.fixture
def generator():
    return PDFGenerator()


@pytest.fixture
def report():
    return {
        "inspection_id": "0b5c7f1e-0000-4000-8000-000000000001",
        "address": "12 Harbour Street",
        "title": "Move-in",
        "inspection_date": datetime(2026, 3, 1),
        "summary": "Leak under <sink> & tub",
        "rooms": [
            {"room": "Bath", "photos": [{"comment": "c2", "filename": "2.jpg"}]},
            {"room": "Kitchen", "photos": [
                {"comment": "c1", "filename": "1.jpg"},
                {"comment": None, "filename": "3.jpg"},
            ]},
        ],
    }


def texts(story):
    return [f.getPlainText() for f in story if isinstance(f, Paragraph)]


def test_sections_follow_report_order(generator, report):
    lines = texts(generator.build_story(report))

    assert lines[0] == REPORT_HEADING
    assert lines[1] == "12 Harbour Street"
    order = [lines.index(s) for s in ("INSPECTION", "SUMMARY", "ROOMS", "Bath", "• c2", "Kitchen", "• c1")]
    assert order == sorted(order)
    assert lines.index("evidence: 1.jpg") < lines.index("evidence: 3.jpg")


def test_markup_in_user_text_is_rendered_literally(generator, report):
    report["rooms"][0]["room"] = "<b>Bath</b>"
    lines = texts(generator.build_story(report))

    assert "Leak under <sink> & tub" in lines
    assert "<b>Bath</b>" in lines


def test_placeholders_for_missing_fields(generator, report):
    report["summary"] = None
    report["rooms"] = []
    lines = texts(generator.build_story(report))

    assert SUMMARY_PLACEHOLDER in lines
    assert "No photos recorded." in lines
    assert generator._format_date(None) == DATE_PLACEHOLDER


def test_missing_comment_uses_placeholder(generator, report):
    lines = texts(generator.build_story(report))
    assert f"• {COMMENT_PLACEHOLDER}" in lines


def test_rendering_is_deterministic(generator, report):
    first = generator.generate_inspection_report(report)
    second = PDFGenerator().generate_inspection_report(report)

    assert first.startswith(b"%PDF")
    assert first == second
