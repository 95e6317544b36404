"""
PDF Generator Service for inspection reports.

Renders one inspection into a PDF document. Output is deterministic:
reportlab runs in invariant mode and nothing time-dependent is printed,
so the same inspection data always yields the same bytes.
"""

import io
from datetime import datetime
from typing import Any, Dict, List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, HRFlowable, Flowable,
)

REPORT_HEADING = "Property Inspection Report"
DATE_PLACEHOLDER = "Not recorded"
SUMMARY_PLACEHOLDER = "No summary provided."
COMMENT_PLACEHOLDER = "No comment"


def plain(text: Any) -> str:
    """Escape text so reportlab's paragraph parser never sees markup."""
    return escape(str(text))


class PDFGenerator:
    """Generates inspection report PDFs."""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Add custom paragraph styles."""
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=22,
            spaceAfter=12,
            alignment=TA_CENTER,
            textColor=colors.HexColor('#1a1a2e'),
        ))
        self.styles.add(ParagraphStyle(
            name='Subtitle',
            parent=self.styles['Normal'],
            fontSize=12,
            spaceAfter=20,
            alignment=TA_CENTER,
            textColor=colors.HexColor('#666666'),
        ))
        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=14,
            spaceBefore=20,
            spaceAfter=10,
            textColor=colors.HexColor('#1a1a2e'),
        ))
        self.styles.add(ParagraphStyle(
            name='RoomHeader',
            parent=self.styles['Heading3'],
            fontSize=12,
            spaceBefore=12,
            spaceAfter=6,
            textColor=colors.HexColor('#1a1a2e'),
        ))
        self.styles.add(ParagraphStyle(
            name='PhotoLine',
            parent=self.styles['Normal'],
            fontSize=10,
            leftIndent=12,
            spaceAfter=2,
        ))
        self.styles.add(ParagraphStyle(
            name='HashCode',
            parent=self.styles['Normal'],
            fontSize=7,
            fontName='Courier',
            leftIndent=24,
            spaceAfter=6,
            textColor=colors.HexColor('#666666'),
        ))
        self.styles.add(ParagraphStyle(
            name='Footer',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.HexColor('#888888'),
            alignment=TA_CENTER,
            spaceBefore=20,
        ))

    def build_story(self, report: Dict[str, Any]) -> List[Flowable]:
        """
        Build the flowables of an inspection report, in contract order:
        heading and address, title and date, summary, then one section per room.

        Args:
            report: Report data as produced by the report compiler

        Returns:
            List of flowables
        """
        story: List[Flowable] = []

        # Title block
        story.append(Paragraph(REPORT_HEADING, self.styles['ReportTitle']))
        story.append(Paragraph(plain(report.get("address") or ""), self.styles['Subtitle']))

        # Inspection details
        story.append(Paragraph("INSPECTION", self.styles['SectionHeader']))
        story.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor('#e0e0e0')))
        details = [
            [Paragraph("Title:", self.styles['Normal']),
             Paragraph(plain(report.get("title") or ""), self.styles['Normal'])],
            [Paragraph("Date:", self.styles['Normal']),
             Paragraph(plain(self._format_date(report.get("inspection_date"))), self.styles['Normal'])],
        ]
        details_table = Table(details, colWidths=[1.5*inch, 5*inch])
        details_table.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ]))
        story.append(details_table)

        # Summary, verbatim
        story.append(Paragraph("SUMMARY", self.styles['SectionHeader']))
        story.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor('#e0e0e0')))
        summary = report.get("summary") or SUMMARY_PLACEHOLDER
        story.append(Paragraph(plain(summary).replace("\n", "<br/>"), self.styles['Normal']))

        # Rooms
        story.append(Paragraph("ROOMS", self.styles['SectionHeader']))
        story.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor('#e0e0e0')))
        rooms = report.get("rooms") or []
        if not rooms:
            story.append(Paragraph("No photos recorded.", self.styles['Normal']))
        for room in rooms:
            story.append(Paragraph(plain(room["room"]), self.styles['RoomHeader']))
            for photo in room["photos"]:
                comment = photo.get("comment") or COMMENT_PLACEHOLDER
                story.append(Paragraph(f"• {plain(comment)}", self.styles['PhotoLine']))
                story.append(Paragraph(f"evidence: {plain(photo['filename'])}", self.styles['HashCode']))

        story.append(Spacer(1, 0.25*inch))
        story.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor('#e0e0e0')))
        story.append(Paragraph(
            f"Inspection {plain(report.get('inspection_id', ''))} · "
            f"{sum(len(r['photos']) for r in rooms)} photo(s)",
            self.styles['Footer'],
        ))
        return story

    def generate_inspection_report(self, report: Dict[str, Any]) -> bytes:
        """
        Render an inspection report to PDF bytes.

        Args:
            report: Report data as produced by the report compiler

        Returns:
            PDF bytes
        """
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=0.75*inch,
            leftMargin=0.75*inch,
            topMargin=0.75*inch,
            bottomMargin=0.75*inch,
            title=f"{REPORT_HEADING}: {report.get('title') or ''}",
            invariant=1,
        )
        doc.build(self.build_story(report))
        return buffer.getvalue()

    def _format_date(self, dt: Any) -> str:
        """Format a date for display, with a placeholder when absent."""
        if dt is None or dt == "":
            return DATE_PLACEHOLDER
        if isinstance(dt, str):
            return dt[:19].replace("T", " ")
        if isinstance(dt, datetime):
            return dt.strftime("%Y-%m-%d %H:%M") if (dt.hour or dt.minute) else dt.strftime("%Y-%m-%d")
        if hasattr(dt, 'strftime'):
            return dt.strftime("%Y-%m-%d")
        return str(dt)


def get_pdf_generator() -> PDFGenerator:
    """Get PDF generator instance."""
    return PDFGenerator()
