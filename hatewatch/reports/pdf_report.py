"""PDF report encoder built on ReportLab's platypus layout engine."""

from __future__ import annotations

import html
import io
from typing import List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..models import ReportContent
from .base import ReportEncoder, ReportFormat

TEXT_PREVIEW_LENGTH = 50
HEADER_FILL = colors.Color(66 / 255, 139 / 255, 202 / 255)
RESULT_COLUMN_WIDTHS = [75 * mm, 35 * mm, 25 * mm, 45 * mm]
SUMMARY_COLUMN_WIDTHS = [90 * mm, 90 * mm]
MARGIN = 15 * mm


def truncate_text(text: str, limit: int = TEXT_PREVIEW_LENGTH) -> str:
    """Cut ``text`` to ``limit`` characters, appending ``...`` when shortened."""

    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def _grid_style() -> TableStyle:
    return TableStyle(
        [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("ALIGN", (0, 0), (-1, -1), "LEFT"),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("LEFTPADDING", (0, 0), (-1, -1), 4),
            ("RIGHTPADDING", (0, 0), (-1, -1), 4),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ]
    )


def _page_footer(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.drawRightString(A4[0] - MARGIN, 10 * mm, f"Page {doc.page}")
    canvas.restoreState()


class PdfReportEncoder(ReportEncoder):
    """Title, metadata lines, a summary table and a detailed results table.

    Both tables are flowables, so each one starts where the previous element
    ended and long result tables break across pages with the header repeated.
    """

    format = ReportFormat.PDF
    mime_type = "application/pdf"
    extension = "pdf"

    def __init__(self) -> None:
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "ReportTitle", parent=styles["Heading1"], fontSize=20, spaceAfter=12
        )
        self.heading_style = ParagraphStyle(
            "ReportHeading", parent=styles["Heading2"], fontSize=14, spaceBefore=12, spaceAfter=6
        )
        self.meta_style = ParagraphStyle(
            "ReportMeta", parent=styles["Normal"], fontSize=10, spaceAfter=2
        )
        self.cell_style = ParagraphStyle(
            "ReportCell", parent=styles["Normal"], fontSize=9, leading=11
        )

    def _cell(self, value: str) -> Paragraph:
        return Paragraph(html.escape(value), self.cell_style)

    def _summary_table(self, content: ReportContent) -> Table:
        summary = content.summary
        rows = [
            ["Metric", "Value"],
            ["Total Analyzed", str(summary.total_analyzed)],
            ["Average Confidence", summary.average_confidence],
            ["Neutral", summary.distribution.neutral],
            ["Offensive", summary.distribution.offensive],
            ["Hate Speech", summary.distribution.hate],
        ]
        table = Table(rows, colWidths=SUMMARY_COLUMN_WIDTHS, hAlign="LEFT")
        table.setStyle(_grid_style())
        return table

    def _results_table(self, content: ReportContent) -> Table:
        rows: List[list] = [["Text", "Classification", "Confidence", "Timestamp"]]
        for row in content.results:
            rows.append(
                [
                    self._cell(truncate_text(row.text)),
                    self._cell(row.classification),
                    self._cell(row.confidence),
                    self._cell(row.timestamp),
                ]
            )
        table = Table(rows, colWidths=RESULT_COLUMN_WIDTHS, repeatRows=1, hAlign="LEFT")
        table.setStyle(_grid_style())
        return table

    def encode(self, content: ReportContent) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=20 * mm,
            title=content.title,
        )

        story = [
            Paragraph(html.escape(content.title), self.title_style),
            Paragraph(f"Generated: {html.escape(content.generated_at)}", self.meta_style),
            Paragraph(
                f"Date Range: {html.escape(content.date_range.start)} - "
                f"{html.escape(content.date_range.end)}",
                self.meta_style,
            ),
            Paragraph(
                f"Confidence Threshold: {html.escape(content.confidence_threshold)}",
                self.meta_style,
            ),
            Paragraph("Summary", self.heading_style),
            self._summary_table(content),
            Spacer(1, 6 * mm),
            Paragraph("Detailed Results", self.heading_style),
            self._results_table(content),
        ]
        if not content.results:
            story.append(Spacer(1, 3 * mm))
            story.append(Paragraph("No results matched the selected filters.", self.meta_style))

        doc.build(story, onFirstPage=_page_footer, onLaterPages=_page_footer)
        return buffer.getvalue()


__all__ = ["PdfReportEncoder", "TEXT_PREVIEW_LENGTH", "truncate_text"]
