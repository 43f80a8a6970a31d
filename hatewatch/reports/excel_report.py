"""Excel workbook report encoder."""

from __future__ import annotations

import io
from typing import List, Tuple

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from ..models import ReportContent
from .base import ReportEncoder, ReportFormat

SUMMARY_SHEET = "Summary"
RESULTS_SHEET = "Detailed Results"
RESULT_COLUMNS = ["Text", "Classification", "Confidence", "Timestamp"]


def clean_cell(value: object) -> object:
    """Drop control characters that worksheets cannot store."""

    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _force_text(worksheet) -> None:
    # openpyxl reads strings starting with "=" as formulas; keep them literal.
    for row in worksheet.iter_rows(min_row=2):
        for cell in row:
            if isinstance(cell.value, str):
                cell.data_type = "s"


def summary_pairs(content: ReportContent) -> List[Tuple[str, object]]:
    summary = content.summary
    return [
        ("Title", content.title),
        ("Generated", content.generated_at),
        ("Date Range Start", content.date_range.start),
        ("Date Range End", content.date_range.end),
        ("Confidence Threshold", content.confidence_threshold),
        ("Total Analyzed", summary.total_analyzed),
        ("Average Confidence", summary.average_confidence),
        ("Neutral", summary.distribution.neutral),
        ("Offensive", summary.distribution.offensive),
        ("Hate Speech", summary.distribution.hate),
        ("Visualizations", ", ".join(content.visualizations)),
    ]


class ExcelReportEncoder(ReportEncoder):
    """Two-sheet workbook: label/value summary and one row per result."""

    format = ReportFormat.EXCEL
    mime_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    extension = "xlsx"

    def encode(self, content: ReportContent) -> bytes:
        summary_df = pd.DataFrame(
            [(label, clean_cell(value)) for label, value in summary_pairs(content)],
            columns=["Metric", "Value"],
        )
        results_df = pd.DataFrame(
            [
                [
                    clean_cell(row.text),
                    row.classification,
                    row.confidence,
                    clean_cell(row.timestamp),
                ]
                for row in content.results
            ],
            columns=RESULT_COLUMNS,
        )

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            summary_df.to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)
            results_df.to_excel(writer, sheet_name=RESULTS_SHEET, index=False)
            for worksheet in writer.sheets.values():
                _force_text(worksheet)
        return buffer.getvalue()


__all__ = [
    "ExcelReportEncoder",
    "RESULTS_SHEET",
    "RESULT_COLUMNS",
    "SUMMARY_SHEET",
    "clean_cell",
    "summary_pairs",
]
