"""CSV report encoder."""

from __future__ import annotations

from ..models import ReportContent, ReportRow
from .base import ReportEncoder, ReportFormat

HEADERS = ("Text", "Classification", "Confidence", "Timestamp")


def quote_field(value: str) -> str:
    """Wrap ``value`` in double quotes, doubling any embedded quotes."""

    return '"' + value.replace('"', '""') + '"'


def _row(row: ReportRow) -> str:
    return ",".join((quote_field(row.text), row.classification, row.confidence, row.timestamp))


class CsvReportEncoder(ReportEncoder):
    """One line per filtered result; only the free-text column is quoted."""

    format = ReportFormat.CSV
    mime_type = "text/csv;charset=utf-8;"
    extension = "csv"

    def encode(self, content: ReportContent) -> bytes:
        lines = [",".join(HEADERS)]
        lines.extend(_row(row) for row in content.results)
        return "\n".join(lines).encode("utf-8")


__all__ = ["CsvReportEncoder", "HEADERS", "quote_field"]
