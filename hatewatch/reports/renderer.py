"""Format dispatch: one registered encoder per :class:`ReportFormat`."""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Union

from ..models import ReportContent
from .base import RenderedReport, ReportEncoder, ReportFormat, UnsupportedFormatError
from .csv_report import CsvReportEncoder
from .excel_report import ExcelReportEncoder
from .json_report import JsonReportEncoder
from .pdf_report import PdfReportEncoder

ENCODERS: Dict[ReportFormat, ReportEncoder] = {
    ReportFormat.PDF: PdfReportEncoder(),
    ReportFormat.CSV: CsvReportEncoder(),
    ReportFormat.JSON: JsonReportEncoder(),
    ReportFormat.EXCEL: ExcelReportEncoder(),
}


def get_encoder(report_format: Union[str, ReportFormat]) -> ReportEncoder:
    fmt = ReportFormat.parse(report_format)
    try:
        return ENCODERS[fmt]
    except KeyError:
        raise UnsupportedFormatError(f"No encoder registered for {fmt.value!r}") from None


def render_report(
    content: ReportContent,
    report_format: Union[str, ReportFormat],
    on: Optional[date] = None,
) -> RenderedReport:
    """Encode ``content`` in ``report_format``.

    Unknown formats raise :class:`UnsupportedFormatError`; any error raised by
    the encoder itself propagates unchanged.
    """

    return get_encoder(report_format).render(content, on)


__all__ = ["ENCODERS", "get_encoder", "render_report"]
