"""Assemble a :class:`ReportContent` snapshot from the current result set."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..aggregator import average_confidence, count_classifications, percent_distribution
from ..filters import ResultFilter
from ..models import (
    AnalysisResult,
    DateRange,
    Distribution,
    ReportContent,
    ReportRow,
    ReportSummary,
)
from ..utils.formatting import format_percent, format_timestamp

REPORT_TITLES = {
    "summary": "Classification Summary Report",
    "detailed": "Detailed Analysis Report",
}
DEFAULT_VISUALIZATIONS = {
    "distribution": True,
    "timeSeries": False,
    "wordCloud": False,
    "geographic": False,
}
ALL_TIME = "All time"


def _enabled_visualizations(
    visualizations: Union[None, Mapping[str, bool], Iterable[str]],
) -> tuple:
    if visualizations is None:
        visualizations = DEFAULT_VISUALIZATIONS
    if isinstance(visualizations, Mapping):
        return tuple(name for name, enabled in visualizations.items() if enabled)
    return tuple(visualizations)


def build_summary(results: Sequence[AnalysisResult]) -> ReportSummary:
    counts = count_classifications(results)
    distribution = percent_distribution(counts)
    return ReportSummary(
        total_analyzed=len(results),
        average_confidence=format_percent(average_confidence(results)),
        distribution=Distribution(
            neutral=format_percent(distribution.neutral),
            offensive=format_percent(distribution.offensive),
            hate=format_percent(distribution.hate),
        ),
    )


def to_report_row(result: AnalysisResult) -> ReportRow:
    return ReportRow(
        text=result.text,
        classification=result.classification,
        confidence=format_percent(result.confidence),
        timestamp=format_timestamp(result.timestamp),
    )


def build_report_content(
    results: Sequence[AnalysisResult],
    *,
    report_type: str = "summary",
    confidence_threshold: float = 70,
    date_start: Optional[str] = None,
    date_end: Optional[str] = None,
    visualizations: Union[None, Mapping[str, bool], Iterable[str]] = None,
    result_filter: Optional[ResultFilter] = None,
    generated_at: Optional[datetime] = None,
) -> ReportContent:
    """Build the snapshot a report encoder consumes.

    The summary block describes the whole of ``results``; the row list holds
    only the results passing ``result_filter`` (by default, those at or above
    ``confidence_threshold``). Date range bounds are free text and are not
    validated; blank bounds read ``"All time"``.
    """

    if report_type not in REPORT_TITLES:
        raise ValueError(f"Unknown report type: {report_type!r}")

    result_filter = result_filter or ResultFilter(min_confidence=confidence_threshold)
    rows = tuple(to_report_row(result) for result in result_filter.apply(results))

    return ReportContent(
        title=REPORT_TITLES[report_type],
        generated_at=format_timestamp(generated_at or datetime.now()),
        date_range=DateRange(start=date_start or ALL_TIME, end=date_end or ALL_TIME),
        confidence_threshold=f"{confidence_threshold:g}%",
        summary=build_summary(results),
        visualizations=_enabled_visualizations(visualizations),
        results=rows,
    )


__all__ = [
    "DEFAULT_VISUALIZATIONS",
    "REPORT_TITLES",
    "build_report_content",
    "build_summary",
    "to_report_row",
]
