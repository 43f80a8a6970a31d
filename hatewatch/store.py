"""In-memory analysis state with observer notification.

The store is an ordinary object handed to whichever component needs it. It
owns the result collection, the upload/analysis history and the generated
report history, and recomputes the summary in full after every change.
"""

from __future__ import annotations

import dataclasses
import os
import uuid
from datetime import datetime
from typing import IO, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from .aggregator import AnalysisSummary, DashboardMetrics, dashboard_metrics, summarize
from .client import ClassificationApiClient
from .config import Settings
from .filters import Page, ResultFilter, paginate
from .models import AnalysisResult, HistoryEntry, ReportItem
from .normalizer import normalize_analysis, normalize_records
from .reports.base import RenderedReport, ReportFormat
from .reports.builder import build_report_content
from .reports.renderer import render_report
from .utils.formatting import format_size
from .utils.logger import get_logger, set_level

LOGGER = get_logger(__name__)

Listener = Callable[[str, "AnalysisStore"], None]

EVENT_RESULTS = "results"
EVENT_HISTORY = "history"
EVENT_REPORTS = "reports"
EVENT_STATUS = "status"
EVENT_ERROR = "error"


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class AnalysisStore:
    """Holds analysis results and history for the presentation layer."""

    def __init__(
        self,
        client: ClassificationApiClient,
        clock: Callable[[], datetime] = datetime.now,
        trend_hours: int = 7,
        default_confidence_threshold: float = 70.0,
    ) -> None:
        self.client = client
        self.clock = clock
        self.trend_hours = trend_hours
        self.default_confidence_threshold = default_confidence_threshold

        self.results: Tuple[AnalysisResult, ...] = ()
        self.history: List[HistoryEntry] = []
        self.reports: List[ReportItem] = []
        self.summary = AnalysisSummary()
        self.is_loading = False
        self.is_uploading = False
        self.error: Optional[str] = None

        self._listeners: List[Listener] = []

    @classmethod
    def from_settings(
        cls, settings: Settings, client: Optional[ClassificationApiClient] = None
    ) -> "AnalysisStore":
        """Build a store, and its API client unless one is given, from ``settings``."""

        set_level(settings.log_level)
        return cls(
            client or ClassificationApiClient.from_settings(settings),
            trend_hours=settings.trend_hours,
            default_confidence_threshold=settings.default_confidence_threshold,
        )

    # Observers --------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self)

    def _set_status(self, *, loading: Optional[bool] = None, uploading: Optional[bool] = None) -> None:
        if loading is not None:
            self.is_loading = loading
        if uploading is not None:
            self.is_uploading = uploading
        self._notify(EVENT_STATUS)

    def _fail(self, exc: Exception) -> None:
        self.error = str(exc)
        LOGGER.error("Store operation failed: %s", exc)
        self._notify(EVENT_ERROR)

    def _replace_results(self, results: Sequence[AnalysisResult]) -> None:
        self.results = tuple(results)
        self.summary = summarize(self.results, now=self.clock(), trend_hours=self.trend_hours)
        self._notify(EVENT_RESULTS)

    # Remote operations ----------------------------------------------------------------
    def fetch_results(self) -> Tuple[AnalysisResult, ...]:
        """Replace the local result set with the server's current listing."""

        self.error = None
        self._set_status(loading=True)
        try:
            records = self.client.fetch_results()
            results = normalize_records(records, clock=self.clock)
        except Exception as exc:
            self._fail(exc)
            raise
        finally:
            self._set_status(loading=False)

        self._replace_results(results)
        return self.results

    def analyze_text(self, text: str) -> AnalysisResult:
        """Classify a single text and record it in results and history."""

        if not text or not text.strip():
            raise ValueError("Text to analyze must not be empty")

        self.error = None
        self._set_status(loading=True)
        try:
            prediction = self.client.analyze(text)
            result = normalize_analysis(text, prediction, clock=self.clock)
        except Exception as exc:
            self._fail(exc)
            raise
        finally:
            self._set_status(loading=False)

        self._replace_results((result,) + self.results)
        self.history.insert(
            0,
            HistoryEntry(
                id=_new_id(),
                name=text,
                type="text",
                created_at=result.timestamp,
                result=result,
            ),
        )
        self._notify(EVENT_HISTORY)
        return result

    def upload_file(
        self,
        source: Union[str, os.PathLike, IO[bytes]],
        filename: Optional[str] = None,
    ) -> HistoryEntry:
        """Upload a CSV dataset, then refresh the result set from the server."""

        if filename is None and isinstance(source, (str, os.PathLike)):
            filename = os.path.basename(os.fspath(source))

        self.error = None
        self._set_status(uploading=True)
        try:
            self.client.upload_dataset(source, filename=filename)
        except Exception as exc:
            self._fail(exc)
            raise
        finally:
            self._set_status(uploading=False)

        entry = HistoryEntry(
            id=_new_id(),
            name=filename or "dataset.csv",
            type="file",
            created_at=self.clock(),
            status="processing",
        )
        self.history.insert(0, entry)
        self._notify(EVENT_HISTORY)

        try:
            self.fetch_results()
        except Exception:
            self._update_entry(entry.id, status="error")
            raise
        return self._update_entry(entry.id, status="completed")

    def clear_results(self) -> None:
        """Delete the server-side results, then drop the local result set."""

        self.error = None
        try:
            self.client.clear_results()
        except Exception as exc:
            self._fail(exc)
            raise
        self._replace_results(())

    # Local history ------------------------------------------------------------------
    def _update_entry(self, entry_id: str, **changes) -> HistoryEntry:
        for index, entry in enumerate(self.history):
            if entry.id == entry_id:
                updated = dataclasses.replace(entry, **changes)
                self.history[index] = updated
                self._notify(EVENT_HISTORY)
                return updated
        raise KeyError(entry_id)

    def delete_entry(self, entry_id: str) -> None:
        """Remove a history entry locally.

        The server is not told; results already produced by an uploaded file
        stay in the result set until it is refreshed or cleared.
        """

        remaining = [entry for entry in self.history if entry.id != entry_id]
        if len(remaining) == len(self.history):
            raise KeyError(entry_id)
        self.history = remaining
        LOGGER.debug("Removed history entry %s locally", entry_id)
        self._notify(EVENT_HISTORY)

    delete_file = delete_entry

    def clear_history(self) -> None:
        self.history = []
        self._notify(EVENT_HISTORY)

    # Derived views ------------------------------------------------------------------
    def filtered_results(self, result_filter: Optional[ResultFilter] = None) -> List[AnalysisResult]:
        return (result_filter or ResultFilter()).apply(self.results)

    def results_page(
        self,
        page: int = 1,
        per_page: int = 10,
        result_filter: Optional[ResultFilter] = None,
    ) -> Page:
        return paginate(self.filtered_results(result_filter), page, per_page)

    def dashboard(self, activity_limit: int = 5) -> DashboardMetrics:
        return dashboard_metrics(self.results, now=self.clock(), activity_limit=activity_limit)

    # Reports ------------------------------------------------------------------------
    def generate_report(
        self,
        report_format: Union[str, ReportFormat],
        *,
        report_type: str = "summary",
        confidence_threshold: Optional[float] = None,
        date_start: Optional[str] = None,
        date_end: Optional[str] = None,
        visualizations: Optional[Mapping[str, bool]] = None,
        search: str = "",
    ) -> RenderedReport:
        """Render the current result set and record it in the report history."""

        fmt = ReportFormat.parse(report_format)
        if confidence_threshold is None:
            confidence_threshold = self.default_confidence_threshold
        now = self.clock()
        content = build_report_content(
            self.results,
            report_type=report_type,
            confidence_threshold=confidence_threshold,
            date_start=date_start,
            date_end=date_end,
            visualizations=visualizations,
            result_filter=ResultFilter(min_confidence=confidence_threshold, search=search),
            generated_at=now,
        )
        rendered = render_report(content, fmt, on=now.date())
        LOGGER.info(
            "Generated %s report with %d rows (%d bytes)",
            fmt.value,
            len(content.results),
            rendered.size,
        )

        self.reports.insert(
            0,
            ReportItem(
                id=_new_id(),
                name=content.title,
                type="Summary" if report_type == "summary" else "Detailed",
                date=now.date().isoformat(),
                size=format_size(rendered.size),
                format=fmt.value.upper(),
            ),
        )
        self._notify(EVENT_REPORTS)
        return rendered

    def delete_report(self, report_id: str) -> None:
        remaining = [item for item in self.reports if item.id != report_id]
        if len(remaining) == len(self.reports):
            raise KeyError(report_id)
        self.reports = remaining
        self._notify(EVENT_REPORTS)

    def search_reports(self, query: str) -> List[ReportItem]:
        needle = query.strip().lower()
        return [
            item
            for item in self.reports
            if needle in item.name.lower() or needle in item.type.lower()
        ]


__all__ = [
    "AnalysisStore",
    "EVENT_ERROR",
    "EVENT_HISTORY",
    "EVENT_REPORTS",
    "EVENT_RESULTS",
    "EVENT_STATUS",
    "Listener",
]
