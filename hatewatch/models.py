"""Core data structures shared by the aggregation and reporting layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Literal, Optional, Tuple

CLASSIFICATIONS: Tuple[str, ...] = ("Neutral", "Offensive", "Hate")
Classification = Literal["Neutral", "Offensive", "Hate"]

EntryType = Literal["file", "text"]
EntryStatus = Literal["completed", "processing", "error"]
ReportType = Literal["summary", "detailed"]


def classification_key(classification: str) -> str:
    """Return the lower-case key used in count and distribution mappings."""

    if classification not in CLASSIFICATIONS:
        raise ValueError(f"Unknown classification: {classification!r}")
    return classification.lower()


@dataclass(frozen=True)
class AnalysisResult:
    """One classified text.

    ``confidence`` is a percentage on the 0-100 scale kept at full precision;
    rounding is left to the display layer.
    """

    id: str
    text: str
    classification: Classification
    confidence: float
    timestamp: datetime

    def __post_init__(self) -> None:
        if self.classification not in CLASSIFICATIONS:
            raise ValueError(f"Unknown classification: {self.classification!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "classification": self.classification,
            "confidence": self.confidence,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ClassificationCounts:
    """Per-class result counts over a single result set."""

    neutral: int = 0
    offensive: int = 0
    hate: int = 0

    @property
    def total(self) -> int:
        return self.neutral + self.offensive + self.hate

    def get(self, classification: str) -> int:
        return getattr(self, classification_key(classification))

    def to_dict(self) -> Dict[str, int]:
        return {"neutral": self.neutral, "offensive": self.offensive, "hate": self.hate}


@dataclass(frozen=True)
class HistoryEntry:
    """A bulk CSV upload or a single text analysis.

    ``text`` entries always embed their :class:`AnalysisResult`; ``file``
    entries never do, their rows live in the store's result collection.
    """

    id: str
    name: str
    type: EntryType
    created_at: datetime
    status: EntryStatus = "completed"
    result: Optional[AnalysisResult] = None

    def __post_init__(self) -> None:
        if self.type not in ("file", "text"):
            raise ValueError(f"Unknown history entry type: {self.type!r}")
        if self.type == "text" and self.result is None:
            raise ValueError("Text history entries must carry their analysis result")
        if self.type == "file" and self.result is not None:
            raise ValueError("File history entries cannot carry an analysis result")


UploadedFile = HistoryEntry


# Report snapshot ---------------------------------------------------------------


@dataclass(frozen=True)
class DateRange:
    start: str = "All time"
    end: str = "All time"

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class Distribution:
    """Formatted per-class percentages, e.g. ``"33.3%"``."""

    neutral: str = "0.0%"
    offensive: str = "0.0%"
    hate: str = "0.0%"

    def to_dict(self) -> Dict[str, str]:
        return {"neutral": self.neutral, "offensive": self.offensive, "hate": self.hate}


@dataclass(frozen=True)
class ReportSummary:
    total_analyzed: int
    average_confidence: str
    distribution: Distribution = field(default_factory=Distribution)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalAnalyzed": self.total_analyzed,
            "averageConfidence": self.average_confidence,
            "distribution": self.distribution.to_dict(),
        }


@dataclass(frozen=True)
class ReportRow:
    """A single filtered result as it appears in a report."""

    text: str
    classification: str
    confidence: str
    timestamp: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "text": self.text,
            "classification": self.classification,
            "confidence": self.confidence,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ReportContent:
    """Snapshot handed to a report encoder.

    Rebuilt from scratch for every report; :meth:`to_dict` emits the keys in
    the order the exported JSON document uses.
    """

    title: str
    generated_at: str
    date_range: DateRange
    confidence_threshold: str
    summary: ReportSummary
    visualizations: Tuple[str, ...] = ()
    results: Tuple[ReportRow, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "generatedAt": self.generated_at,
            "dateRange": self.date_range.to_dict(),
            "confidenceThreshold": self.confidence_threshold,
            "summary": self.summary.to_dict(),
            "visualizations": list(self.visualizations),
            "results": [row.to_dict() for row in self.results],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ReportContent":
        """Rebuild a snapshot from the structure produced by :meth:`to_dict`."""

        summary = payload["summary"]
        distribution = summary.get("distribution", {})
        return cls(
            title=payload["title"],
            generated_at=payload["generatedAt"],
            date_range=DateRange(**payload["dateRange"]),
            confidence_threshold=payload["confidenceThreshold"],
            summary=ReportSummary(
                total_analyzed=int(summary["totalAnalyzed"]),
                average_confidence=summary["averageConfidence"],
                distribution=Distribution(**distribution),
            ),
            visualizations=tuple(payload.get("visualizations", ())),
            results=tuple(ReportRow(**row) for row in payload.get("results", ())),
        )


@dataclass(frozen=True)
class ReportItem:
    """An entry in the generated-report history."""

    id: str
    name: str
    type: Literal["Summary", "Detailed"]
    date: str
    size: str
    format: str


__all__ = [
    "AnalysisResult",
    "CLASSIFICATIONS",
    "Classification",
    "ClassificationCounts",
    "DateRange",
    "Distribution",
    "EntryStatus",
    "EntryType",
    "HistoryEntry",
    "ReportContent",
    "ReportItem",
    "ReportRow",
    "ReportSummary",
    "ReportType",
    "UploadedFile",
    "classification_key",
]
