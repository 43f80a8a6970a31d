"""Summary statistics over a collection of analysis results.

Every function here is pure: it reads the collection it is given, never
mutates it and keeps no state between calls. Callers recompute the full
summary whenever the underlying collection changes.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from .models import CLASSIFICATIONS, AnalysisResult, ClassificationCounts
from .utils.formatting import format_relative_time

TREND_HOURS = 7
ACTIVITY_LIMIT = 5


def safe_percent(part: float, whole: float) -> float:
    """Return ``part / whole * 100``, or ``0.0`` when ``whole`` is zero."""

    if not whole:
        return 0.0
    return part / whole * 100


@dataclass(frozen=True)
class PercentDistribution:
    neutral: float = 0.0
    offensive: float = 0.0
    hate: float = 0.0

    def get(self, classification: str) -> float:
        return getattr(self, classification.lower())

    def to_dict(self) -> Dict[str, float]:
        return {"neutral": self.neutral, "offensive": self.offensive, "hate": self.hate}


@dataclass(frozen=True)
class TrendSeries:
    """Per-hour percent distribution, oldest bucket first."""

    hours: List[int] = field(default_factory=list)
    neutral: List[float] = field(default_factory=list)
    offensive: List[float] = field(default_factory=list)
    hate: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List]:
        return {
            "hours": list(self.hours),
            "neutral": list(self.neutral),
            "offensive": list(self.offensive),
            "hate": list(self.hate),
        }


@dataclass(frozen=True)
class AnalysisSummary:
    total: int = 0
    classification_counts: ClassificationCounts = field(default_factory=ClassificationCounts)
    average_confidence: float = 0.0
    percent_distribution: PercentDistribution = field(default_factory=PercentDistribution)
    trend: TrendSeries = field(default_factory=TrendSeries)


@dataclass(frozen=True)
class ActivityItem:
    id: str
    content: str
    classification: str
    confidence: float
    time: str


@dataclass(frozen=True)
class DashboardMetrics:
    total: int
    hate_percent: float
    offensive_percent: float
    average_confidence: float
    recent_activity: List[ActivityItem] = field(default_factory=list)


def count_classifications(results: Sequence[AnalysisResult]) -> ClassificationCounts:
    counter = Counter(result.classification for result in results)
    return ClassificationCounts(
        neutral=counter.get("Neutral", 0),
        offensive=counter.get("Offensive", 0),
        hate=counter.get("Hate", 0),
    )


def average_confidence(results: Sequence[AnalysisResult]) -> float:
    """Arithmetic mean of the confidences; ``0.0`` for an empty collection."""

    if not results:
        return 0.0
    return sum(result.confidence for result in results) / len(results)


def percent_distribution(counts: ClassificationCounts) -> PercentDistribution:
    total = counts.total
    return PercentDistribution(
        neutral=safe_percent(counts.neutral, total),
        offensive=safe_percent(counts.offensive, total),
        hate=safe_percent(counts.hate, total),
    )


def hourly_trend(
    results: Sequence[AnalysisResult],
    now: Optional[datetime] = None,
    hours: int = TREND_HOURS,
    rolling: bool = False,
) -> TrendSeries:
    """Bucket results into the last ``hours`` one-hour slots ending at ``now``.

    By default buckets are keyed on the hour of day alone, so 14:00 yesterday
    and 14:00 today share a bucket. With ``rolling=True`` only results whose
    timestamp falls inside the absolute window ``[now.hour - hours + 1, now]``
    are counted. Empty buckets report 0% for every class. ``hours`` must lie
    in ``1..24``.
    """

    if not 1 <= hours <= 24:
        raise ValueError("hours must be between 1 and 24")
    now = now or datetime.now()
    current = now.replace(minute=0, second=0, microsecond=0)
    bucket_hours = [(current.hour - offset) % 24 for offset in range(hours - 1, -1, -1)]
    buckets: Dict[int, Counter] = {hour: Counter() for hour in bucket_hours}

    for result in results:
        if rolling:
            age = (current - result.timestamp.replace(minute=0, second=0, microsecond=0))
            age_hours = int(age.total_seconds() // 3600)
            if not 0 <= age_hours < hours:
                continue
        hour = result.timestamp.hour
        if hour in buckets:
            buckets[hour][result.classification] += 1

    series: Dict[str, List[float]] = {name.lower(): [] for name in CLASSIFICATIONS}
    for hour in bucket_hours:
        bucket = buckets[hour]
        denominator = sum(bucket.values()) or 1
        for name in CLASSIFICATIONS:
            series[name.lower()].append(bucket[name] / denominator * 100)

    return TrendSeries(hours=bucket_hours, **series)


def summarize(
    results: Sequence[AnalysisResult],
    now: Optional[datetime] = None,
    trend_hours: int = TREND_HOURS,
    rolling_trend: bool = False,
) -> AnalysisSummary:
    """Fold ``results`` into an :class:`AnalysisSummary`."""

    counts = count_classifications(results)
    return AnalysisSummary(
        total=len(results),
        classification_counts=counts,
        average_confidence=average_confidence(results),
        percent_distribution=percent_distribution(counts),
        trend=hourly_trend(results, now=now, hours=trend_hours, rolling=rolling_trend),
    )


def recent_activity(
    results: Sequence[AnalysisResult],
    limit: int = ACTIVITY_LIMIT,
    now: Optional[datetime] = None,
) -> List[ActivityItem]:
    """Return the ``limit`` newest results as dashboard activity rows."""

    newest = sorted(results, key=lambda result: result.timestamp, reverse=True)[:limit]
    return [
        ActivityItem(
            id=result.id,
            content=result.text,
            classification=result.classification,
            confidence=result.confidence,
            time=format_relative_time(result.timestamp, now),
        )
        for result in newest
    ]


def dashboard_metrics(
    results: Sequence[AnalysisResult],
    now: Optional[datetime] = None,
    activity_limit: int = ACTIVITY_LIMIT,
) -> DashboardMetrics:
    counts = count_classifications(results)
    distribution = percent_distribution(counts)
    return DashboardMetrics(
        total=len(results),
        hate_percent=distribution.hate,
        offensive_percent=distribution.offensive,
        average_confidence=average_confidence(results),
        recent_activity=recent_activity(results, activity_limit, now),
    )


__all__ = [
    "ACTIVITY_LIMIT",
    "ActivityItem",
    "AnalysisSummary",
    "DashboardMetrics",
    "PercentDistribution",
    "TREND_HOURS",
    "TrendSeries",
    "average_confidence",
    "count_classifications",
    "dashboard_metrics",
    "hourly_trend",
    "percent_distribution",
    "recent_activity",
    "safe_percent",
    "summarize",
]
