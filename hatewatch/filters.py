"""Stateless filtering and pagination over analysis results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Sequence, Tuple, TypeVar

from .models import CLASSIFICATIONS, AnalysisResult

T = TypeVar("T")


@dataclass(frozen=True)
class ResultFilter:
    """Confidence threshold, classification toggle and text search, ANDed.

    The search is a case-insensitive substring match; an empty search string
    matches everything.
    """

    min_confidence: float = 0.0
    classifications: FrozenSet[str] = field(default_factory=lambda: frozenset(CLASSIFICATIONS))
    search: str = ""

    def __post_init__(self) -> None:
        unknown = set(self.classifications) - set(CLASSIFICATIONS)
        if unknown:
            raise ValueError(f"Unknown classifications: {sorted(unknown)}")
        object.__setattr__(self, "classifications", frozenset(self.classifications))

    def matches_confidence(self, result: AnalysisResult) -> bool:
        return result.confidence >= self.min_confidence

    def matches_classification(self, result: AnalysisResult) -> bool:
        return result.classification in self.classifications

    def matches_search(self, result: AnalysisResult) -> bool:
        needle = self.search.strip().lower()
        return not needle or needle in result.text.lower()

    def matches(self, result: AnalysisResult) -> bool:
        return (
            self.matches_confidence(result)
            and self.matches_classification(result)
            and self.matches_search(result)
        )

    def apply(self, results: Iterable[AnalysisResult]) -> List[AnalysisResult]:
        return [result for result in results if self.matches(result)]


def filter_results(
    results: Iterable[AnalysisResult],
    min_confidence: float = 0.0,
    classifications: Iterable[str] = CLASSIFICATIONS,
    search: str = "",
) -> List[AnalysisResult]:
    return ResultFilter(min_confidence, frozenset(classifications), search).apply(results)


@dataclass(frozen=True)
class Page:
    items: Tuple
    page: int
    per_page: int
    total_items: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_items / self.per_page))

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def paginate(items: Sequence[T], page: int = 1, per_page: int = 10) -> Page:
    """Return the 1-based ``page`` of ``items``; out-of-range pages are empty."""

    if per_page < 1:
        raise ValueError("per_page must be at least 1")
    if page < 1:
        raise ValueError("page numbers start at 1")
    start = (page - 1) * per_page
    return Page(
        items=tuple(items[start : start + per_page]),
        page=page,
        per_page=per_page,
        total_items=len(items),
    )


__all__ = ["Page", "ResultFilter", "filter_results", "paginate"]
