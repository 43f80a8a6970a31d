"""Convert raw classification API records into :class:`AnalysisResult` objects."""

from __future__ import annotations

import math
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .models import AnalysisResult

LABEL_MAP: Dict[str, str] = {
    "non-offensive": "Neutral",
    "offensive": "Offensive",
    "hate": "Hate",
}


class NormalizationError(ValueError):
    """Raised when a raw record cannot be mapped onto an analysis result."""


def generate_result_id() -> str:
    return uuid.uuid4().hex[:12]


def map_label(label: Any) -> str:
    """Translate an API label into one of the three classifications."""

    key = str(label).strip().lower() if label is not None else ""
    try:
        return LABEL_MAP[key]
    except KeyError:
        raise NormalizationError(f"Unrecognized label: {label!r}") from None


def score_to_confidence(score: Any) -> float:
    """Turn a decimal-fraction score such as ``"0.87"`` into a percentage.

    The score must parse as a finite number in ``[0, 1]``; nothing is clamped.
    """

    if isinstance(score, bool):
        raise NormalizationError(f"Score is not numeric: {score!r}")
    try:
        value = float(score)
    except (TypeError, ValueError):
        raise NormalizationError(f"Score is not numeric: {score!r}") from None
    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        raise NormalizationError(f"Score out of range [0, 1]: {score!r}")
    return value * 100


def _coerce_timestamp(value: Union[None, str, datetime], clock: Callable[[], datetime]) -> datetime:
    if value is None or value == "":
        return clock()
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            raise NormalizationError(f"Unparsable timestamp: {value!r}") from None
    # Offsets are folded into naive local time to match the clocks.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def normalize_prediction(
    text: str,
    label: Any,
    score: Any,
    *,
    timestamp: Union[None, str, datetime] = None,
    clock: Callable[[], datetime] = datetime.now,
    id_factory: Callable[[], str] = generate_result_id,
) -> AnalysisResult:
    """Build an :class:`AnalysisResult` from a text and its raw prediction.

    A fresh identifier is always generated; the server is not trusted to
    provide a stable one. When no timestamp is supplied the result is stamped
    with ``clock()`` (local time).
    """

    if text is None:
        raise NormalizationError("Record has no text")
    return AnalysisResult(
        id=id_factory(),
        text=str(text),
        classification=map_label(label),  # type: ignore[arg-type]
        confidence=score_to_confidence(score),
        timestamp=_coerce_timestamp(timestamp, clock),
    )


def normalize_record(
    record: Mapping[str, Any],
    *,
    clock: Callable[[], datetime] = datetime.now,
    id_factory: Callable[[], str] = generate_result_id,
) -> AnalysisResult:
    """Normalize one ``/api/results`` row (``Tweet``/``Prediction``/``Score``)."""

    missing = [key for key in ("Tweet", "Prediction", "Score") if key not in record]
    if missing:
        raise NormalizationError(f"Record is missing fields: {', '.join(missing)}")
    return normalize_prediction(
        record["Tweet"],
        record["Prediction"],
        record["Score"],
        timestamp=record.get("Timestamp"),
        clock=clock,
        id_factory=id_factory,
    )


def normalize_records(
    records: Iterable[Mapping[str, Any]],
    *,
    clock: Callable[[], datetime] = datetime.now,
    id_factory: Callable[[], str] = generate_result_id,
) -> List[AnalysisResult]:
    """Normalize a whole result listing; the first bad record aborts the batch."""

    results: List[AnalysisResult] = []
    for index, record in enumerate(records):
        try:
            results.append(normalize_record(record, clock=clock, id_factory=id_factory))
        except NormalizationError as exc:
            raise NormalizationError(f"Record {index}: {exc}") from exc
    return results


def normalize_analysis(
    text: str,
    payload: Mapping[str, Any],
    *,
    clock: Callable[[], datetime] = datetime.now,
    id_factory: Callable[[], str] = generate_result_id,
) -> AnalysisResult:
    """Normalize an ``/api/analyze`` response for ``text``.

    ``payload`` may be the full response (``{"analysis": [...]}``) or the
    first element of the ``analysis`` array itself.
    """

    entry: Optional[Mapping[str, Any]] = payload
    if "analysis" in payload:
        analysis = payload["analysis"]
        if not isinstance(analysis, list) or not analysis:
            raise NormalizationError("Analysis response contains no predictions")
        entry = analysis[0]
    if not isinstance(entry, Mapping) or "label" not in entry or "score" not in entry:
        raise NormalizationError("Analysis entry must provide 'label' and 'score'")
    return normalize_prediction(
        text, entry["label"], entry["score"], clock=clock, id_factory=id_factory
    )


__all__ = [
    "LABEL_MAP",
    "NormalizationError",
    "generate_result_id",
    "map_label",
    "normalize_analysis",
    "normalize_prediction",
    "normalize_record",
    "normalize_records",
    "score_to_confidence",
]
