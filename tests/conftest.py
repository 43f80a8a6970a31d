"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from hatewatch.models import AnalysisResult
from hatewatch.reports.builder import build_report_content

FIXED_NOW = datetime(2026, 10, 19, 14, 30, 0)


def make_result(
    classification: str,
    confidence: float,
    text: str = "sample text",
    timestamp: Optional[datetime] = None,
    result_id: Optional[str] = None,
) -> AnalysisResult:
    return AnalysisResult(
        id=result_id or f"{classification.lower()}-{confidence}",
        text=text,
        classification=classification,
        confidence=confidence,
        timestamp=timestamp or FIXED_NOW,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    """A clock frozen at :data:`FIXED_NOW`."""

    return lambda: FIXED_NOW


@pytest.fixture
def sample_results() -> List[AnalysisResult]:
    """Mixed results spread over the last few hours."""

    return [
        make_result("Neutral", 95.0, "Great product, highly recommended!", FIXED_NOW - timedelta(minutes=2), "r1"),
        make_result("Offensive", 85.0, 'He said "hi", then left', FIXED_NOW - timedelta(hours=1), "r2"),
        make_result("Hate", 70.0, "a" * 120, FIXED_NOW - timedelta(hours=2), "r3"),
        make_result("Neutral", 87.25, "Amazing customer support team", FIXED_NOW - timedelta(hours=3), "r4"),
    ]


@pytest.fixture
def report_content(sample_results):
    return build_report_content(
        sample_results,
        report_type="detailed",
        confidence_threshold=80,
        date_start="2026-10-01",
        generated_at=FIXED_NOW,
    )


class FakeResponse:
    """Minimal stand-in for :class:`requests.Response`."""

    def __init__(self, status_code: int = 200, payload: Any = None, reason: str = "OK") -> None:
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self.content = b"" if payload is None else b"{}"

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Records requests and replays queued responses or exceptions."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        call = {"method": method, "url": url, **kwargs}
        files = kwargs.get("files")
        if files:
            name, handle, content_type = files["file"]
            call["uploaded"] = (name, handle.read(), content_type)
        self.calls.append(call)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def result_factory():
    """Build :class:`AnalysisResult` objects with sensible defaults."""

    return make_result


@pytest.fixture
def response_factory():
    return FakeResponse
