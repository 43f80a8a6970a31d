"""Tests for display formatting helpers."""

from datetime import datetime, timedelta

import pytest

from hatewatch.utils.formatting import (
    format_number,
    format_percent,
    format_relative_time,
    format_size,
    format_timestamp,
)

NOW = datetime(2026, 10, 19, 14, 30, 0)


def test_format_percent():
    assert format_percent(87.26) == "87.3%"
    assert format_percent(100 / 3) == "33.3%"
    assert format_percent(0) == "0.0%"


def test_format_number():
    assert format_number(1234) == "1,234"
    assert format_number(12.0) == "12"
    assert format_number("n/a") == "n/a"


def test_format_timestamp():
    assert format_timestamp(NOW) == "2026-10-19 14:30:00"


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=20), "just now"),
        (timedelta(minutes=1), "1 min ago"),
        (timedelta(minutes=45), "45 mins ago"),
        (timedelta(minutes=61), "1 hour ago"),
        (timedelta(hours=5), "5 hours ago"),
        (timedelta(days=2), "2026-10-17"),
    ],
)
def test_format_relative_time(delta, expected):
    assert format_relative_time(NOW - delta, now=NOW) == expected


def test_format_size():
    assert format_size(2048) == "2.0 KB"
