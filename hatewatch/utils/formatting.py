"""Display formatting helpers for percentages, counts and timestamps."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_percent(value: float, digits: int = 1) -> str:
    """Render ``value`` (already on a 0-100 scale) as ``"87.3%"``."""

    return f"{value:.{digits}f}%"


def format_number(value: Union[int, float, str]) -> str:
    """Group thousands for numbers; strings pass through untouched."""

    if isinstance(value, str):
        return value
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.1f}"
    return f"{int(value):,}"


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def format_relative_time(value: datetime, now: Optional[datetime] = None) -> str:
    """Describe how long ago ``value`` happened.

    Anything older than a day is shown as a plain date.
    """

    now = now or datetime.now()
    minutes = int((now - value).total_seconds() // 60)

    if minutes < 1:
        return "just now"
    if minutes == 1:
        return "1 min ago"
    if minutes < 60:
        return f"{minutes} mins ago"

    hours = minutes // 60
    if hours == 1:
        return "1 hour ago"
    if hours < 24:
        return f"{hours} hours ago"

    return value.strftime("%Y-%m-%d")


def format_size(num_bytes: int) -> str:
    return f"{num_bytes / 1024:.1f} KB"


__all__ = [
    "TIMESTAMP_FORMAT",
    "format_number",
    "format_percent",
    "format_relative_time",
    "format_size",
    "format_timestamp",
]
