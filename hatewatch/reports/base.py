"""Shared types for report encoders."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..models import ReportContent

FILENAME_PREFIX = "hate-speech-report"


class UnsupportedFormatError(ValueError):
    """Raised when a report is requested in a format with no encoder."""


class ReportFormat(str, enum.Enum):
    PDF = "pdf"
    CSV = "csv"
    JSON = "json"
    EXCEL = "excel"

    @classmethod
    def parse(cls, value: "str | ReportFormat") -> "ReportFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported report format: {value!r}") from None


def report_filename(extension: str, on: Optional[date] = None) -> str:
    """``hate-speech-report-<ISO date>.<extension>``."""

    on = on or date.today()
    return f"{FILENAME_PREFIX}-{on.isoformat()}.{extension}"


@dataclass(frozen=True)
class RenderedReport:
    """Encoded report bytes plus what a caller needs to offer a download."""

    format: ReportFormat
    payload: bytes
    mime_type: str
    extension: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.payload)


class ReportEncoder:
    """Turns a :class:`ReportContent` snapshot into one output encoding.

    Subclasses set the class attributes and implement :meth:`encode`. An
    encoder must not keep a reference to the content after returning.
    """

    format: ReportFormat
    mime_type: str
    extension: str

    def encode(self, content: ReportContent) -> bytes:
        raise NotImplementedError

    def render(self, content: ReportContent, on: Optional[date] = None) -> RenderedReport:
        return RenderedReport(
            format=self.format,
            payload=self.encode(content),
            mime_type=self.mime_type,
            extension=self.extension,
            filename=report_filename(self.extension, on),
        )


__all__ = [
    "FILENAME_PREFIX",
    "RenderedReport",
    "ReportEncoder",
    "ReportFormat",
    "UnsupportedFormatError",
    "report_filename",
]
