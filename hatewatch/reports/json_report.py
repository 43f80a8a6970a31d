"""JSON report encoder."""

from __future__ import annotations

import json

from ..models import ReportContent
from .base import ReportEncoder, ReportFormat


class JsonReportEncoder(ReportEncoder):
    """Dumps the whole snapshot, metadata included, with two-space indentation."""

    format = ReportFormat.JSON
    mime_type = "application/json"
    extension = "json"

    def encode(self, content: ReportContent) -> bytes:
        return json.dumps(content.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")


__all__ = ["JsonReportEncoder"]
