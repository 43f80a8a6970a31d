"""HTTP client for the remote classification API."""

from __future__ import annotations

import os
import pathlib
from typing import IO, Any, Dict, List, Mapping, Optional, Union

import requests

from .config import Settings
from .utils.logger import get_logger

LOGGER = get_logger(__name__)

RESULTS_PATH = "/api/results"
ANALYZE_PATH = "/api/analyze"
UPLOAD_PATH = "/api/upload-dataset"


class ApiError(RuntimeError):
    """The classification API could not be reached or answered unexpectedly."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UploadRejectedError(ValueError):
    """A dataset was refused locally before any request was made."""


class ClassificationApiClient:
    """Thin wrapper over the four classification API endpoints.

    No retries are attempted; failures surface as :class:`ApiError`.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        upload_timeout: float = 120.0,
        max_upload_bytes: int = 50 * 1024 * 1024,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.upload_timeout = upload_timeout
        self.max_upload_bytes = max_upload_bytes
        self.session = session or requests.Session()

    @classmethod
    def from_settings(
        cls, settings: Settings, session: Optional[requests.Session] = None
    ) -> "ClassificationApiClient":
        return cls(
            settings.api_base,
            timeout=settings.request_timeout,
            upload_timeout=settings.upload_timeout,
            max_upload_bytes=settings.max_upload_bytes,
            session=session,
        )

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._url(path)
        kwargs.setdefault("timeout", self.timeout)
        LOGGER.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            LOGGER.error("Request to %s failed: %s", url, exc)
            raise ApiError(f"{method} {path} failed: {exc}") from exc

        if not response.ok:
            LOGGER.error("%s %s returned HTTP %s", method, url, response.status_code)
            raise ApiError(
                f"{method} {path} failed: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"{method} {path} returned invalid JSON") from exc

    def fetch_results(self) -> List[Dict[str, Any]]:
        """Return the raw ``Tweet``/``Prediction``/``Score`` rows."""

        payload = self._request("GET", RESULTS_PATH)
        if not isinstance(payload, Mapping) or not payload.get("success"):
            raise ApiError("API returned unsuccessful response")
        data = payload.get("data") or []
        if not isinstance(data, list):
            raise ApiError("API result listing is not a list")
        LOGGER.info("Fetched %d results", len(data))
        return data

    def analyze(self, text: str) -> Dict[str, Any]:
        """Classify ``text`` and return the first ``{label, score}`` prediction."""

        payload = self._request("POST", ANALYZE_PATH, json={"tweet": text})
        analysis = payload.get("analysis") if isinstance(payload, Mapping) else None
        if not isinstance(analysis, list) or not analysis:
            raise ApiError("Analysis response contains no predictions")
        return analysis[0]

    def validate_upload(self, filename: str, size: int) -> None:
        if not filename.lower().endswith(".csv"):
            raise UploadRejectedError("Please upload a CSV file")
        if size > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise UploadRejectedError(f"File size must be less than {limit_mb}MB")

    def upload_dataset(
        self,
        source: Union[str, os.PathLike, IO[bytes]],
        filename: Optional[str] = None,
    ) -> Any:
        """Upload a CSV dataset for server-side bulk classification.

        ``source`` is a path or a binary file object; for file objects pass
        ``filename`` explicitly.
        """

        if isinstance(source, (str, os.PathLike)):
            path = pathlib.Path(source)
            filename = filename or path.name
            self.validate_upload(filename, path.stat().st_size)
            with path.open("rb") as handle:
                return self._post_dataset(filename, handle)

        if not filename:
            raise UploadRejectedError("A filename is required when uploading a file object")
        position = source.tell()
        source.seek(0, os.SEEK_END)
        size = source.tell() - position
        source.seek(position)
        self.validate_upload(filename, size)
        return self._post_dataset(filename, source)

    def _post_dataset(self, filename: str, handle: IO[bytes]) -> Any:
        LOGGER.info("Uploading dataset %s", filename)
        return self._request(
            "POST",
            UPLOAD_PATH,
            files={"file": (filename, handle, "text/csv")},
            headers={"Accept": "application/json"},
            timeout=self.upload_timeout,
        )

    def clear_results(self) -> None:
        """Delete the server-side result history."""

        self._request("DELETE", RESULTS_PATH)
        LOGGER.info("Cleared server-side results")


__all__ = [
    "ANALYZE_PATH",
    "ApiError",
    "ClassificationApiClient",
    "RESULTS_PATH",
    "UPLOAD_PATH",
    "UploadRejectedError",
]
