"""Runtime settings loaded from YAML with environment overrides."""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

import yaml

from .utils.logger import get_logger

LOGGER = get_logger(__name__)

CONFIG_PATH = pathlib.Path("config/config.yaml")
ENV_PREFIX = "HATEWATCH_"
TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Runtime configuration for the API client, store and reports."""

    api_url: str = "http://127.0.0.1:5000"
    production_api_url: str = "https://backend-hatespeech.onrender.com"
    online_mode: bool = False
    request_timeout: float = 30.0
    upload_timeout: float = 120.0
    max_upload_mb: int = 50
    default_confidence_threshold: float = 70.0
    trend_hours: int = 7
    log_level: str = "INFO"

    @property
    def api_base(self) -> str:
        """Base URL of the classification API for the active mode."""

        base = self.production_api_url if self.online_mode else self.api_url
        return base.rstrip("/")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def _coerce(value: Any, default: Any) -> Any:
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in TRUE_VALUES
    if isinstance(default, (int, float)):
        try:
            return type(default)(value)
        except (TypeError, ValueError):
            LOGGER.warning("Ignoring invalid numeric setting %r; using %r", value, default)
            return default
    return str(value)


def _apply(settings: Settings, values: Mapping[str, Any]) -> None:
    for item in fields(Settings):
        if item.name in values and values[item.name] is not None:
            default = getattr(settings, item.name)
            setattr(settings, item.name, _coerce(values[item.name], default))


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for item in fields(Settings):
        key = f"{ENV_PREFIX}{item.name.upper()}"
        if key in environ:
            overrides[item.name] = environ[key]
    return overrides


def load_settings(
    path: pathlib.Path = CONFIG_PATH, environ: Optional[Mapping[str, str]] = None
) -> Settings:
    """Load settings from ``path`` then apply ``HATEWATCH_*`` environment overrides.

    A missing file yields the defaults. A file whose top level is not a
    mapping raises :class:`ValueError`.
    """

    settings = Settings()
    path = pathlib.Path(path)

    if path.exists():
        LOGGER.debug("Loading settings from %s", path)
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        _apply(settings, payload)
    else:
        LOGGER.debug("No settings file at %s; using defaults", path)

    _apply(settings, _env_overrides(os.environ if environ is None else environ))
    return settings


__all__ = ["CONFIG_PATH", "Settings", "load_settings"]
