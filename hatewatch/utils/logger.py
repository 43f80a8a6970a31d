"""Logger factory shared by the client, store and configuration layers."""

from __future__ import annotations

import logging
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def get_logger(
    name: str, level: Union[int, str] = logging.INFO, fmt: Optional[str] = None
) -> logging.Logger:
    """Return a configured logger instance.

    Args:
        name: Name of the logger to create or fetch.
        level: Logging level, either numeric or a level name such as ``"DEBUG"``.
            Unknown names fall back to ``INFO``.
        fmt: Optional logging format string. :data:`DEFAULT_FORMAT` is applied
            when omitted.

    Returns:
        A :class:`logging.Logger` with exactly one stream handler attached.
    """

    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(_resolve_level(level))
    logger.propagate = False
    return logger


def set_level(level: Union[int, str], prefix: str = "hatewatch") -> None:
    """Apply ``level`` to every already-created logger under ``prefix``."""

    resolved = _resolve_level(level)
    for name, logger in logging.root.manager.loggerDict.items():
        if name.startswith(prefix) and isinstance(logger, logging.Logger):
            logger.setLevel(resolved)


__all__ = ["DEFAULT_FORMAT", "get_logger", "set_level"]
