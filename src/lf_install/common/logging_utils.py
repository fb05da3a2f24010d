"""Logging helpers shared across the package.

Provides centralized configuration plus a few utilities used when emitting
DEBUG traces for HTTP and filesystem events: structured ``extra`` payloads,
credential-free URLs for logs, and a small timer.
"""
from __future__ import annotations

import logging
import os
import time
import urllib.parse
from typing import Any, Dict, Optional

from ..constants import Constants, LogLevels

_PACKAGE_LOGGER = "lf_install"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger.

    The level comes from the argument, then ``LF_INSTALL_LOG_LEVEL``, then
    defaults to INFO. Calling this repeatedly does not stack handlers.

    Args:
        level: Optional level name (DEBUG, INFO, WARNING, ERROR).

    Returns:
        logging.Logger: The configured package logger.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    if level_name not in LogLevels.__members__:
        level_name = LogLevels.INFO.value

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level_name))

    if not any(getattr(h, "_lf_install", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        handler._lf_install = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


def discard_logger() -> logging.Logger:
    """Return a logger that drops everything unless a caller attaches handlers."""
    logger = logging.getLogger(f"{_PACKAGE_LOGGER}.discard")
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped so records only carry what is known.
    """
    return {k: v for k, v in fields.items() if v is not None}


def safe_url(url: str) -> str:
    """Strip credentials, query string and fragment from a URL for logging."""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return "<invalid url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urllib.parse.urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring wall time in milliseconds."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.monotonic()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.monotonic()

    def duration_ms(self) -> int:
        """Elapsed milliseconds so far, or in total once the block exited."""
        if self._start is None:
            return 0
        end = self._end if self._end is not None else time.monotonic()
        return int((end - self._start) * 1000)
