"""Logging setup for calendar-notifier.

All output, including uvicorn's server and access logs, goes through one
stderr handler on the root logger with pipe-separated fields::

    2026-03-10T09:00:00 | INFO     | cal_notifier.calendar.sync | Fetched 3 event(s) across 1 page(s)

``cal-notifier serve`` starts uvicorn with ``log_config=None``, so uvicorn
leaves its loggers unconfigured and :func:`setup_logging` routes them here.
"""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# httpx logs every request URL at INFO, and the webhook URL embeds its
# token.  Held at WARNING regardless of the configured level.
_QUIET_LOGGERS = ("httpx", "httpcore")


class _RootHandler(logging.StreamHandler):
    """The stderr handler owned by :func:`setup_logging`."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)
        self.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))


def setup_logging(level: str = "INFO") -> None:
    """Configure process-wide logging.

    Installs a single :class:`_RootHandler` on the root logger (reused on
    repeated calls), hands uvicorn's loggers over to it, and silences
    request-level logging from the HTTP client.

    Args:
        level: A standard logging level name, case-insensitive.

    Raises:
        ValueError: If *level* is not a recognised logging level string.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r}")

    root = logging.getLogger()
    root.setLevel(numeric_level)

    handler = next((h for h in root.handlers if isinstance(h, _RootHandler)), None)
    if handler is None:
        handler = _RootHandler()
        root.addHandler(handler)
    handler.setLevel(numeric_level)

    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.setLevel(logging.NOTSET)
        uvicorn_logger.propagate = True

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
