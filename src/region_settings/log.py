"""Logging setup for region_settings.

Modules log through ``logging.getLogger(__name__)``; this module only
decides how the ``region_settings`` logger tree is rendered. Two output
formats are available:

    console  2024-01-15 10:30:00 DEBUG [region_settings.resolver] message
    json     {"timestamp": "...", "level": "debug", "logger": "...", ...}
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, TextIO

ROOT_LOGGER = "region_settings"

# Attributes every LogRecord has; anything else was passed via ``extra``.
_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys() | {"message", "asctime"}
)


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED}


class JSONFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def __init__(self, *, sort_keys: bool = False) -> None:
        super().__init__()
        self._sort_keys = sort_keys

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            **_extra_fields(record),
        }
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            data["exception"] = {
                "type": type(exc).__name__,
                "message": str(exc),
                "traceback": traceback.format_exception(*record.exc_info),
            }
        return json.dumps(data, sort_keys=self._sort_keys, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, *, color: bool = False, timestamp_format: str = "%Y-%m-%d %H:%M:%S") -> None:
        super().__init__()
        self._color = color
        self._timestamp_format = timestamp_format

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime(self._timestamp_format)
        level = record.levelname.ljust(7)
        if self._color:
            level = f"{self.COLORS.get(record.levelno, '')}{level}{self.RESET}"

        parts = [ts, level, f"[{record.name}]", record.getMessage()]
        fields = _extra_fields(record)
        if fields:
            parts.append(" ".join(f"{k}={v}" for k, v in fields.items()))

        result = " ".join(parts)
        if record.exc_info:
            result = f"{result}\n{self.formatException(record.exc_info)}"
        return result


def configure_logging(
    level: str | int = "WARNING",
    format: str = "console",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the package logger.

    Replaces any handler installed by a previous call, so it is safe to
    call more than once.

    Args:
        level: Level name or number.
        format: "console" or "json".
        stream: Output stream (default: stderr).

    Returns:
        The configured package logger.
    """
    if format not in ("console", "json"):
        raise ValueError(f"Unknown log format: {format!r}")
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name!r}")

    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    if format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(color=stream.isatty()))

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
