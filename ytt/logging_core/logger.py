# ytt/logging_core/logger.py
"""
Centralized structured logging setup for ytt.

Provides a pre-configured logger that emits JSON lines with fields:
- timestamp (ISO)
- run_id
- stage_name (optional, filled by caller)
- event_type (start/success/failure/progress)
- level
- message
- metadata (dict)

Logs go to stderr; stdout belongs to transcript output.
All library logs MUST use the logger obtained from get_logger().
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID

from logging import Logger


LOG_LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

DEFAULT_LOG_LEVEL = "WARNING"


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if hasattr(record, "run_id"):
            log_record["run_id"] = str(record.run_id)

        extra_fields = ["stage_name", "event_type", "metadata"]
        for field in extra_fields:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class RunIdFilter(logging.Filter):
    """Bind a run_id to every record passing through the logger."""

    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id  # type: ignore[attr-defined]
        return True


# Module-level cache to ensure single handler per run_id
_loggers: Dict[str, Logger] = {}
_level: int = LOG_LEVELS[DEFAULT_LOG_LEVEL]


def set_log_level(level: str | int) -> None:
    """
    Set the process-wide level for every ytt logger, existing and future.

    Accepts a level name (case-insensitive) or a logging constant.
    Raises ValueError on an unknown level name.
    """
    global _level  # pylint: disable=global-statement
    if isinstance(level, str):
        name = level.upper()
        if name not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        _level = LOG_LEVELS[name]
    else:
        _level = level

    for logger in _loggers.values():
        logger.setLevel(_level)


def get_logger(run_id: UUID) -> Logger:
    """
    Return a configured logger for the given run.

    Logs are emitted as JSON lines to stderr.
    One logger instance per run_id (idempotent).
    """
    run_id_str = str(run_id)

    if run_id_str in _loggers:
        return _loggers[run_id_str]

    logger = logging.getLogger(f"ytt.run.{run_id_str}")
    logger.setLevel(_level)
    logger.propagate = False

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    logger.addFilter(RunIdFilter(run_id_str))
    _loggers[run_id_str] = logger

    return logger


def log_event(
    logger: Logger,
    level: int,
    message: str,
    *,
    stage_name: str | None = None,
    event_type: str,
    metadata: Dict[str, Any] | None = None,
) -> None:
    """
    Convenience wrapper for structured logging.

    Use this inside components for consistency.
    """
    extra: Dict[str, Any] = {"event_type": event_type}
    if stage_name:
        extra["stage_name"] = stage_name
    if metadata:
        extra["metadata"] = metadata

    logger.log(level, message, extra=extra)
