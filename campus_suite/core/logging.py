"""Structured logging configuration.

Human-readable lines in development, one JSON object per record in
production. Store, allocator and workflow code attach structured context
(collection, identifier, status, attempt) through ``extra=``.
"""
import logging
import json
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import traceback


# Attributes promoted from ``extra=`` into the JSON payload
CONTEXT_FIELDS = (
    "request_id", "user_id", "method", "path", "status_code", "duration_ms",
    "collection", "identifier", "status", "attempt", "recipient", "error_type",
)


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info)
            }

        for attr in CONTEXT_FIELDS:
            if hasattr(record, attr):
                log_obj[attr] = getattr(record, attr)

        return json.dumps(log_obj, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that merges persistent context into every record.

    Example:
        >>> logger = ContextLogger(base_logger, {"collection": "loans"})
        >>> logger.info("Loan created", extra={"identifier": 4})
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(level: str = "INFO", json_format: bool = True) -> logging.Logger:
    """Configure the root logger with a single stdout handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use ``JSONFormatter`` (production) instead of plain text

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    return root_logger


def get_logger(name: str, context: Optional[Dict[str, Any]] = None):
    """Get a logger, wrapped in a ``ContextLogger`` when context is given."""
    logger = logging.getLogger(name)

    if context:
        return ContextLogger(logger, context)

    return logger


class LogTimer:
    """Context manager that logs how long an operation took.

    Example:
        >>> with LogTimer(logger, "allocate:loans"):
        ...     repository.create(payload)
        # Logs: "allocate:loans completed in 3.2ms"
    """

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return
        duration = (time.perf_counter() - self.start_time) * 1000

        if exc_type:
            self.logger.warning(
                f"{self.operation} failed after {duration:.1f}ms: {exc_val}",
                extra={"duration_ms": round(duration, 2), "error_type": exc_type.__name__},
            )
        else:
            self.logger.debug(
                f"{self.operation} completed in {duration:.1f}ms",
                extra={"duration_ms": round(duration, 2)},
            )
