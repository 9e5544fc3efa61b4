"""
Logging configuration.

Provides:
- JSONFormatter for structured logs (one JSON object per line)
- setup_logging() used by the API and the sweep DAG at process start

Extra context is attached with ``logger.info("...", extra={"key": ...})``
and is emitted as top-level JSON fields.
"""
import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'message', 'taskName',
])


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Example output:
    {
        "timestamp": "2025-01-19T10:30:45.123456+00:00",
        "level": "INFO",
        "logger": "image_compressor.lifecycle.sweeper",
        "message": "Retired lifecycle record",
        "key": "uploads/1700000000000.png",
        "age_ms": 5400000
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = self._serialize_value(value)

        return json.dumps(log_entry, default=str, ensure_ascii=False)

    def _serialize_value(self, value: Any) -> Any:
        """Convert values the json module cannot handle."""
        if isinstance(value, datetime):
            return value.isoformat()

        if isinstance(value, bytes):
            try:
                return value.decode('utf-8')
            except UnicodeDecodeError:
                return f"<binary data: {len(value)} bytes>"

        if isinstance(value, Exception):
            return {"type": type(value).__name__, "message": str(value)}

        return value


def setup_logging(
    level: str = "INFO",
    fmt: str = "text",
    logger_name: Optional[str] = None
) -> logging.Logger:
    """
    Configure a logger (root by default) to write to stdout.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: 'text' for human readable lines, 'json' for JSONFormatter
        logger_name: Name of logger to configure (None for root logger)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    logger.addHandler(handler)

    return logger
