"""
Logging system configuration.

This module configures logging for the order entry engine with:
- Console and rotating file handlers
- Colored console formatting
- Structured JSON logging for monitoring
- Order context attached to records
"""

import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from orderdesk.core.config import get_settings

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_RECORD_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
    ]
)


class ColoredFormatter(logging.Formatter):
    """
    Formatter that adds colors to console logs.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record):
        formatted = super().format(record)

        # Only colorize when writing to a terminal
        if hasattr(sys.stderr, "isatty") and sys.stderr.isatty():
            color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
            reset = self.COLORS["RESET"]
            formatted = formatted.replace(record.levelname, f"{color}{record.levelname}{reset}")

        return formatted


class StructuredFormatter(logging.Formatter):
    """
    Formatter for structured JSON logging.
    """

    def format(self, record):
        """
        Format the record as structured JSON.

        Args:
            record: LogRecord to format

        Returns:
            str: JSON encoded log line
        """
        settings = get_settings()
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "app_name": settings.APP_NAME,
            "app_version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        extra_fields = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_RECORD_ATTRS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def get_logging_configuration() -> Dict[str, Any]:
    """
    Build the complete logging configuration.

    Returns:
        Dict: dictConfig compatible configuration
    """
    settings = get_settings()
    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": settings.LOG_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": ("%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "colored": {
                "()": ColoredFormatter,
                "format": settings.LOG_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {"()": StructuredFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.LOG_LEVEL,
                "formatter": "colored" if settings.DEBUG else "standard",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "aiohttp.access": {"level": "WARNING"},
            "aiohttp.client": {"level": "WARNING"},
        },
        "root": {"level": settings.LOG_LEVEL, "handlers": ["console"]},
    }

    if settings.LOG_FILE_PATH:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "json" if settings.is_production else "detailed",
            "filename": settings.LOG_FILE_PATH,
            "maxBytes": settings.LOG_MAX_SIZE_MB * 1024 * 1024,
            "backupCount": settings.LOG_BACKUP_COUNT,
            "encoding": "utf-8",
        }
        config["root"]["handlers"].append("file")

    return config


def setup_logging() -> None:
    """
    Configure logging for the whole application.
    """
    settings = get_settings()
    if settings.LOG_FILE_PATH:
        Path(settings.LOG_FILE_PATH).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(get_logging_configuration())

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured - level: {settings.LOG_LEVEL}")


_log_context: ContextVar[Dict[str, Any] | None] = ContextVar("orderdesk_log_context", default=None)
_base_record_factory = None


def _context_record_factory(*args, **kwargs):
    record = _base_record_factory(*args, **kwargs)
    for key, value in (_log_context.get() or {}).items():
        setattr(record, key, value)
    return record


def _install_record_factory() -> None:
    """Wrap the current record factory once; the context itself lives in a ContextVar."""
    global _base_record_factory
    if _base_record_factory is not None:
        return
    _base_record_factory = logging.getLogRecordFactory()
    logging.setLogRecordFactory(_context_record_factory)


class LogContext:
    """
    Context manager that adds temporary context to every log record.

    The context is stored per task, so sessions awaiting the store at the
    same time never see each other's fields. Nested contexts are merged.

    Example:
        >>> with LogContext(customer_id="c-1", order_id="o-9"):
        ...     logger.info("Submitting order")
    """

    def __init__(self, **context):
        self.context = context
        self._token = None

    def __enter__(self):
        _install_record_factory()
        self._token = _log_context.set({**(_log_context.get() or {}), **self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_context.reset(self._token)
