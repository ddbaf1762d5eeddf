"""Structured logging configuration for the FlowGuide backend.

This module wires the standard library logging system for the service:
- JSON structured logs for file output and production consoles
- Colored console output when DEBUG is enabled
- Rotating file handler (10MB max, 5 backups)
- Redaction of credentials that workflow JSON tends to carry in node
  parameters (API keys, bearer tokens, passwords)
- A ``context`` dict attached to records through ``extra`` or LogContext
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, ClassVar

from flowguide.core.config import settings


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Merge the LogContext scope with the ``extra={"context": ...}`` of a record.

    Per-call context wins over the enclosing scope.
    """
    return {
        **(getattr(record, "scope_context", None) or {}),
        **(getattr(record, "context", None) or {}),
    }


class SensitiveDataFilter(logging.Filter):
    """Redact secrets from log messages before any handler sees them.

    Workflow parameter bags routinely embed credentials (``apiKey``,
    ``Authorization`` headers, webhook secrets). Anything matching
    ``<key>: value`` or ``<key>=value`` for a sensitive key is replaced.

    Examples:
        >>> logger = logging.getLogger("flowguide")
        >>> logger.addFilter(SensitiveDataFilter())
        >>> logger.info("apiKey=sk-123")
        # Logs: "apikey: [REDACTED]"
    """

    SENSITIVE_PATTERNS: ClassVar[list[str]] = [
        "password",
        "passwd",
        "secret",
        "api_key",
        "apikey",
        "access_token",
        "accesstoken",
        "token",
        "authorization",
        "bearer",
        "credential",
    ]

    _REGEXES: ClassVar[list[tuple[str, re.Pattern[str]]]] = [
        (
            pattern,
            re.compile(
                rf"{pattern}[\"']?\s*[:=]\s*[\"']?(?:(?:bearer|basic)\s+)?[^\s\"',}}]+",
                re.IGNORECASE,
            ),
        )
        for pattern in SENSITIVE_PATTERNS
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact the message and string arguments; never drops a record."""
        record.msg = self.redact(str(record.msg))
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                self.redact(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True

    @classmethod
    def redact(cls, text: str) -> str:
        for pattern, regex in cls._REGEXES:
            text = regex.sub(f"{pattern}: [REDACTED]", text)
        return text


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Format:
        {
            "timestamp": "2025-01-12T10:30:45.123Z",
            "level": "WARNING",
            "logger": "flowguide.services.workflow.traversal",
            "message": "Build order degraded (deadlocked): ...",
            "service": "FlowGuide API",
            "context": {"recovery_state": "deadlocked", "sweeps": 1}
        }
    """

    def __init__(
        self,
        service_name: str = "FlowGuide API",
        service_version: str = "0.1.0",
    ) -> None:
        super().__init__()
        self.service_name = service_name
        self.service_version = service_version

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "version": self.service_version,
        }

        context = record_context(record)
        if context:
            log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if record.levelno >= logging.ERROR:
            log_entry["source"] = {
                "function": record.funcName,
                "line": record.lineno,
                "file": record.pathname,
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """Human-readable colored console output for development."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[41m",  # Red background
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors and inline context."""
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"

        context = record_context(record)
        if context:
            record.msg = f"{record.msg} | Context: {json.dumps(context, default=str)}"

        return super().format(record)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    service_name: str = "FlowGuide API",
    enable_json: bool = True,
    enable_console: bool = True,
    enable_sensitive_filter: bool | None = None,
) -> logging.Logger:
    """Configure root logging with file and console handlers.

    Args:
        log_level: Logging level name. Defaults to settings.LOG_LEVEL.
        log_file: Path to log file. Defaults to logs/app.log.
        service_name: Name of the service for log metadata.
        enable_json: Use JSON formatting for the file handler.
        enable_console: Add a stdout handler.
        enable_sensitive_filter: Redact credentials. Defaults to
            settings.LOG_SENSITIVE_FILTER.

    Returns:
        Configured root logger instance.

    Examples:
        >>> logger = setup_logging(log_level="INFO")
        >>> logger.info("Started", extra={"context": {"port": 8000}})
    """
    if log_level is None:
        log_level = settings.LOG_LEVEL
    if enable_sensitive_filter is None:
        enable_sensitive_filter = settings.LOG_SENSITIVE_FILTER
    level = getattr(logging, log_level.upper(), logging.INFO)

    log_file_path = Path(log_file) if log_file is not None else Path("logs") / "app.log"
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    sensitive_filter = SensitiveDataFilter() if enable_sensitive_filter else None

    file_handler = RotatingFileHandler(
        filename=str(log_file_path),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    if enable_json:
        file_handler.setFormatter(JSONFormatter(service_name=service_name))
    else:
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    handlers: list[logging.Handler] = [file_handler]

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        if settings.DEBUG:
            console_handler.setFormatter(ColoredConsoleFormatter())
        else:
            console_handler.setFormatter(JSONFormatter(service_name=service_name))
        handlers.append(console_handler)

    for handler in handlers:
        if sensitive_filter is not None:
            handler.addFilter(sensitive_filter)
        logger.addHandler(handler)

    logger.info(
        f"Logging initialized - Level: {log_level}, File: {log_file_path}",
        extra={
            "context": {
                "log_level": log_level,
                "log_file": str(log_file_path),
                "service": service_name,
            }
        },
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger that inherits the configuration from setup_logging()."""
    return logging.getLogger(name)


class LogContext:
    """Attach structured context to every record created inside a block.

    The scope is stored apart from ``context`` so calls made inside the block
    can still pass ``extra={"context": ...}``. Formatters merge both through
    :func:`record_context`.

    Examples:
        >>> logger = get_logger(__name__)
        >>> with LogContext(logger, workflow_name="Lead intake"):
        ...     logger.info("Extracting build order")
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        self.logger = logger
        self.context = context
        self.old_factory = logging.getLogRecordFactory()

    def __enter__(self) -> None:
        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = self.old_factory(*args, **kwargs)
            outer = getattr(record, "scope_context", None) or {}
            record.scope_context = {**outer, **self.context}
            return record

        logging.setLogRecordFactory(record_factory)

    def __exit__(self, *args: Any) -> None:
        logging.setLogRecordFactory(self.old_factory)


__all__ = [
    "ColoredConsoleFormatter",
    "JSONFormatter",
    "LogContext",
    "SensitiveDataFilter",
    "get_logger",
    "record_context",
    "setup_logging",
]
