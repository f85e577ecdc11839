"""
FeedProxy Logging
================

Console and rotating-file logging for the proxy.

Records emitted while serving a feed carry request fields (feed id, binding
kind, item outcome counts, upstream status). The JSON formatter lifts those
fields to the top level of each line so a request can be followed across
components; anything else passed via ``extra`` is nested under ``"extra"``.
"""

import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..config.settings import LoggingSettings

ROOT_LOGGER = "feedproxy"

REQUEST_FIELDS = (
    "component",
    "feed_id",
    "kind",
    "item_link",
    "items",
    "kept",
    "modified",
    "failed",
    "status",
    "duration_seconds",
    "success",
)

# Console lines only show the fields that identify the request.
_CONSOLE_FIELDS = ("feed_id", "kind", "item_link", "status")

_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached to ``record`` through ``extra``."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRIBUTES}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, request fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = record_context(record)
        for name in REQUEST_FIELDS:
            if name in context:
                data[name] = context.pop(name)
        if context:
            data["extra"] = context

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Coloured single-line output for interactive use."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        line = (
            f"{color}[{timestamp}] {record.levelname:8}{self.RESET} "
            f"{record.name} - {record.getMessage()}"
        )

        context = record_context(record)
        tags = " ".join(f"{k}={context[k]}" for k in _CONSOLE_FIELDS if context.get(k) is not None)
        if tags:
            line += f" [{tags}]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


class LoggerAdapter(logging.LoggerAdapter):
    """Adds a component's fixed request fields to every record."""

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> tuple:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger_for_component(component_name: str, **context: Any) -> LoggerAdapter:
    """Get a ``feedproxy.<component>`` logger carrying request fields.

    Args:
        component_name: Name of the component (e.g., 'pipeline', 'asset_proxy')
        **context: Request fields such as ``feed_id``; None values are dropped

    Returns:
        Logger adapter with context
    """
    extra = {"component": component_name}
    extra.update({k: v for k, v in context.items() if v is not None})
    return LoggerAdapter(logging.getLogger(f"{ROOT_LOGGER}.{component_name}"), extra)


def configure_application_logging(
    settings: LoggingSettings,
    level: Optional[str] = None,
) -> logging.Logger:
    """Install handlers on the ``feedproxy`` logger.

    The console uses JSON when ``structured_logging`` is set; the log file,
    when configured, always does.

    Args:
        settings: Logging section of the application settings
        level: Level overriding ``settings.level`` (used for --debug)
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel((level or settings.level.value).upper())
    logger.handlers.clear()

    if settings.console_logging:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(
            StructuredFormatter() if settings.structured_logging else ConsoleFormatter()
        )
        logger.addHandler(console)

    if settings.file_path:
        path = Path(settings.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=settings.max_file_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logging.getLogger("aiohttp.access").setLevel(logging.INFO)
    logging.getLogger("aiohttp.client").setLevel(logging.WARNING)

    return logger


class PerformanceLogger:
    """Times a block and logs its outcome with ``duration_seconds``."""

    def __init__(self, logger, operation: str, **context):
        """Initialize performance logger.

        Args:
            logger: Logger or adapter to write to
            operation: Operation being timed, e.g. ``render dilbert``
            **context: Request fields added to both log records
        """
        self.logger = logger
        self.operation = operation
        self.context = context
        self.started = None

    def __enter__(self) -> "PerformanceLogger":
        self.started = time.perf_counter()
        self.logger.debug(f"Starting {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        duration = round(time.perf_counter() - self.started, 3)
        context = {**self.context, "duration_seconds": duration, "success": exc_type is None}

        if exc_type:
            self.logger.warning(f"Failed {self.operation} in {duration:.3f}s: {exc_val}", extra=context)
        else:
            self.logger.info(f"Completed {self.operation} in {duration:.3f}s", extra=context)
