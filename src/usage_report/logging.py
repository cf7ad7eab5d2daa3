"""Logging configuration for usage-report.

structlog renders through stdlib logging, so library loggers (httpx) share
the same handlers. Console output goes to stderr; stdout belongs to the CLI.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

from usage_report.config import Settings, get_settings

QUIET_LOGGERS = ("httpx", "httpcore")


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer]
    )


def _file_handler(settings: Settings, level: int) -> RotatingFileHandler | None:
    """Rotating JSON log file, or None if it cannot be opened."""
    try:
        Path(settings.log_directory).mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            filename=settings.log_file_path,
            maxBytes=settings.log_file_max_bytes,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Continue with console-only logging
        print(f"Warning: Could not set up file logging: {e}", file=sys.stderr)
        return None
    handler.setLevel(level)
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    return handler


def setup_logging(settings: Settings | None = None) -> None:
    """Route structlog events to stderr and, optionally, a rotating file.

    The console renders colored key/value lines in development and JSON
    otherwise. The log file is always JSON.
    """
    if settings is None:
        settings = get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    if settings.is_development:
        console.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=True)))
    else:
        console.setFormatter(_formatter(structlog.processors.JSONRenderer()))

    handlers: list[logging.Handler] = [console]
    if settings.log_to_file:
        file_handler = _file_handler(settings, level)
        if file_handler is not None:
            handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
