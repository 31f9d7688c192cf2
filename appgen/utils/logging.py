"""Logging configuration using structlog.

Core components log dotted events (``generation.started``,
``response_parser.tier_matched``) with key/value fields. Prompt and response
bodies are never logged, only their lengths.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

from appgen.config import Settings, settings as default_settings

# Chatty transport loggers pulled in by the Anthropic SDK
NOISY_LOGGERS = ("httpx", "httpcore", "anthropic")


def _log_handlers(settings: Settings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if not settings.log_directory:
        return handlers

    log_dir = Path(settings.log_directory)
    if not log_dir.is_absolute():
        log_dir = Path(__file__).resolve().parents[2] / log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    handlers.append(logging.FileHandler(log_dir / settings.log_file_name, encoding="utf-8"))
    return handlers


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structured logging for the application.

    An empty ``log_directory`` disables the log file and keeps stdout only.
    """
    settings = settings or default_settings
    level = getattr(logging, settings.log_level)

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=_log_handlers(settings),
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    # request_id bound by the HTTP middleware arrives through contextvars
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
