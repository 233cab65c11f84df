"""Structured logging setup using structlog."""

import logging
import sys
from typing import Any

import structlog

from payfi_credit.core.config import settings


def _add_service(logger: Any, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", settings.app_name)
    return event_dict


def setup_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """
    Configure structlog for the application.

    JSON output (LOG_FORMAT=json) for production, console output for local
    development. Modules log with structlog.get_logger(__name__) and
    snake_case event names.
    """
    level = (level or settings.log_level).upper()
    log_format = (log_format or settings.log_format).lower()
    level_value = getattr(logging, level, logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
