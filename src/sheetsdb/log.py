"""
Structured logging setup for sheetsdb.

Modules log through ``structlog.get_logger()`` with event-style messages and
key/value context. Applications call :func:`configure_logging` once at startup;
without it structlog's default console configuration applies.
"""

import logging
import sys
from typing import Optional

import structlog

from sheetsdb.config import get_settings


def configure_logging(level: Optional[str] = None, json_format: Optional[bool] = None) -> None:
    """Configure structlog for console or JSON output.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR); defaults to
            ``Settings.log_level``
        json_format: Render JSON lines instead of the colored console format;
            defaults to ``Settings.log_format == "json"``
    """
    if level is None or json_format is None:
        settings = get_settings()
        level = level or settings.log_level
        json_format = settings.log_format == "json" if json_format is None else json_format

    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
