"""
crewplan Structured Logging

Scheduling services log through structlog with event names such as
``auto_assign.completed`` and keyword context; the storage layer uses
standard library loggers, which end up on the same stream.
"""

import logging
import sys
from typing import List, Optional

import structlog

from crewplan.platform.config import settings


def _processors(json_output: bool) -> List:
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=True)
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        level: Log level name; defaults to ``LOG_LEVEL``
        json_output: Render JSON lines; defaults to True in production
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    if json_output is None:
        json_output = settings.APP_ENV == "production"

    structlog.configure(
        processors=_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)


def log_context(**values):
    """Attach values (team_id, booking_id, ...) to every log line inside the block."""
    return structlog.contextvars.bound_contextvars(**values)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
