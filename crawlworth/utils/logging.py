"""
Structured logging configuration.
JSON lines for log shippers, readable console output for development.
"""
import logging
import sys
from typing import Any, TextIO

import structlog

from ..config import settings

# Raw request fields can be arbitrarily long (hostile user agents, query strings)
MAX_FIELD_LENGTH = 200
TRUNCATED_FIELDS = ("user_agent", "request_uri", "error")


def truncate_request_fields(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Cap untrusted request fields so one log line stays one log line."""
    for key in TRUNCATED_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > MAX_FIELD_LENGTH:
            event_dict[key] = value[:MAX_FIELD_LENGTH] + "..."
    return event_dict


def setup_logging(
    log_level: str | None = None,
    log_format: str | None = None,
    stream: TextIO | None = None,
    force: bool = False
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG|INFO|WARNING|ERROR (defaults to settings.log_level)
        log_format: "json" or "console" (defaults to settings.log_format)
        stream: Output stream (defaults to stdout)
        force: Replace handlers already on the root logger. Only the
               application entry point should ask for this.
    """
    log_level = log_level or settings.log_level
    log_format = log_format or settings.log_format

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        truncate_request_fields,
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        renderer = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level] + shared_processors + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=getattr(logging, log_level),
        force=force,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger bound to a component name."""
    return structlog.get_logger(name)


# Initialize on import
setup_logging()
