"""Structured logging for the flag store.

Library code only asks for loggers with ``get_logger``. Host applications
usually configure logging themselves; the ``flagstore`` command calls
``setup_logging`` so its events come out as JSON on stderr, leaving stdout
for command output.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from flagstore.core.config import settings


def setup_logging(level: str | None = None) -> None:
    """Configure structlog and the stdlib loggers it writes through.

    Args:
        level: Log level name. Defaults to the ``log_level`` setting.
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger("flagstore").setLevel(log_level)

    # Emitted SQL only shows up in debug mode
    logging.getLogger("sqlalchemy.engine").setLevel(
        log_level if settings.debug else max(log_level, logging.WARNING)
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, named after the calling module by convention."""
    return structlog.get_logger(name)
