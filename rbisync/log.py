"""Logging configuration for rbisync with structlog support."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

LogLevel = int | str


def configure_logging(level: LogLevel = "WARNING") -> None:
    """Configure structlog on top of standard logging, writing to stderr.

    Reports go to stdout through the console; the log never does.

    Args:
        level: Logging level
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    logging.basicConfig(
        level=level,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
        format="%(message)s",  # structlog handles formatting
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
