"""Structured logging setup shared by the gateway, the interpreter and the CLI."""

import logging
import sys
from typing import TextIO

import structlog

from propsearch.settings import settings

# Libraries that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def _renderer():
    if settings.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(level: str | None = None, stream: TextIO | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Overrides ``settings.log_level`` (the CLI uses this for --verbose)
        stream: Log destination, stdout by default. The CLI logs to stderr
    """
    stream = stream or sys.stdout
    level = level or settings.log_level
    timestamp_fmt = "iso" if settings.log_format == "json" else "%Y-%m-%d %H:%M:%S"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt=timestamp_fmt),
            _renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=settings.app_name)

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, level),
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)
