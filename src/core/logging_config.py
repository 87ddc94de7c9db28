"""Structured logging configuration.

This module initializes structlog with a stable JSON event format and
defines the log sink contract accepted by the parsing pipeline.
"""

from __future__ import annotations

import sys
from typing import Any, Protocol

import structlog


class LogSink(Protocol):
    """Leveled structured event sink.

    Any object exposing these four methods can receive pipeline
    diagnostics, including structlog loggers and test recorders.
    """

    def debug(self, event: str, **fields: Any) -> Any:
        """Record a debug-level structured event."""

    def info(self, event: str, **fields: Any) -> Any:
        """Record an info-level structured event."""

    def warning(self, event: str, **fields: Any) -> Any:
        """Record a warning-level structured event."""

    def error(self, event: str, **fields: Any) -> Any:
        """Record an error-level structured event."""


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger writing JSON event lines to stderr.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def resolve_sink(log_sink: LogSink | None, name: str) -> LogSink:
    """Return the given sink or a default module logger.

    Args:
        log_sink: Caller-supplied sink, if any.
        name: Logger name used for the default sink.

    Returns:
        Sink that receives structured events.
    """
    if log_sink is not None:
        return log_sink
    return get_logger(name)
