"""Structured logging for klaw-io.

Library loggers are structlog loggers backed by stdlib loggers under the
``klaw_io`` namespace, so nothing is emitted until the application (or
init(log_level=...)) configures logging. Only handle lifecycle events are
logged: ``handle opened``, ``handle connected`` and ``handle released``.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

__all__ = [
    'LOGGER_NAME',
    'configure_logging',
    'get_logger',
]

LOGGER_NAME = 'klaw_io'


def _get_processors() -> list[Any]:
    """Get the processor chain for klaw-io loggers."""
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def _get_renderer(stream: IO[str], json_output: bool) -> Any:
    if json_output:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Send klaw-io lifecycle events to a stream.

    Only the ``klaw_io`` logger is configured; the root logger and other
    libraries are left alone. Calling this again replaces the previous
    handler. Logs default to stderr so they never mix with data written to a
    stdio chain.

    Args:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
            Lifecycle events are DEBUG.
        json_output: If True, emit one JSON object per line. If False, use
            console output.
        stream: Text stream to write to. Defaults to ``sys.stderr``.

    Returns:
        The installed handler.
    """
    stream = sys.stderr if stream is None else stream

    structlog.configure(
        processors=_get_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _get_renderer(stream, json_output),
            ],
        )
    )

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.propagate = False
    return handler


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger backed by a stdlib logger.

    Args:
        name: Logger name. Defaults to the package logger.

    Returns:
        A structlog BoundLogger; silent below the stdlib logger's level.
    """
    return structlog.wrap_logger(
        logging.getLogger(name or LOGGER_NAME),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
