"""
Structured logging for the encoder.

Encoded objects are often written to stdout (or fd 1), so every log line
goes to stderr: through the stdlib handler installed by
``configure_logging()``, or through the stderr fallback that ``get_logger()``
installs when the embedding application never configured structlog.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from typing import Any, Iterator, cast

import structlog
from structlog.dev import ConsoleRenderer
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from rserial import __version__ as RSERIAL_VERSION

# Library default when nobody configured logging: only failures are shown
DEFAULT_LEVEL = logging.WARNING


def _coerce_level(level: str | int) -> int:
    """Translate a string/int level into the numeric logging level."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, str):
            raise ValueError(f"Invalid log level: {level}")
        return int(resolved)
    return int(level)


def _install_stderr_default() -> None:
    """Point an unconfigured structlog at stderr, filtered at DEFAULT_LEVEL."""
    if structlog.is_configured():
        return
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(DEFAULT_LEVEL),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def configure_logging(level: str | int = "WARNING", json_output: bool = False) -> None:
    """Route structlog through a stdlib handler on stderr.

    Console rendering by default (the CLI is used interactively); pass
    ``json_output=True`` for log collectors.
    """
    numeric_level = _coerce_level(level)
    timestamper = structlog.processors.TimeStamper(fmt="iso")
    renderer = structlog.processors.JSONRenderer() if json_output else ConsoleRenderer()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        timestamper,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Module-level loggers must follow later reconfiguration
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logging.basicConfig(level=numeric_level, handlers=[handler], force=True)


def get_logger(name: str) -> BoundLogger:
    """Return a lazy structlog logger carrying service name and version."""
    _install_stderr_default()
    service_name = os.getenv("SERVICE_NAME", "rserial")
    version = os.getenv("APP_VERSION", RSERIAL_VERSION)
    # Lazy proxy: resolved on each use, so configure_logging() may run later
    return cast(
        BoundLogger,
        structlog.get_logger(name, service_name=service_name, version=version),
    )


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind contextual data (e.g. ``command``, ``source``) for the duration of a block."""
    if not kwargs:
        yield
        return

    previous = structlog.contextvars.get_contextvars()
    structlog.contextvars.bind_contextvars(**kwargs)
    try:
        yield
    finally:
        structlog.contextvars.clear_contextvars()
        if previous:
            structlog.contextvars.bind_contextvars(**previous)
