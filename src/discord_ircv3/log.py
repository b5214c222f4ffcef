"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """Configure structlog with console output.

    *debug* forces DEBUG level so raw IRC traffic (``irc_send``/``irc_recv``)
    is printed as well.
    """
    log_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)

    # pydle and discord.py log through the stdlib; keep them at the same level
    logging.basicConfig(level=log_level, stream=sys.stderr, format="%(name)s: %(message)s")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named logger instance."""
    return structlog.get_logger(name)
