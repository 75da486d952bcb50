"""Logging configuration for food-order."""

from __future__ import annotations

import logging
from pathlib import Path

import structlog


def configure_logging(level: str = "INFO", log_path: str | None = None) -> None:
    """Route structlog output to an append-only log file.

    Logging must never interfere with app flow: if the file cannot be opened,
    events are dropped instead of raised.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if log_path is None:
        factory = structlog.PrintLoggerFactory()
    else:
        try:
            path = Path(log_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            factory = structlog.WriteLoggerFactory(file=path.open("a", encoding="utf-8"))
        except OSError:
            factory = structlog.ReturnLoggerFactory()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=factory,
    )
