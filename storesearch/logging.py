"""Structured logging helpers."""

from __future__ import annotations

import logging
import sys

import structlog

from storesearch.config import get_settings


def _render_chain(environment: str) -> list:
    if environment == "dev":
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging(level: int = logging.INFO, environment: str | None = None) -> None:
    """Console output while developing, one JSON object per line elsewhere."""

    environment = environment or get_settings().environment
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            *_render_chain(environment),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(app="storesearch", environment=environment)


logger = structlog.get_logger("storesearch")

__all__ = ["configure_logging", "logger"]
