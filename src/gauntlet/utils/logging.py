"""Structured logging setup (structlog)."""

from __future__ import annotations

import logging
import sys

import structlog

from gauntlet.config import settings

_configured = False


def configure_logging(level: str | None = None, json: bool | None = None) -> None:
    """Configure structlog once for the whole process."""
    global _configured

    level_name = (level or settings.log_level).upper()
    use_json = settings.log_json if json is None else json

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level_name)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Return a bound logger; call sites log ``event_name`` plus key/values."""
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)
