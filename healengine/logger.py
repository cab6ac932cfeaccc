"""Structured logging for HealEngine."""

from __future__ import annotations

import logging
import os
from typing import Any

import structlog


def configure_logging(level: str | None = None, json_output: bool = False) -> None:
    """Install the structlog processor chain used by every module.

    Events are emitted as ``log.info("event_name", key=value)``; the
    renderer is a console renderer for humans or JSON for log shipping.
    ``level`` defaults to ``HEAL_LOG_LEVEL``, then INFO.
    """
    level = (level or os.environ.get("HEAL_LOG_LEVEL", "INFO")).upper()
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level)
        ),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to the module name."""
    return structlog.get_logger(name)
