"""Structlog configuration helpers."""
from __future__ import annotations

import logging

import structlog


def configure_structlog(json_logs: bool = False) -> None:
    """Route structlog events through the stdlib logging handlers.

    Events honour the level and format set by ``logging.basicConfig``; with
    ``json_logs`` each event is rendered as one JSON object, otherwise as
    ``key=value`` pairs.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.processors.KeyValueRenderer(key_order=["event"])
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.getLogger(__name__).info("structlog configured")
