"""
Logging configuration for cart_engine

Library modules only call structlog.get_logger(__name__) and emit snake_case
events with key/value context; the host application calls
configure_logging() once at startup.
"""

import logging
from typing import Union

import structlog


def configure_logging(level: Union[int, str] = logging.INFO, json: bool = False) -> None:
    """
    Configure structlog processors and the minimum level.

    Args:
        level: minimum level (logging constant or name, e.g. "DEBUG")
        json: render JSON lines instead of the console renderer
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
