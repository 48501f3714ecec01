"""Structured logging setup."""

import logging
import os
import structlog
from typing import Any

from ..domain.interfaces import Logger


def setup_logging(level: str = "INFO", component: str = "queue-gateway", **context: Any) -> "StructLogger":
    """Set up structured logging and return a logger for the component."""
    logging.basicConfig(format="%(message)s", level=level.upper())

    # For local development, use console-friendly output
    # For production, use JSON
    use_json = os.getenv("LOG_FORMAT", "console") == "json"

    if use_json:
        renderer = structlog.processors.JSONRenderer()
        timestamper = structlog.processors.TimeStamper(fmt="iso")
    else:
        renderer = structlog.dev.ConsoleRenderer()
        timestamper = structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S")

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return StructLogger(component, **context)


class StructLogger(Logger):
    """Structured logger for gateway components.

    Every entry carries the component name plus whatever context was bound
    at construction, e.g. the region or service URL the messenger talks to.
    """

    def __init__(self, component: str = "queue-gateway", **context: Any):
        self.component = component
        self.context = dict(context)
        self.logger = structlog.get_logger(component=component, **context)

    def info(self, message: str, **kwargs: Any) -> None:
        self.logger.info(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.logger.error(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.logger.warning(message, **kwargs)
