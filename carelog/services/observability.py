"""Structured logging setup and the package logger."""

import logging

import structlog
from structlog.types import Processor

from carelog.config import LoggingConfig


def _configure_structlog(renderer: Processor) -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# JSON output until configure_logging() says otherwise
_configure_structlog(structlog.processors.JSONRenderer())

logger = structlog.get_logger("carelog")


def configure_logging(config: LoggingConfig) -> None:
    """Apply the level and renderer chosen in configuration."""
    level = getattr(logging, config.level)
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    if config.format == "console":
        _configure_structlog(structlog.dev.ConsoleRenderer())
    else:
        _configure_structlog(structlog.processors.JSONRenderer())
