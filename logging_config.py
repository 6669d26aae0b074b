"""
Logging Configuration

Centralized logging configuration for the TLE catalog.
All modules should use this logger for consistent output.

Standard library logging owns the handlers (console and optional file);
structlog sits on top of it and renders key-value events.

Usage:
    from logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("cache_loaded", path="./output/cache.json", records=70)
    logger.warning("record_rejected", index=3, field="drag_term")
    logger.error("fetch_failed", url=url, error=str(exc))
"""

import logging
import sys
from typing import Optional

import structlog

from config import config

# Default logging format
LOG_FORMAT = "%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    json_output: bool = False,
    stream=None,
) -> None:
    """
    Configure logging for the entire application.

    Parameters
    ----------
    level : int
        Logging level (e.g., logging.DEBUG, logging.INFO)
    log_file : str, optional
        Path to log file. If None, logs only to console.
    json_output : bool
        Render events as JSON lines instead of key-value text.
    stream : file-like, optional
        Console stream. Defaults to stdout.
    """
    handlers = [logging.StreamHandler(stream or sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

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
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Parameters
    ----------
    name : str
        Name of the logger (typically __name__)

    Returns
    -------
    structlog.stdlib.BoundLogger
        Logger bound to the stdlib logger of the same name
    """
    return structlog.get_logger(name)


# Configure default logging on module import
configure_logging(json_output=config.LOG_JSON)
