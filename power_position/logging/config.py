"""
Centralized logging configuration for the power position service.

This module configures structlog on top of the standard library logging
module. All components log through structlog loggers so extraction cycles
can be followed through their key/value context.
"""
import logging
import sys
from datetime import date, datetime
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
    """
    log_level = getattr(logging, level.upper())

    # structlog renders the message, stdlib only routes it
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",
        force=True
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if format_json:
        processors.append(structlog.processors.JSONRenderer(default=str))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_cycle_logger(name: str, trading_day: date, extract_time: datetime) -> FilteringBoundLogger:
    """
    Get a logger bound to a single extraction cycle.

    Every event logged through it carries the trading day and the local
    extraction time.

    Args:
        name: Logger name (typically __name__)
        trading_day: Trading day being extracted
        extract_time: Local time the cycle started

    Returns:
        Structlog logger with cycle context bound
    """
    return get_logger(name).bind(
        subsystem="extraction",
        trading_day=trading_day.isoformat(),
        extract_time=extract_time.isoformat()
    )


def log_cycle_outcome(
    logger: FilteringBoundLogger,
    succeeded: bool,
    duration_seconds: float,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the end of an extraction cycle with a standardized format.

    Args:
        logger: Structlog logger instance
        succeeded: Whether the cycle wrote a snapshot
        duration_seconds: Wall time spent in the cycle
        context: Additional context data
    """
    bound_logger = logger.bind(
        cycle_result="WRITTEN" if succeeded else "NO_OUTPUT",
        duration_seconds=round(duration_seconds, 3)
    )

    if context:
        bound_logger = bound_logger.bind(**context)

    if succeeded:
        bound_logger.info("Extraction completed")
    else:
        bound_logger.warning("Extraction completed without output")
