"""
Centralized logging configuration for the signal engine.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    # Convert string level to logging constant
    log_level = getattr(logging, level.upper())

    # Standard library logging carries the rendered line; stderr keeps
    # stdout free for script output
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s"
    )

    # Run context (target_date, bhavcopy_date) bound by the generator is
    # merged first so store log lines inside a run carry it too
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    # ConsoleRenderer formats exc_info itself; JSON needs it as a dict
    if format_json:
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

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


def get_run_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for signal run auditing.

    Binds the signal engine subsystem so every run decision can be
    filtered out of the log stream as one audit trail.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for run decisions
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="signal_engine",
        audit_trail=True
    )


def log_score_decision(
    logger: FilteringBoundLogger,
    symbol: str,
    score: int,
    threshold: int,
    source: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a per-symbol threshold decision with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Symbol being scored
        score: Composite score
        threshold: Active score threshold
        source: Data source path ("both" or "end_of_day_only")
        context: Additional context data
    """
    accepted = score >= threshold
    bound_logger = logger.bind(
        symbol=symbol,
        score=score,
        threshold=threshold,
        source=source,
        decision="ACCEPT" if accepted else "REJECT"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if accepted:
        bound_logger.info("Score decision")
    else:
        bound_logger.debug("Score decision")
