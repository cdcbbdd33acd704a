"""
Centralized logging configuration for the reveal narrative engine.

This module provides standardized logging configuration using structlog
for all components. The store, sequencer, controls and dispatcher all log
through these helpers so step transitions and degraded features share one
structured format.
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
    include_caller: bool = False
) -> None:
    """
    Route structlog through stdlib logging with one renderer for all subsystems.

    The package never calls this itself: a RevealApp holds no process-wide
    state, so the embedding host configures logging once at startup.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        format_json: JSON lines instead of the colored console renderer
        include_timestamp: Prefix each entry with an ISO timestamp
        include_caller: Add the emitting file and line
    """
    logging.basicConfig(level=getattr(logging, level.upper()), stream=sys.stdout, format="%(message)s")

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
    ]
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))
    processors.append(
        structlog.processors.JSONRenderer() if format_json else structlog.dev.ConsoleRenderer()
    )

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


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for state store and step transition events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for state changes
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="state_store",
        audit_trail=True
    )


def get_animation_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for animation sequencing.

    Cancellation traces go through this logger at debug level only; a
    cancelled run is an expected outcome, never a failure.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the sequencer
    """
    logger = get_logger(name)

    return logger.bind(subsystem="animation")


def log_state_transition(
    logger: FilteringBoundLogger,
    from_step: str,
    to_step: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a step transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_step: Step (or view) rendered before the change
        to_step: Step (or view) rendered after the change
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_step=from_step,
        to_step=to_step,
        trigger=trigger,
        event="step_transition"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Step transition")
