"""
Structured logging for Mockup Studio.

Provides JSON Lines logging with correlation and run IDs for tracing a
generation run from the session through the coordinator to the backends.

Usage:
    from shared.logging import get_logger, run_context

    log = get_logger("studio", "coordinator")

    with run_context(run_id=3):
        log.info("studio.coordinator.run_started", mode="description")
"""

from .logger import get_logger, StudioLogger
from .context import (
    correlation_context,
    run_context,
    get_correlation_id,
    set_correlation_id,
    get_session_id,
    set_session_id,
    get_run_id,
)

__all__ = [
    "get_logger",
    "StudioLogger",
    "correlation_context",
    "run_context",
    "get_correlation_id",
    "set_correlation_id",
    "get_session_id",
    "set_session_id",
    "get_run_id",
]
