"""
StudioLogger - Structured logging for Mockup Studio components.
"""

import logging
import os
import time
import traceback
from pathlib import Path
from typing import Any, Optional
from logging.handlers import RotatingFileHandler

from .formatters import JsonLinesFormatter, ConsoleFormatter

# Cache of loggers by module.component
_loggers: dict[str, "StudioLogger"] = {}

_log_dir: Optional[Path] = None

LOG_DIR_ENV = "MOCKUP_STUDIO_LOG_DIR"


def _get_log_dir() -> Path:
    """Get or create log directory."""
    global _log_dir
    if _log_dir is None:
        override = os.environ.get(LOG_DIR_ENV)
        if override:
            _log_dir = Path(override)
        else:
            # Project root is the directory holding shared/
            current = Path(__file__).resolve()
            for parent in current.parents:
                if (parent / "shared").exists():
                    _log_dir = parent / "logs"
                    break
            else:
                _log_dir = Path("logs")

        _log_dir.mkdir(parents=True, exist_ok=True)
    return _log_dir


def get_logger(module: str, component: str, console: bool = True) -> "StudioLogger":
    """
    Get or create a StudioLogger for a module/component.

    Args:
        module: Module name (studio, backends, cli)
        component: Component within module (coordinator, store, etc.)
        console: Whether to also output to console

    Returns:
        StudioLogger instance
    """
    key = f"{module}.{component}"
    if key not in _loggers:
        _loggers[key] = StudioLogger(module, component, console)
    return _loggers[key]


class StudioLogger:
    """
    Structured logger for studio components.

    Outputs JSON Lines to file and optionally human-readable to console.
    All events include the correlation ID, and the run ID when one is bound.
    """

    def __init__(self, module: str, component: str, console: bool = True):
        self.module = module
        self.component = component
        self._logger = logging.getLogger(f"mockup_studio.{module}.{component}")
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False

        self._logger.handlers.clear()

        log_file = _get_log_dir() / f"{module}.jsonl"
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=50 * 1024 * 1024,  # 50MB
            backupCount=10,
            encoding='utf-8',
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonLinesFormatter())
        self._logger.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(ConsoleFormatter())
            self._logger.addHandler(console_handler)

    def event(
        self,
        event_type: str,
        level: str = "INFO",
        **data: Any,
    ) -> None:
        """
        Log a structured event.

        Args:
            event_type: Event type identifier (e.g., "studio.store.persisted")
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            **data: Event-specific data fields
        """
        log_level = getattr(logging, level.upper(), logging.INFO)

        event_data = {
            "event_type": event_type,
            "studio_module": self.module,
            "component": self.component,
            **data,
        }

        self._logger.log(
            log_level,
            event_type,
            extra={
                "event_type": event_type,
                "studio_module": self.module,
                "component": self.component,
                "event_data": event_data,
                "fields": data,
            },
        )

    def debug(self, event_type: str, **data: Any) -> None:
        self.event(event_type, level="DEBUG", **data)

    def info(self, event_type: str, **data: Any) -> None:
        self.event(event_type, level="INFO", **data)

    def warning(self, event_type: str, **data: Any) -> None:
        self.event(event_type, level="WARNING", **data)

    def error(self, event_type: str, **data: Any) -> None:
        self.event(event_type, level="ERROR", **data)

    def exception(
        self,
        error: BaseException,
        event_type: str = "error",
        context: Optional[dict] = None,
    ) -> None:
        """
        Log an exception with its stack trace.

        Args:
            error: The exception to log
            event_type: Event type (default: "error")
            context: Additional context about what was happening
        """
        self.event(
            event_type,
            level="ERROR",
            error_class=type(error).__name__,
            error_message=str(error),
            stack_trace="".join(traceback.format_exception(type(error), error, error.__traceback__)),
            context=context or {},
        )

    # Adapter call lifecycle

    def call_start(self, operation: str, **kwargs: Any) -> float:
        """
        Log the start of an adapter call and return its start time.

        Args:
            operation: Adapter operation (enhance_text, synthesize_image, ...)
            **kwargs: Additional fields

        Returns:
            Start time (for duration calculation)
        """
        self.event(
            f"{self.module}.call.start",
            level="DEBUG",
            action="started",
            operation=operation,
            **kwargs,
        )
        return time.time()

    def call_complete(self, operation: str, start_time: float, **kwargs: Any) -> None:
        """Log a successful adapter call with its duration."""
        duration_ms = (time.time() - start_time) * 1000
        self.event(
            f"{self.module}.call.complete",
            action="completed",
            operation=operation,
            duration_ms=round(duration_ms, 2),
            **kwargs,
        )

    def call_error(
        self,
        operation: str,
        error: BaseException,
        start_time: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """Log a failed adapter call."""
        event_data = {
            "action": "failed",
            "operation": operation,
            "error": str(error),
            "error_type": type(error).__name__,
            **kwargs,
        }
        if start_time:
            event_data["duration_ms"] = round((time.time() - start_time) * 1000, 2)

        self.event(f"{self.module}.call.error", level="ERROR", **event_data)
