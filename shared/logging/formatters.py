"""
Formatters for studio logs: JSON Lines for files, plain text for the console.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from .context import get_correlation_id, get_session_id, get_run_id


class JsonLinesFormatter(logging.Formatter):
    """
    Formats log records as JSON Lines (one JSON object per line).

    Each log entry includes:
    - timestamp: ISO 8601 with microseconds in UTC
    - level: Log level
    - event_type: Dotted event identifier (e.g. "studio.session.run_started")
    - module / component: Where the event was emitted
    - correlation_id: Tracing ID for the current run or command
    - session_id / run_id: When bound
    - Additional event-specific fields
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "event_type": getattr(record, 'event_type', 'log'),
            "module": getattr(record, 'studio_module', record.module),
            "component": getattr(record, 'component', record.funcName),
            "correlation_id": get_correlation_id(),
        }

        session_id = get_session_id()
        if session_id:
            log_entry["session_id"] = session_id

        run_id = get_run_id()
        if run_id is not None:
            log_entry["run_id"] = run_id

        if hasattr(record, 'event_data'):
            log_entry.update(record.event_data)

        if record.getMessage() and record.getMessage() != log_entry.get("event_type"):
            log_entry["message"] = record.getMessage()

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=self._json_serializer)

    def _json_serializer(self, obj: Any) -> Any:
        """Handle non-serializable objects."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        if hasattr(obj, 'value'):
            return obj.value
        return repr(obj)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter.

    Format: timestamp [LEVEL] [module.component] event_type key=value ...
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        module = getattr(record, 'studio_module', record.module)
        component = getattr(record, 'component', '')
        event_type = getattr(record, 'event_type', '')

        prefix = f"{timestamp} [{record.levelname}]"
        if module and component:
            prefix += f" [{module}.{component}]"

        message = record.getMessage()
        if event_type and event_type != message:
            message = f"{event_type}: {message}" if message else event_type

        fields = getattr(record, 'fields', {})
        if fields:
            message += " " + " ".join(f"{k}={v}" for k, v in fields.items())

        return f"{prefix} {message}"
