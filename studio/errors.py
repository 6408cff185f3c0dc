"""
Exception types raised by the studio.
"""

from typing import Optional

from .models import Mode


class StudioError(Exception):
    """Base class for studio errors."""


class ValidationError(StudioError):
    """Required input missing or malformed; raised before any adapter call."""

    def __init__(self, mode: Mode, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.mode = mode
        self.message = message
        self.field = field


class AdapterError(StudioError):
    """A generation backend call failed."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation


class PersistenceError(StudioError):
    """History could not be read or written. Never escapes the store."""
