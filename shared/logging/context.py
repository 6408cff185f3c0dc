"""
Correlation context for tracing runs through the studio.

ContextVar-based, so values follow asyncio tasks spawned inside a run.
"""

import uuid
from contextvars import ContextVar
from contextlib import contextmanager
from typing import Optional, Generator

_correlation_id: ContextVar[str] = ContextVar('correlation_id', default='')
_session_id: ContextVar[str] = ContextVar('session_id', default='')
_run_id: ContextVar[Optional[int]] = ContextVar('run_id', default=None)


def get_correlation_id() -> str:
    """Get current correlation ID, generating one if none exists."""
    cid = _correlation_id.get()
    if not cid:
        cid = str(uuid.uuid4())
        _correlation_id.set(cid)
    return cid


def set_correlation_id(cid: str) -> None:
    """Set correlation ID for current context."""
    _correlation_id.set(cid)


def get_session_id() -> Optional[str]:
    """Get current session ID."""
    return _session_id.get() or None


def set_session_id(sid: str) -> None:
    """Set session ID for current context."""
    _session_id.set(sid)


def get_run_id() -> Optional[int]:
    """Get the generation run bound to the current context."""
    return _run_id.get()


@contextmanager
def run_context(run_id: int, session_id: Optional[str] = None) -> Generator[str, None, None]:
    """
    Bind a generation run (and a fresh correlation ID) to the current context.

    Args:
        run_id: Monotonic run identifier assigned by the session
        session_id: Optional session ID

    Yields:
        The correlation ID used for this run
    """
    old_cid = _correlation_id.get()
    old_sid = _session_id.get()
    old_run = _run_id.get()

    try:
        _correlation_id.set(str(uuid.uuid4()))
        _run_id.set(run_id)
        if session_id:
            _session_id.set(session_id)
        yield _correlation_id.get()
    finally:
        _correlation_id.set(old_cid)
        _session_id.set(old_sid)
        _run_id.set(old_run)


@contextmanager
def correlation_context(
    correlation_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> Generator[str, None, None]:
    """
    Context manager for setting correlation context.

    Example:
        with correlation_context() as cid:
            log.info("studio.cli.command", correlation_id=cid)
    """
    old_cid = _correlation_id.get()
    old_sid = _session_id.get()

    try:
        if correlation_id:
            _correlation_id.set(correlation_id)
        elif not old_cid:
            _correlation_id.set(str(uuid.uuid4()))

        if session_id:
            _session_id.set(session_id)

        yield get_correlation_id()
    finally:
        _correlation_id.set(old_cid)
        _session_id.set(old_sid)
