"""
History Store.

Persists the bounded history log as one JSON array file:
1. Best-effort load: missing, unreadable or corrupt files give an empty log
2. Debounced writes: rapid successive changes coalesce into one write
3. Write-on-change: identical content is never rewritten
4. Atomic writes: .tmp -> fsync -> replace

Persistence failures are logged and swallowed; history is not
safety-critical and must never take the session down.
"""

import asyncio
import contextlib
import json
import os
from pathlib import Path
from typing import Optional, Union

from shared.logging import get_logger

from .errors import PersistenceError
from .history import HistoryLog, MAX_HISTORY
from .models import HistoryEntry

log = get_logger("studio", "store")


class HistoryStore:
    """
    Owns the HistoryLog and its on-disk copy.
    """

    def __init__(
        self,
        path: Union[str, Path],
        debounce_seconds: float = 0.5,
        max_length: int = MAX_HISTORY,
    ):
        self.path = Path(path)
        self.debounce_seconds = debounce_seconds
        self.max_length = max_length

        self.history = HistoryLog(max_length=max_length)

        self._pending: Optional[HistoryLog] = None
        self._flush_task: Optional[asyncio.Task] = None
        # Serialized form of what is on disk; no file counts as an empty log
        self._on_disk = self._serialize(HistoryLog(max_length=max_length))

    @staticmethod
    def _serialize(history: HistoryLog) -> str:
        return json.dumps(history.to_list(), indent=2, ensure_ascii=False)

    # ==================== Loading ====================

    def load(self) -> HistoryLog:
        """
        Load the persisted log. Never raises.

        A corrupt file is removed so the next save starts clean.
        """
        try:
            self.history = self._read()
        except PersistenceError as e:
            log.error("studio.store.load_failed", path=str(self.path), error=str(e))
            self._remove_file()
            self.history = HistoryLog(max_length=self.max_length)

        self._on_disk = self._serialize(self.history)
        log.info("studio.store.loaded", path=str(self.path), entries=len(self.history))
        return self.history

    def _read(self) -> HistoryLog:
        if not self.path.exists():
            return HistoryLog(max_length=self.max_length)
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return HistoryLog.from_list(data, self.max_length)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise PersistenceError(f"unreadable history file: {e}") from e

    # ==================== Mutations ====================

    def append(self, entry: HistoryEntry) -> HistoryLog:
        """Prepend an entry (dropping the oldest beyond capacity) and schedule a save."""
        self.history = self.history.prepend(entry)
        log.info("studio.store.entry_appended", entry_id=entry.id, entries=len(self.history))
        self.persist(self.history)
        return self.history

    def clear(self) -> HistoryLog:
        """Empty the log and remove the file immediately."""
        self._cancel_flush()
        self._pending = None
        self.history = self.history.clear()
        self._remove_file()
        self._on_disk = self._serialize(self.history)
        log.info("studio.store.cleared", path=str(self.path))
        return self.history

    # ==================== Persistence ====================

    def persist(self, history: HistoryLog):
        """
        Schedule a save of the given log.

        Calls within debounce_seconds of each other coalesce; only the latest
        log is written. Without a running event loop the write is immediate.
        """
        self._pending = history

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.flush()
            return

        self._cancel_flush()
        self._flush_task = loop.create_task(self._flush_later())

    async def _flush_later(self):
        try:
            await asyncio.sleep(self.debounce_seconds)
        except asyncio.CancelledError:
            return
        self._flush_task = None
        self.flush()

    def _cancel_flush(self):
        if self._flush_task and not self._flush_task.done():
            self._flush_task.cancel()
        self._flush_task = None

    def flush(self):
        """Write any pending log now."""
        self._cancel_flush()
        pending, self._pending = self._pending, None
        if pending is not None:
            self._write(pending)

    async def close(self):
        """Flush pending writes; called on session teardown."""
        self.flush()
        log.debug("studio.store.closed", path=str(self.path))

    @property
    def has_pending_write(self) -> bool:
        return self._pending is not None

    def _write(self, history: HistoryLog):
        serialized = self._serialize(history)
        if serialized == self._on_disk:
            log.debug("studio.store.unchanged", entries=len(history))
            return

        try:
            if len(history) == 0:
                self._remove_file(strict=True)
            else:
                self._atomic_write(serialized)
        except PersistenceError as e:
            log.error("studio.store.persist_failed", path=str(self.path), error=str(e))
            return

        self._on_disk = serialized
        log.debug("studio.store.persisted", path=str(self.path), entries=len(history))

    def _atomic_write(self, serialized: str):
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(serialized)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except OSError as e:
            with contextlib.suppress(OSError):
                temp_path.unlink(missing_ok=True)
            raise PersistenceError(f"could not write history: {e}") from e

    def _remove_file(self, strict: bool = False):
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            if strict:
                raise PersistenceError(f"could not remove history: {e}") from e
            log.warning("studio.store.remove_failed", path=str(self.path), error=str(e))
