"""
History recording.

HistoryRecorder turns a settled run into an immutable HistoryEntry.
HistoryLog is the bounded, most-recent-first sequence of entries.
"""

import re
import time
from dataclasses import dataclass
from typing import Iterator, Optional

from shared.logging import get_logger

from .models import (
    CloneInput,
    CloneOutput,
    DescriptionInput,
    DescriptionOutput,
    HistoryEntry,
    ModifyInput,
    RunInput,
    RunOutput,
)

log = get_logger("studio", "history")

MAX_HISTORY = 20


class HistoryLog:
    """
    Immutable most-recent-first list of entries, capped at MAX_HISTORY.

    Insertion is prepend-then-truncate: the oldest (tail) entries drop off
    and existing entries never change order.
    """

    def __init__(self, entries: tuple[HistoryEntry, ...] = (), max_length: int = MAX_HISTORY):
        self.max_length = max_length
        self._entries = tuple(entries)[:max_length]

    def prepend(self, entry: HistoryEntry) -> "HistoryLog":
        return HistoryLog((entry, *self._entries), self.max_length)

    def clear(self) -> "HistoryLog":
        return HistoryLog((), self.max_length)

    def find(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return self._entries

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, HistoryLog):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"HistoryLog({len(self._entries)} entries)"

    def to_list(self) -> list[dict]:
        return [e.to_dict() for e in self._entries]

    @classmethod
    def from_list(cls, data: list, max_length: int = MAX_HISTORY) -> "HistoryLog":
        """Rebuild a log from its JSON form. Raises on malformed data."""
        if not isinstance(data, list):
            raise TypeError(f"history must be a list, got {type(data).__name__}")
        return cls(tuple(HistoryEntry.from_dict(item) for item in data[:max_length]), max_length)


class HistoryRecorder:
    """
    Builds history entries for settled runs.

    Entry ids derive from the creation time in nanoseconds and are strictly
    increasing even when the clock stalls or steps back.
    """

    def __init__(self, last_id: int = 0):
        self._last_id = last_id

    def seed(self, history: HistoryLog):
        """Continue the id sequence after entries loaded from disk."""
        for entry in history:
            if re.fullmatch(r"[0-9]+", entry.id):
                self._last_id = max(self._last_id, int(entry.id))

    def _next_id(self) -> str:
        candidate = time.time_ns()
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def on_settled(self, run_input: RunInput, output: RunOutput) -> HistoryEntry:
        """Snapshot a settled run, partial output included."""
        entry = HistoryEntry(
            id=self._next_id(),
            input=run_input,
            output=output,
            created_at=time.time(),
        )
        log.debug("studio.history.entry_created", entry_id=entry.id, mode=entry.mode.value)
        return entry


@dataclass(frozen=True)
class EntrySummary:
    """What a history listing shows for one entry."""
    title: str
    badge: str
    subtitle: str
    preview: str
    thumbnail: Optional[str] = None


def summarize(entry: HistoryEntry) -> EntrySummary:
    """Describe an entry for a history listing."""
    run_input, output = entry.input, entry.output

    if isinstance(run_input, DescriptionInput) and isinstance(output, DescriptionOutput):
        return EntrySummary(
            title=run_input.text or "Generated UI",
            badge="Describe",
            subtitle=f"Style: {run_input.style.value}",
            preview=output.enhanced_prompt or "No prompt generated",
            thumbnail=output.preview_image,
        )

    if isinstance(run_input, ModifyInput):
        return EntrySummary(
            title="HTML Remix",
            badge="Remix",
            subtitle="Cloned style applied",
            preview=run_input.base_html or "No original HTML provided.",
        )

    if isinstance(run_input, CloneInput) and isinstance(output, CloneOutput):
        count = len(output.grounding_sources)
        return EntrySummary(
            title=run_input.url or "Screenshot clone",
            badge="Clone",
            subtitle=f"{count} source{'s' if count != 1 else ''}",
            preview=output.html or "No HTML generated",
        )

    raise TypeError(f"unsupported history entry: {entry!r}")
