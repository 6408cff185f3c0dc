"""
Session: the presentation boundary of the studio.

Holds the current mode, per-mode input drafts, the current (possibly
partial) output, per-channel errors and the history log. Commands mirror
what a UI offers: set_mode, set_input, start_run, restore, clear_history.

Runs are tagged with a monotonically increasing id. Only the active run
may write output, errors or history; events from a superseded run are
dropped at the write site.
"""

import uuid
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Optional

from shared.logging import get_logger, run_context

from .adapters import GenerationAdapters
from .channels import NO_ERRORS, ChannelErrors, errors_to_dict
from .coordinator import ChannelFailed, ChannelResolved, Coordinator, RunEvent, RunSettled
from .errors import ValidationError
from .history import HistoryLog, HistoryRecorder
from .models import (
    HistoryEntry,
    Mode,
    RunInput,
    RunOutput,
    empty_input,
    empty_output,
)
from .modes import validate, with_field
from .restore import RestoredState, restore
from .store import HistoryStore

log = get_logger("studio", "session")

Listener = Callable[[RunEvent], None]


class SessionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    RUNNING = "running"
    SETTLED = "settled"
    RESTORING = "restoring"


class Session:
    """
    One user's working state.

    Lifecycle: init() loads persisted history; teardown() flushes any
    pending history write.
    """

    def __init__(
        self,
        adapters: GenerationAdapters,
        store: HistoryStore,
        session_id: Optional[str] = None,
    ):
        self.coordinator = Coordinator(adapters)
        self.store = store
        self.recorder = HistoryRecorder()
        self.session_id = session_id or uuid.uuid4().hex[:12]

        self.mode = Mode.DESCRIPTION
        self.inputs: dict[Mode, RunInput] = {m: empty_input(m) for m in Mode}
        self.output: RunOutput = empty_output(self.mode)
        self.errors: ChannelErrors = NO_ERRORS
        self.state = SessionState.IDLE

        self._run_counter = 0
        self._active_run_id = 0
        self._listeners: list[Listener] = []

    # ==================== Lifecycle ====================

    def init(self) -> HistoryLog:
        history = self.store.load()
        self.recorder.seed(history)
        self.state = SessionState.IDLE
        log.info("studio.session.initialized",
                 session_id=self.session_id, history=len(history))
        return history

    async def teardown(self):
        await self.store.close()

    # ==================== Views ====================

    @property
    def history(self) -> HistoryLog:
        return self.store.history

    @property
    def run_input(self) -> RunInput:
        """The input draft of the active mode."""
        return self.inputs[self.mode]

    @property
    def is_running(self) -> bool:
        return self.state == SessionState.RUNNING

    @property
    def active_run_id(self) -> int:
        return self._active_run_id

    def snapshot(self) -> dict:
        return {
            "mode": self.mode.value,
            "state": self.state.value,
            "is_running": self.is_running,
            "input": self.run_input.to_dict(),
            "output": self.output.to_dict(),
            "errors": errors_to_dict(self.errors),
            "history": len(self.history),
        }

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Receive every event applied to this session. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: RunEvent):
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                log.exception(e, "studio.session.listener_error", {
                    "event": type(event).__name__,
                })

    # ==================== Commands ====================

    def set_mode(self, mode: Mode):
        """Switch modes; clears output and errors from the previous mode."""
        mode = Mode(mode)
        if self.is_running:
            raise RuntimeError("cannot change mode while a run is in progress")
        if mode == self.mode:
            return
        self.mode = mode
        self.output = empty_output(mode)
        self.errors = NO_ERRORS
        self.state = SessionState.IDLE
        log.debug("studio.session.mode_changed", mode=mode.value)

    def set_input(self, field: str, value: Any):
        """Set one field of the active mode's input draft."""
        self.inputs[self.mode] = with_field(self.run_input, field, value)

    def use_template(self, html: str, target: str = "base"):
        """Load generated template HTML into remix mode as the base or the style source."""
        if target not in ("base", "style"):
            raise ValueError(f"unknown template target: {target!r}")
        self.set_mode(Mode.MODIFY)
        self.set_input("base_html" if target == "base" else "style_html", html)

    async def start_run(self) -> Optional[RunSettled]:
        """
        Validate the active input and run it.

        Returns the settle event, or None if a newer run or a restore
        superseded this one before it settled.

        Raises:
            ValidationError: before any adapter call; current output is untouched
        """
        previous_state = self.state
        self.state = SessionState.VALIDATING
        run_input = self.run_input
        try:
            validate(run_input)
        except ValidationError as e:
            self.state = previous_state
            log.info("studio.session.validation_failed",
                     mode=run_input.mode.value, field=e.field, message=e.message)
            raise

        self._run_counter += 1
        run_id = self._run_counter
        if self._active_run_id and previous_state == SessionState.RUNNING:
            log.info("studio.session.run_superseded",
                     superseded=self._active_run_id, by=run_id)
        self._active_run_id = run_id

        self.output = empty_output(run_input.mode)
        self.errors = NO_ERRORS
        self.state = SessionState.RUNNING

        settled: Optional[RunSettled] = None
        with run_context(run_id, self.session_id):
            log.info("studio.session.run_started", run_id=run_id, mode=run_input.mode.value)
            try:
                async for event in self.coordinator.run(run_id, run_input):
                    if self._apply(event, run_input) and isinstance(event, RunSettled):
                        settled = event
            finally:
                # Cancelled before settling: leave the loading state
                if self._active_run_id == run_id and self.state == SessionState.RUNNING:
                    self.state = SessionState.IDLE
        return settled

    def _apply(self, event: RunEvent, run_input: RunInput) -> bool:
        """Apply an event if it belongs to the active run."""
        if event.run_id != self._active_run_id:
            log.debug("studio.session.stale_event_dropped",
                      run_id=event.run_id,
                      active_run_id=self._active_run_id,
                      event=type(event).__name__)
            return False

        if isinstance(event, ChannelResolved):
            self.output = event.output
        elif isinstance(event, ChannelFailed):
            self.errors = MappingProxyType({**self.errors, event.channel: event.message})
        elif isinstance(event, RunSettled):
            self.output = event.output
            self.errors = event.errors
            entry = self.recorder.on_settled(run_input, event.output)
            self.store.append(entry)
            self.state = SessionState.SETTLED

        self._notify(event)
        return True

    def restore(self, entry_id: str) -> RestoredState:
        """
        Replace the current state with a past run's input and output.

        Any in-flight run is superseded. History is left untouched.

        Raises:
            KeyError: no entry with that id
        """
        entry: Optional[HistoryEntry] = self.history.find(entry_id)
        if entry is None:
            raise KeyError(entry_id)

        self.state = SessionState.RESTORING
        self._run_counter += 1
        self._active_run_id = self._run_counter

        restored = restore(entry)
        self.mode = restored.mode
        self.inputs = dict(restored.inputs)
        self.output = restored.output
        self.errors = NO_ERRORS
        self.state = SessionState.IDLE

        log.info("studio.session.restored", entry_id=entry_id, mode=restored.mode.value)
        return restored

    def clear_history(self) -> HistoryLog:
        return self.store.clear()
