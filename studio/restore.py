"""
Session restore: rebuild the input/output state of a past run.

Pure; no adapter calls and no history changes.
"""

from dataclasses import dataclass

from .models import HistoryEntry, Mode, RunInput, RunOutput, empty_input


@dataclass(frozen=True)
class RestoredState:
    mode: Mode
    run_input: RunInput
    output: RunOutput
    # Drafts for every mode: the restored mode carries the entry's input,
    # the others are reset to their defaults
    inputs: dict[Mode, RunInput]


def restore(entry: HistoryEntry) -> RestoredState:
    """Reconstruct the state a history entry was recorded from."""
    inputs = {mode: empty_input(mode) for mode in Mode}
    inputs[entry.mode] = entry.input
    return RestoredState(
        mode=entry.mode,
        run_input=entry.input,
        output=entry.output,
        inputs=inputs,
    )
