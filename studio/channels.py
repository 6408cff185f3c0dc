"""
Error channel aggregation.

One error slot per output channel, so a failure in one channel neither
blocks nor corrupts the others.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from .models import Channel, Mode
from .modes import descriptor_for

ChannelErrors = Mapping[Channel, str]

# Fixed user-facing messages; the underlying error only goes to the log
CHANNEL_ERROR_MESSAGES: dict[tuple[Mode, Channel], str] = {
    (Mode.DESCRIPTION, Channel.PROMPT): "Failed to enhance prompt.",
    (Mode.DESCRIPTION, Channel.IMAGE): "Failed to generate preview.",
    (Mode.DESCRIPTION, Channel.HTML): "Failed to generate HTML from prompt.",
    (Mode.MODIFY, Channel.HTML): "Failed to modify HTML.",
    (Mode.CLONE, Channel.HTML): "Failed to clone UI.",
}

NO_ERRORS: ChannelErrors = MappingProxyType({})


def error_message(mode: Mode, channel: Channel) -> str:
    return CHANNEL_ERROR_MESSAGES[(Mode(mode), Channel(channel))]


def errors_to_dict(errors: ChannelErrors) -> dict[str, str]:
    return {channel.value: message for channel, message in errors.items()}


class ChannelErrorAggregator:
    """
    Tracks the outcome of each channel within a single run.

    Each channel has exactly one writer per run, so recording a second
    outcome for the same channel is a bug and raises.
    """

    def __init__(self, mode: Mode):
        self.mode = Mode(mode)
        self.channels = descriptor_for(self.mode).channels
        self._errors: dict[Channel, str] = {}
        self._succeeded: set[Channel] = set()

    def _check(self, channel: Channel) -> Channel:
        channel = Channel(channel)
        if channel not in self.channels:
            raise ValueError(f"channel {channel.value} does not apply to {self.mode.value} mode")
        if channel in self._errors or channel in self._succeeded:
            raise RuntimeError(f"channel {channel.value} already resolved")
        return channel

    def fail(self, channel: Channel) -> str:
        """Record a failure and return the message shown to the user."""
        channel = self._check(channel)
        message = error_message(self.mode, channel)
        self._errors[channel] = message
        return message

    def succeed(self, channel: Channel):
        self._succeeded.add(self._check(channel))

    def error_for(self, channel: Channel) -> Optional[str]:
        return self._errors.get(Channel(channel))

    def unresolved(self) -> list[Channel]:
        """Applicable channels with neither a result nor an error."""
        return [c for c in self.channels if c not in self._errors and c not in self._succeeded]

    def errors(self) -> ChannelErrors:
        """Read-only snapshot of the current errors."""
        return MappingProxyType(dict(self._errors))
