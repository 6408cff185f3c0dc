"""
Mockup Studio - Generation orchestration engine.

Turns a mode plus its inputs into UI mockups:
- Three modes: description, modify (remix) and clone
- Concurrent fan-out with per-channel error isolation
- Run-id supersession so late results never overwrite a newer run
- Bounded (20), debounced, persisted run history with restore
"""

from .models import (
    Channel,
    CloneInput,
    CloneOutput,
    DescriptionInput,
    DescriptionOutput,
    GroundingSource,
    HistoryEntry,
    ImageAttachment,
    Mode,
    ModifyInput,
    ModifyOutput,
    VisualStyle,
    VISUAL_STYLES,
)
from .errors import StudioError, ValidationError, AdapterError
from .modes import MODE_DESCRIPTORS, ModeDescriptor, build_input, validate
from .adapters import GenerationAdapters, CloneResult, strip_code_fence
from .channels import ChannelErrorAggregator, CHANNEL_ERROR_MESSAGES
from .coordinator import Coordinator, ChannelResolved, ChannelFailed, RunSettled
from .history import HistoryLog, HistoryRecorder, MAX_HISTORY, summarize
from .store import HistoryStore
from .restore import RestoredState, restore
from .session import Session, SessionState
from .templates import Template, TemplateGallery, TEMPLATES

__all__ = [
    # Models
    "Channel",
    "CloneInput",
    "CloneOutput",
    "DescriptionInput",
    "DescriptionOutput",
    "GroundingSource",
    "HistoryEntry",
    "ImageAttachment",
    "Mode",
    "ModifyInput",
    "ModifyOutput",
    "VisualStyle",
    "VISUAL_STYLES",
    # Errors
    "StudioError",
    "ValidationError",
    "AdapterError",
    # Modes
    "MODE_DESCRIPTORS",
    "ModeDescriptor",
    "build_input",
    "validate",
    # Adapters
    "GenerationAdapters",
    "CloneResult",
    "strip_code_fence",
    # Orchestration
    "ChannelErrorAggregator",
    "CHANNEL_ERROR_MESSAGES",
    "Coordinator",
    "ChannelResolved",
    "ChannelFailed",
    "RunSettled",
    # History
    "HistoryLog",
    "HistoryRecorder",
    "HistoryStore",
    "MAX_HISTORY",
    "summarize",
    "RestoredState",
    "restore",
    # Session
    "Session",
    "SessionState",
    # Templates
    "Template",
    "TemplateGallery",
    "TEMPLATES",
]
