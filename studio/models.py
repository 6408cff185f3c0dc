"""
Data models for the studio.

Inputs, outputs and history entries are tagged by Mode: each mode has its own
frozen dataclass, so a clone entry can never carry a style and a remix can
never carry a preview image.
"""

import base64
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar, Optional, Union


class VisualStyle(str, Enum):
    """Visual styles offered for description-mode runs."""
    MINIMALIST = "Minimalist"
    NEUMORPHIC = "Neumorphic"
    CYBERPUNK = "Cyberpunk"
    GLASSMORPHISM = "Glassmorphism"
    BRUTALIST = "Brutalist"
    CORPORATE = "Clean & Corporate"
    PLAYFUL = "Playful & Illustrated"
    VINTAGE = "Vintage & Retro"


VISUAL_STYLES: list[VisualStyle] = list(VisualStyle)
DEFAULT_STYLE = VISUAL_STYLES[0]


class Mode(str, Enum):
    """Mutually exclusive generation workflows."""
    DESCRIPTION = "description"
    MODIFY = "modify"
    CLONE = "clone"


class Channel(str, Enum):
    """Independently resolvable output slots of a run."""
    PROMPT = "prompt"
    IMAGE = "image"
    HTML = "html"


MAX_SCREENSHOTS = 3


@dataclass(frozen=True)
class ImageAttachment:
    """A base64-encoded image (clone-mode screenshot)."""
    data: str
    media_type: str = "image/png"

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ImageAttachment":
        path = Path(path)
        media_type = mimetypes.guess_type(path.name)[0] or "image/png"
        return cls(
            data=base64.b64encode(path.read_bytes()).decode("ascii"),
            media_type=media_type,
        )

    def to_dict(self) -> dict:
        return {"data": self.data, "media_type": self.media_type}

    @classmethod
    def from_dict(cls, data: dict) -> "ImageAttachment":
        return cls(data=data["data"], media_type=data.get("media_type", "image/png"))


@dataclass(frozen=True)
class GroundingSource:
    """A citation returned alongside cloned HTML."""
    title: str
    uri: str

    def to_dict(self) -> dict:
        return {"title": self.title, "uri": self.uri}

    @classmethod
    def from_dict(cls, data: dict) -> "GroundingSource":
        return cls(title=data.get("title", ""), uri=data["uri"])


# ==================== Inputs ====================

@dataclass(frozen=True)
class DescriptionInput:
    """Free-form description plus a visual style."""
    mode: ClassVar[Mode] = Mode.DESCRIPTION

    text: str = ""
    style: VisualStyle = DEFAULT_STYLE

    def to_dict(self) -> dict:
        return {"text": self.text, "style": self.style.value}

    @classmethod
    def from_dict(cls, data: dict) -> "DescriptionInput":
        return cls(
            text=data.get("text", ""),
            style=VisualStyle(data.get("style", DEFAULT_STYLE.value)),
        )


@dataclass(frozen=True)
class ModifyInput:
    """HTML to restyle and the HTML whose look it should take on."""
    mode: ClassVar[Mode] = Mode.MODIFY

    base_html: str = ""
    style_html: str = ""

    def to_dict(self) -> dict:
        return {"base_html": self.base_html, "style_html": self.style_html}

    @classmethod
    def from_dict(cls, data: dict) -> "ModifyInput":
        return cls(
            base_html=data.get("base_html", ""),
            style_html=data.get("style_html", ""),
        )


@dataclass(frozen=True)
class CloneInput:
    """A page URL and/or up to three screenshots to clone."""
    mode: ClassVar[Mode] = Mode.CLONE

    url: str = ""
    screenshots: tuple[ImageAttachment, ...] = ()

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "screenshots": [s.to_dict() for s in self.screenshots],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CloneInput":
        return cls(
            url=data.get("url", ""),
            screenshots=tuple(ImageAttachment.from_dict(s) for s in data.get("screenshots", [])),
        )


RunInput = Union[DescriptionInput, ModifyInput, CloneInput]


# ==================== Outputs ====================
# None marks an absent channel; an empty string is a (possibly odd) result.

@dataclass(frozen=True)
class DescriptionOutput:
    mode: ClassVar[Mode] = Mode.DESCRIPTION

    enhanced_prompt: Optional[str] = None
    # data: URI or remote URI of the generated mockup
    preview_image: Optional[str] = None
    html: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "enhanced_prompt": self.enhanced_prompt,
            "preview_image": self.preview_image,
            "html": self.html,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DescriptionOutput":
        return cls(
            enhanced_prompt=data.get("enhanced_prompt"),
            preview_image=data.get("preview_image"),
            html=data.get("html"),
        )


@dataclass(frozen=True)
class ModifyOutput:
    mode: ClassVar[Mode] = Mode.MODIFY

    html: Optional[str] = None

    def to_dict(self) -> dict:
        return {"html": self.html}

    @classmethod
    def from_dict(cls, data: dict) -> "ModifyOutput":
        return cls(html=data.get("html"))


@dataclass(frozen=True)
class CloneOutput:
    """Cloned HTML and its grounding sources, always set together."""
    mode: ClassVar[Mode] = Mode.CLONE

    html: Optional[str] = None
    grounding_sources: tuple[GroundingSource, ...] = ()

    def __post_init__(self):
        if self.html is None and self.grounding_sources:
            raise ValueError("grounding sources without cloned html")

    def to_dict(self) -> dict:
        return {
            "html": self.html,
            "grounding_sources": [s.to_dict() for s in self.grounding_sources],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CloneOutput":
        return cls(
            html=data.get("html"),
            grounding_sources=tuple(
                GroundingSource.from_dict(s) for s in data.get("grounding_sources", [])
            ),
        )


RunOutput = Union[DescriptionOutput, ModifyOutput, CloneOutput]


INPUT_TYPES: dict[Mode, type] = {
    Mode.DESCRIPTION: DescriptionInput,
    Mode.MODIFY: ModifyInput,
    Mode.CLONE: CloneInput,
}

OUTPUT_TYPES: dict[Mode, type] = {
    Mode.DESCRIPTION: DescriptionOutput,
    Mode.MODIFY: ModifyOutput,
    Mode.CLONE: CloneOutput,
}


def empty_input(mode: Mode) -> RunInput:
    """Default (blank) input for a mode."""
    return INPUT_TYPES[Mode(mode)]()


def empty_output(mode: Mode) -> RunOutput:
    """Output with every channel absent."""
    return OUTPUT_TYPES[Mode(mode)]()


# ==================== History ====================

@dataclass(frozen=True)
class HistoryEntry:
    """
    Immutable record of one settled run.

    Created exactly once per settled run and never mutated; evicted only
    by capacity or an explicit clear.
    """
    # Creation-time-derived, strictly increasing across entries
    id: str
    input: RunInput
    output: RunOutput
    created_at: float = field(default=0.0, compare=False)

    def __post_init__(self):
        if self.input.mode != self.output.mode:
            raise ValueError(
                f"input mode {self.input.mode.value} does not match output mode {self.output.mode.value}"
            )

    @property
    def mode(self) -> Mode:
        return self.input.mode

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "mode": self.mode.value,
            "created_at": self.created_at,
            "input": self.input.to_dict(),
            "output": self.output.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        mode = Mode(data["mode"])
        return cls(
            id=str(data["id"]),
            input=INPUT_TYPES[mode].from_dict(data.get("input", {})),
            output=OUTPUT_TYPES[mode].from_dict(data.get("output", {})),
            created_at=float(data.get("created_at", 0.0)),
        )
