"""
Generation adapter interface.

The studio never talks to a model directly. Each backend implements
GenerationAdapters; every method returns an already-cleaned value or
raises. The coordinator treats any exception as a channel failure.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

from .errors import AdapterError
from .models import GroundingSource, ImageAttachment, VisualStyle

__all__ = [
    "AdapterError",
    "CloneResult",
    "GenerationAdapters",
    "strip_code_fence",
]

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Remove a ```html ... ``` wrapper around model output, if present."""
    text = (text or "").strip()
    match = _CODE_FENCE.match(text)
    if match and match.group(1):
        return match.group(1).strip()
    return text


@dataclass(frozen=True)
class CloneResult:
    """Cloned HTML with its grounding citations; returned atomically."""
    html: str
    grounding_sources: tuple[GroundingSource, ...] = field(default_factory=tuple)


class GenerationAdapters(ABC):
    """
    Abstract interface to the external generation capabilities.

    Implementations handle transport, auth and response post-processing.
    """

    @abstractmethod
    async def enhance_text(self, text: str, style: VisualStyle) -> str:
        """Expand a short UI description into a structured design prompt."""
        pass

    @abstractmethod
    async def synthesize_image(self, prompt: str) -> str:
        """Render a mockup image; returns a data: URI or remote URI."""
        pass

    @abstractmethod
    async def synthesize_html(self, prompt: str) -> str:
        """Turn a design prompt into HTML."""
        pass

    @abstractmethod
    async def restyle_html(self, base_html: str, style_html: str) -> str:
        """Apply the look of style_html to the content of base_html."""
        pass

    @abstractmethod
    async def clone_url(self, url: str, screenshots: Sequence[ImageAttachment]) -> CloneResult:
        """Recreate a page from its URL and/or screenshots."""
        pass

    async def close(self):
        """Release transport resources."""
        pass
