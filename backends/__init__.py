"""
Generation backends for Mockup Studio.

Usage:
    from backends import GeminiAdapters

    adapters = GeminiAdapters.from_config(load_config())
    html = await adapters.synthesize_html(prompt)
    await adapters.close()
"""

from .client import GeminiClient
from .gemini import (
    GeminiAdapters,
    extract_grounding_sources,
    extract_image,
    extract_text,
)

__all__ = [
    "GeminiClient",
    "GeminiAdapters",
    "extract_grounding_sources",
    "extract_image",
    "extract_text",
]
