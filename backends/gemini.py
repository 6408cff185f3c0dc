"""
Gemini implementation of the studio's generation adapters.
"""

from typing import Optional, Sequence

from shared.logging import get_logger
from studio.adapters import CloneResult, GenerationAdapters, strip_code_fence
from studio.errors import AdapterError
from studio.models import GroundingSource, ImageAttachment, VisualStyle

from . import prompts
from .client import DEFAULT_BASE_URL, GeminiClient

log = get_logger("backends", "gemini")

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "imagen-3.0-generate-002"


def extract_text(response: dict, operation: str) -> str:
    """Concatenate the text parts of the first candidate."""
    candidates = response.get("candidates") or []
    if not candidates:
        raise AdapterError("Gemini returned no candidates", operation=operation)
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
    if not text.strip():
        raise AdapterError("Gemini returned an empty response", operation=operation)
    return text


def extract_grounding_sources(response: dict) -> tuple[GroundingSource, ...]:
    """Web citations of the first candidate, in order, without duplicate URIs."""
    candidates = response.get("candidates") or []
    if not candidates:
        return ()
    metadata = candidates[0].get("groundingMetadata") or {}

    sources: list[GroundingSource] = []
    seen: set[str] = set()
    for chunk in metadata.get("groundingChunks") or []:
        web = chunk.get("web") or {}
        uri = web.get("uri")
        if not uri or uri in seen:
            continue
        seen.add(uri)
        sources.append(GroundingSource(title=web.get("title") or uri, uri=uri))
    return tuple(sources)


def extract_image(response: dict) -> str:
    """First Imagen prediction as a data: URI."""
    predictions = response.get("predictions") or []
    if not predictions or not predictions[0].get("bytesBase64Encoded"):
        raise AdapterError("No image was generated.", operation="synthesize_image")
    prediction = predictions[0]
    mime_type = prediction.get("mimeType", "image/jpeg")
    return f"data:{mime_type};base64,{prediction['bytesBase64Encoded']}"


class GeminiAdapters(GenerationAdapters):
    """
    GenerationAdapters backed by Gemini (text, HTML, grounding) and Imagen (images).
    """

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        text_model: str = DEFAULT_TEXT_MODEL,
        image_model: str = DEFAULT_IMAGE_MODEL,
    ):
        self.client = client or GeminiClient()
        self.text_model = text_model
        self.image_model = image_model

    @classmethod
    def from_config(cls, config: dict) -> "GeminiAdapters":
        """Build from the backends.gemini section of the studio config."""
        gemini = config.get("backends", {}).get("gemini", {})
        client = GeminiClient(
            api_key=gemini.get("api_key"),
            base_url=gemini.get("base_url", DEFAULT_BASE_URL),
            timeout_seconds=gemini.get("timeout_seconds", 120),
        )
        return cls(
            client=client,
            text_model=gemini.get("text_model", DEFAULT_TEXT_MODEL),
            image_model=gemini.get("image_model", DEFAULT_IMAGE_MODEL),
        )

    async def close(self):
        await self.client.close()

    async def _generate_text(self, prompt: str, operation: str) -> str:
        response = await self.client.generate_content(self.text_model, [{"text": prompt}])
        return extract_text(response, operation)

    async def enhance_text(self, text: str, style: VisualStyle) -> str:
        return (await self._generate_text(prompts.enhance_prompt(text, style), "enhance_text")).strip()

    async def synthesize_image(self, prompt: str) -> str:
        response = await self.client.predict(self.image_model, prompts.image_prompt(prompt))
        return extract_image(response)

    async def synthesize_html(self, prompt: str) -> str:
        text = await self._generate_text(prompts.html_from_prompt(prompt), "synthesize_html")
        return strip_code_fence(text)

    async def restyle_html(self, base_html: str, style_html: str) -> str:
        text = await self._generate_text(prompts.restyle_html(base_html, style_html), "restyle_html")
        return strip_code_fence(text)

    async def clone_url(self, url: str, screenshots: Sequence[ImageAttachment]) -> CloneResult:
        parts: list[dict] = [{"text": prompts.clone_page(url, len(screenshots))}]
        for shot in screenshots:
            parts.append({"inline_data": {"mime_type": shot.media_type, "data": shot.data}})

        # Search grounding only helps when there is a page to look up
        tools = [{"google_search": {}}] if url else None
        response = await self.client.generate_content(self.text_model, parts, tools=tools)

        html = strip_code_fence(extract_text(response, "clone_url"))
        sources = extract_grounding_sources(response)
        log.info("backends.gemini.cloned", html_length=len(html), sources=len(sources))
        return CloneResult(html=html, grounding_sources=sources)
