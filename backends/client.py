"""
Gemini REST client.

Thin aiohttp wrapper over the generativelanguage API: generateContent for
text (optionally grounded with Google Search) and predict for Imagen.
Every failure surfaces as AdapterError; there are no retries.
"""

import asyncio
import os
from typing import Optional

import aiohttp

from shared.logging import get_logger
from studio.errors import AdapterError

log = get_logger("backends", "client")

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiClient:
    """
    Usage:
        client = GeminiClient()
        data = await client.generate_content("gemini-2.5-flash", [{"text": "Hi"}])
        await client.close()
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 120,
    ):
        """
        Args:
            api_key: Gemini API key (or uses GEMINI_API_KEY env var)
            base_url: API base URL
            timeout_seconds: Total timeout per request
        """
        self._api_key = api_key or os.environ.get("GEMINI_API_KEY")
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._http_session: Optional[aiohttp.ClientSession] = None

    async def _get_http_session(self) -> aiohttp.ClientSession:
        if self._http_session is None or self._http_session.closed:
            self._http_session = aiohttp.ClientSession()
        return self._http_session

    async def close(self):
        if self._http_session and not self._http_session.closed:
            await self._http_session.close()
            self._http_session = None

    async def _post(self, model: str, method: str, body: dict) -> dict:
        if not self._api_key:
            raise AdapterError("GEMINI_API_KEY not configured", operation=method)

        url = f"{self._base_url}/models/{model}:{method}"
        log.debug("backends.gemini.request", model=model, method=method)

        try:
            session = await self._get_http_session()
            async with session.post(
                url,
                headers={
                    "x-goog-api-key": self._api_key,
                    "Content-Type": "application/json",
                },
                json=body,
                timeout=aiohttp.ClientTimeout(total=self._timeout_seconds),
            ) as resp:
                try:
                    data = await resp.json(content_type=None)
                except ValueError:
                    data = None
                if not isinstance(data, dict):
                    data = {}

                if resp.status != 200:
                    error = data.get("error")
                    message = error.get("message") if isinstance(error, dict) else None
                    message = message or f"HTTP {resp.status}"
                    log.error("backends.gemini.error",
                              model=model, method=method, status=resp.status, error=message)
                    raise AdapterError(f"Gemini API error: {message}", operation=method)

                return data

        except asyncio.TimeoutError:
            raise AdapterError(
                f"Gemini request timed out after {self._timeout_seconds} seconds",
                operation=method,
            ) from None
        except aiohttp.ClientError as e:
            raise AdapterError(f"Gemini connection error: {e}", operation=method) from e

    async def generate_content(
        self,
        model: str,
        parts: list[dict],
        tools: Optional[list[dict]] = None,
    ) -> dict:
        """Call models/{model}:generateContent with one user turn."""
        body: dict = {"contents": [{"role": "user", "parts": parts}]}
        if tools:
            body["tools"] = tools
        return await self._post(model, "generateContent", body)

    async def predict(self, model: str, prompt: str, mime_type: str = "image/jpeg") -> dict:
        """Call models/{model}:predict for a single Imagen sample."""
        body = {
            "instances": [{"prompt": prompt}],
            "parameters": {"sampleCount": 1, "outputMimeType": mime_type},
        }
        return await self._post(model, "predict", body)
