from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from errors import ModelError
from settings import Settings

logger = logging.getLogger("math-practice.gemini")


class TextModel(Protocol):
    """Anything that turns a prompt into text. Routes depend on this, not on Gemini."""

    def generate(self, prompt: str) -> str: ...


class GeminiClient:
    """
    Single-call client for the Gemini generateContent REST endpoint.

    No retries: a failed call surfaces as ModelError and fails the request.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._client = http_client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.gemini_timeout_seconds,
        )

    def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise ModelError("GEMINI_API_KEY is not configured")

        payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        try:
            r = self._client.post(self.url, params={"key": self.api_key}, json=payload)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Gemini returned HTTP %s: %s", e.response.status_code, e.response.text)
            raise ModelError(f"AI model request failed with HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error("Gemini request error: %s", e)
            raise ModelError(f"AI model request failed: {type(e).__name__}") from e

        try:
            data = r.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("Unexpected Gemini response: %s", r.text)
            raise ModelError("Unexpected AI model response") from e
        if not isinstance(text, str):
            raise ModelError("Unexpected AI model response")

        logger.debug("Raw AI response: %s", text)
        return text

    def close(self) -> None:
        self._client.close()
