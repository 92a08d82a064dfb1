"""Async client for the Gemini ``generateContent`` REST endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import httpx

from outfitgen.config.settings import Settings
from outfitgen.imggen.errors import (
    ConfigurationError,
    ProviderNetworkError,
    ProviderRequestError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InlineImage:
    """Base64 image payload sent to the model."""

    data: str
    mime_type: str

    def as_part(self) -> dict[str, Any]:
        return {"inlineData": {"mimeType": self.mime_type, "data": self.data}}


class GeminiClient:
    """Thin wrapper that sends multimodal prompts and returns the raw JSON response."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        if not settings.google_ai_api_key:
            raise ConfigurationError("GOOGLE_AI_API_KEY is not configured")

        self._settings = settings
        self._client = http_client or httpx.AsyncClient(
            base_url=settings.gemini_base_url.rstrip("/"),
            timeout=settings.request_timeout,
        )
        self._headers = {"x-goog-api-key": settings.google_ai_api_key}

    @property
    def model(self) -> str:
        return self._settings.gemini_model

    async def close(self) -> None:
        """Close the underlying HTTP session."""

        await self._client.aclose()

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(
                method,
                endpoint,
                json=json_body,
                headers=self._headers,
            )
            response.raise_for_status()
            if not response.content:
                return {}
            return response.json()
        except httpx.TimeoutException as exc:
            raise ProviderRequestError(
                f"DEADLINE_EXCEEDED: request timeout after {self._settings.request_timeout:g}s",
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderRequestError(
                self._error_message(exc.response),
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderNetworkError(str(exc) or type(exc).__name__) from exc

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Build ``STATUS: message`` from a Google API error body."""

        try:
            payload = response.json()
        except ValueError:
            return f"HTTP {response.status_code}: {response.text}"
        error = payload.get("error") if isinstance(payload, dict) else None
        if not isinstance(error, dict):
            return f"HTTP {response.status_code}: {response.text}"
        status = error.get("status") or f"HTTP {response.status_code}"
        return f"{status}: {error.get('message', '')}".strip()

    async def generate_image(
        self,
        images: Sequence[InlineImage],
        prompt: str,
    ) -> dict[str, Any]:
        """Send images followed by the text prompt and request an image-only answer."""

        parts = [image.as_part() for image in images]
        parts.append({"text": prompt})
        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"responseModalities": ["IMAGE"]},
        }
        logger.info("Calling %s with %d image(s)", self.model, len(images))
        return await self._request_json(
            "POST",
            f"/models/{self.model}:generateContent",
            json_body=payload,
        )

    async def ping(self) -> bool:
        """Return ``True`` when the configured model can be looked up."""

        payload = await self._request_json("GET", f"/models/{self.model}")
        return bool(payload.get("name"))
