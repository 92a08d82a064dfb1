"""Shared fixtures: isolated settings, fake provider transports and image factories."""

from __future__ import annotations

import base64
import json
from io import BytesIO
from pathlib import Path
from typing import Any, Callable

import httpx
import numpy as np
import pytest
from PIL import Image

from outfitgen.config.settings import Settings
from outfitgen.imggen.gemini_client import GeminiClient

GEMINI_BASE_URL = "https://gemini.test/v1beta"


def _encode_png(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _solid_png(color: tuple[int, int, int], size: tuple[int, int] = (8, 8)) -> bytes:
    return _encode_png(Image.new("RGB", size, color))


def image_response(data: str = "aGVsbG8=", mime_type: str = "image/png") -> dict[str, Any]:
    return {
        "candidates": [
            {
                "finishReason": "STOP",
                "content": {"parts": [{"inlineData": {"mimeType": mime_type, "data": data}}]},
            }
        ]
    }


class FakeGemini:
    """Records ``generateContent`` calls and replies with a configurable response."""

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.status_code = 200
        self.payload: dict[str, Any] = image_response()
        self.exception: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.exception is not None:
            raise self.exception
        self.requests.append(
            {
                "url": str(request.url),
                "headers": dict(request.headers),
                "body": json.loads(request.content) if request.content else None,
            }
        )
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_parts(self) -> list[dict[str, Any]]:
        return self.requests[-1]["body"]["contents"][0]["parts"]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        google_ai_api_key="test-key",
        gemini_base_url=GEMINI_BASE_URL,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}",
        media_root=str(tmp_path / "media"),
        vectorizer_api_username="vector-user",
        vectorizer_api_password="vector-pass",
        vectorizer_base_url="https://vectorizer.test/api/v1",
    )


@pytest.fixture
def fake_gemini() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def gemini_client(settings: Settings, fake_gemini: FakeGemini) -> GeminiClient:
    http_client = httpx.AsyncClient(
        base_url=GEMINI_BASE_URL,
        transport=httpx.MockTransport(fake_gemini.handler),
    )
    return GeminiClient(settings, http_client=http_client)


@pytest.fixture
def b64_png() -> Callable[..., str]:
    def _factory(color: tuple[int, int, int] = (10, 20, 30)) -> str:
        return base64.b64encode(_solid_png(color)).decode()

    return _factory


@pytest.fixture
def solid_png() -> Callable[..., bytes]:
    """Factory for a flat-colour RGB PNG."""

    return _solid_png


@pytest.fixture
def png_bytes() -> Callable[[np.ndarray], bytes]:
    """Factory that encodes an RGB or RGBA array as PNG."""

    def _factory(pixels: np.ndarray) -> bytes:
        return _encode_png(Image.fromarray(pixels.astype(np.uint8)))

    return _factory
