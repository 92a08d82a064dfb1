"""Async wrapper around the vectorizer.ai raster-to-vector API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from outfitgen.config.settings import Settings

logger = logging.getLogger(__name__)

FILE_FORMATS = ("svg", "eps", "pdf", "dxf", "png")

CONTENT_TYPES = {
    "svg": "image/svg+xml",
    "pdf": "application/pdf",
    "eps": "application/postscript",
    "dxf": "application/dxf",
    "png": "image/png",
}

VECTORIZE_FORWARD_HEADERS = ("X-Image-Token", "X-Credits-Charged", "X-Credits-Calculated", "X-Receipt")
DOWNLOAD_FORWARD_HEADERS = ("X-Credits-Charged", "X-Credits-Calculated", "X-Receipt")


class VectorizerError(RuntimeError):
    """Raised for vectorizer failures; ``status_code`` is what the client sees."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.status_code = status_code
        super().__init__(message)


def api_mode(mode: str, is_test: bool) -> str:
    """
    Combine the UI mode (``production`` or ``preview``) with the test toggle.

    Test calls are free and watermarked; the API expects ``test`` or
    ``test_preview`` for them.
    """

    if is_test:
        return "test" if mode == "production" else "test_preview"
    return mode


def content_type_for(file_format: str | None) -> str:
    return CONTENT_TYPES.get(file_format or "svg", "image/svg+xml")


@dataclass(slots=True)
class VectorizeOptions:
    """Optional processing parameters forwarded as form fields."""

    mode: str = "test"
    max_colors: int | None = None
    retention_days: int | None = None
    palette: str | None = None
    min_area_px: float | None = None
    file_format: str | None = None

    def as_form(self) -> dict[str, str]:
        form: dict[str, str] = {}
        if self.mode:
            form["mode"] = self.mode
        if self.max_colors is not None:
            form["processing.max_colors"] = str(self.max_colors)
        if self.retention_days is not None:
            form["policy.retention_days"] = str(self.retention_days)
        if self.palette:
            form["processing.palette"] = self.palette
        if self.min_area_px is not None:
            form["processing.shapes.min_area_px"] = f"{self.min_area_px:g}"
        if self.file_format:
            form["output.file_format"] = self.file_format
        return form


@dataclass(slots=True)
class VectorResult:
    """Raw bytes returned by the API plus the headers callers pass through."""

    content: bytes
    headers: dict[str, str]


@dataclass(slots=True)
class AccountStatus:
    subscription_plan: str | None
    subscription_state: str | None
    credits: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "subscriptionPlan": self.subscription_plan,
            "subscriptionState": self.subscription_state,
            "credits": self.credits,
        }


class VectorizerClient:
    """Basic-auth client for the vectorize, download, delete and account endpoints."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        if not settings.vectorizer_api_username or not settings.vectorizer_api_password:
            raise VectorizerError("API credentials not configured", status_code=500)

        self._client = http_client or httpx.AsyncClient(
            base_url=settings.vectorizer_base_url.rstrip("/"),
            timeout=settings.request_timeout,
        )
        self._auth = httpx.BasicAuth(
            settings.vectorizer_api_username,
            settings.vectorizer_api_password,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        data: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method,
                endpoint,
                data=data,
                files=files,
                auth=self._auth,
            )
        except httpx.HTTPError as exc:
            raise VectorizerError(f"Vectorizer API unreachable: {exc}") from exc

        if response.is_error:
            raise VectorizerError(self._error_message(response))
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return f"Vectorizer API error: {response.status_code}"
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return "Vectorizer API error"

    @staticmethod
    def _forward_headers(response: httpx.Response, names: tuple[str, ...]) -> dict[str, str]:
        return {name: response.headers[name] for name in names if response.headers.get(name)}

    async def vectorize(
        self,
        image: tuple[str, bytes, str],
        options: VectorizeOptions | None = None,
    ) -> VectorResult:
        """Upload a raster image and return the vector output."""

        options = options or VectorizeOptions()
        logger.info("Vectorizing %s in %s mode", image[0], options.mode)
        response = await self._request(
            "POST",
            "/vectorize",
            data=options.as_form(),
            files={"image": image},
        )
        return VectorResult(
            content=response.content,
            headers=self._forward_headers(response, VECTORIZE_FORWARD_HEADERS),
        )

    async def download(
        self,
        image_token: str,
        *,
        receipt: str | None = None,
        file_format: str = "svg",
    ) -> VectorResult:
        """Download a previously vectorized image in the requested format."""

        form = {"image.token": image_token}
        if receipt:
            form["receipt"] = receipt
        if file_format:
            form["output.file_format"] = file_format
        response = await self._request("POST", "/download", data=form)
        return VectorResult(
            content=response.content,
            headers=self._forward_headers(response, DOWNLOAD_FORWARD_HEADERS),
        )

    async def delete(self, image_token: str) -> bool:
        """Delete a retained image from the vectorizer."""

        response = await self._request("POST", "/delete", data={"image.token": image_token})
        return response.json().get("success") is True

    async def account(self) -> AccountStatus:
        response = await self._request("GET", "/account")
        payload = response.json()
        return AccountStatus(
            subscription_plan=payload.get("subscriptionPlan"),
            subscription_state=payload.get("subscriptionState"),
            credits=payload.get("credits"),
        )
