"""Use-cases that forward images to the generative model and return a data URI."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from outfitgen.imggen.errors import (
    NETWORK_ERROR,
    NO_CANDIDATES,
    SAFETY_BLOCKED,
    GenerationError,
    ProviderNetworkError,
    ProviderRequestError,
    classify_provider_error,
)
from outfitgen.imggen.gemini_client import GeminiClient, InlineImage
from outfitgen.imggen.prompt_builder import BackgroundType, GarmentType, PromptBuilder
from outfitgen.imgproc.normalize import normalize_mime_type
from outfitgen.monitoring.metrics import generation_requests_total, provider_errors_total

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:image/[a-z]+;base64,")
_BASE64_BODY = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")
_URL_IN_TEXT = re.compile(r"https?://\S+")


@dataclass(frozen=True, slots=True)
class ImageInput:
    """Image received from the client before validation."""

    data: str
    mime_type: str = "image/jpeg"

    @classmethod
    def from_payload(cls, value: Any) -> ImageInput | None:
        """
        Accept either a bare base64 string or a ``{"data", "mimeType"}`` mapping.

        Bare strings predate the mapping form and are assumed to be JPEG.
        """

        if value is None:
            return None
        if isinstance(value, str):
            return cls(data=value)
        if isinstance(value, Mapping):
            return cls(
                data=value.get("data") or "",
                mime_type=value.get("mimeType") or "image/jpeg",
            )
        raise TypeError(f"Unsupported image payload: {type(value).__name__}")


def clean_base64(value: str) -> str:
    """Strip a ``data:image/...;base64,`` prefix if present."""

    return _DATA_URL_PREFIX.sub("", value, count=1)


def is_valid_base64(value: str) -> bool:
    cleaned = clean_base64(value)
    if not cleaned or not _BASE64_BODY.match(cleaned):
        return False
    try:
        base64.b64decode(cleaned, validate=True)
    except (ValueError, binascii.Error):
        return False
    return True


def to_inline_image(image: ImageInput) -> InlineImage:
    return InlineImage(
        data=clean_base64(image.data),
        mime_type=normalize_mime_type(image.mime_type),
    )


def extract_image_url(response: Mapping[str, Any], output_mime_type: str | None = None) -> str | None:
    """
    Return the first image reference in a ``generateContent`` response.

    A text part containing an http(s) URL or an ``inlineData`` part, whichever
    comes first, is returned; inline data is wrapped in a data URI. Raises
    :class:`GenerationError` when the model returned nothing or was blocked.
    """

    candidates = response.get("candidates") or []
    if not candidates:
        logger.error("No candidates in response: %s", response)
        raise GenerationError(NO_CANDIDATES, status_code=500)

    candidate = candidates[0] or {}
    finish_reason = candidate.get("finishReason")
    if finish_reason == "SAFETY":
        raise GenerationError(SAFETY_BLOCKED, status_code=400)
    if finish_reason and finish_reason != "STOP":
        logger.warning("Unexpected finish reason: %s", finish_reason)

    content = candidate.get("content") or {}
    for part in content.get("parts") or []:
        text = part.get("text")
        if text:
            match = _URL_IN_TEXT.search(text)
            if match:
                return match.group(0)
        elif part.get("inlineData"):
            inline = part["inlineData"]
            mime_type = output_mime_type or inline.get("mimeType") or "image/png"
            return f"data:{mime_type};base64,{inline.get('data', '')}"
    return None


class GenerationService:
    """Validates client images, builds prompts and interprets model responses."""

    def __init__(self, client: GeminiClient, prompts: PromptBuilder | None = None) -> None:
        self._client = client
        self._prompts = prompts or PromptBuilder()

    async def _generate(
        self,
        operation: str,
        images: list[InlineImage],
        prompt: str,
        *,
        failure_message: str,
        output_mime_type: str | None = None,
    ) -> str:
        generation_requests_total.labels(operation=operation).inc()
        try:
            response = await self._client.generate_image(images, prompt)
        except ProviderRequestError as exc:
            error = classify_provider_error(str(exc))
            if error.status_code == 500:
                logger.error("Gemini API error during %s: %s", operation, exc)
            else:
                logger.warning("Gemini API rejected %s: %s", operation, exc)
            provider_errors_total.labels(status=str(error.status_code)).inc()
            raise error from exc
        except ProviderNetworkError as exc:
            logger.error("Gemini API unreachable during %s: %s", operation, exc)
            provider_errors_total.labels(status="503").inc()
            raise GenerationError(NETWORK_ERROR, status_code=503) from exc

        try:
            image_url = extract_image_url(response, output_mime_type)
        except GenerationError as exc:
            provider_errors_total.labels(status=str(exc.status_code)).inc()
            raise
        if not image_url:
            logger.error("Unexpected output format for %s: %s", operation, response)
            provider_errors_total.labels(status="500").inc()
            raise GenerationError(failure_message, status_code=500)
        return image_url

    @staticmethod
    def _require_valid(image: ImageInput, label: str) -> InlineImage:
        if not is_valid_base64(image.data):
            prefix = f"Invalid {label} image format" if label else "Invalid image format"
            raise GenerationError(f"{prefix}. Please upload a valid image.", status_code=400)
        return to_inline_image(image)

    async def generate_outfit(
        self,
        top: ImageInput | None,
        bottom: ImageInput | None,
        person: ImageInput | None = None,
    ) -> str:
        """Dress the person (if given) in the top and bottom garments."""

        if top is None or bottom is None or not top.data or not bottom.data:
            raise GenerationError("Top and bottom images are required", status_code=400)

        top_image = self._require_valid(top, "top")
        bottom_image = self._require_valid(bottom, "bottom")
        images = [top_image, bottom_image]
        if person is not None:
            # The model sees the person photo first.
            images.insert(0, self._require_valid(person, "person"))

        return await self._generate(
            "generate_outfit",
            images,
            self._prompts.outfit(),
            failure_message=(
                "Failed to generate outfit image - the API response did not contain an image. "
                "Please try again."
            ),
        )

    async def remove_background(
        self,
        image: ImageInput | None,
        background_type: str = BackgroundType.TRANSPARENT.value,
        custom_color: str | None = None,
    ) -> str:
        """Ask the model to cut out the subject and apply the requested background."""

        if image is None or not image.data:
            raise GenerationError("Image is required", status_code=400)
        inline = self._require_valid(image, "")

        output_mime = "image/png" if background_type == BackgroundType.TRANSPARENT else None
        return await self._generate(
            "remove_background",
            [inline],
            self._prompts.background_removal(background_type, custom_color),
            failure_message=(
                "Failed to remove background - the API response did not contain an image. "
                "Please try again."
            ),
            output_mime_type=output_mime,
        )

    async def normalize_pose(self, image: ImageInput | None) -> str:
        """Redraw the person in a neutral standing pose."""

        if image is None or not image.data:
            raise GenerationError("Image is required", status_code=400)
        inline = self._require_valid(image, "")
        return await self._generate(
            "normalize_pose",
            [inline],
            self._prompts.pose_normalization(),
            failure_message=(
                "Failed to normalize pose - the API response did not contain an image. "
                "Please try again."
            ),
        )

    async def extract_garment(
        self,
        image: ImageInput | None,
        garment_type: str = GarmentType.TOP.value,
    ) -> str:
        """Isolate a worn garment as a flat product image."""

        if image is None or not image.data:
            raise GenerationError("Image is required", status_code=400)
        if garment_type not in {item.value for item in GarmentType}:
            raise GenerationError("garmentType must be 'top' or 'bottom'", status_code=400)
        inline = self._require_valid(image, "")
        return await self._generate(
            "extract_garment",
            [inline],
            self._prompts.garment_extraction(garment_type),
            failure_message=(
                "Failed to extract garment - the API response did not contain an image. "
                "Please try again."
            ),
        )
