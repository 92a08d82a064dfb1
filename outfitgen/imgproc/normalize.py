"""Image decoding, resizing and compression helpers."""

from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image, UnidentifiedImageError

SUPPORTED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")


class InvalidImageError(ValueError):
    """Raised when uploaded bytes cannot be decoded as an image."""


def normalize_mime_type(mime_type: str | None) -> str:
    """Map ``image/jpg`` to ``image/jpeg`` and unknown types to JPEG."""

    normalized = "image/jpeg" if mime_type == "image/jpg" else mime_type
    if normalized not in SUPPORTED_MIME_TYPES:
        return "image/jpeg"
    return normalized


def validate_upload(
    content_type: str | None,
    size: int,
    *,
    allowed_types: tuple[str, ...],
    max_bytes: int,
) -> str | None:
    """Return an error message for an unacceptable upload, ``None`` otherwise."""

    if content_type not in allowed_types:
        return "Invalid file type. Please upload a PNG, JPG, JPEG, or WEBP image."
    if size > max_bytes:
        return f"File size exceeds {max_bytes // (1024 * 1024)}MB limit."
    return None


def open_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except Image.DecompressionBombError as exc:
        raise InvalidImageError("Image dimensions are too large.") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidImageError("File is not a supported image.") from exc
    return image


def decode_rgba(data: bytes) -> np.ndarray:
    """Decode image bytes into a ``(height, width, 4)`` uint8 array."""

    with open_image(data) as image:
        return np.array(image.convert("RGBA"), dtype=np.uint8)


def encode_png(pixels: np.ndarray) -> bytes:
    """Serialise an RGBA array as PNG."""

    buffer = BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Return dimensions scaled down to fit the box while keeping the aspect ratio."""

    if width <= max_width and height <= max_height:
        return width, height

    aspect_ratio = width / height
    if width > height:
        new_width = min(width, max_width)
        new_height = new_width / aspect_ratio
    else:
        new_height = min(height, max_height)
        new_width = new_height * aspect_ratio
    return max(1, round(new_width)), max(1, round(new_height))


def resize_to_fit(image: Image.Image, max_width: int, max_height: int) -> Image.Image:
    size = fit_within(image.width, image.height, max_width, max_height)
    if size == image.size:
        return image
    return image.resize(size, Image.Resampling.LANCZOS)


def compress_image(
    data: bytes,
    mime_type: str | None,
    *,
    max_width: int = 1024,
    max_height: int = 1024,
    quality: int = 85,
) -> tuple[bytes, str]:
    """
    Downscale and re-encode an image to keep request payloads small.

    PNG input stays PNG so transparency survives; everything else is written as JPEG.
    """

    with open_image(data) as image:
        resized = resize_to_fit(image, max_width, max_height)
        buffer = BytesIO()
        if mime_type == "image/png":
            resized.save(buffer, format="PNG", optimize=True)
            return buffer.getvalue(), "image/png"
        resized.convert("RGB").save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue(), "image/jpeg"
