"""Compositor transforms and encode/decode helpers."""

from __future__ import annotations

from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from outfitgen.imgproc.compositor import (
    convert_to_transparent_png,
    convert_to_white_background_png,
    fill_background,
    parse_hex_color,
    remove_person_background,
)
from outfitgen.imgproc.normalize import (
    InvalidImageError,
    compress_image,
    decode_rgba,
    fit_within,
    normalize_mime_type,
    validate_upload,
)


def _decode(data: bytes) -> np.ndarray:
    with Image.open(BytesIO(data)) as image:
        return np.array(image.convert("RGBA"))


def test_fill_background_is_opaque_flat_colour() -> None:
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    mask = np.array([[True, False], [False, True]])

    fill_background(pixels, mask, (1, 2, 3))

    assert pixels[0, 0].tolist() == [1, 2, 3, 255]
    assert pixels[1, 1].tolist() == [1, 2, 3, 255]
    assert pixels[0, 1].tolist() == [0, 0, 0, 0]


def test_transparent_png_clears_white_backdrop(png_bytes) -> None:
    pixels = np.full((10, 10, 4), 255, dtype=np.uint8)
    pixels[3:7, 3:7, :3] = (20, 40, 200)

    result = _decode(convert_to_transparent_png(png_bytes(pixels)))

    assert result[0, 0, 3] == 0
    assert result[5, 5].tolist() == [20, 40, 200, 255]


def test_white_background_png_resizes_and_flattens(png_bytes) -> None:
    pixels = np.zeros((200, 400, 4), dtype=np.uint8)
    pixels[..., :3] = (245, 245, 245)
    pixels[..., 3] = 255
    pixels[50:150, 150:250, :3] = (10, 10, 10)

    result = _decode(convert_to_white_background_png(png_bytes(pixels), max_width=100, max_height=100))

    assert result.shape[:2] == (50, 100)
    assert result[0, 0].tolist() == [255, 255, 255, 255]
    assert (result[..., 3] == 255).all()


def test_white_background_png_fills_transparent_input(png_bytes) -> None:
    pixels = np.zeros((8, 8, 4), dtype=np.uint8)

    result = _decode(convert_to_white_background_png(png_bytes(pixels), color=(0, 128, 0)))

    assert result[4, 4].tolist() == [0, 128, 0, 255]


def test_remove_person_background_keeps_subject(png_bytes) -> None:
    pixels = np.zeros((60, 40, 4), dtype=np.uint8)
    pixels[..., :3] = (40, 90, 160)
    pixels[..., 3] = 255
    pixels[15:45, 10:30, :3] = (180, 120, 90)

    result = _decode(remove_person_background(png_bytes(pixels)))

    assert result[0, 0, 3] == 0
    assert result[30, 20, 3] == 255


def test_decode_rejects_non_image_bytes() -> None:
    with pytest.raises(InvalidImageError):
        decode_rgba(b"definitely not a png")


@pytest.mark.parametrize(
    ("value", "expected"),
    [("#ffffff", (255, 255, 255)), ("00ff80", (0, 255, 128)), ("#abc", (170, 187, 204))],
)
def test_parse_hex_color(value: str, expected: tuple[int, int, int]) -> None:
    assert parse_hex_color(value) == expected


@pytest.mark.parametrize("value", ["#12", "#zzzzzz", ""])
def test_parse_hex_color_rejects_garbage(value: str) -> None:
    with pytest.raises(ValueError):
        parse_hex_color(value)


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        ((800, 600), (800, 600)),
        ((2048, 1024), (1024, 512)),
        ((1000, 3000), (333, 1000)),
        ((3000, 3000), (1000, 1000)),
    ],
)
def test_fit_within_keeps_aspect_ratio(size: tuple[int, int], expected: tuple[int, int]) -> None:
    limit = 1024 if size == (2048, 1024) else 1000
    assert fit_within(*size, limit, limit) == expected


def test_compress_image_keeps_png_and_downscales(solid_png) -> None:
    data, mime_type = compress_image(solid_png((1, 2, 3), size=(2000, 500)), "image/png")

    assert mime_type == "image/png"
    with Image.open(BytesIO(data)) as image:
        assert image.size == (1024, 256)


def test_compress_image_writes_jpeg_for_other_types(solid_png) -> None:
    data, mime_type = compress_image(solid_png((1, 2, 3)), "image/webp")

    assert mime_type == "image/jpeg"
    assert data[:2] == b"\xff\xd8"


def test_normalize_mime_type() -> None:
    assert normalize_mime_type("image/jpg") == "image/jpeg"
    assert normalize_mime_type("image/png") == "image/png"
    assert normalize_mime_type("image/gif") == "image/jpeg"
    assert normalize_mime_type(None) == "image/jpeg"


def test_validate_upload_messages() -> None:
    allowed = ("image/png",)
    assert validate_upload("image/png", 10, allowed_types=allowed, max_bytes=100) is None
    assert "Invalid file type" in validate_upload("text/plain", 10, allowed_types=allowed, max_bytes=100)
    assert validate_upload(
        "image/png", 11 * 1024 * 1024, allowed_types=allowed, max_bytes=10 * 1024 * 1024
    ) == "File size exceeds 10MB limit."
