"""Apply background masks to bitmaps and re-encode the result."""

from __future__ import annotations

import numpy as np
from PIL import Image

from outfitgen.imgproc.background import (
    CLOTHING_POLICY,
    PERSON_POLICY,
    AbsoluteThresholdPolicy,
    EdgeSampledPolicy,
    classify_absolute,
    classify_edge_sampled,
)
from outfitgen.imgproc.normalize import decode_rgba, encode_png, open_image, resize_to_fit

WHITE = (255, 255, 255)


def make_transparent(pixels: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Zero the alpha channel of masked pixels in place."""

    pixels[..., 3][mask] = 0
    return pixels


def fill_background(
    pixels: np.ndarray,
    mask: np.ndarray,
    color: tuple[int, int, int] = WHITE,
) -> np.ndarray:
    """Overwrite masked pixels with an opaque flat colour in place."""

    pixels[mask] = (*color, 255)
    return pixels


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """Parse ``#RGB`` or ``#RRGGBB`` into an RGB tuple."""

    raw = value.strip().lstrip("#")
    if len(raw) == 3:
        raw = "".join(ch * 2 for ch in raw)
    if len(raw) != 6:
        raise ValueError(f"Invalid hex colour: {value!r}")
    return int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16)


def convert_to_transparent_png(
    data: bytes,
    policy: AbsoluteThresholdPolicy = CLOTHING_POLICY,
) -> bytes:
    """Make white/light pixels of a garment photo transparent."""

    pixels = decode_rgba(data)
    make_transparent(pixels, classify_absolute(pixels, policy))
    return encode_png(pixels)


def convert_to_white_background_png(
    data: bytes,
    *,
    max_width: int = 1024,
    max_height: int = 1024,
    color: tuple[int, int, int] = WHITE,
    policy: AbsoluteThresholdPolicy = CLOTHING_POLICY,
) -> bytes:
    """
    Resize a garment photo and replace its light background with a flat colour.

    The image is first composited over the fill colour so transparent input
    ends up opaque, then near-white pixels are snapped to the fill colour.
    """

    with open_image(data) as image:
        resized = resize_to_fit(image.convert("RGBA"), max_width, max_height)
    canvas = Image.new("RGBA", resized.size, (*color, 255))
    canvas.alpha_composite(resized)
    pixels = np.array(canvas, dtype=np.uint8)
    fill_background(pixels, classify_absolute(pixels, policy), color)
    return encode_png(pixels)


def remove_person_background(
    data: bytes,
    policy: EdgeSampledPolicy = PERSON_POLICY,
) -> bytes:
    """Make pixels resembling the photo's border colour transparent."""

    pixels = decode_rgba(data)
    make_transparent(pixels, classify_edge_sampled(pixels, policy))
    return encode_png(pixels)
