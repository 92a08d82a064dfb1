"""Local image pre-processing: background removal and normalisation."""

from .background import (
    CLOTHING_POLICY,
    PERSON_POLICY,
    AbsoluteThresholdPolicy,
    EdgeSampledPolicy,
    classify_absolute,
    classify_edge_sampled,
    estimate_background_color,
)
from .compositor import (
    convert_to_transparent_png,
    convert_to_white_background_png,
    fill_background,
    make_transparent,
    remove_person_background,
)
from .normalize import InvalidImageError, compress_image, decode_rgba, encode_png

__all__ = [
    "AbsoluteThresholdPolicy",
    "CLOTHING_POLICY",
    "EdgeSampledPolicy",
    "InvalidImageError",
    "PERSON_POLICY",
    "classify_absolute",
    "classify_edge_sampled",
    "compress_image",
    "convert_to_transparent_png",
    "convert_to_white_background_png",
    "decode_rgba",
    "encode_png",
    "estimate_background_color",
    "fill_background",
    "make_transparent",
    "remove_person_background",
]
