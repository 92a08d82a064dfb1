"""
Per-pixel background classification.

Two heuristics decide whether a pixel belongs to the background:

* :class:`AbsoluteThresholdPolicy` treats anything near-white or very bright as
  background. It is used on clothing photos shot against a light backdrop and
  will also swallow white fabric.
* :class:`EdgeSampledPolicy` estimates the backdrop colour from pixels on the
  image border and treats anything close to that colour, or very bright, as
  background. It is used on person photos and assumes the subject does not touch
  the border.

Both return a boolean mask the compositor applies. Neither reports confidence.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

MAX_EDGE_SAMPLES_PER_SIDE = 50


@dataclass(frozen=True, slots=True)
class AbsoluteThresholdPolicy:
    """Whiteness/brightness cut-off used for garment images."""

    white_threshold: int = 240
    brightness_threshold: float = 0.9


@dataclass(frozen=True, slots=True)
class EdgeSampledPolicy:
    """Distance-from-border-colour cut-off used for person photos."""

    color_threshold: float = 40.0
    brightness_threshold: float = 0.85


CLOTHING_POLICY = AbsoluteThresholdPolicy()
PERSON_POLICY = EdgeSampledPolicy()


def _rgb(pixels: np.ndarray) -> np.ndarray:
    return pixels[..., :3].astype(np.float64)


def brightness(pixels: np.ndarray) -> np.ndarray:
    """Mean of the RGB channels scaled to ``[0, 1]``."""

    return _rgb(pixels).sum(axis=-1) / 3.0 / 255.0


def classify_absolute(
    pixels: np.ndarray,
    policy: AbsoluteThresholdPolicy = CLOTHING_POLICY,
) -> np.ndarray:
    """Return a ``(height, width)`` mask of near-white or very bright pixels."""

    rgb = pixels[..., :3]
    is_white = np.all(rgb > policy.white_threshold, axis=-1)
    is_light = brightness(pixels) > policy.brightness_threshold
    return is_white | is_light


def edge_sample_points(width: int, height: int) -> list[tuple[int, int]]:
    """
    Return ``(x, y)`` coordinates sampled evenly along the four borders.

    Up to 50 positions per side are used, fewer for small images, never fewer
    than one.
    """

    count = max(1, min(MAX_EDGE_SAMPLES_PER_SIDE, width // 10, height // 10))
    points: list[tuple[int, int]] = []
    for i in range(count):
        x = (i * width) // count
        y = (i * height) // count
        points.append((x, 0))
        points.append((x, height - 1))
        points.append((0, y))
        points.append((width - 1, y))
    return points


def estimate_background_color(pixels: np.ndarray) -> tuple[float, float, float]:
    """Average RGB over the border samples."""

    height, width = pixels.shape[:2]
    points = edge_sample_points(width, height)
    xs = np.fromiter((x for x, _ in points), dtype=np.intp, count=len(points))
    ys = np.fromiter((y for _, y in points), dtype=np.intp, count=len(points))
    samples = _rgb(pixels[ys, xs])
    mean = samples.mean(axis=0)
    return float(mean[0]), float(mean[1]), float(mean[2])


def classify_edge_sampled(
    pixels: np.ndarray,
    policy: EdgeSampledPolicy = PERSON_POLICY,
    background: tuple[float, float, float] | None = None,
) -> np.ndarray:
    """Return a mask of pixels close to the estimated backdrop colour or very bright."""

    if background is None:
        background = estimate_background_color(pixels)
    distance = np.sqrt(((_rgb(pixels) - np.asarray(background)) ** 2).sum(axis=-1))
    is_similar = distance < policy.color_threshold
    is_light = brightness(pixels) > policy.brightness_threshold
    return is_similar | is_light
