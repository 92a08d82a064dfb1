"""Pixel classifier properties."""

from __future__ import annotations

import numpy as np
import pytest

from outfitgen.imgproc.background import (
    CLOTHING_POLICY,
    PERSON_POLICY,
    AbsoluteThresholdPolicy,
    EdgeSampledPolicy,
    brightness,
    classify_absolute,
    classify_edge_sampled,
    edge_sample_points,
    estimate_background_color,
)
from outfitgen.imgproc.compositor import make_transparent


def _rgba(rgb: tuple[int, int, int], shape: tuple[int, int] = (4, 4)) -> np.ndarray:
    pixels = np.zeros((*shape, 4), dtype=np.uint8)
    pixels[..., :3] = rgb
    pixels[..., 3] = 255
    return pixels


def test_policies_use_distinct_thresholds() -> None:
    assert CLOTHING_POLICY.white_threshold == 240
    assert CLOTHING_POLICY.brightness_threshold == pytest.approx(0.9)
    assert PERSON_POLICY.color_threshold == pytest.approx(40.0)
    assert PERSON_POLICY.brightness_threshold == pytest.approx(0.85)


@pytest.mark.parametrize("threshold", [0, 100, 240, 254, 255])
def test_pure_white_is_always_background(threshold: int) -> None:
    policy = AbsoluteThresholdPolicy(white_threshold=threshold)
    assert classify_absolute(_rgba((255, 255, 255)), policy).all()


@pytest.mark.parametrize("threshold", [0, 100, 240, 255])
def test_pure_black_is_never_background(threshold: int) -> None:
    policy = AbsoluteThresholdPolicy(white_threshold=threshold)
    assert not classify_absolute(_rgba((0, 0, 0)), policy).any()


def test_bright_but_tinted_pixel_counts_as_background() -> None:
    # Brightness 0.93 passes even though blue is below the white threshold.
    pixels = _rgba((250, 250, 210), shape=(1, 1))

    assert brightness(pixels)[0, 0] > 0.9
    assert classify_absolute(pixels)[0, 0]


def test_mid_grey_is_foreground() -> None:
    assert not classify_absolute(_rgba((128, 128, 128))).any()


def test_two_by_two_transparent_scenario() -> None:
    pixels = np.array(
        [
            [[255, 255, 255, 255], [0, 0, 0, 255]],
            [[200, 200, 200, 255], [250, 10, 10, 255]],
        ],
        dtype=np.uint8,
    )

    make_transparent(pixels, classify_absolute(pixels))

    assert pixels[..., 3].ravel().tolist() == [0, 255, 255, 255]


def test_white_pixel_among_black_pixels() -> None:
    pixels = np.array(
        [
            [[255, 255, 255, 255], [0, 0, 0, 255]],
            [[0, 0, 0, 255], [0, 0, 0, 255]],
        ],
        dtype=np.uint8,
    )

    make_transparent(pixels, classify_absolute(pixels))

    assert pixels[..., 3].ravel().tolist() == [0, 255, 255, 255]


def test_transparent_transform_is_idempotent() -> None:
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(16, 16, 4), dtype=np.uint8)
    pixels[..., 3] = 255

    once = make_transparent(pixels.copy(), classify_absolute(pixels))
    twice = make_transparent(once.copy(), classify_absolute(once))

    np.testing.assert_array_equal(once, twice)


def test_edge_sample_points_stay_on_border() -> None:
    width, height = 200, 120
    points = edge_sample_points(width, height)

    assert len(points) == 4 * 12
    for x, y in points:
        assert 0 <= x < width and 0 <= y < height
        assert x in (0, width - 1) or y in (0, height - 1)


def test_edge_sample_points_cap_at_fifty_per_side() -> None:
    assert len(edge_sample_points(4000, 3000)) == 4 * 50


def test_edge_sample_points_tiny_image_still_samples() -> None:
    points = edge_sample_points(3, 2)

    assert len(points) == 4
    assert (0, 0) in points


def test_constant_border_estimates_exact_colour() -> None:
    border = (10, 120, 200)
    pixels = _rgba(border, shape=(40, 60))
    pixels[5:-5, 5:-5, :3] = (255, 0, 0)

    assert estimate_background_color(pixels) == (10.0, 120.0, 200.0)


def test_edge_sampled_separates_subject_from_backdrop() -> None:
    pixels = _rgba((30, 140, 60), shape=(40, 40))
    pixels[10:30, 10:30, :3] = (200, 40, 40)

    mask = classify_edge_sampled(pixels)

    assert mask[0, 0] and mask[39, 39]
    assert not mask[20, 20]


def test_edge_sampled_treats_bright_pixels_as_background() -> None:
    pixels = _rgba((0, 0, 0), shape=(20, 20))
    pixels[10, 10, :3] = (240, 240, 240)

    mask = classify_edge_sampled(pixels, EdgeSampledPolicy(color_threshold=1.0))

    assert mask[10, 10]
    assert mask[0, 0]


def test_edge_sampled_accepts_known_background() -> None:
    pixels = _rgba((100, 100, 100), shape=(10, 10))

    mask = classify_edge_sampled(pixels, background=(0.0, 0.0, 0.0))

    assert not mask.any()
