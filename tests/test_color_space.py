"""Tests for sRGB <-> OKLCH conversion."""

import numpy as np
import pytest

from color_space import (
    PerceptualColor, oklab_to_oklch, rgb_to_hex, srgb_to_oklab,
    to_display, to_display_array, to_perceptual, to_perceptual_many,
)


def test_pure_red_matches_reference_oklch():
    color = to_perceptual([255, 0, 0])
    assert color.lightness == pytest.approx(0.6280, abs=1e-3)
    assert color.chroma == pytest.approx(0.2577, abs=1e-3)
    assert color.hue == pytest.approx(29.23, abs=0.1)


def test_white_and_black_lightness():
    assert to_perceptual([255, 255, 255]).lightness == pytest.approx(1.0, abs=1e-4)
    assert to_perceptual([0, 0, 0]).lightness == pytest.approx(0.0, abs=1e-6)


@pytest.mark.parametrize('value', [0, 1, 37, 128, 200, 255])
def test_grays_are_achromatic(value):
    color = to_perceptual([value, value, value])
    assert color.hue is None
    assert color.is_achromatic
    assert color.chroma < 1e-4


def test_round_trip_within_one_step():
    rng = np.random.default_rng(42)
    rgb = rng.integers(0, 256, size=(500, 3))
    back = to_display_array(oklab_to_oklch(srgb_to_oklab(rgb)))
    assert np.abs(back - rgb).max() <= 1


@pytest.mark.parametrize('rgb', [(255, 0, 0), (0, 255, 0), (0, 0, 255), (12, 200, 99), (250, 250, 3)])
def test_single_color_round_trip(rgb):
    back = to_display(to_perceptual(rgb))
    assert all(abs(a - b) <= 1 for a, b in zip(back, rgb))


def test_to_display_clamps_out_of_gamut():
    rgb = to_display(PerceptualColor(lightness=0.9, chroma=0.4, hue=140.0))
    assert all(0 <= c <= 255 for c in rgb)
    assert all(isinstance(c, int) for c in rgb)


def test_to_display_lightness_extremes_clamp():
    assert to_display(PerceptualColor(lightness=1.3, chroma=0.0)) == (255, 255, 255)
    assert to_display(PerceptualColor(lightness=-0.2, chroma=0.0)) == (0, 0, 0)


def test_achromatic_ignores_chroma():
    # Without a hue there is no direction for the chroma to act in
    gray = to_display(PerceptualColor(lightness=0.5, chroma=0.2, hue=None))
    assert max(gray) - min(gray) <= 1


def test_to_perceptual_many_matches_single():
    rgb = np.array([[10, 20, 30], [128, 128, 128], [255, 128, 0]])
    many = to_perceptual_many(rgb)
    assert len(many) == 3
    for row, color in zip(rgb, many):
        single = to_perceptual(row)
        assert color.lightness == pytest.approx(single.lightness)
        assert color.chroma == pytest.approx(single.chroma)
        assert (color.hue is None) == (single.hue is None)
    assert many[1].hue is None


def test_hue_range():
    rng = np.random.default_rng(7)
    for color in to_perceptual_many(rng.integers(0, 256, size=(200, 3))):
        if color.hue is not None:
            assert 0 <= color.hue < 360


def test_rgb_to_hex_is_lowercase_and_padded():
    assert rgb_to_hex((255, 10, 0)) == '#ff0a00'
    assert rgb_to_hex(np.array([0, 0, 171])) == '#0000ab'
