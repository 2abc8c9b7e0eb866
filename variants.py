#!/usr/bin/env python3
"""
Derive style palettes from a primary palette by transforming colors in OKLCH.

Each transform maps a PerceptualColor to a new one; results are clamped back
into sRGB when the palette entries are built.
"""

from typing import Callable, Optional
import math

from color_space import PerceptualColor
from palette import ColorEntry, Palette, entry_from_perceptual


HIGHLIGHTER_LIGHTNESS = 0.8
MAX_OKLCH_CHROMA = 0.37


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _rotate(hue: Optional[float], degrees: float) -> Optional[float]:
    """Rotate a hue, leaving an undefined hue undefined."""
    if hue is None:
        return None
    return (hue + degrees) % 360


# =============================================================================
# Per-color Transforms
# =============================================================================

def soft(color: PerceptualColor) -> PerceptualColor:
    """Lighter and much less saturated."""
    return PerceptualColor(
        lightness=min(color.lightness + 0.15, 0.95),
        chroma=color.chroma * 0.4,
        hue=color.hue
    )


def inverted(color: PerceptualColor) -> PerceptualColor:
    """Complementary hue with inverted lightness."""
    return PerceptualColor(
        lightness=1 - color.lightness,
        chroma=color.chroma,
        hue=_rotate(color.hue, 180)
    )


def vibrant(color: PerceptualColor) -> PerceptualColor:
    """Mid-range lightness with boosted chroma."""
    return PerceptualColor(
        lightness=_clamp(color.lightness, 0.4, 0.7),
        chroma=min(color.chroma * 1.8, MAX_OKLCH_CHROMA),
        hue=color.hue
    )


def monochrome(color: PerceptualColor) -> PerceptualColor:
    """Grayscale: zero chroma, so the hue becomes undefined."""
    return PerceptualColor(lightness=color.lightness, chroma=0.0, hue=None)


def dark(color: PerceptualColor) -> PerceptualColor:
    # Floor at 0.15 so very dark colors stay distinguishable
    return PerceptualColor(
        lightness=max(0.15, color.lightness * 0.5),
        chroma=color.chroma * 0.9,
        hue=color.hue
    )


def neon(color: PerceptualColor) -> PerceptualColor:
    return PerceptualColor(
        lightness=0.65,
        chroma=min(MAX_OKLCH_CHROMA, color.chroma * 2.5),
        hue=color.hue
    )


def analogous(color: PerceptualColor) -> PerceptualColor:
    return PerceptualColor(
        lightness=color.lightness,
        chroma=color.chroma,
        hue=_rotate(color.hue, 30)
    )


def warm(color: PerceptualColor) -> PerceptualColor:
    """Compress the hue into the red/orange/yellow range around 30°."""
    return PerceptualColor(
        lightness=max(0.45, color.lightness),
        chroma=color.chroma * 0.85,
        hue=30 + color.hue * 0.2 if color.hue is not None else 30.0
    )


def cool(color: PerceptualColor) -> PerceptualColor:
    """Compress the hue into the blue/cyan range around 220°."""
    return PerceptualColor(
        lightness=min(0.75, color.lightness + 0.05),
        chroma=color.chroma * 0.85,
        hue=220 + color.hue * 0.2 if color.hue is not None else 220.0
    )


# =============================================================================
# Highlighter
# =============================================================================

def max_chroma_for_hue(hue: Optional[float], lightness: float) -> float:
    """
    Approximate the largest displayable chroma for a hue at a given lightness.

    Base values are per hue range, scaled down away from mid lightness.
    """
    h = hue % 360 if hue is not None else 0.0

    if 60 <= h <= 120:
        base = 0.37  # Yellow-green
    elif 240 <= h <= 270:
        base = 0.31  # Blue
    elif 0 <= h <= 30 or 330 <= h <= 360:
        base = 0.33  # Red
    elif 180 <= h <= 210:
        base = 0.29  # Cyan
    elif 270 <= h <= 330:
        base = 0.32  # Purple / magenta
    else:
        base = 0.35

    lightness_factor = math.sin((lightness - 0.1) * math.pi)
    return base * max(0.7, lightness_factor)


def highlighter_hues(colors: list[PerceptualColor], count: int) -> list[float]:
    """
    Evenly spaced hues anchored at the median-position hue of colors.

    Achromatic colors count as hue 0. With no colors, hues start at 0.
    """
    if count < 1:
        return []

    hues = sorted(c.hue if c.hue is not None else 0.0 for c in colors)
    start = hues[len(hues) // 2] if hues else 0.0
    step = 360 / count

    return [(start + step * i) % 360 for i in range(count)]


def highlighter(colors: list[PerceptualColor]) -> list[PerceptualColor]:
    """Bright, maximally saturated colors spread evenly around the hue circle."""
    return [
        PerceptualColor(
            lightness=HIGHLIGHTER_LIGHTNESS,
            chroma=max_chroma_for_hue(hue, HIGHLIGHTER_LIGHTNESS),
            hue=hue
        )
        for hue in highlighter_hues(colors, len(colors))
    ]


# =============================================================================
# Palette Generation
# =============================================================================

def _per_color(transform: Callable) -> Callable:
    def apply(colors: list[PerceptualColor]) -> list[PerceptualColor]:
        return [transform(c) for c in colors]
    return apply


# key -> (display name, palette transform), in presentation order
VARIANTS = {
    'soft': ('Soft Pastels', _per_color(soft)),
    'inverted': ('Complementary', _per_color(inverted)),
    'vibrant': ('Vibrant Bold', _per_color(vibrant)),
    'highlighter': ('Highlighter Neon', highlighter),
    'monochrome': ('Monochrome', _per_color(monochrome)),
    'dark': ('Dark Mode', _per_color(dark)),
    'neon': ('Neon Electric', _per_color(neon)),
    'analogous': ('Analogous Harmony', _per_color(analogous)),
    'warm': ('Warm Tones', _per_color(warm)),
    'cool': ('Cool Tones', _per_color(cool)),
}


def generate_variant(primary: Palette, key: str) -> Palette:
    """Build one derived palette from the primary palette."""
    name, transform = VARIANTS[key]
    colors = [entry.perceptual for entry in primary.colors]
    entries: list[ColorEntry] = [entry_from_perceptual(c) for c in transform(colors)]
    return Palette(key=key, name=name, colors=entries)


def generate_variants(primary: Palette) -> dict:
    """Build all ten derived palettes, keyed in presentation order."""
    return {key: generate_variant(primary, key) for key in VARIANTS}
