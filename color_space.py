#!/usr/bin/env python3
"""
Convert between sRGB (0-255) and the OKLab / OKLCH perceptual spaces.
"""

from dataclasses import dataclass
from typing import Optional
import math

import numpy as np


ACHROMATIC_CHROMA = 1e-4  # Below this chroma the hue is undefined


@dataclass(frozen=True)
class PerceptualColor:
    """An OKLCH color. hue is None for achromatic colors."""
    lightness: float  # 0-1
    chroma: float  # >= 0, practically <= 0.4
    hue: Optional[float] = None  # 0-360, None when achromatic

    @property
    def is_achromatic(self) -> bool:
        return self.hue is None


def srgb_to_linear(rgb: np.ndarray) -> np.ndarray:
    """Convert RGB array (0-255) to linear-light RGB (0-1)."""
    rgb_norm = np.asarray(rgb, dtype=np.float64) / 255.0
    mask = rgb_norm > 0.04045
    return np.where(mask, ((rgb_norm + 0.055) / 1.055) ** 2.4, rgb_norm / 12.92)


def linear_to_srgb(linear: np.ndarray) -> np.ndarray:
    """Convert linear-light RGB to gamma-encoded sRGB (0-1, unclamped)."""
    mask = linear > 0.0031308
    return np.where(
        mask,
        1.055 * np.power(np.clip(linear, 0, None), 1 / 2.4) - 0.055,
        12.92 * linear
    )


def srgb_to_oklab(rgb: np.ndarray) -> np.ndarray:
    """Convert an (n, 3) RGB array (0-255) to OKLab."""
    rgb_linear = srgb_to_linear(np.asarray(rgb).reshape(-1, 3))
    r, g, b = rgb_linear[:, 0], rgb_linear[:, 1], rgb_linear[:, 2]

    # Linear sRGB to LMS
    l = 0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b
    m = 0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b
    s = 0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b

    l_, m_, s_ = np.cbrt(l), np.cbrt(m), np.cbrt(s)

    L = 0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_
    a = 1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_
    b_val = 0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_

    return np.column_stack([L, a, b_val])


def oklab_to_linear_srgb(lab: np.ndarray) -> np.ndarray:
    """Convert an (n, 3) OKLab array to linear sRGB (unclamped)."""
    lab = np.asarray(lab, dtype=np.float64).reshape(-1, 3)
    L, a, b = lab[:, 0], lab[:, 1], lab[:, 2]

    l_ = L + 0.3963377774 * a + 0.2158037573 * b
    m_ = L - 0.1055613458 * a - 0.0638541728 * b
    s_ = L - 0.0894841775 * a - 1.2914855480 * b

    l, m, s = l_ ** 3, m_ ** 3, s_ ** 3

    r = 4.0767416621 * l - 3.3077115913 * m + 0.2309699292 * s
    g = -1.2684380046 * l + 2.6097574011 * m - 0.3413193965 * s
    b_out = -0.0041960863 * l - 0.7034186147 * m + 1.7076147010 * s

    return np.column_stack([r, g, b_out])


def oklab_to_oklch(lab: np.ndarray) -> np.ndarray:
    """Convert OKLab to OKLCH. Hue is NaN where chroma is negligible."""
    lab = np.asarray(lab, dtype=np.float64).reshape(-1, 3)
    chroma = np.hypot(lab[:, 1], lab[:, 2])
    hue = np.degrees(np.arctan2(lab[:, 2], lab[:, 1])) % 360
    hue = np.where(chroma < ACHROMATIC_CHROMA, np.nan, hue)
    return np.column_stack([lab[:, 0], chroma, hue])


def oklch_to_oklab(lch: np.ndarray) -> np.ndarray:
    """Convert OKLCH to OKLab. A NaN hue contributes no a/b component."""
    lch = np.asarray(lch, dtype=np.float64).reshape(-1, 3)
    hue = np.radians(np.nan_to_num(lch[:, 2], nan=0.0))
    chroma = np.where(np.isnan(lch[:, 2]), 0.0, lch[:, 1])
    return np.column_stack([lch[:, 0], chroma * np.cos(hue), chroma * np.sin(hue)])


def to_display_array(lch: np.ndarray) -> np.ndarray:
    """Convert an (n, 3) OKLCH array to clamped integer RGB (0-255)."""
    rgb = linear_to_srgb(oklab_to_linear_srgb(oklch_to_oklab(lch)))
    # Round half up, then clamp; no gamut mapping
    return np.clip(np.floor(rgb * 255 + 0.5), 0, 255).astype(np.int64)


def to_perceptual(rgb) -> PerceptualColor:
    """Convert one RGB triple (0-255) to a PerceptualColor."""
    L, c, h = oklab_to_oklch(srgb_to_oklab(np.asarray(rgb).reshape(1, 3)))[0]
    hue = None if math.isnan(h) else float(h)
    return PerceptualColor(lightness=float(L), chroma=float(c), hue=hue)


def to_perceptual_many(rgb: np.ndarray) -> list[PerceptualColor]:
    """Convert an (n, 3) RGB array to a list of PerceptualColors."""
    lch = oklab_to_oklch(srgb_to_oklab(rgb))
    return [
        PerceptualColor(
            lightness=float(L),
            chroma=float(c),
            hue=None if math.isnan(h) else float(h)
        )
        for L, c, h in lch
    ]


def to_display(color: PerceptualColor) -> tuple[int, int, int]:
    """Convert a PerceptualColor to an RGB tuple, clamping each channel."""
    hue = np.nan if color.hue is None else color.hue
    rgb = to_display_array(np.array([[color.lightness, color.chroma, hue]]))[0]
    return (int(rgb[0]), int(rgb[1]), int(rgb[2]))


def rgb_to_hex(rgb) -> str:
    """Format an RGB triple as lowercase #rrggbb."""
    return f"#{int(rgb[0]):02x}{int(rgb[1]):02x}{int(rgb[2]):02x}"
