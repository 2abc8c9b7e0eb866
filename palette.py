#!/usr/bin/env python3
"""
Palette data structures: color entries, named palettes, per-image profiles
and the store that holds them.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional
import itertools

import numpy as np

from color_space import PerceptualColor, rgb_to_hex, to_display, to_perceptual_many


# =============================================================================
# Color Entries
# =============================================================================

@dataclass(frozen=True)
class ColorEntry:
    """One swatch: display RGB plus the OKLCH values it was derived from."""
    rgb: tuple  # (r, g, b), each 0-255
    perceptual: PerceptualColor

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)

    @property
    def rgb_css(self) -> str:
        return f"rgb({self.rgb[0]}, {self.rgb[1]}, {self.rgb[2]})"

    @property
    def lightness_percent(self) -> float:
        """Lightness on a 0-100 scale, one decimal."""
        return round(self.perceptual.lightness * 100, 1)

    @property
    def chroma_value(self) -> float:
        return round(self.perceptual.chroma, 3)

    @property
    def hue_degrees(self) -> Optional[float]:
        if self.perceptual.hue is None:
            return None
        return round(self.perceptual.hue, 1)

    @property
    def oklch_values(self) -> dict:
        """Formatted L/C/H strings. Hue is 'undefined' for achromatic colors."""
        p = self.perceptual
        return {
            'l': f"{p.lightness * 100:.1f}",
            'c': f"{p.chroma:.3f}",
            'h': 'undefined' if p.hue is None else f"{p.hue:.1f}",
        }

    @property
    def css(self) -> str:
        """CSS Color 4 oklch() string; missing hue is written as none."""
        p = self.perceptual
        hue = 'none' if p.hue is None else f"{p.hue:.2f}"
        return f"oklch({p.lightness * 100:.2f}% {p.chroma:.4f} {hue})"

    @property
    def readable(self) -> str:
        p = self.perceptual
        hue = round(p.hue) if p.hue is not None else 0
        return f"{p.lightness * 100:.0f}% {p.chroma:.2f} {hue}°"


def entry_from_perceptual(color: PerceptualColor) -> ColorEntry:
    """Build an entry for a transformed color, clamping it into RGB."""
    return ColorEntry(rgb=to_display(color), perceptual=color)


def entries_from_rgb(rgb: np.ndarray) -> list[ColorEntry]:
    """Build entries for an (n, 3) array of extracted RGB colors."""
    rgb = np.asarray(rgb, dtype=np.int64).reshape(-1, 3)
    perceptual = to_perceptual_many(rgb)
    return [
        ColorEntry(rgb=(int(r), int(g), int(b)), perceptual=p)
        for (r, g, b), p in zip(rgb, perceptual)
    ]


# =============================================================================
# Palettes and Profiles
# =============================================================================

@dataclass
class Palette:
    """An ordered, named list of color entries."""
    key: str  # e.g. 'primary', 'soft'
    name: str  # Display name, e.g. 'Soft Pastels'
    colors: list = field(default_factory=list)  # List of ColorEntry

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[ColorEntry]:
        return iter(self.colors)

    @property
    def hex_codes(self) -> list[str]:
        return [c.hex for c in self.colors]


@dataclass
class ColorProfile:
    """All palettes derived from one image."""
    name: str
    palettes: dict  # key -> Palette, 'primary' first
    micro: Optional[Palette] = None
    id: int = 0  # Assigned by ImageStore.add

    @property
    def primary(self) -> Palette:
        return self.palettes['primary']

    @property
    def variants(self) -> dict:
        return {key: p for key, p in self.palettes.items() if key != 'primary'}


# =============================================================================
# Image Store
# =============================================================================

class ImageStore:
    """
    Ordered collection of processed profiles with a selected entry.

    Owned by the caller; nothing here is module-global.
    """

    def __init__(self):
        self._profiles: dict[int, ColorProfile] = {}
        self._ids = itertools.count(1)
        self.active_id: Optional[int] = None

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[ColorProfile]:
        return iter(self._profiles.values())

    def __contains__(self, profile_id: int) -> bool:
        return profile_id in self._profiles

    def add(self, profile: ColorProfile) -> int:
        """Store a profile and return its id. The first profile added is selected."""
        profile.id = next(self._ids)
        self._profiles[profile.id] = profile
        if self.active_id is None:
            self.active_id = profile.id
        return profile.id

    def get(self, profile_id: int) -> ColorProfile:
        try:
            return self._profiles[profile_id]
        except KeyError:
            raise KeyError(f"No image with id {profile_id}")

    def select(self, profile_id: int) -> ColorProfile:
        profile = self.get(profile_id)
        self.active_id = profile_id
        return profile

    def remove(self, profile_id: int) -> ColorProfile:
        profile = self.get(profile_id)
        del self._profiles[profile_id]
        if self.active_id == profile_id:
            self.active_id = next(iter(self._profiles), None)
        return profile

    def clear(self) -> None:
        self._profiles.clear()
        self.active_id = None

    @property
    def active(self) -> Optional[ColorProfile]:
        if self.active_id is None:
            return None
        return self._profiles[self.active_id]
