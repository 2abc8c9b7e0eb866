#!/usr/bin/env python3
"""
Palette extraction pipeline.

Extracts a primary palette from an image and derives ten OKLCH style variants
plus a 256-color micro palette.
Three stages: Quantize → Cluster → Variants
"""

from pathlib import Path
from typing import Optional

import numpy as np

from extract_colors import DEFAULT_BUCKET_SIZE, load_pixels, quantize_with_stats
from kmeans import MAX_ITERATIONS, RandomState, cluster, make_rng
from palette import ColorProfile, Palette, entries_from_rgb
from variants import generate_variants


# =============================================================================
# Constants
# =============================================================================

DEFAULT_COLOR_COUNT = 8
MIN_COLOR_COUNT = 2  # Bounds for user-facing color count options
MAX_COLOR_COUNT = 20
MICRO_COLOR_COUNT = 256

# Downsample targets (longest side, pixels)
PRIMARY_MAX_SIZE = 150
MICRO_MAX_SIZE = 100

PRIMARY_NAME = 'Extracted Colors'
MICRO_NAME = '256 Color Sample'


def _unique_rows(colors: np.ndarray) -> np.ndarray:
    """Drop repeated colors, keeping the first occurrence and original order."""
    if len(colors) == 0:
        return colors
    _, first_index = np.unique(colors, axis=0, return_index=True)
    return colors[np.sort(first_index)]


# =============================================================================
# Stage 1 + 2: Quantize and Cluster
# =============================================================================

def extract_centroids(pixels, color_count: int, bucket_size: int = DEFAULT_BUCKET_SIZE,
                      random_state: RandomState = None, verbose: bool = False) -> np.ndarray:
    """
    Quantize a pixel buffer and cluster it into representative colors.

    Returns:
        int array of shape (n, 3), n <= color_count, most common color first.
        Empty when the buffer has no opaque pixels.

    Raises:
        ValueError: If color_count < 1
    """
    if color_count < 1:
        raise ValueError(f"Color count must be at least 1, got {color_count}")

    samples, pixel_count, distinct = quantize_with_stats(pixels, bucket_size)
    if verbose:
        print(f"Reduced {pixel_count} pixels to {distinct} unique colors "
              f"({len(samples)} weighted samples)")

    centroids = cluster(samples, color_count, max_iterations=MAX_ITERATIONS,
                        random_state=random_state)

    # Weighted samples repeat colors; a palette lists each color once
    return _unique_rows(centroids)


def extract_palette(pixels, color_count: int = DEFAULT_COLOR_COUNT,
                    bucket_size: int = DEFAULT_BUCKET_SIZE,
                    random_state: RandomState = None, verbose: bool = False) -> Palette:
    """Extract the primary palette, ordered by cluster size."""
    colors = extract_centroids(pixels, color_count, bucket_size, random_state, verbose)
    return Palette(key='primary', name=PRIMARY_NAME, colors=entries_from_rgb(colors))


def extract_micro_palette(pixels, color_count: int = MICRO_COLOR_COUNT,
                          bucket_size: int = DEFAULT_BUCKET_SIZE,
                          random_state: RandomState = None, verbose: bool = False) -> Palette:
    """Extract a large palette of up to color_count colors, without variants."""
    colors = extract_centroids(pixels, color_count, bucket_size, random_state, verbose)
    return Palette(key='micro', name=MICRO_NAME, colors=entries_from_rgb(colors))


# =============================================================================
# Stage 3: Profile Assembly
# =============================================================================

def build_profile(name: str, pixels, micro_pixels=None,
                  color_count: int = DEFAULT_COLOR_COUNT,
                  bucket_size: int = DEFAULT_BUCKET_SIZE,
                  random_state: RandomState = None,
                  verbose: bool = False) -> ColorProfile:
    """
    Build the primary palette, its ten variants and the micro palette.

    Args:
        name: Label for the profile, usually the image file name
        pixels: RGBA buffer for the primary palette
        micro_pixels: RGBA buffer for the micro palette; None skips it
        color_count: Number of primary colors requested
        bucket_size: Quantization bucket width
        random_state: Seed or Generator shared by both clustering runs
    """
    rng = make_rng(random_state)

    primary = extract_palette(pixels, color_count, bucket_size, rng, verbose)
    palettes = {'primary': primary}
    palettes.update(generate_variants(primary))

    micro = None
    if micro_pixels is not None:
        micro = extract_micro_palette(micro_pixels, MICRO_COLOR_COUNT, bucket_size, rng, verbose)

    return ColorProfile(name=name, palettes=palettes, micro=micro)


def analyze_image(image_path: str, color_count: int = DEFAULT_COLOR_COUNT,
                  bucket_size: int = DEFAULT_BUCKET_SIZE, micro: bool = True,
                  random_state: RandomState = None, verbose: bool = False) -> ColorProfile:
    """Run the full pipeline on an image file.

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If the image can't be read or color_count < 1
    """
    pixels = load_pixels(image_path, PRIMARY_MAX_SIZE)
    micro_pixels = load_pixels(image_path, MICRO_MAX_SIZE) if micro else None
    return build_profile(
        Path(image_path).name, pixels, micro_pixels,
        color_count=color_count, bucket_size=bucket_size,
        random_state=random_state, verbose=verbose
    )


# =============================================================================
# Render
# =============================================================================

def render(profile: ColorProfile) -> str:
    """Plain-text listing of every palette in a profile."""
    lines = []
    lines.append(f"{profile.name}")
    lines.append(f"{len(profile.palettes)} palettes, {len(profile.primary)} colors each")

    if len(profile.primary) == 0:
        lines.append("")
        lines.append("No colors available (image has no opaque pixels).")
        return "\n".join(lines)

    for palette in profile.palettes.values():
        lines.append("")
        lines.append(f"{palette.name}:")
        for i, color in enumerate(palette.colors, 1):
            lines.append(f"  {i:>2}. {color.hex}  {color.rgb_css:<18} oklch {color.readable}")

    if profile.micro is not None:
        lines.append("")
        lines.append(f"{profile.micro.name}: {len(profile.micro)} colors")
        hexes = profile.micro.hex_codes
        for start in range(0, len(hexes), 8):
            lines.append("  " + " ".join(hexes[start:start + 8]))

    return "\n".join(lines)


# =============================================================================
# CLI
# =============================================================================

def check_options(color_count: int, bucket_size: int) -> Optional[str]:
    """Return an error message for out-of-range CLI options, or None."""
    if not MIN_COLOR_COUNT <= color_count <= MAX_COLOR_COUNT:
        return f"--colors must be between {MIN_COLOR_COUNT} and {MAX_COLOR_COUNT}"
    if bucket_size < 1:
        return f"--bucket-size must be at least 1, got {bucket_size}"
    return None


def main(argv=None):
    import argparse
    import sys

    parser = argparse.ArgumentParser(
        description='Extract a color palette and its style variants from an image.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Path to the image file'
    )
    parser.add_argument(
        '--colors', '-k',
        type=int,
        default=DEFAULT_COLOR_COUNT,
        help=f'Number of primary colors ({MIN_COLOR_COUNT}-{MAX_COLOR_COUNT}, default {DEFAULT_COLOR_COUNT})'
    )
    parser.add_argument(
        '--bucket-size',
        type=int,
        default=DEFAULT_BUCKET_SIZE,
        help='Quantization bucket width per channel'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible clustering'
    )
    parser.add_argument(
        '--no-micro',
        action='store_true',
        help='Skip the 256-color micro palette'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Print quantization statistics'
    )

    args = parser.parse_args(argv)

    error = check_options(args.colors, args.bucket_size)
    if error:
        print(f"Error: {error}", file=sys.stderr)
        sys.exit(2)

    try:
        profile = analyze_image(
            args.input, color_count=args.colors, bucket_size=args.bucket_size,
            micro=not args.no_micro, random_state=args.seed, verbose=args.verbose
        )
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error analyzing image: {e}", file=sys.stderr)
        sys.exit(1)

    print(render(profile))


if __name__ == '__main__':
    main()
