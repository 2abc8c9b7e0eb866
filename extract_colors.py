#!/usr/bin/env python3
"""
Load image pixels and quantize them into weighted RGB samples.
"""

import math

import numpy as np
from PIL import Image


DEFAULT_BUCKET_SIZE = 8  # 256 values -> 32 buckets per channel
MAX_SAMPLE_WEIGHT = 10  # Cap on repeated copies of one bucket color
ALPHA_THRESHOLD = 128  # Pixels below this alpha are ignored

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels
MAX_IMAGE_DIMENSION = 10_000  # 10k pixels per side


def load_pixels(image_path: str, max_size: int = 150) -> np.ndarray:
    """
    Load an image as an RGBA array, downscaled so neither side exceeds max_size.

    Returns:
        uint8 array of shape (height, width, 4)

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If file is not a valid image or exceeds size limits
    """
    try:
        img = Image.open(image_path)
    except FileNotFoundError:
        raise FileNotFoundError(f"Image not found: {image_path}")
    except Exception as e:
        raise ValueError(f"Could not open image: {e}")

    width, height = img.size
    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        raise ValueError(
            f"Image dimensions {width}x{height} exceed maximum "
            f"{MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
        )
    if width * height > MAX_IMAGE_PIXELS:
        raise ValueError(
            f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
        )

    img = img.convert('RGBA')

    # Never upscale, never collapse below one pixel
    scale = min(max_size / width, max_size / height, 1)
    new_size = (max(math.floor(width * scale), 1), max(math.floor(height * scale), 1))
    if new_size != img.size:
        img = img.resize(new_size, Image.Resampling.BILINEAR)

    return np.array(img)


def _as_pixel_rows(pixels) -> np.ndarray:
    """Reshape a pixel buffer into (n, channels) rows."""
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        pixels = np.frombuffer(pixels, dtype=np.uint8)
    pixels = np.asarray(pixels, dtype=np.uint8)
    if pixels.ndim <= 1:
        # Flat buffers are RGBA quadruples
        return pixels.reshape(-1, 4)
    return pixels.reshape(-1, pixels.shape[-1])


def quantize_with_stats(pixels, bucket_size: int = DEFAULT_BUCKET_SIZE) -> tuple[np.ndarray, int, int]:
    """
    Quantize pixels and report how much the buffer was reduced.

    Returns:
        Tuple of (samples, pixel_count, distinct_count)
    """
    if bucket_size < 1:
        raise ValueError(f"bucket_size must be at least 1, got {bucket_size}")

    rows = _as_pixel_rows(pixels)
    pixel_count = len(rows)

    # Skip transparent pixels
    if rows.shape[1] == 4:
        rows = rows[rows[:, 3] >= ALPHA_THRESHOLD]
    rgb = rows[:, :3].astype(np.int64)

    if len(rgb) == 0:
        return np.empty((0, 3), dtype=np.int64), pixel_count, 0

    # Collapse near-duplicates into buckets
    bucketed = (rgb // bucket_size) * bucket_size

    unique_colors, first_index, counts = np.unique(
        bucketed, axis=0, return_index=True, return_counts=True
    )

    # Keep buckets in the order they first appear in the image
    order = np.argsort(first_index, kind='stable')
    unique_colors = unique_colors[order]
    weights = np.minimum(counts[order], MAX_SAMPLE_WEIGHT)

    samples = np.repeat(unique_colors, weights, axis=0)
    return samples, pixel_count, len(unique_colors)


def quantize(pixels, bucket_size: int = DEFAULT_BUCKET_SIZE) -> np.ndarray:
    """
    Reduce a pixel buffer to weighted, bucketed RGB samples.

    Args:
        pixels: RGBA (or opaque RGB) pixel buffer; flat buffers are read as RGBA
        bucket_size: Width of each quantization bucket per channel

    Returns:
        int array of shape (n_samples, 3). Each distinct bucket color appears
        min(count, MAX_SAMPLE_WEIGHT) times.
    """
    samples, _, _ = quantize_with_stats(pixels, bucket_size)
    return samples
