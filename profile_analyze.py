#!/usr/bin/env python3
"""Profile the palette pipeline to identify performance bottlenecks."""

import cProfile
import pstats
import io
import sys
import time
from pathlib import Path

from analyze import DEFAULT_COLOR_COUNT, MICRO_COLOR_COUNT, MICRO_MAX_SIZE, PRIMARY_MAX_SIZE
from batch_analyze import find_images
from extract_colors import load_pixels, quantize
from kmeans import cluster
from palette import Palette, entries_from_rgb
from variants import generate_variants


def profile_image(image_path: str, seed=None, verbose: bool = True):
    """Time each pipeline stage for a single image."""

    if verbose:
        print(f"\n{'='*60}")
        print(f"Profiling: {Path(image_path).name}")
        print(f"{'='*60}")

    timings = {}

    start = time.perf_counter()
    pixels = load_pixels(image_path, PRIMARY_MAX_SIZE)
    micro_pixels = load_pixels(image_path, MICRO_MAX_SIZE)
    timings['load'] = time.perf_counter() - start

    start = time.perf_counter()
    samples = quantize(pixels)
    micro_samples = quantize(micro_pixels)
    timings['quantize'] = time.perf_counter() - start

    if verbose:
        print(f"  Samples: {len(samples):,}")
        print(f"  Micro samples: {len(micro_samples):,}")

    start = time.perf_counter()
    centroids = cluster(samples, DEFAULT_COLOR_COUNT, random_state=seed)
    timings['cluster'] = time.perf_counter() - start

    start = time.perf_counter()
    micro = cluster(micro_samples, MICRO_COLOR_COUNT, random_state=seed)
    timings['cluster_micro'] = time.perf_counter() - start

    start = time.perf_counter()
    primary = Palette(key='primary', name='primary', colors=entries_from_rgb(centroids))
    generate_variants(primary)
    timings['variants'] = time.perf_counter() - start

    total = sum(timings.values())
    timings['total'] = total

    if verbose:
        print(f"  Micro colors: {len(micro)}")
        print(f"\nStage timings:")
        for stage, t in timings.items():
            pct = (t / total * 100) if stage != 'total' and total > 0 else 100
            print(f"  {stage:20s}: {t:6.3f}s ({pct:5.1f}%)")

    return timings, samples


def detailed_profile(image_path: str, seed=None):
    """Run detailed cProfile on the micro palette clustering (the main compute stage)."""

    print(f"\n{'='*60}")
    print(f"Detailed profile of cluster(k={MICRO_COLOR_COUNT})")
    print(f"{'='*60}")

    samples = quantize(load_pixels(image_path, MICRO_MAX_SIZE))

    profiler = cProfile.Profile()
    profiler.enable()
    centroids = cluster(samples, MICRO_COLOR_COUNT, random_state=seed)
    profiler.disable()

    stream = io.StringIO()
    stats = pstats.Stats(profiler, stream=stream)
    stats.sort_stats('cumulative')
    stats.print_stats(30)  # Top 30 functions

    print(stream.getvalue())

    return centroids


def main():
    images_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent / "source_images"
    images = find_images(images_dir) if images_dir.is_dir() else []

    if not images:
        print(f"No images found in {images_dir}/")
        sys.exit(1)

    print(f"Found {len(images)} test images")

    all_timings = []
    for img in images:
        timings, samples = profile_image(str(img), seed=0)
        all_timings.append((img.name, timings, len(samples)))

    # Summary
    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    print(f"{'Image':<35} {'Samples':>10} {'Total':>10}")
    print("-" * 60)
    for name, timings, n_samples in all_timings:
        print(f"{name:<35} {n_samples:>10,} {timings['total']:>9.3f}s")

    detailed_profile(str(images[0]), seed=0)


if __name__ == "__main__":
    main()
