#!/usr/bin/env python3
"""Batch extract palettes from a directory of images."""

import argparse
import sys
import time
from pathlib import Path

from analyze import (
    DEFAULT_COLOR_COUNT, MAX_COLOR_COUNT, MIN_COLOR_COUNT,
    analyze_image, check_options, render,
)
from extract_colors import DEFAULT_BUCKET_SIZE
from palette import ImageStore


def find_images(directory: Path) -> list[Path]:
    """Find all image files in directory."""
    extensions = {'.jpg', '.jpeg', '.png', '.webp', '.gif', '.bmp'}
    return sorted(
        path for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() in extensions
    )


def process_images(images: list[Path], store: ImageStore, color_count: int = DEFAULT_COLOR_COUNT,
                   bucket_size: int = DEFAULT_BUCKET_SIZE, micro: bool = True,
                   seed=None, verbose: bool = False) -> list[tuple[str, str]]:
    """
    Analyze each image and add its profile to store.

    A failing image is reported and skipped; the rest still run.

    Returns:
        List of (file name, error message) for images that failed
    """
    total = len(images)
    failed = []

    for i, image_path in enumerate(images, 1):
        try:
            img_start = time.perf_counter()
            profile = analyze_image(
                str(image_path), color_count=color_count, bucket_size=bucket_size,
                micro=micro, random_state=seed, verbose=verbose
            )
            img_elapsed = time.perf_counter() - img_start

            store.add(profile)
            print(f"[{i}/{total}] {image_path.name} → {len(profile.primary)} colors ({img_elapsed:.2f}s)")

        except Exception as e:
            error_msg = f"{type(e).__name__}: {e}"
            print(f"[{i}/{total}] {image_path.name} → ERROR: {error_msg}", file=sys.stderr)
            failed.append((image_path.name, error_msg))

    return failed


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Batch extract palettes and style variants from images.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Directory containing images to analyze'
    )
    parser.add_argument(
        '--colors', '-k',
        type=int,
        default=DEFAULT_COLOR_COUNT,
        help=f'Number of primary colors ({MIN_COLOR_COUNT}-{MAX_COLOR_COUNT})'
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
        help='Skip the 256-color micro palettes'
    )
    parser.add_argument(
        '--show',
        action='store_true',
        help='Print every palette after the summary'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Print quantization statistics'
    )

    args = parser.parse_args(argv)

    input_dir = Path(args.input)

    # Validate input directory
    if not input_dir.is_dir():
        print(f"Error: Input directory not found: {input_dir}", file=sys.stderr)
        sys.exit(2)

    error = check_options(args.colors, args.bucket_size)
    if error:
        print(f"Error: {error}", file=sys.stderr)
        sys.exit(2)

    images = find_images(input_dir)
    if not images:
        print(f"No images found in {input_dir}", file=sys.stderr)
        sys.exit(2)

    store = ImageStore()
    batch_start = time.perf_counter()

    failed = process_images(
        images, store, color_count=args.colors, bucket_size=args.bucket_size,
        micro=not args.no_micro, seed=args.seed, verbose=args.verbose
    )

    batch_elapsed = time.perf_counter() - batch_start
    succeeded = len(store)

    if args.show:
        for profile in store:
            print()
            print(render(profile))

    # Summary
    print()
    print(f"Completed: {succeeded}/{len(images)} succeeded in {batch_elapsed:.2f}s")
    if succeeded > 0:
        print(f"Average: {batch_elapsed / succeeded:.2f}s per image")
    if failed:
        print(f"Failed ({len(failed)}):")
        for name, error in failed:
            print(f"  - {name}: {error}")
        sys.exit(1)


if __name__ == '__main__':
    main()
