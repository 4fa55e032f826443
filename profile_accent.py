#!/usr/bin/env python3
"""Profile the accent color pipeline to identify performance bottlenecks."""

import cProfile
import pstats
import io
import sys
import time
from pathlib import Path

from media_colors import load_image
from most_used_colors import (
    make_thumbnail, build_histogram, materialize_samples,
    DEFAULT_FUZZINESS, DEFAULT_MAX_WIDTH, DEFAULT_MAX_HEIGHT,
)
from primary_colors import select_primaries, encode_color_value


def profile_image(image_path: str, verbose: bool = True):
    """Time each pipeline stage for a single image."""

    if verbose:
        print(f"\n{'='*60}")
        print(f"Profiling: {Path(image_path).name}")
        print(f"{'='*60}")

    timings = {}

    start = time.perf_counter()
    image = load_image(image_path)
    timings['load'] = time.perf_counter() - start

    start = time.perf_counter()
    thumbnail = make_thumbnail(image, DEFAULT_MAX_WIDTH, DEFAULT_MAX_HEIGHT)
    timings['thumbnail'] = time.perf_counter() - start

    start = time.perf_counter()
    histogram = build_histogram(thumbnail, DEFAULT_FUZZINESS, DEFAULT_MAX_WIDTH, DEFAULT_MAX_HEIGHT)
    timings['histogram'] = time.perf_counter() - start

    start = time.perf_counter()
    samples = materialize_samples(histogram)
    timings['samples'] = time.perf_counter() - start

    start = time.perf_counter()
    primaries = select_primaries(samples)
    timings['select'] = time.perf_counter() - start

    start = time.perf_counter()
    encode_color_value(samples, primaries)
    timings['encode'] = time.perf_counter() - start

    total = sum(timings.values())
    timings['total'] = total

    if verbose:
        print(f"  Image: {image.size[0]}x{image.size[1]} → thumbnail {thumbnail.size[0]}x{thumbnail.size[1]}")
        print(f"  Distinct colors: {len(samples):,}")
        print(f"  Primary colors: {len(primaries)}")
        print(f"\nStage timings:")
        for stage, t in timings.items():
            pct = (t / total * 100) if stage != 'total' else 100
            print(f"  {stage:20s}: {t:6.3f}s ({pct:5.1f}%)")

    return timings, len(samples)


def detailed_profile(image_path: str):
    """Run detailed cProfile on build_histogram (the per-pixel stage)."""

    print(f"\n{'='*60}")
    print(f"Detailed profile of build_histogram()")
    print(f"{'='*60}")

    image = load_image(image_path)

    profiler = cProfile.Profile()
    profiler.enable()
    histogram = build_histogram(image)
    profiler.disable()

    stream = io.StringIO()
    stats = pstats.Stats(profiler, stream=stream)
    stats.sort_stats('cumulative')
    stats.print_stats(30)  # Top 30 functions

    print(stream.getvalue())

    return histogram


def main():
    images_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent / "source_images"
    images = sorted(images_dir.glob("*.jpeg")) + sorted(images_dir.glob("*.jpg")) + sorted(images_dir.glob("*.png"))

    if not images:
        print(f"No images found in {images_dir}/")
        sys.exit(1)

    print(f"Found {len(images)} test images")

    all_timings = []
    for img in images:
        timings, n_colors = profile_image(str(img))
        all_timings.append((img.name, timings, n_colors))

    # Summary
    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    print(f"{'Image':<35} {'Colors':>8} {'Total':>8}")
    print("-" * 60)
    for name, timings, n_colors in all_timings:
        print(f"{name:<35} {n_colors:>8,} {timings['total']:>7.3f}s")

    detailed_profile(str(images[0]))


if __name__ == "__main__":
    main()
