#!/usr/bin/env python3
"""Batch extract accent colors for a directory of images."""

import argparse
import sys
import time
from pathlib import Path

from media_colors import (
    MediaItem, LocalMediaFileSystem, on_media_saving, summarize_results,
    COLOR_PROPERTY, IMAGE_CONTENT_TYPE, UPDATED, SKIPPED, FAILED,
)
from most_used_colors import DEFAULT_FUZZINESS, DEFAULT_MAX_WIDTH


def find_images(directory: Path) -> list[Path]:
    """Find all image files in directory."""
    extensions = {'.jpg', '.jpeg', '.png', '.webp'}
    images = []
    for ext in extensions:
        images.extend(directory.glob(f'*{ext}'))
        images.extend(directory.glob(f'*{ext.upper()}'))
    return sorted(set(images))


def output_path_for(output_dir: Path, image_name: str) -> Path:
    return output_dir / f"{Path(image_name).stem}-accent.txt"


class TextFileMediaService:
    """Saves each media item's color value as <stem>-accent.txt."""

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir

    def save(self, media: MediaItem, raise_events: bool = True) -> None:
        output_file = output_path_for(self.output_dir, media.file)
        output_file.write_text(media.get_value(COLOR_PROPERTY) + "\n")


def build_media_items(images: list[Path], output_dir: Path) -> list[MediaItem]:
    """Wrap image files as media items, carrying over earlier output as the stored value."""
    items = []
    for media_id, image_path in enumerate(images, 1):
        properties = {}
        previous = output_path_for(output_dir, image_path.name)
        if previous.exists():
            properties[COLOR_PROPERTY] = previous.read_text()
        items.append(MediaItem(
            id=media_id,
            content_type=IMAGE_CONTENT_TYPE,
            extension=image_path.suffix.lstrip('.'),
            file=image_path.name,
            properties=properties,
        ))
    return items


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Batch extract accent colors for a directory of images.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Directory containing images'
    )
    parser.add_argument(
        '--output', '-o',
        required=True,
        help='Directory for <image>-accent.txt files'
    )
    parser.add_argument(
        '--fuzziness', '-f',
        type=int,
        default=DEFAULT_FUZZINESS,
        help=f'Color bucket width per channel (default {DEFAULT_FUZZINESS})'
    )
    parser.add_argument(
        '--max-size',
        type=int,
        default=DEFAULT_MAX_WIDTH,
        help=f'Thumbnail bound in pixels (default {DEFAULT_MAX_WIDTH})'
    )

    args = parser.parse_args(argv)

    input_dir = Path(args.input)
    output_dir = Path(args.output)

    # Validate input directory
    if not input_dir.is_dir():
        print(f"Error: Input directory not found: {input_dir}", file=sys.stderr)
        sys.exit(2)

    output_dir.mkdir(parents=True, exist_ok=True)

    images = find_images(input_dir)
    if not images:
        print(f"No images found in {input_dir}", file=sys.stderr)
        sys.exit(2)

    items = build_media_items(images, output_dir)
    total = len(items)

    batch_start = time.perf_counter()
    results = on_media_saving(
        items,
        LocalMediaFileSystem(input_dir),
        TextFileMediaService(output_dir),
        fuzziness=args.fuzziness,
        max_width=args.max_size,
        max_height=args.max_size,
    )
    batch_elapsed = time.perf_counter() - batch_start

    for i, (item, result) in enumerate(zip(items, results), 1):
        if result.status == UPDATED:
            selected = result.value.split("\n", 1)[0]
            print(f"[{i}/{total}] {item.file} → {selected}")
        elif result.status == FAILED:
            print(f"[{i}/{total}] {item.file} → ERROR: {result.error}", file=sys.stderr)
        else:
            print(f"[{i}/{total}] {item.file} → skipped")

    # Summary
    summary = summarize_results(results)
    print()
    print(f"Completed: {summary[UPDATED]}/{total} updated, {summary[SKIPPED]} skipped "
          f"in {batch_elapsed:.2f}s")
    if summary[FAILED]:
        print(f"Failed ({summary[FAILED]}):")
        for item, result in zip(items, results):
            if result.status == FAILED:
                print(f"  - {item.file}: {result.error}")
        sys.exit(1)


if __name__ == '__main__':
    main()
