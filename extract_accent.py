#!/usr/bin/env python3
"""Extract accent colors from an image and print the stored color value."""

import argparse
import sys
from pathlib import Path

from PIL import Image

from media_colors import load_image
from most_used_colors import DEFAULT_FUZZINESS, DEFAULT_MAX_WIDTH
from primary_colors import analyze_colors, encode_color_value, MOST_USED_LIMIT


def render_details(most_used: list, primaries: list) -> str:
    """Render a table of the most used colors."""
    primary_rgbs = {p.rgb for p in primaries}
    total = sum(s.count for s in most_used)

    lines = []
    lines.append(f"Distinct colors: {len(most_used)} | Pixels: {total:,}")
    lines.append("")
    lines.append(f"{'Hex':<9} {'Count':>8} {'Share':>7} {'Hue':>5} {'Sat':>5} {'Light':>5} {'Contrast':>8}")
    lines.append("-" * 54)

    for sample in most_used[:MOST_USED_LIMIT]:
        share = sample.count / total * 100
        hue, sat, light = sample.hsl
        marker = " *" if sample.rgb in primary_rgbs else ""
        lines.append(
            f"{sample.hex:<9} {sample.count:>8,} {share:>6.1f}% {hue:>5.0f} {sat:>5.2f} "
            f"{light:>5.2f} {sample.contrast:>7.2f}:1{marker}"
        )

    lines.append("")
    lines.append(f"Primary colors (*): {len(primaries)}")
    return "\n".join(lines)


def save_swatches(most_used: list, primaries: list, output_path: str) -> None:
    """
    Save a swatch image: most used colors on the first row, primaries on the second.

    Args:
        most_used: ColorSamples, most used first
        primaries: Primary ColorSamples, highest contrast first
        output_path: Path to save the output image
    """
    from PIL import ImageDraw

    swatch_size = 48
    padding = 8
    text_height = 16
    rows = [most_used[:MOST_USED_LIMIT], primaries]
    cols = max(1, max(len(row) for row in rows))

    img_width = cols * (swatch_size + padding) + padding
    img_height = len(rows) * (swatch_size + text_height + padding) + padding

    img = Image.new('RGB', (img_width, img_height), (240, 240, 240))
    draw = ImageDraw.Draw(img)

    for row_index, row in enumerate(rows):
        y = padding + row_index * (swatch_size + text_height + padding)
        for col, sample in enumerate(row):
            x = padding + col * (swatch_size + padding)
            draw.rectangle([x, y, x + swatch_size, y + swatch_size], fill=sample.rgb)
            draw.text((x, y + swatch_size + 2), f"{sample.contrast:.1f}", fill=(0, 0, 0))

    img.save(output_path)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Extract accent colors from an image.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Path to the image file'
    )
    parser.add_argument(
        '--existing', '-e',
        default='',
        help='Previously stored value; a leading #rrggbb is kept as the selected color'
    )
    parser.add_argument(
        '--fuzziness', '-f',
        type=int,
        default=DEFAULT_FUZZINESS,
        help=f'Color bucket width per channel (default {DEFAULT_FUZZINESS}, 0 disables)'
    )
    parser.add_argument(
        '--max-size',
        type=int,
        default=DEFAULT_MAX_WIDTH,
        help=f'Thumbnail bound in pixels (default {DEFAULT_MAX_WIDTH})'
    )
    parser.add_argument(
        '--details',
        action='store_true',
        help='Also print the most used colors with HSL and contrast'
    )
    parser.add_argument(
        '--swatch', '-s',
        default=None,
        help='Write a PNG swatch of the most used and primary colors to this path'
    )

    args = parser.parse_args(argv)
    image_path = Path(args.input)

    try:
        image = load_image(str(image_path))
        most_used, primaries = analyze_colors(
            image, args.fuzziness, args.max_size, args.max_size
        )
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error analyzing image: {e}", file=sys.stderr)
        sys.exit(1)

    print(encode_color_value(most_used, primaries, args.existing))

    if args.details:
        print()
        print(render_details(most_used, primaries))

    if args.swatch:
        try:
            save_swatches(most_used, primaries, args.swatch)
            print(f"\nWrote: {args.swatch}")
        except OSError as e:
            print(f"Error writing swatch: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == '__main__':
    main()
