"""
Find the most used colors of an image.

The image is downscaled to a bounded thumbnail, every pixel is quantized into
fuzziness-sized buckets per channel, and the buckets are counted. Each bucket
becomes a ColorSample carrying its HSL and WCAG contrast against white.
"""

from dataclasses import dataclass

import numpy as np
from PIL import Image

from color_space import Hsl, rgb_to_hsl, rgb_to_hex, contrast_against_white


# =============================================================================
# Constants
# =============================================================================

DEFAULT_FUZZINESS = 25  # Bucket width per channel (0 disables quantization)
DEFAULT_MAX_WIDTH = 512
DEFAULT_MAX_HEIGHT = 512


@dataclass(frozen=True)
class ColorSample:
    """A quantized color and how many thumbnail pixels fell into it."""
    count: int
    rgb: tuple  # (r, g, b), 0-255
    hsl: Hsl
    contrast: float  # WCAG ratio against white, 1-21

    @classmethod
    def from_rgb(cls, rgb: tuple, count: int) -> 'ColorSample':
        rgb = tuple(int(c) for c in rgb)
        return cls(
            count=int(count),
            rgb=rgb,
            hsl=rgb_to_hsl(rgb),
            contrast=contrast_against_white(rgb),
        )

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)


# =============================================================================
# Thumbnail
# =============================================================================

def compute_bounded_size(max_width: int, max_height: int,
                         orig_width: int, orig_height: int) -> tuple[int, int]:
    """
    Scale (orig_width, orig_height) so the dominant side matches its bound.

    Landscape images are scaled to max_width, everything else to max_height.
    The other side keeps the aspect ratio, rounded to the nearest pixel and
    never below 1.

    Returns:
        (new_width, new_height), or (0, 0) for a zero-area input
    """
    if orig_width <= 0 or orig_height <= 0:
        return 0, 0

    if orig_width > orig_height:
        new_width = max_width
        factor = new_width / orig_width
        new_height = max(1, round(orig_height * factor))
    else:
        new_height = max_height
        factor = new_height / orig_height
        new_width = max(1, round(orig_width * factor))

    return new_width, new_height


def make_thumbnail(image: Image.Image, max_width: int, max_height: int) -> Image.Image:
    """
    Return a downscaled version of image that fits max_width x max_height.

    If the image already fits, the source image itself is returned. Resampling
    is nearest-neighbour: the result is only counted, never displayed.
    """
    orig_width, orig_height = image.size

    if orig_width <= max_width and orig_height <= max_height:
        return image
    if orig_width == 0 or orig_height == 0:
        return image

    new_size = compute_bounded_size(max_width, max_height, orig_width, orig_height)
    return image.resize(new_size, Image.Resampling.NEAREST)


# =============================================================================
# Histogram
# =============================================================================

def quantize(pixels: np.ndarray, fuzziness: int) -> np.ndarray:
    """Floor each channel to a multiple of fuzziness (no-op when fuzziness <= 0)."""
    if fuzziness <= 0:
        return pixels
    return pixels // fuzziness * fuzziness


def build_histogram(image: Image.Image,
                    fuzziness: int = DEFAULT_FUZZINESS,
                    max_width: int = DEFAULT_MAX_WIDTH,
                    max_height: int = DEFAULT_MAX_HEIGHT) -> dict:
    """
    Count quantized colors over the thumbnail of an image.

    Args:
        image: Source image (any mode, converted to RGB)
        fuzziness: Bucket width per channel
        max_width: Thumbnail width bound
        max_height: Thumbnail height bound

    Returns:
        dict mapping (r, g, b) -> pixel count. Counts sum to the thumbnail's
        pixel count. Empty for zero-area images.
    """
    width, height = image.size
    if width == 0 or height == 0:
        return {}

    thumbnail = make_thumbnail(image, max_width, max_height)
    if thumbnail.mode != 'RGB':
        thumbnail = thumbnail.convert('RGB')

    pixels = np.asarray(thumbnail, dtype=np.int32).reshape(-1, 3)
    pixels = quantize(pixels, fuzziness)

    colors, counts = np.unique(pixels, axis=0, return_counts=True)

    return {
        (int(r), int(g), int(b)): int(n)
        for (r, g, b), n in zip(colors, counts)
    }


def materialize_samples(histogram: dict) -> list[ColorSample]:
    """
    Turn a color histogram into ColorSamples.

    Sorted by count descending; equal counts are ordered by RGB ascending.
    """
    samples = [ColorSample.from_rgb(rgb, count) for rgb, count in histogram.items()]
    samples.sort(key=lambda s: (-s.count, s.rgb))
    return samples


def get_most_used_colors(image: Image.Image,
                         fuzziness: int = DEFAULT_FUZZINESS,
                         max_width: int = DEFAULT_MAX_WIDTH,
                         max_height: int = DEFAULT_MAX_HEIGHT) -> list[ColorSample]:
    """Histogram an image and return its ColorSamples, most used first."""
    histogram = build_histogram(image, fuzziness, max_width, max_height)
    return materialize_samples(histogram)
