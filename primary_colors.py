"""
Pick primary (accent) colors from the most used colors of an image and encode
them as the three-line value stored on a media item:

    #selected
    #most #used #colors ...
    #primary #colors ...
"""

import re
from typing import Optional

from PIL import Image

from most_used_colors import (
    ColorSample, get_most_used_colors,
    DEFAULT_FUZZINESS, DEFAULT_MAX_WIDTH, DEFAULT_MAX_HEIGHT,
)


# =============================================================================
# Constants
# =============================================================================

MOST_USED_LIMIT = 25  # Candidates considered, and colors listed on line 2
MIN_SATURATION = 0.20  # Exclusive; near-grays make poor accents
MIN_CONTRAST = 4.5  # WCAG AA against white
MAX_CONTRAST = 10.0
FALLBACK_COLOR = "#666666"

SELECTED_COLOR_PATTERN = re.compile(r"^#([0-9a-f]{6})")


# =============================================================================
# Selection
# =============================================================================

def is_primary_candidate(sample: ColorSample) -> bool:
    """Saturated enough, and readable but not harsh against white."""
    return (sample.hsl.saturation > MIN_SATURATION
            and MIN_CONTRAST <= sample.contrast <= MAX_CONTRAST)


def select_primaries(samples: list[ColorSample]) -> list[ColorSample]:
    """
    Filter the most used colors down to primary colors.

    Args:
        samples: ColorSamples sorted by count descending

    Returns:
        Candidates among the first MOST_USED_LIMIT samples, sorted by contrast
        descending. May be empty.
    """
    primaries = [s for s in samples[:MOST_USED_LIMIT] if is_primary_candidate(s)]
    primaries.sort(key=lambda s: s.contrast, reverse=True)
    return primaries


# =============================================================================
# Encoding
# =============================================================================

def parse_selected_color(existing_value: Optional[str]) -> Optional[str]:
    """Return the '#rrggbb' a stored value starts with, or None."""
    if not existing_value:
        return None
    match = SELECTED_COLOR_PATTERN.match(existing_value)
    if match is None:
        return None
    return "#" + match.group(1)


def encode_color_value(most_used: list[ColorSample],
                       primaries: list[ColorSample],
                       existing_value: Optional[str] = None) -> str:
    """
    Build the stored color value.

    Line 1 keeps a previously selected color if existing_value starts with one,
    otherwise the top primary, otherwise FALLBACK_COLOR. Line 2 lists the most
    used colors, line 3 the primaries.
    """
    selected = parse_selected_color(existing_value)
    if selected is None:
        selected = primaries[0].hex if primaries else FALLBACK_COLOR

    lines = [
        selected,
        " ".join(s.hex for s in most_used[:MOST_USED_LIMIT]),
        " ".join(s.hex for s in primaries),
    ]
    value = "\n".join(lines)
    return value.replace("\r\n", "\n").strip()


# =============================================================================
# Main Pipeline
# =============================================================================

def analyze_colors(image: Image.Image,
                   fuzziness: int = DEFAULT_FUZZINESS,
                   max_width: int = DEFAULT_MAX_WIDTH,
                   max_height: int = DEFAULT_MAX_HEIGHT) -> tuple[list, list]:
    """Run histogram and selection stages.

    Returns:
        Tuple of (most_used, primaries)
    """
    most_used = get_most_used_colors(image, fuzziness, max_width, max_height)
    primaries = select_primaries(most_used)
    return most_used, primaries


def calculate_color_value(image: Image.Image,
                          existing_value: Optional[str] = None,
                          fuzziness: int = DEFAULT_FUZZINESS,
                          max_width: int = DEFAULT_MAX_WIDTH,
                          max_height: int = DEFAULT_MAX_HEIGHT) -> str:
    """Compute the encoded color value for an image."""
    most_used, primaries = analyze_colors(image, fuzziness, max_width, max_height)
    return encode_color_value(most_used, primaries, existing_value)
