"""
Color conversions used by the accent color pipeline.

RGB <-> HSL, hex encoding and WCAG contrast. All functions take plain
(r, g, b) tuples with channels in 0-255.
"""

from typing import NamedTuple


WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


class Hsl(NamedTuple):
    """HSL color: hue in degrees [0, 360), saturation and lightness in [0, 1]."""
    hue: float
    saturation: float
    lightness: float


# =============================================================================
# HSL
# =============================================================================

def rgb_to_hsl(rgb: tuple) -> Hsl:
    """Convert an RGB tuple (0-255) to HSL."""
    r, g, b = (c / 255.0 for c in rgb)
    mx = max(r, g, b)
    mn = min(r, g, b)
    lightness = (mx + mn) / 2

    if mx == mn:
        return Hsl(0.0, 0.0, lightness)

    delta = mx - mn
    saturation = delta / (1 - abs(2 * lightness - 1))

    if mx == r:
        hue = ((g - b) / delta) % 6
    elif mx == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4

    hue = (hue * 60) % 360
    return Hsl(hue, min(saturation, 1.0), lightness)


def hsl_to_rgb(hsl: tuple) -> tuple:
    """Convert HSL back to an RGB tuple (0-255)."""
    hue, saturation, lightness = hsl
    chroma = (1 - abs(2 * lightness - 1)) * saturation
    h = (hue % 360) / 60
    x = chroma * (1 - abs(h % 2 - 1))
    m = lightness - chroma / 2

    if h < 1:
        r, g, b = chroma, x, 0
    elif h < 2:
        r, g, b = x, chroma, 0
    elif h < 3:
        r, g, b = 0, chroma, x
    elif h < 4:
        r, g, b = 0, x, chroma
    elif h < 5:
        r, g, b = x, 0, chroma
    else:
        r, g, b = chroma, 0, x

    return tuple(int(round(min(max((c + m) * 255, 0), 255))) for c in (r, g, b))


# =============================================================================
# Hex
# =============================================================================

def rgb_to_hex(rgb: tuple) -> str:
    """Convert RGB tuple to a lowercase '#rrggbb' string."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_color: str) -> tuple:
    """Convert '#rrggbb' (or 'rrggbb') to an RGB tuple."""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"Expected 6 hex digits, got {hex_color!r}")
    return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))


# =============================================================================
# WCAG Contrast
# =============================================================================

def relative_luminance(rgb: tuple) -> float:
    """WCAG 2.0 relative luminance of an RGB tuple, in [0, 1]."""
    def linearize(c):
        c = c / 255.0
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = (linearize(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(rgb1: tuple, rgb2: tuple) -> float:
    """WCAG contrast ratio between two colors, in [1, 21]."""
    l1 = relative_luminance(rgb1)
    l2 = relative_luminance(rgb2)

    lighter = max(l1, l2)
    darker = min(l1, l2)

    return (lighter + 0.05) / (darker + 0.05)


def contrast_against_white(rgb: tuple) -> float:
    """Contrast ratio of a color against white text/background."""
    return contrast_ratio(rgb, WHITE)
