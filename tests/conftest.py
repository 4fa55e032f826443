"""
Shared fixtures: synthetic images built in memory.
"""
import io

import numpy as np
import pytest
from PIL import Image


def solid_image(width, height, color, mode='RGB'):
    """Create a single-color image."""
    return Image.new(mode, (width, height), color)


def striped_image(colors_and_widths, height=10):
    """Create an image of vertical stripes: [((r, g, b), width), ...]."""
    columns = []
    for color, width in colors_and_widths:
        columns.append(np.full((height, width, 3), color, dtype=np.uint8))
    return Image.fromarray(np.concatenate(columns, axis=1), 'RGB')


def encode_image(image, fmt):
    """Encode an image to bytes in the given Pillow format."""
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def red_image():
    return solid_image(8, 8, (255, 0, 0))


@pytest.fixture
def dark_red_image():
    return solid_image(8, 8, (200, 0, 0))


@pytest.fixture
def gray_image():
    return solid_image(16, 16, (128, 128, 128))


@pytest.fixture
def noisy_image():
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, size=(60, 90, 3), dtype=np.uint8)
    return Image.fromarray(pixels, 'RGB')
