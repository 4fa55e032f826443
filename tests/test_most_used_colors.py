"""
Unit tests for thumbnailing and the quantized color histogram.
"""

import dataclasses

import numpy as np
import pytest
from PIL import Image

from conftest import solid_image, striped_image
from most_used_colors import (
    ColorSample, compute_bounded_size, make_thumbnail, quantize,
    build_histogram, materialize_samples, get_most_used_colors,
)


class TestComputeBoundedSize:
    """Aspect-preserving size calculation"""

    def test_landscape_scales_to_width(self):
        assert compute_bounded_size(512, 512, 1024, 768) == (512, 384)

    def test_portrait_scales_to_height(self):
        assert compute_bounded_size(512, 512, 768, 1024) == (384, 512)

    def test_square_scales_to_height(self):
        assert compute_bounded_size(512, 256, 1000, 1000) == (256, 256)

    def test_rounds_to_nearest(self):
        # 333 * 0.512 = 170.496
        assert compute_bounded_size(512, 512, 1000, 333) == (512, 170)

    def test_thin_image_keeps_one_pixel(self):
        assert compute_bounded_size(512, 512, 10000, 1) == (512, 1)

    def test_zero_area(self):
        assert compute_bounded_size(512, 512, 0, 100) == (0, 0)
        assert compute_bounded_size(512, 512, 100, 0) == (0, 0)

    @pytest.mark.parametrize("width,height", [
        (1920, 1080), (1080, 1920), (4000, 3000), (800, 799), (513, 100), (777, 2049),
    ])
    def test_aspect_ratio_within_rounding(self, width, height):
        new_width, new_height = compute_bounded_size(512, 512, width, height)
        if width > height:
            assert new_width == 512
            assert abs(new_height - height * 512 / width) <= 0.5
        else:
            assert new_height == 512
            assert abs(new_width - width * 512 / height) <= 0.5


class TestMakeThumbnail:
    """Thumbnail generation"""

    def test_small_image_returned_unchanged(self):
        image = solid_image(100, 50, (1, 2, 3))
        assert make_thumbnail(image, 512, 512) is image

    def test_exact_bound_returned_unchanged(self):
        image = solid_image(512, 512, (1, 2, 3))
        assert make_thumbnail(image, 512, 512) is image

    def test_large_image_downscaled(self):
        image = solid_image(2048, 1024, (1, 2, 3))
        thumbnail = make_thumbnail(image, 512, 512)
        assert thumbnail is not image
        assert thumbnail.size == (512, 256)
        assert image.size == (2048, 1024)

    def test_nearest_keeps_exact_colors(self):
        image = striped_image([((200, 0, 0), 600), ((0, 125, 0), 600)], height=40)
        thumbnail = make_thumbnail(image, 300, 300)
        colors = {c for _, c in thumbnail.getcolors()}
        assert colors == {(200, 0, 0), (0, 125, 0)}


class TestQuantize:
    """Channel bucketing"""

    def test_floors_to_bucket(self):
        pixels = np.array([[49, 50, 74], [255, 0, 24]])
        np.testing.assert_array_equal(quantize(pixels, 25), [[25, 50, 50], [250, 0, 0]])

    def test_disabled(self):
        pixels = np.array([[49, 50, 74]])
        np.testing.assert_array_equal(quantize(pixels, 0), pixels)
        np.testing.assert_array_equal(quantize(pixels, -5), pixels)


class TestBuildHistogram:
    """Quantized color counting"""

    def test_solid_red(self, red_image):
        assert build_histogram(red_image, 25, 512, 512) == {(250, 0, 0): 64}

    def test_no_fuzziness(self, red_image):
        assert build_histogram(red_image, 0, 512, 512) == {(255, 0, 0): 64}

    def test_counts_sum_to_thumbnail_pixels(self, noisy_image):
        histogram = build_histogram(noisy_image, 25, 30, 30)
        # 90x60 -> 30x20
        assert sum(histogram.values()) == 600

    def test_keys_are_bucket_multiples(self, noisy_image):
        histogram = build_histogram(noisy_image, 25, 512, 512)
        assert sum(histogram.values()) == 90 * 60
        for rgb in histogram:
            assert all(c % 25 == 0 for c in rgb)
            assert all(0 <= c <= 255 for c in rgb)

    def test_stripes(self):
        image = striped_image([((0, 125, 0), 50), ((200, 0, 0), 30), ((255, 255, 255), 20)])
        assert build_histogram(image, 25) == {
            (0, 125, 0): 500,
            (200, 0, 0): 300,
            (250, 250, 250): 200,
        }

    def test_downscaled_large_image(self):
        image = striped_image([((255, 0, 0), 512), ((0, 0, 255), 512)], height=512)
        histogram = build_histogram(image, 0, 512, 512)
        assert set(histogram) == {(255, 0, 0), (0, 0, 255)}
        assert sum(histogram.values()) == 512 * 256

    def test_rgba_converted(self):
        image = Image.new('RGBA', (4, 4), (0, 0, 255, 128))
        assert build_histogram(image, 25) == {(0, 0, 250): 16}

    def test_palette_image_converted(self):
        # web-safe color, so the default palette holds it exactly
        image = solid_image(5, 5, (204, 0, 0)).convert('P')
        assert build_histogram(image, 25) == {(200, 0, 0): 25}

    def test_zero_area(self):
        assert build_histogram(Image.new('RGB', (0, 0)), 25) == {}


class TestMaterializeSamples:
    """ColorSample creation and ordering"""

    def test_sorted_by_count_then_rgb(self):
        samples = materialize_samples({(0, 0, 0): 5, (10, 0, 0): 9, (5, 0, 0): 9})
        assert [s.rgb for s in samples] == [(5, 0, 0), (10, 0, 0), (0, 0, 0)]
        assert [s.count for s in samples] == [9, 9, 5]

    def test_derived_fields(self):
        [sample] = materialize_samples({(200, 0, 0): 3})
        assert sample.hex == "#c80000"
        assert sample.hsl.saturation == pytest.approx(1.0)
        assert sample.contrast == pytest.approx(6.08, abs=0.01)

    def test_samples_are_frozen(self):
        sample = ColorSample.from_rgb((1, 2, 3), 4)
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample.contrast = 1.0

    def test_empty(self):
        assert materialize_samples({}) == []


class TestGetMostUsedColors:
    """End to end histogram"""

    def test_deterministic(self, noisy_image):
        first = get_most_used_colors(noisy_image)
        second = get_most_used_colors(noisy_image)
        assert first == second
        counts = [s.count for s in first]
        assert counts == sorted(counts, reverse=True)
