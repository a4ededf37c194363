"""
Unit tests for image quantization.

Tests the quantizer stage:
- distinct-color short circuit and population conservation
- Wu boxes and the Lab k-means refinement
- alpha filtering and empty input
- deterministic results
"""

import numpy as np
import pytest

from colorgen.services.colors.color_utils import RGBColor
from colorgen.services.colors.errors import EmptyInputError
from colorgen.services.colors.quantize import (
    QuantizedColor, QuantizerWu, count_colors, quantize, visible_pixels
)


class TestVisiblePixels:
    """Test pixel buffer normalization"""

    def test_rgb_array_passthrough(self):
        pixels = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.uint8)
        np.testing.assert_array_equal(visible_pixels(pixels), pixels)

    def test_image_shaped_array_is_flattened(self):
        img = np.zeros((4, 5, 3), dtype=np.uint8)
        assert visible_pixels(img).shape == (20, 3)

    def test_alpha_below_threshold_dropped(self):
        """Test that only fully opaque pixels survive the default threshold"""
        pixels = np.array([[255, 0, 0, 255], [0, 255, 0, 254], [0, 0, 255, 0]], dtype=np.uint8)
        result = visible_pixels(pixels)
        np.testing.assert_array_equal(result, [[255, 0, 0]])

    def test_custom_alpha_threshold(self):
        pixels = np.array([[255, 0, 0, 255], [0, 255, 0, 128], [0, 0, 255, 0]], dtype=np.uint8)
        assert len(visible_pixels(pixels, alpha_threshold=128)) == 2

    def test_rgbcolor_sequence(self):
        pixels = [RGBColor(1, 2, 3), RGBColor(4, 5, 6)]
        np.testing.assert_array_equal(visible_pixels(pixels), [[1, 2, 3], [4, 5, 6]])

    def test_bad_channel_count(self):
        with pytest.raises(ValueError):
            visible_pixels(np.zeros((4, 2), dtype=np.uint8))


class TestCountColors:
    """Test distinct color counting"""

    def test_first_occurrence_order(self):
        rgb = np.array([[9, 9, 9], [1, 1, 1], [9, 9, 9], [5, 5, 5], [1, 1, 1], [9, 9, 9]], dtype=np.uint8)
        colors, counts = count_colors(rgb)
        np.testing.assert_array_equal(colors, [[9, 9, 9], [1, 1, 1], [5, 5, 5]])
        np.testing.assert_array_equal(counts, [3, 2, 1])


class TestQuantize:
    """Test the public quantize entry point"""

    def test_two_by_two_red(self):
        """Test a 2x2 pure red image: one cluster with population 4"""
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        img[:, :] = (255, 0, 0)
        result = quantize(img, max_colors=128)
        assert result == [QuantizedColor(RGBColor(255, 0, 0), 4)]

    def test_fewer_distinct_colors_than_budget(self):
        """Test that distinct colors are returned exactly, sorted by population"""
        pixels = [(0, 0, 255)] * 3 + [(255, 255, 0)] * 5 + [(0, 128, 0)] * 2
        result = quantize(pixels, max_colors=16)
        assert [q.color for q in result] == [RGBColor(255, 255, 0), RGBColor(0, 0, 255), RGBColor(0, 128, 0)]
        assert [q.population for q in result] == [5, 3, 2]

    @pytest.mark.parametrize("method", ["celebi", "wu"])
    def test_population_conserved(self, noisy_pixels, method):
        """Test that counts add up to the number of visible pixels"""
        result = quantize(noisy_pixels, max_colors=8, method=method)
        assert sum(q.population for q in result) == len(noisy_pixels)

    @pytest.mark.parametrize("method", ["celebi", "wu"])
    @pytest.mark.parametrize("max_colors", [1, 3, 16, 128])
    def test_cap_respected(self, noisy_pixels, method, max_colors):
        """Test that at most max_colors colors come back"""
        result = quantize(noisy_pixels, max_colors=max_colors, method=method)
        assert 1 <= len(result) <= max_colors

    @pytest.mark.parametrize("method", ["celebi", "wu"])
    def test_sorted_by_population(self, noisy_pixels, method):
        result = quantize(noisy_pixels, max_colors=16, method=method)
        populations = [q.population for q in result]
        assert populations == sorted(populations, reverse=True)

    @pytest.mark.parametrize("method", ["celebi", "wu"])
    def test_dominant_cluster_found(self, noisy_pixels, method):
        """Test that the largest cluster (reds) comes first with three colors"""
        result = quantize(noisy_pixels, max_colors=3, method=method)
        top = result[0].color
        assert top.red > 150
        assert top.green < 100 and top.blue < 100

    @pytest.mark.parametrize("method", ["celebi", "wu"])
    def test_deterministic(self, noisy_pixels, method):
        """Test identical input gives identical output"""
        first = quantize(noisy_pixels, max_colors=12, method=method)
        second = quantize(noisy_pixels.copy(), max_colors=12, method=method)
        assert first == second

    def test_transparent_pixels_ignored(self):
        """Test that transparent pixels do not contribute to populations"""
        pixels = np.array([[255, 0, 0, 255]] * 3 + [[0, 0, 255, 0]] * 10, dtype=np.uint8)
        result = quantize(pixels)
        assert result == [QuantizedColor(RGBColor(255, 0, 0), 3)]

    def test_fully_transparent_raises(self):
        """Test EmptyInputError with no visible pixels"""
        pixels = np.zeros((10, 4), dtype=np.uint8)
        with pytest.raises(EmptyInputError):
            quantize(pixels)

    def test_empty_buffer_raises(self):
        with pytest.raises(EmptyInputError):
            quantize([])

    def test_invalid_parameters(self, noisy_pixels):
        with pytest.raises(ValueError):
            quantize(noisy_pixels, max_colors=0)
        with pytest.raises(ValueError):
            quantize(noisy_pixels, method="median-cut")


class TestQuantizerWu:
    """Test Wu box splitting directly"""

    def test_boxes_split_separated_colors(self):
        """Test two far apart groups end up in two boxes"""
        colors = np.array([[250, 10, 10], [245, 5, 15], [10, 10, 250], [15, 5, 245]], dtype=np.uint8)
        counts = np.array([4, 4, 2, 2])
        result = QuantizerWu().quantize(colors, counts, 2)
        assert len(result) == 2
        assert sorted(weight for _, weight in result) == [4, 8]

    def test_weights_conserved(self, noisy_pixels):
        colors, counts = count_colors(noisy_pixels)
        result = QuantizerWu().quantize(colors, counts, 5)
        assert sum(weight for _, weight in result) == int(counts.sum())

    def test_weights_conserved_after_fine_splits(self):
        colors = np.array([[r, g, b] for r in range(8) for g in range(8) for b in range(8)], dtype=np.uint8)
        counts = np.arange(1, len(colors) + 1)
        result = QuantizerWu().quantize(colors, counts, 40)
        assert len(result) == 40
        assert sum(weight for _, weight in result) == int(counts.sum())


class TestSubBinSplitting:
    """Test splitting of distinct colors that share one histogram bin"""

    @pytest.fixture
    def dark_cube(self):
        """512 distinct colors with every channel in 0..7, one histogram bin"""
        return np.array([[r, g, b] for r in range(8) for g in range(8) for b in range(8)], dtype=np.uint8)

    @pytest.fixture
    def two_reds(self):
        """Two groups of reds (0..3 and 4..7) inside the same bin"""
        return np.array([[r, 0, 0] for r in range(8)], dtype=np.uint8)

    def test_wu_fills_budget_within_one_bin(self, dark_cube):
        result = quantize(dark_cube, max_colors=128, method="wu")
        assert len(result) == 128
        assert len({q.color for q in result}) == 128
        assert sum(q.population for q in result) == 512

    def test_celebi_fills_budget_within_one_bin(self, dark_cube):
        result = quantize(dark_cube, max_colors=128, method="celebi")
        assert 1 < len(result) <= 128
        assert sum(q.population for q in result) == 512

    def test_wu_separates_two_groups_in_one_bin(self, two_reds):
        result = quantize(two_reds, max_colors=2, method="wu")
        assert sorted(q.color.red for q in result) == [1, 5]
        assert [q.population for q in result] == [4, 4]

    def test_celebi_separates_two_groups_in_one_bin(self, two_reds):
        result = quantize(two_reds, max_colors=2, method="celebi")
        assert len(result) == 2
        assert [q.population for q in result] == [4, 4]

    def test_stops_when_each_cluster_is_one_color(self):
        """Test no empty clusters appear once every distinct color is its own cluster"""
        colors = np.array([[0, 0, 0], [1, 0, 0], [2, 0, 0]], dtype=np.uint8)
        counts = np.array([5, 1, 1])
        result = QuantizerWu().quantize(colors, counts, 8)
        assert sorted(result, key=lambda item: item[0].red) == [
            (RGBColor(0, 0, 0), 5), (RGBColor(1, 0, 0), 1), (RGBColor(2, 0, 0), 1)
        ]
