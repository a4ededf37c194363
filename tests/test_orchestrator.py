"""
Unit tests for the scheme orchestrator.
"""
import numpy as np
import pytest

from colorgen.services.colors.color_utils import RGBColor
from colorgen.services.colors.errors import EmptyInputError, ImageDecodeError, InvalidColorError
from colorgen.services.colors.scheme import ROLE_NAMES
from colorgen.services.orchestrator import scheme_from_color, scheme_from_image_bytes, scheme_from_pixels
from colorgen.utils.metrics import get_metrics


class TestSchemeFromColor:
    """Test the explicit seed path"""

    def test_accepts_hex_and_tuple(self):
        assert scheme_from_color("#6750a4").seed == RGBColor(103, 80, 164)
        assert scheme_from_color((103, 80, 164)).seed == RGBColor(103, 80, 164)

    def test_no_candidates(self):
        result = scheme_from_color("#6750a4")
        assert result.candidates == []
        assert result.quantized_count == 0

    def test_adjust_toggle(self):
        plain = scheme_from_color("#6750a4", adjust_surfaces=False)
        adjusted = scheme_from_color("#6750a4", adjust_surfaces=True)
        assert plain.scheme.light["surface"] != adjusted.scheme.light["surface"]

    def test_invalid_color_counted(self):
        with pytest.raises(InvalidColorError):
            scheme_from_color("#nothex")
        assert get_metrics().get_counters()["scheme_failed_total_invalidcolorerror"] == 1

    def test_unknown_variant(self):
        with pytest.raises(ValueError):
            scheme_from_color("#6750a4", variant="rainbow")


class TestSchemeFromPixels:
    """Test the pixel buffer path"""

    def test_red_square(self):
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        img[:, :] = (255, 0, 0)
        result = scheme_from_pixels(img)
        assert result.seed == RGBColor(255, 0, 0)
        assert result.quantized_count == 1
        assert [c.color for c in result.candidates] == [RGBColor(255, 0, 0)]
        assert set(result.scheme.dark) == set(ROLE_NAMES)

    def test_candidate_count(self, noisy_pixels):
        result = scheme_from_pixels(noisy_pixels, candidates=2, max_colors=16)
        assert 1 <= len(result.candidates) <= 2
        assert result.seed == result.candidates[0].color

    def test_empty_input(self):
        with pytest.raises(EmptyInputError):
            scheme_from_pixels(np.zeros((4, 4), dtype=np.uint8))

    @pytest.mark.parametrize("params", [{"max_colors": 0}, {"max_colors": 300}, {"quantizer": "octree"}])
    def test_invalid_params(self, noisy_pixels, params):
        with pytest.raises(ValueError):
            scheme_from_pixels(noisy_pixels, **params)


class TestSchemeFromImageBytes:
    """Test the encoded image path"""

    def test_png(self, violet_blocks_png):
        result = scheme_from_image_bytes(violet_blocks_png)
        assert result.request_id.startswith("image-")
        assert result.seed.blue > result.seed.red > result.seed.green
        assert get_metrics().get_counters()["scheme_source_total_image"] == 1

    def test_not_an_image(self):
        with pytest.raises(ImageDecodeError):
            scheme_from_image_bytes(b"GIF89a" + b"\x00" * 10)
