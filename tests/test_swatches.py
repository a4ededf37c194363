"""
Unit tests for swatch rendering.
"""
import base64
import io

import pytest
from PIL import Image

from colorgen.services.colors.color_utils import RGBColor
from colorgen.services.colors.palettes import STANDARD_TONES, CorePalette
from colorgen.services.colors.swatches import render_palette_grid, render_swatch_strip


def decode_png(b64: str) -> Image.Image:
    return Image.open(io.BytesIO(base64.b64decode(b64)))


class TestRenderSwatchStrip:
    """Test the candidate strip"""

    def test_dimensions_and_colors(self):
        img = decode_png(render_swatch_strip(["#ff0000", "#00ff00", "#0000ff"], chip_size=10))
        assert img.size == (30, 10)
        assert img.getpixel((5, 5)) == (255, 0, 0)
        assert img.getpixel((15, 5)) == (0, 255, 0)
        assert img.getpixel((25, 5)) == (0, 0, 255)

    def test_highlight_outline(self):
        img = decode_png(render_swatch_strip(["#ffffff", "#ffffff"], chip_size=10, highlight_index=1))
        assert img.getpixel((10, 0)) == (0, 0, 0)
        assert img.getpixel((15, 5)) == (255, 255, 255)
        assert img.getpixel((0, 0)) == (255, 255, 255)

    @pytest.mark.parametrize("colors,chip_size,highlight", [
        ([], 10, None),
        (["#ff0000"], 0, None),
        (["#ff0000"], 10, 1),
        (["ff0000"], 10, None),
        (["#gg0000"], 10, None),
    ])
    def test_invalid_params(self, colors, chip_size, highlight):
        with pytest.raises(ValueError):
            render_swatch_strip(colors, chip_size=chip_size, highlight_index=highlight)


class TestRenderPaletteGrid:
    """Test the tonal palette grid"""

    def test_grid_layout(self):
        core = CorePalette.of(RGBColor(103, 80, 164))
        img = decode_png(render_palette_grid(core, chip_size=4))
        assert img.size == (4 * len(STANDARD_TONES), 4 * 6)
        assert img.getpixel((1, 1)) == (0, 0, 0)
        assert img.getpixel((4 * len(STANDARD_TONES) - 1, 4 * 6 - 1)) == (255, 255, 255)
