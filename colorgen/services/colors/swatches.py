"""
Swatch Rendering Module

Renders quick visual previews as base64 PNGs: a strip of seed candidates with
the chosen seed outlined, and a grid of the six tonal palettes.
"""

import base64
from io import BytesIO
from typing import List, Optional, Sequence

from loguru import logger
from PIL import Image, ImageDraw

from .color_utils import RGBColor
from .palettes import STANDARD_TONES, CorePalette


def _encode_png(img: Image.Image) -> str:
    buffer = BytesIO()
    try:
        img.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to encode swatch: {str(e)}")
        raise RuntimeError(f"Swatch encoding failed: {str(e)}")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def validate_swatch_params(hex_colors: Sequence[str], chip_size: int, highlight_index: Optional[int]) -> None:
    """Validate swatch rendering parameters."""
    if not hex_colors:
        raise ValueError("hex_colors cannot be empty")

    if chip_size <= 0:
        raise ValueError("chip_size must be positive")

    if highlight_index is not None and (highlight_index < 0 or highlight_index >= len(hex_colors)):
        raise ValueError(f"highlight_index {highlight_index} out of range [0, {len(hex_colors)})")

    for i, hex_color in enumerate(hex_colors):
        if not isinstance(hex_color, str):
            raise ValueError(f"Color at index {i} is not a string: {type(hex_color)}")
        if not hex_color.startswith('#') or len(hex_color) != 7:
            raise ValueError(f"Invalid hex color format at index {i}: {hex_color}")
        try:
            int(hex_color[1:], 16)
        except ValueError:
            raise ValueError(f"Invalid hex color digits at index {i}: {hex_color}")


def render_swatch_strip(hex_colors: Sequence[str],
                        chip_size: int = 40,
                        highlight_index: Optional[int] = None,
                        border_color: tuple = (0, 0, 0),
                        border_width: int = 2) -> str:
    """
    Render a horizontal strip of color swatches.

    Args:
        hex_colors: List of "#rrggbb" strings
        chip_size: Size of each color chip in pixels
        highlight_index: Index of the chip to outline (the chosen seed)
        border_color: RGB color of the outline
        border_width: Width of the outline in pixels

    Returns:
        Base64-encoded PNG image string
    """
    validate_swatch_params(hex_colors, chip_size, highlight_index)

    k = len(hex_colors)
    logger.debug(f"Rendering swatch strip with {k} colors, chip_size={chip_size}")

    img = Image.new("RGB", (chip_size * k, chip_size))
    draw = ImageDraw.Draw(img)
    for i, hex_color in enumerate(hex_colors):
        x_start = i * chip_size
        draw.rectangle([x_start, 0, x_start + chip_size - 1, chip_size - 1],
                       fill=RGBColor.from_hex(hex_color).as_tuple())

    if highlight_index is not None:
        x_start = highlight_index * chip_size
        draw.rectangle([x_start, 0, x_start + chip_size - 1, chip_size - 1],
                       outline=border_color, width=border_width)

    return _encode_png(img)


def render_palette_grid(core: CorePalette, chip_size: int = 24) -> str:
    """
    Render the six tonal palettes as rows of STANDARD_TONES chips.

    Returns:
        Base64-encoded PNG image string
    """
    if chip_size <= 0:
        raise ValueError("chip_size must be positive")

    rows: List = list(core.items())
    img = Image.new("RGB", (chip_size * len(STANDARD_TONES), chip_size * len(rows)))
    draw = ImageDraw.Draw(img)
    for row, (name, palette) in enumerate(rows):
        y_start = row * chip_size
        for col, tone in enumerate(STANDARD_TONES):
            x_start = col * chip_size
            draw.rectangle([x_start, y_start, x_start + chip_size - 1, y_start + chip_size - 1],
                           fill=palette.tone(tone).as_tuple())
        logger.debug(f"Rendered palette row {name}")

    return _encode_png(img)
