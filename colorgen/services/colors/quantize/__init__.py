"""
Image quantization.

Reduces a pixel buffer to at most ``max_colors`` representative colors with
population counts. The counts of one run always add up to the number of
visible pixels.

Methods:
    wu:     Wu's variance-minimizing box splitting
    celebi: Wu boxes refined with weighted k-means in L*a*b* (default)
"""

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

import numpy as np
from loguru import logger

from ..color_utils import RGBColor
from ..errors import EmptyInputError
from .wsmeans import refine
from .wu import QuantizerWu


QUANTIZER_METHODS = ("celebi", "wu")
DEFAULT_MAX_COLORS = 128
DEFAULT_ALPHA_THRESHOLD = 255


@dataclass(frozen=True)
class QuantizedColor:
    """A representative color and the number of pixels it absorbed."""
    color: RGBColor
    population: int


def visible_pixels(pixels: Any, alpha_threshold: int = DEFAULT_ALPHA_THRESHOLD) -> np.ndarray:
    """
    Normalize a pixel buffer to an (N, 3) uint8 array of visible pixels.

    Args:
        pixels: (N, 3|4) or (H, W, 3|4) array, or a sequence of RGB/RGBA
            tuples or RGBColor values
        alpha_threshold: Pixels with alpha below this value are dropped

    Returns:
        Visible RGB pixels (N, 3) uint8

    Raises:
        ValueError: If the buffer does not have 3 or 4 channels
    """
    if not isinstance(pixels, np.ndarray):
        pixels = [p.as_tuple() if isinstance(p, RGBColor) else tuple(p) for p in pixels]
        if not pixels:
            return np.zeros((0, 3), dtype=np.uint8)
    array = np.asarray(pixels)
    if array.size == 0:
        return np.zeros((0, 3), dtype=np.uint8)
    if array.ndim == 3:
        array = array.reshape(-1, array.shape[-1])
    if array.ndim != 2 or array.shape[1] not in (3, 4):
        raise ValueError(f"Expected RGB or RGBA pixels, got shape {array.shape}")
    array = np.clip(array, 0, 255).astype(np.uint8)

    if array.shape[1] == 4:
        array = array[array[:, 3] >= alpha_threshold, :3]
    return array


def count_colors(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Distinct colors and their counts, in order of first occurrence.

    Returns:
        Tuple of (colors (M, 3) uint8, counts (M,) int64)
    """
    packed = (rgb[:, 0].astype(np.int64) << 16) | (rgb[:, 1].astype(np.int64) << 8) | rgb[:, 2].astype(np.int64)
    unique, first_index, counts = np.unique(packed, return_index=True, return_counts=True)
    order = np.argsort(first_index, kind="stable")
    unique = unique[order]
    colors = np.stack([(unique >> 16) & 0xFF, (unique >> 8) & 0xFF, unique & 0xFF], axis=1).astype(np.uint8)
    return colors, counts[order].astype(np.int64)


def quantize(pixels: Any,
             max_colors: int = DEFAULT_MAX_COLORS,
             method: str = "celebi",
             alpha_threshold: int = DEFAULT_ALPHA_THRESHOLD) -> List[QuantizedColor]:
    """
    Quantize a pixel buffer.

    Args:
        pixels: Pixel buffer, see visible_pixels
        max_colors: Upper bound on the number of returned colors
        method: "celebi" or "wu"
        alpha_threshold: Minimum alpha of a visible pixel

    Returns:
        QuantizedColor list ordered by population, descending

    Raises:
        EmptyInputError: If no visible pixels remain
        ValueError: For an unknown method or a non-positive max_colors
    """
    if max_colors < 1:
        raise ValueError(f"max_colors must be positive, got {max_colors}")
    if method not in QUANTIZER_METHODS:
        raise ValueError(f"Unknown quantizer: {method}. Supported: {', '.join(QUANTIZER_METHODS)}")

    rgb = visible_pixels(pixels, alpha_threshold)
    if len(rgb) == 0:
        raise EmptyInputError("No visible pixels to quantize")

    colors, counts = count_colors(rgb)
    logger.info(f"Quantizing {len(rgb)} pixels ({len(colors)} distinct) to at most {max_colors} colors with {method}")

    if len(colors) <= max_colors:
        clusters = [(RGBColor(int(r), int(g), int(b)), int(n)) for (r, g, b), n in zip(colors, counts)]
    else:
        clusters = QuantizerWu().quantize(colors, counts, max_colors)
        if method == "celebi":
            clusters = refine(colors, counts, [color for color, _ in clusters])

    # Stable sort keeps first-occurrence / box order for equal populations
    clusters.sort(key=lambda item: -item[1])
    result = [QuantizedColor(color, population) for color, population in clusters]

    logger.debug(f"Quantization produced {len(result)} colors")
    return result


__all__ = [
    "QuantizedColor", "QuantizerWu", "QUANTIZER_METHODS", "DEFAULT_MAX_COLORS",
    "DEFAULT_ALPHA_THRESHOLD", "count_colors", "quantize", "refine", "visible_pixels",
]
