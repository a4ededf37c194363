"""
Material color derivation.

Pipeline: pixels -> quantize -> score -> seed -> CorePalette (six
TonalPalettes) -> scheme roles for light, dark and amoled modes.
"""

from .color_utils import RGBColor, parse_color
from .errors import ColorGenError, EmptyInputError, ImageDecodeError, InvalidColorError
from .hct import Hct, to_hct, to_rgb
from .palettes import PALETTE_VARIANTS, STANDARD_TONES, CorePalette, TonalPalette
from .quantize import QuantizedColor, quantize
from .scheme import MODES, ROLE_NAMES, ROLE_TABLE, ColorScheme, RoleSpec, build_scheme, scheme_from_seed
from .score import ScoredColor, rank, select, top_color

__version__ = "1.0.0"

__all__ = [
    "RGBColor", "parse_color",
    "ColorGenError", "EmptyInputError", "ImageDecodeError", "InvalidColorError",
    "Hct", "to_hct", "to_rgb",
    "PALETTE_VARIANTS", "STANDARD_TONES", "CorePalette", "TonalPalette",
    "QuantizedColor", "quantize",
    "MODES", "ROLE_NAMES", "ROLE_TABLE", "ColorScheme", "RoleSpec", "build_scheme", "scheme_from_seed",
    "ScoredColor", "rank", "select", "top_color",
]
