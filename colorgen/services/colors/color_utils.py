"""
Color utilities shared by the HCT converter, the quantizer and the scheme builder.

Holds the RGBColor value type plus the sRGB / linear RGB / XYZ / L*a*b*
conversions. All matrices are fixed D65 constants.
"""

import math
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .errors import InvalidColorError


SRGB_TO_XYZ = (
    (0.41233895, 0.35762064, 0.18051042),
    (0.2126, 0.7152, 0.0722),
    (0.01932141, 0.11916382, 0.95034478),
)

XYZ_TO_SRGB = (
    (3.2413774792388685, -1.5376652402851851, -0.49885366846268053),
    (-0.9691452513005321, 1.8758853451067872, 0.04156585616912061),
    (0.05562093689691305, -0.20395524564742123, 1.0571799111220335),
)

WHITE_POINT_D65 = (95.047, 100.0, 108.883)

_HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")


@dataclass(frozen=True)
class RGBColor:
    """8-bit sRGB color."""
    red: int
    green: int
    blue: int

    def __post_init__(self):
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise InvalidColorError(f"Channel out of range: {channel}")

    @property
    def hex(self) -> str:
        """Lowercase #rrggbb."""
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    @property
    def argb(self) -> int:
        return (255 << 24) | (self.red << 16) | (self.green << 8) | self.blue

    def as_list(self) -> List[int]:
        return [self.red, self.green, self.blue]

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    @classmethod
    def from_argb(cls, argb: int) -> "RGBColor":
        return cls((argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF)

    @classmethod
    def from_hex(cls, hex_color: str) -> "RGBColor":
        """
        Parse #rrggbb, rrggbb or the #rgb shorthand.

        Raises:
            InvalidColorError: If the string is not a hex color
        """
        match = _HEX_RE.match(hex_color.strip()) if isinstance(hex_color, str) else None
        if match is None:
            raise InvalidColorError(f"Invalid hex color format: {hex_color!r}")
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(d * 2 for d in digits)
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> "RGBColor":
        if len(values) < 3:
            raise InvalidColorError(f"Expected 3 channels, got {len(values)}")
        return cls(int(values[0]), int(values[1]), int(values[2]))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_int(low: int, high: int, value: int) -> int:
    return max(low, min(high, value))


def clamp_double(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))


def matrix_multiply(row: Sequence[float], matrix: Sequence[Sequence[float]]) -> Tuple[float, float, float]:
    """Multiply a 3x3 matrix by a column vector."""
    return (
        row[0] * matrix[0][0] + row[1] * matrix[0][1] + row[2] * matrix[0][2],
        row[0] * matrix[1][0] + row[1] * matrix[1][1] + row[2] * matrix[1][2],
        row[0] * matrix[2][0] + row[1] * matrix[2][1] + row[2] * matrix[2][2],
    )


def sanitize_degrees(degrees: float) -> float:
    degrees = degrees % 360.0
    if degrees < 0:
        degrees += 360.0
    return degrees


def difference_degrees(a: float, b: float) -> float:
    return 180.0 - abs(abs(a - b) - 180.0)


# ------------------------------------------------------------
# Transfer functions
# ------------------------------------------------------------

def linearized(component: int) -> float:
    """8-bit sRGB channel -> linear channel in [0, 100]."""
    normalized = component / 255.0
    if normalized <= 0.040449936:
        return normalized / 12.92 * 100.0
    return math.pow((normalized + 0.055) / 1.055, 2.4) * 100.0


def delinearized(component: float) -> int:
    """Linear channel in [0, 100] -> 8-bit sRGB channel."""
    normalized = component / 100.0
    if normalized <= 0.0031308:
        value = normalized * 12.92
    else:
        value = 1.055 * math.pow(normalized, 1.0 / 2.4) - 0.055
    return clamp_int(0, 255, round_half_up(value * 255.0))


def lab_f(t: float) -> float:
    e = 216.0 / 24389.0
    kappa = 24389.0 / 27.0
    if t > e:
        return math.pow(t, 1.0 / 3.0)
    return (kappa * t + 16) / 116


def lab_invf(ft: float) -> float:
    e = 216.0 / 24389.0
    kappa = 24389.0 / 27.0
    ft3 = ft * ft * ft
    if ft3 > e:
        return ft3
    return (116 * ft - 16) / kappa


def y_from_lstar(lstar: float) -> float:
    return 100.0 * lab_invf((lstar + 16.0) / 116.0)


def lstar_from_y(y: float) -> float:
    return lab_f(y / 100.0) * 116.0 - 16.0


# ------------------------------------------------------------
# Conversions
# ------------------------------------------------------------

def rgb_from_linrgb(linrgb: Sequence[float]) -> RGBColor:
    return RGBColor(delinearized(linrgb[0]), delinearized(linrgb[1]), delinearized(linrgb[2]))


def rgb_from_xyz(x: float, y: float, z: float) -> RGBColor:
    return rgb_from_linrgb(matrix_multiply((x, y, z), XYZ_TO_SRGB))


def xyz_from_rgb(rgb: RGBColor) -> Tuple[float, float, float]:
    linear = (linearized(rgb.red), linearized(rgb.green), linearized(rgb.blue))
    return matrix_multiply(linear, SRGB_TO_XYZ)


def rgb_from_lstar(lstar: float) -> RGBColor:
    """Gray with the given L*."""
    component = delinearized(y_from_lstar(lstar))
    return RGBColor(component, component, component)


def lstar_from_rgb(rgb: RGBColor) -> float:
    return lstar_from_y(xyz_from_rgb(rgb)[1])


def lab_from_rgb(rgb: RGBColor) -> Tuple[float, float, float]:
    x, y, z = xyz_from_rgb(rgb)
    fx = lab_f(x / WHITE_POINT_D65[0])
    fy = lab_f(y / WHITE_POINT_D65[1])
    fz = lab_f(z / WHITE_POINT_D65[2])
    return (116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz))


def rgb_from_lab(l: float, a: float, b: float) -> RGBColor:
    fy = (l + 16.0) / 116.0
    fx = a / 500.0 + fy
    fz = fy - b / 200.0
    x = lab_invf(fx) * WHITE_POINT_D65[0]
    y = lab_invf(fy) * WHITE_POINT_D65[1]
    z = lab_invf(fz) * WHITE_POINT_D65[2]
    return rgb_from_xyz(x, y, z)


def parse_color(value) -> RGBColor:
    """Accept an RGBColor, a hex string or an (r, g, b) sequence."""
    if isinstance(value, RGBColor):
        return value
    if isinstance(value, str):
        return RGBColor.from_hex(value)
    try:
        return RGBColor.from_sequence(list(value))
    except (TypeError, ValueError) as e:
        raise InvalidColorError(f"Unsupported color value: {value!r}") from e
