"""
HCT (hue, chroma, tone) color space.

Hue and chroma come from CAM16, tone is CIE L*. Tone 0 is black, 100 is white
and 50 is perceptually mid-gray. Two colors with the same tone have the same
contrast against any third color regardless of their hue and chroma, which is
what makes tonal palettes and scheme roles predictable.
"""

from dataclasses import dataclass

from ..color_utils import RGBColor, lstar_from_rgb
from .cam16 import Cam16
from .solver import solve_to_rgb


@dataclass(frozen=True)
class Hct:
    """
    A color in HCT.

    hue, chroma and tone are the values actually achieved by ``rgb``; building
    an Hct from an out-of-gamut request yields a lower chroma than requested.
    """
    hue: float
    chroma: float
    tone: float
    rgb: RGBColor

    @classmethod
    def from_rgb(cls, rgb: RGBColor) -> "Hct":
        cam = Cam16.from_rgb(rgb)
        return cls(hue=cam.hue, chroma=cam.chroma, tone=lstar_from_rgb(rgb), rgb=rgb)

    @classmethod
    def from_hct(cls, hue: float, chroma: float, tone: float) -> "Hct":
        return cls.from_rgb(solve_to_rgb(hue, chroma, tone))


def to_hct(rgb: RGBColor) -> Hct:
    """Convert an sRGB color to HCT."""
    return Hct.from_rgb(rgb)


def to_rgb(hue: float, chroma: float, tone: float) -> RGBColor:
    """Convert an HCT triple to sRGB, reducing chroma when out of gamut."""
    return solve_to_rgb(hue, chroma, tone)


__all__ = ["Hct", "Cam16", "to_hct", "to_rgb"]
