"""
Surface adjustments applied on top of a generated scheme.

Material surfaces read slightly bright on most desktop themes, so a fixed set
of roles is dimmed by a constant before mode specific tweaks: in dark mode
surface_dim is dimmed again and surface_bright is re-derived from surface; in
light mode surface_bright is brightened.
"""

import colorsys
import math
from typing import Dict, Mapping

from loguru import logger

from .color_utils import RGBColor, clamp_int, round_half_up
from .scheme import ColorScheme


DIMMED_ROLES = (
    "surface",
    "surface_dim",
    "surface_bright",
    "surface_container",
    "surface_container_lowest",
    "surface_container_low",
    "surface_container_high",
    "surface_container_highest",
    "inverse_surface",
    "primary",
    "secondary",
    "tertiary",
    "primary_container",
    "secondary_container",
    "tertiary_container",
    "error",
)

DIM_AMOUNT = -1.0
LIGHT_SURFACE_BRIGHT_AMOUNT = 1.0
DARK_SURFACE_BRIGHT_LIGHTNESS = 1.35


def brighten(color: RGBColor, amount: float) -> RGBColor:
    """
    Shift every channel by ``amount`` percent of the full range.

    Unlike an HSL lightness change this does not drift the color towards its
    hue. The shift is floor(255 * amount / 100) with the sign flipped before
    flooring, so -1 dims by 2 and +1 brightens by 3.
    """
    delta = math.floor(255.0 * -(amount / 100.0))
    return RGBColor(
        clamp_int(0, 255, color.red - delta),
        clamp_int(0, 255, color.green - delta),
        clamp_int(0, 255, color.blue - delta),
    )


def lighten_hsl(color: RGBColor, amount: float) -> RGBColor:
    """Raise HSL lightness by ``amount`` percentage points."""
    h, l, s = colorsys.rgb_to_hls(color.red / 255.0, color.green / 255.0, color.blue / 255.0)
    l = max(0.0, min(1.0, l + amount / 100.0))
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return RGBColor(
        clamp_int(0, 255, round_half_up(r * 255)),
        clamp_int(0, 255, round_half_up(g * 255)),
        clamp_int(0, 255, round_half_up(b * 255)),
    )


def adjust_mode(roles: Mapping[str, RGBColor], mode: str) -> Dict[str, RGBColor]:
    """Apply the surface adjustments of one mode to a role map."""
    adjusted = dict(roles)
    for role in DIMMED_ROLES:
        adjusted[role] = brighten(adjusted[role], DIM_AMOUNT)

    if mode == "dark":
        adjusted["surface_dim"] = brighten(adjusted["surface_dim"], DIM_AMOUNT)
        adjusted["surface_bright"] = lighten_hsl(adjusted["surface"], DARK_SURFACE_BRIGHT_LIGHTNESS)
    elif mode == "light":
        adjusted["surface_bright"] = brighten(adjusted["surface_bright"], LIGHT_SURFACE_BRIGHT_AMOUNT)
    return adjusted


def adjust(scheme: ColorScheme) -> ColorScheme:
    """Return a copy of ``scheme`` with surface adjustments applied to every mode."""
    modes = {mode: adjust_mode(roles, mode) for mode, roles in scheme.modes.items()}
    logger.debug(f"Applied surface adjustments to modes: {', '.join(modes)}")
    return scheme.with_modes(modes)
