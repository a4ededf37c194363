"""
Scheme builder.

A scheme maps every semantic role to a color, per mode. The mapping is the
static ROLE_TABLE: each record names the palette and the tone to read in each
mode. The builder only reads the table, so alternate role sets can be swapped
in without touching the code.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Union

from loguru import logger

from .color_utils import RGBColor
from .palettes import CorePalette


# Changing ROLE_TABLE changes every derived scheme; bump on any edit.
SCHEME_TABLE_VERSION = "1.0.0"

MODES = ("light", "dark", "amoled")


@dataclass(frozen=True)
class RoleSpec:
    """Where a role reads its color: palette name plus tone per mode."""
    name: str
    palette: str
    light: float
    dark: float
    amoled: Optional[float] = None

    def tone_for(self, mode: str) -> float:
        if mode == "light":
            return self.light
        if mode == "dark":
            return self.dark
        if mode == "amoled":
            return self.dark if self.amoled is None else self.amoled
        raise ValueError(f"Unknown mode: {mode}. Supported: {', '.join(MODES)}")


ROLE_TABLE = (
    RoleSpec("primary", "primary", 40, 80),
    RoleSpec("on_primary", "primary", 100, 20),
    RoleSpec("primary_container", "primary", 90, 30),
    RoleSpec("on_primary_container", "primary", 10, 90),
    RoleSpec("inverse_primary", "primary", 80, 40),
    RoleSpec("surface_tint", "primary", 40, 80),
    RoleSpec("primary_fixed", "primary", 90, 90),
    RoleSpec("primary_fixed_dim", "primary", 80, 80),
    RoleSpec("on_primary_fixed", "primary", 10, 10),
    RoleSpec("on_primary_fixed_variant", "primary", 30, 30),

    RoleSpec("secondary", "secondary", 40, 80),
    RoleSpec("on_secondary", "secondary", 100, 20),
    RoleSpec("secondary_container", "secondary", 90, 30),
    RoleSpec("on_secondary_container", "secondary", 10, 90),
    RoleSpec("secondary_fixed", "secondary", 90, 90),
    RoleSpec("secondary_fixed_dim", "secondary", 80, 80),
    RoleSpec("on_secondary_fixed", "secondary", 10, 10),
    RoleSpec("on_secondary_fixed_variant", "secondary", 30, 30),

    RoleSpec("tertiary", "tertiary", 40, 80),
    RoleSpec("on_tertiary", "tertiary", 100, 20),
    RoleSpec("tertiary_container", "tertiary", 90, 30),
    RoleSpec("on_tertiary_container", "tertiary", 10, 90),
    RoleSpec("tertiary_fixed", "tertiary", 90, 90),
    RoleSpec("tertiary_fixed_dim", "tertiary", 80, 80),
    RoleSpec("on_tertiary_fixed", "tertiary", 10, 10),
    RoleSpec("on_tertiary_fixed_variant", "tertiary", 30, 30),

    RoleSpec("error", "error", 40, 80),
    RoleSpec("on_error", "error", 100, 20),
    RoleSpec("error_container", "error", 90, 30),
    RoleSpec("on_error_container", "error", 10, 90),

    RoleSpec("background", "neutral", 98, 6, amoled=0),
    RoleSpec("on_background", "neutral", 10, 90),
    RoleSpec("surface", "neutral", 98, 6, amoled=0),
    RoleSpec("on_surface", "neutral", 10, 90),
    RoleSpec("surface_dim", "neutral", 87, 6, amoled=0),
    RoleSpec("surface_bright", "neutral", 98, 24),
    RoleSpec("surface_container_lowest", "neutral", 100, 4, amoled=0),
    RoleSpec("surface_container_low", "neutral", 96, 10),
    RoleSpec("surface_container", "neutral", 94, 12),
    RoleSpec("surface_container_high", "neutral", 92, 17),
    RoleSpec("surface_container_highest", "neutral", 90, 22),
    RoleSpec("inverse_surface", "neutral", 20, 90),
    RoleSpec("inverse_on_surface", "neutral", 95, 20),
    RoleSpec("shadow", "neutral", 0, 0),
    RoleSpec("scrim", "neutral", 0, 0),

    RoleSpec("surface_variant", "neutral_variant", 90, 30),
    RoleSpec("on_surface_variant", "neutral_variant", 30, 80),
    RoleSpec("outline", "neutral_variant", 50, 60),
    RoleSpec("outline_variant", "neutral_variant", 80, 30),
)

ROLE_NAMES = tuple(spec.name for spec in ROLE_TABLE)

ColorValue = Union[str, List[int]]


def format_color(color: RGBColor, fmt: str = "hex", hash_prefix: bool = True) -> ColorValue:
    """Serialize a color as "#rrggbb" / "rrggbb" or [r, g, b]."""
    if fmt == "rgb":
        return color.as_list()
    if fmt == "hex":
        return color.hex if hash_prefix else color.hex[1:]
    raise ValueError(f"Unknown color format: {fmt}. Supported: hex, rgb")


@dataclass(frozen=True)
class ColorScheme:
    """Role maps for every mode, plus the seed and palettes they came from."""
    seed: RGBColor
    core: CorePalette
    modes: Mapping[str, Mapping[str, RGBColor]]
    variant: str = "default"
    content: bool = True

    def mode(self, name: str) -> Mapping[str, RGBColor]:
        if name not in self.modes:
            raise ValueError(f"Unknown mode: {name}. Supported: {', '.join(self.modes)}")
        return self.modes[name]

    @property
    def light(self) -> Mapping[str, RGBColor]:
        return self.modes["light"]

    @property
    def dark(self) -> Mapping[str, RGBColor]:
        return self.modes["dark"]

    def to_dict(self, fmt: str = "hex", hash_prefix: bool = True,
                modes: Optional[Sequence[str]] = None) -> Dict[str, Dict[str, ColorValue]]:
        selected = modes or tuple(self.modes)
        return {
            mode: {role: format_color(color, fmt, hash_prefix) for role, color in self.mode(mode).items()}
            for mode in selected
        }

    def with_modes(self, modes: Mapping[str, Mapping[str, RGBColor]]) -> "ColorScheme":
        return ColorScheme(seed=self.seed, core=self.core, modes=_freeze(modes),
                           variant=self.variant, content=self.content)


def _freeze(modes: Mapping[str, Mapping[str, RGBColor]]) -> Mapping[str, Mapping[str, RGBColor]]:
    return MappingProxyType({mode: MappingProxyType(dict(roles)) for mode, roles in modes.items()})


def build_mode(core: CorePalette, mode: str, table: Sequence[RoleSpec] = ROLE_TABLE) -> Dict[str, RGBColor]:
    """Role map of one mode."""
    return {spec.name: core.get(spec.palette).tone(spec.tone_for(mode)) for spec in table}


def build_scheme(core: CorePalette,
                 seed: RGBColor,
                 variant: str = "default",
                 content: bool = True,
                 table: Sequence[RoleSpec] = ROLE_TABLE) -> ColorScheme:
    """
    Build light, dark and amoled role maps from a core palette.

    Args:
        core: The six tonal palettes
        seed: Seed color the palettes were derived from
        variant: Palette variant name, recorded on the scheme
        content: Whether content palettes were used, recorded on the scheme
        table: Role table to read

    Returns:
        Immutable ColorScheme
    """
    modes = {mode: build_mode(core, mode, table) for mode in MODES}
    logger.info(f"Built scheme for seed {seed.hex}: {len(table)} roles x {len(MODES)} modes "
                f"(table {SCHEME_TABLE_VERSION})")
    return ColorScheme(seed=seed, core=core, modes=_freeze(modes), variant=variant, content=content)


def scheme_from_seed(seed: RGBColor, variant: str = "default", content: bool = True) -> ColorScheme:
    """Seed color -> core palette -> scheme."""
    core = CorePalette.of(seed, variant=variant, content=content)
    return build_scheme(core, seed, variant=variant, content=content)
