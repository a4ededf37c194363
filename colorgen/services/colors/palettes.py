"""
Tonal palettes.

A TonalPalette keeps hue and chroma fixed and varies tone. A CorePalette is the
set of six palettes a scheme is built from, derived from one seed color by
fixed hue rotations and chroma rules.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple

from loguru import logger

from .color_utils import RGBColor, sanitize_degrees
from .hct import Hct, to_rgb


STANDARD_TONES = (0, 4, 5, 6, 10, 12, 17, 20, 22, 24, 25, 30, 35, 40, 50, 60,
                  70, 80, 87, 90, 92, 94, 95, 96, 98, 99, 100)

BLACK = RGBColor(0, 0, 0)
WHITE = RGBColor(255, 255, 255)

ERROR_HUE = 25.0
ERROR_CHROMA = 84.0

# Tertiary hue rotation (degrees) per palette variant
PALETTE_VARIANTS: Dict[str, float] = {
    "default": 60.0,
    "analogous": 30.0,
    "triadic": 120.0,
    "complementary": 180.0,
}

PALETTE_NAMES = ("primary", "secondary", "tertiary", "neutral", "neutral_variant", "error")


@dataclass
class TonalPalette:
    """Colors of one hue and chroma across tones. Tones are solved lazily and cached."""
    hue: float
    chroma: float
    _cache: Dict[float, RGBColor] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_hue_and_chroma(cls, hue: float, chroma: float) -> "TonalPalette":
        return cls(hue=sanitize_degrees(hue), chroma=max(0.0, chroma))

    @classmethod
    def from_rgb(cls, rgb: RGBColor) -> "TonalPalette":
        hct = Hct.from_rgb(rgb)
        return cls.from_hue_and_chroma(hct.hue, hct.chroma)

    def tone(self, tone: float) -> RGBColor:
        """Color at ``tone``; 0 and 100 are exactly black and white."""
        tone = max(0.0, min(100.0, float(tone)))
        color = self._cache.get(tone)
        if color is None:
            if tone <= 0.0:
                color = BLACK
            elif tone >= 100.0:
                color = WHITE
            else:
                color = to_rgb(self.hue, self.chroma, tone)
            self._cache[tone] = color
        return color

    @property
    def tones(self) -> Dict[int, RGBColor]:
        return {t: self.tone(t) for t in STANDARD_TONES}


@dataclass
class CorePalette:
    primary: TonalPalette
    secondary: TonalPalette
    tertiary: TonalPalette
    neutral: TonalPalette
    neutral_variant: TonalPalette
    error: TonalPalette

    @classmethod
    def of(cls, seed: RGBColor, variant: str = "default", content: bool = True) -> "CorePalette":
        """
        Derive the six palettes from a seed color.

        Args:
            seed: Seed color
            variant: Key of PALETTE_VARIANTS, sets the tertiary hue rotation
            content: Keep the seed's own chroma (content palettes) instead of
                the fixed tonal-spot chromas

        Raises:
            ValueError: For an unknown variant
        """
        if variant not in PALETTE_VARIANTS:
            raise ValueError(f"Unknown palette variant: {variant}. Supported: {', '.join(PALETTE_VARIANTS)}")
        hct = Hct.from_rgb(seed)
        hue, chroma = hct.hue, hct.chroma
        tertiary_hue = hue + PALETTE_VARIANTS[variant]

        if content:
            palettes = cls(
                primary=TonalPalette.from_hue_and_chroma(hue, chroma),
                secondary=TonalPalette.from_hue_and_chroma(hue, chroma / 3.0),
                tertiary=TonalPalette.from_hue_and_chroma(tertiary_hue, chroma / 2.0),
                neutral=TonalPalette.from_hue_and_chroma(hue, min(chroma / 12.0, 4.0)),
                neutral_variant=TonalPalette.from_hue_and_chroma(hue, min(chroma / 6.0, 8.0)),
                error=TonalPalette.from_hue_and_chroma(ERROR_HUE, ERROR_CHROMA),
            )
        else:
            palettes = cls(
                primary=TonalPalette.from_hue_and_chroma(hue, max(48.0, chroma)),
                secondary=TonalPalette.from_hue_and_chroma(hue, 16.0),
                tertiary=TonalPalette.from_hue_and_chroma(tertiary_hue, 24.0),
                neutral=TonalPalette.from_hue_and_chroma(hue, 4.0),
                neutral_variant=TonalPalette.from_hue_and_chroma(hue, 8.0),
                error=TonalPalette.from_hue_and_chroma(ERROR_HUE, ERROR_CHROMA),
            )

        logger.debug(f"Core palette for {seed.hex}: hue={hue:.1f} chroma={chroma:.1f} "
                     f"variant={variant} content={content}")
        return palettes

    def get(self, name: str) -> TonalPalette:
        if name not in PALETTE_NAMES:
            raise KeyError(name)
        return getattr(self, name)

    def items(self) -> Iterator[Tuple[str, TonalPalette]]:
        for name in PALETTE_NAMES:
            yield name, getattr(self, name)
