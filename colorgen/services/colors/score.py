"""
Seed Color Scoring Module

Ranks quantized colors by how well they would work as the seed of a theme.
A good seed is saturated and covers a meaningful share of the image, where
"share" counts the population of the whole neighborhood of similar hues so
that a hue spread across many clusters still wins over a single stray one.

Scoring formula:
    score = excited_proportion * 100 * WEIGHT_PROPORTION
            + (chroma - TARGET_CHROMA) * chroma_weight
            - LOW_SIGNIFICANCE_PENALTY  (near-grays and negligible hues only)
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from .color_utils import RGBColor, difference_degrees
from .hct import Hct
from .quantize import QuantizedColor


# Changing any constant below changes every derived scheme.
SCORING_POLICY_VERSION = "1.0.0"

TARGET_CHROMA = 48.0
WEIGHT_PROPORTION = 0.7
WEIGHT_CHROMA_BELOW = 0.3
WEIGHT_CHROMA_ABOVE = 0.1
CUTOFF_CHROMA = 5.0
CUTOFF_EXCITED_PROPORTION = 0.01
LOW_SIGNIFICANCE_PENALTY = 1000.0

# Hue neighborhood that contributes to a hue's excited proportion
HUE_WINDOW_BELOW = 14
HUE_WINDOW_ABOVE = 15

MAX_HUE_SEPARATION = 90
MIN_HUE_SEPARATION = 15


@dataclass(frozen=True)
class ScoredColor:
    """A quantized color with its HCT and score. ``index`` is its population rank."""
    color: RGBColor
    population: int
    hct: Hct
    proportion: float
    score: float
    index: int

    @property
    def significant(self) -> bool:
        return self.score > -LOW_SIGNIFICANCE_PENALTY / 2


def hue_excited_proportions(hcts: Sequence[Hct], populations: Sequence[int]) -> List[float]:
    """Population fraction within the hue window around each whole degree (hues rounded)."""
    hue_population = [0] * 360
    for hct, population in zip(hcts, populations):
        hue_population[int(math.floor(hct.hue + 0.5)) % 360] += population
    total = float(sum(populations))

    excited = [0.0] * 360
    for hue in range(360):
        proportion = hue_population[hue] / total
        if proportion == 0.0:
            continue
        for neighbor in range(hue - HUE_WINDOW_BELOW, hue + HUE_WINDOW_ABOVE + 1):
            excited[neighbor % 360] += proportion
    return excited


def score_color(hct: Hct, proportion: float) -> float:
    proportion_score = proportion * 100.0 * WEIGHT_PROPORTION
    chroma_weight = WEIGHT_CHROMA_BELOW if hct.chroma < TARGET_CHROMA else WEIGHT_CHROMA_ABOVE
    chroma_score = (hct.chroma - TARGET_CHROMA) * chroma_weight
    score = proportion_score + chroma_score
    if hct.chroma < CUTOFF_CHROMA or proportion <= CUTOFF_EXCITED_PROPORTION:
        score -= LOW_SIGNIFICANCE_PENALTY
    return score


def rank(quantized: Sequence[QuantizedColor]) -> List[ScoredColor]:
    """
    Rank quantized colors by score, descending.

    Ties keep the quantizer's population order.

    Args:
        quantized: Quantizer output, ordered by population

    Returns:
        ScoredColor list, best first
    """
    if not quantized:
        return []

    hcts = [Hct.from_rgb(q.color) for q in quantized]
    populations = [q.population for q in quantized]
    excited = hue_excited_proportions(hcts, populations)

    scored = []
    for index, (q, hct) in enumerate(zip(quantized, hcts)):
        proportion = excited[int(math.floor(hct.hue + 0.5)) % 360]
        scored.append(ScoredColor(
            color=q.color,
            population=q.population,
            hct=hct,
            proportion=proportion,
            score=score_color(hct, proportion),
            index=index,
        ))
        logger.debug(f"Candidate {index}: {q.color.hex} pop={q.population} "
                     f"chroma={hct.chroma:.1f} excited={proportion:.3f}")

    scored.sort(key=lambda s: (-s.score, s.index))
    return scored


def select(quantized: Sequence[QuantizedColor], desired: int = 4) -> List[ScoredColor]:
    """
    Choose up to ``desired`` seeds with distinct hues.

    The required hue separation starts at MAX_HUE_SEPARATION degrees and is
    relaxed one degree at a time down to MIN_HUE_SEPARATION. If that still
    yields too few colors, the remaining best-ranked colors fill the list.
    """
    ranked = rank(quantized)
    if not ranked or desired < 1:
        return []

    chosen: List[ScoredColor] = []
    for separation in range(MAX_HUE_SEPARATION, MIN_HUE_SEPARATION - 1, -1):
        chosen = []
        for candidate in ranked:
            if all(difference_degrees(candidate.hct.hue, c.hct.hue) >= separation for c in chosen):
                chosen.append(candidate)
            if len(chosen) >= desired:
                break
        if len(chosen) >= desired:
            break

    if len(chosen) < desired:
        for candidate in ranked:
            if len(chosen) >= desired:
                break
            if candidate not in chosen:
                chosen.append(candidate)

    logger.info(f"Selected {len(chosen)} seed(s): {[c.color.hex for c in chosen]}")
    return chosen


def top_color(quantized: Sequence[QuantizedColor]) -> Optional[RGBColor]:
    """Best seed color, or None for an empty input."""
    ranked = rank(quantized)
    if not ranked:
        return None
    best = ranked[0]
    logger.info(f"Top color {best.color.hex} score={best.score:.2f} chroma={best.hct.chroma:.1f}")
    return best.color
