"""
Wu color quantizer.

Xiaolin Wu, "Efficient Statistical Computations for Optimal Color
Quantization", Graphics Gems II (1991).

Colors are binned into a 32x32x32 histogram (plus a zero plane on each axis so
cumulative tables need no bounds checks). Boxes are kept in an arena indexed by
integer id; the box with the highest variance is split along the axis and at
the position that best separates its moments, until the requested number of
boxes exists or no box can be cut in the histogram.

Bins are 8 levels wide, so a box that cannot be cut may still hold several
distinct colors. Those are split further over the exact 8-bit colors with the
same criterion until the budget is reached or every cluster holds a single
distinct color.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from ..color_utils import RGBColor


INDEX_BITS = 5
SIDE = (1 << INDEX_BITS) + 1  # 33
BITS_TO_REMOVE = 8 - INDEX_BITS

RED, GREEN, BLUE = 0, 1, 2


@dataclass
class Box:
    """Half-open box (r0, r1] x (g0, g1] x (b0, b1] in histogram coordinates."""
    r0: int = 0
    r1: int = 0
    g0: int = 0
    g1: int = 0
    b0: int = 0
    b1: int = 0
    vol: int = 0

    def lower(self, direction: int) -> int:
        return (self.r0, self.g0, self.b0)[direction]

    def upper(self, direction: int) -> int:
        return (self.r1, self.g1, self.b1)[direction]


class QuantizerWu:
    """Variance-minimizing box-splitting quantizer."""

    def __init__(self):
        self.weights = None
        self.moments_r = None
        self.moments_g = None
        self.moments_b = None
        self.moments = None

    def quantize(self, colors: np.ndarray, counts: np.ndarray, max_colors: int) -> List[Tuple[RGBColor, int]]:
        """
        Quantize distinct colors with their populations.

        Args:
            colors: Distinct RGB colors (M, 3) uint8
            counts: Population of each color (M,)
            max_colors: Maximum number of boxes

        Returns:
            List of (centroid color, population) per non-empty cluster, in box order
        """
        self._construct_histogram(colors, counts)
        self._create_moments()
        boxes = self._create_boxes(max_colors)
        groups = self._assign(colors, boxes)
        histogram_boxes = len(groups)
        groups = split_distinct(groups, colors, counts, max_colors)
        result = self._create_result(groups, colors, counts)
        logger.debug(
            f"Wu quantizer produced {len(result)} clusters ({histogram_boxes} histogram boxes) "
            f"from {len(colors)} distinct colors"
        )
        return result

    def _construct_histogram(self, colors: np.ndarray, counts: np.ndarray) -> None:
        colors = colors.astype(np.int64)
        counts = counts.astype(np.int64)
        index = (colors >> BITS_TO_REMOVE) + 1
        flat = index[:, 0] * SIDE * SIDE + index[:, 1] * SIDE + index[:, 2]

        size = SIDE * SIDE * SIDE
        weights = np.zeros(size, dtype=np.int64)
        moments_r = np.zeros(size, dtype=np.int64)
        moments_g = np.zeros(size, dtype=np.int64)
        moments_b = np.zeros(size, dtype=np.int64)
        moments = np.zeros(size, dtype=np.float64)

        np.add.at(weights, flat, counts)
        np.add.at(moments_r, flat, counts * colors[:, 0])
        np.add.at(moments_g, flat, counts * colors[:, 1])
        np.add.at(moments_b, flat, counts * colors[:, 2])
        squares = (colors.astype(np.float64) ** 2).sum(axis=1)
        np.add.at(moments, flat, counts * squares)

        shape = (SIDE, SIDE, SIDE)
        self.weights = weights.reshape(shape)
        self.moments_r = moments_r.reshape(shape)
        self.moments_g = moments_g.reshape(shape)
        self.moments_b = moments_b.reshape(shape)
        self.moments = moments.reshape(shape)

    def _create_moments(self) -> None:
        """Turn the histogram into 3-D cumulative sums."""
        for name in ("weights", "moments_r", "moments_g", "moments_b", "moments"):
            table = getattr(self, name)
            setattr(self, name, table.cumsum(axis=0).cumsum(axis=1).cumsum(axis=2))

    def _create_boxes(self, max_colors: int) -> List[Box]:
        cubes = [Box() for _ in range(max_colors)]
        volume_variance = [0.0] * max_colors
        first = cubes[0]
        first.r1 = first.g1 = first.b1 = SIDE - 1
        first.vol = (SIDE - 1) ** 3

        generated = max_colors
        next_index = 0
        i = 1
        while i < max_colors:
            if self._cut(cubes[next_index], cubes[i]):
                one, two = cubes[next_index], cubes[i]
                volume_variance[next_index] = self._variance(one) if one.vol > 1 else 0.0
                volume_variance[i] = self._variance(two) if two.vol > 1 else 0.0
            else:
                volume_variance[next_index] = 0.0
                i -= 1

            next_index = 0
            best = volume_variance[0]
            for j in range(1, i + 1):
                if volume_variance[j] > best:
                    best = volume_variance[j]
                    next_index = j
            if best <= 0.0:
                generated = i + 1
                break
            i += 1

        return cubes[:generated]

    @staticmethod
    def _assign(colors: np.ndarray, boxes: List[Box]) -> List[np.ndarray]:
        """Indices of the distinct colors inside each non-empty box."""
        index = (colors.astype(np.int64) >> BITS_TO_REMOVE) + 1
        groups = []
        for box in boxes:
            inside = ((index[:, 0] > box.r0) & (index[:, 0] <= box.r1)
                      & (index[:, 1] > box.g0) & (index[:, 1] <= box.g1)
                      & (index[:, 2] > box.b0) & (index[:, 2] <= box.b1))
            members = np.flatnonzero(inside)
            if len(members):
                groups.append(members)
        return groups

    @staticmethod
    def _create_result(groups: List[np.ndarray],
                       colors: np.ndarray,
                       counts: np.ndarray) -> List[Tuple[RGBColor, int]]:
        result = []
        for members in groups:
            weights = counts[members].astype(np.int64)
            weight = int(weights.sum())
            moments = (colors[members].astype(np.int64) * weights[:, None]).sum(axis=0)
            r, g, b = (int(m) // weight for m in moments)
            result.append((RGBColor(r, g, b), weight))
        return result

    def _variance(self, box: Box) -> float:
        dr = float(self._volume(box, self.moments_r))
        dg = float(self._volume(box, self.moments_g))
        db = float(self._volume(box, self.moments_b))
        xx = float(self._volume(box, self.moments))
        weight = float(self._volume(box, self.weights))
        if weight == 0:
            return 0.0
        hypotenuse = dr * dr + dg * dg + db * db
        return xx - hypotenuse / weight

    def _cut(self, one: Box, two: Box) -> bool:
        whole_r = float(self._volume(one, self.moments_r))
        whole_g = float(self._volume(one, self.moments_g))
        whole_b = float(self._volume(one, self.moments_b))
        whole_w = float(self._volume(one, self.weights))
        wholes = (whole_r, whole_g, whole_b, whole_w)

        cut_r, max_r = self._maximize(one, RED, wholes)
        cut_g, max_g = self._maximize(one, GREEN, wholes)
        cut_b, max_b = self._maximize(one, BLUE, wholes)

        if max_r >= max_g and max_r >= max_b:
            if cut_r < 0:
                return False
            direction, cut = RED, cut_r
        elif max_g >= max_r and max_g >= max_b:
            direction, cut = GREEN, cut_g
        else:
            direction, cut = BLUE, cut_b

        two.r1, two.g1, two.b1 = one.r1, one.g1, one.b1
        if direction == RED:
            one.r1 = cut
            two.r0, two.g0, two.b0 = one.r1, one.g0, one.b0
        elif direction == GREEN:
            one.g1 = cut
            two.r0, two.g0, two.b0 = one.r0, one.g1, one.b0
        else:
            one.b1 = cut
            two.r0, two.g0, two.b0 = one.r0, one.g0, one.b1

        one.vol = (one.r1 - one.r0) * (one.g1 - one.g0) * (one.b1 - one.b0)
        two.vol = (two.r1 - two.r0) * (two.g1 - two.g0) * (two.b1 - two.b0)
        return True

    def _maximize(self, box: Box, direction: int, wholes: Tuple[float, float, float, float]) -> Tuple[int, float]:
        """
        Best cut position along one axis.

        Returns:
            (cut position, score) or (-1, 0.0) when no cut leaves both halves non-empty
        """
        first = box.lower(direction) + 1
        last = box.upper(direction)
        if first >= last:
            return -1, 0.0

        halves = []
        for table in (self.moments_r, self.moments_g, self.moments_b, self.weights):
            line = self._line(box, direction, table).astype(np.float64)
            halves.append(line[first:last] - line[box.lower(direction)])
        half_r, half_g, half_b, half_w = halves
        whole_r, whole_g, whole_b, whole_w = wholes
        rest_w = whole_w - half_w

        valid = (half_w != 0) & (rest_w != 0)
        if not valid.any():
            return -1, 0.0

        safe_half_w = np.where(valid, half_w, 1.0)
        safe_rest_w = np.where(valid, rest_w, 1.0)
        temp = (half_r ** 2 + half_g ** 2 + half_b ** 2) / safe_half_w
        temp += ((whole_r - half_r) ** 2 + (whole_g - half_g) ** 2 + (whole_b - half_b) ** 2) / safe_rest_w
        temp = np.where(valid, temp, 0.0)

        best = int(np.argmax(temp))
        if temp[best] <= 0.0:
            return -1, 0.0
        return first + best, float(temp[best])

    @staticmethod
    def _line(box: Box, direction: int, m: np.ndarray) -> np.ndarray:
        """Cumulative moment of the box's cross-section at every position along an axis."""
        if direction == RED:
            return m[:, box.g1, box.b1] - m[:, box.g1, box.b0] - m[:, box.g0, box.b1] + m[:, box.g0, box.b0]
        if direction == GREEN:
            return m[box.r1, :, box.b1] - m[box.r1, :, box.b0] - m[box.r0, :, box.b1] + m[box.r0, :, box.b0]
        return m[box.r1, box.g1, :] - m[box.r1, box.g0, :] - m[box.r0, box.g1, :] + m[box.r0, box.g0, :]

    @staticmethod
    def _volume(box: Box, m: np.ndarray):
        return (m[box.r1, box.g1, box.b1] - m[box.r1, box.g1, box.b0]
                - m[box.r1, box.g0, box.b1] + m[box.r1, box.g0, box.b0]
                - m[box.r0, box.g1, box.b1] + m[box.r0, box.g1, box.b0]
                + m[box.r0, box.g0, box.b1] - m[box.r0, box.g0, box.b0])


def _group_variance(values: np.ndarray, weights: np.ndarray) -> float:
    """Weighted sum of squared distances to the centroid; 0 for a single color."""
    if len(values) < 2:
        return 0.0
    centroid = (values * weights[:, None]).sum(axis=0) / weights.sum()
    return float((((values - centroid) ** 2).sum(axis=1) * weights).sum())


def _cut_group(members: np.ndarray,
               values: np.ndarray,
               weights: np.ndarray) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """
    Split distinct colors by the best axis-aligned cut between 8-bit levels.

    Uses the same criterion as the histogram cut: maximize the sum of the
    halves' |moment|^2 / weight.

    Returns:
        (lower, upper) member indices, or None when all members share one color
    """
    whole_w = float(weights[members].sum())
    whole = (values[members] * weights[members][:, None]).sum(axis=0)
    best_score = -1.0
    best = None
    for axis in (RED, GREEN, BLUE):
        order = members[np.argsort(values[members, axis], kind="stable")]
        axis_values = values[order, axis]
        valid = axis_values[1:] != axis_values[:-1]
        if not valid.any():
            continue
        half_w = np.cumsum(weights[order])[:-1]
        half = np.cumsum(values[order] * weights[order][:, None], axis=0)[:-1]
        rest_w = whole_w - half_w
        rest = whole - half
        score = (half ** 2).sum(axis=1) / half_w + (rest ** 2).sum(axis=1) / rest_w
        score = np.where(valid, score, -1.0)
        position = int(np.argmax(score))
        if score[position] > best_score:
            best_score = float(score[position])
            best = (np.sort(order[:position + 1]), np.sort(order[position + 1:]))
    return best


def split_distinct(groups: List[np.ndarray],
                   colors: np.ndarray,
                   counts: np.ndarray,
                   max_colors: int) -> List[np.ndarray]:
    """
    Keep splitting clusters at full 8-bit resolution.

    The cluster with the largest variance is cut until there are max_colors
    clusters or none holds two distinct colors. The lower half keeps the
    cluster's slot and the upper half is appended.

    Args:
        groups: Indices into colors, one array per cluster
        colors: Distinct RGB colors (M, 3) uint8
        counts: Population of each color (M,)
        max_colors: Cluster budget

    Returns:
        New list of index arrays
    """
    values = colors.astype(np.float64)
    weights = counts.astype(np.float64)
    groups = list(groups)
    variances = [_group_variance(values[g], weights[g]) for g in groups]
    while len(groups) < max_colors:
        target = int(np.argmax(variances))
        if variances[target] <= 0.0:
            break
        halves = _cut_group(groups[target], values, weights)
        if halves is None:
            variances[target] = 0.0
            continue
        lower, upper = halves
        groups[target] = lower
        groups.append(upper)
        variances[target] = _group_variance(values[lower], weights[lower])
        variances.append(_group_variance(values[upper], weights[upper]))
    return groups
