"""
HCT -> sRGB solver.

Finds the sRGB color with a requested CAM16 hue and chroma at a given L*.
Newton iteration on CAM16 J is tried first; if the result is outside the sRGB
cube, the color is out of gamut and the solver walks the boundary of the
constant-Y plane to the in-gamut color of the requested hue with the greatest
chroma.
"""

import math
from typing import List, Optional, Sequence, Tuple

from ..color_utils import (
    SRGB_TO_XYZ, RGBColor, matrix_multiply, rgb_from_linrgb, rgb_from_lstar, sanitize_degrees, y_from_lstar,
)
from .viewing_conditions import DEFAULT, XYZ_TO_CAM16RGB


# Linear RGB (0-100) -> CAM16 cone responses, pre-scaled by FL * D / 100 of
# the default viewing conditions.
SCALED_DISCOUNT_FROM_LINRGB = (
    (0.001200833568784504, 0.002389694492170889, 0.0002795742885861124),
    (0.0005891086651375999, 0.0029785502573438758, 0.0003270666104008398),
    (0.00010146692491640572, 0.0005364214359186694, 0.0032979401770712076),
)

LINRGB_FROM_SCALED_DISCOUNT = (
    (1373.2198709594231, -1100.4251190754821, -7.278681089101213),
    (-271.815969077903, 559.6580465940733, -32.46047482791194),
    (1.9622899599665666, -57.173814538844006, 308.7233197812385),
)

Y_FROM_LINRGB = (0.2126, 0.7152, 0.0722)

Vector = Tuple[float, float, float]


def _midpoint_linear(level: int) -> float:
    normalized = (level + 0.5) / 255.0
    if normalized <= 0.040449936:
        return normalized / 12.92 * 100.0
    return math.pow((normalized + 0.055) / 1.055, 2.4) * 100.0


# Linear-light values halfway between adjacent 8-bit levels.
CRITICAL_PLANES = tuple(_midpoint_linear(i) for i in range(255))

_NOT_FOUND = (-1.0, -1.0, -1.0)


def _signum(value: float) -> float:
    if value < 0:
        return -1.0
    if value > 0:
        return 1.0
    return 0.0


def sanitize_radians(angle: float) -> float:
    return (angle + math.pi * 8) % (math.pi * 2)


def true_delinearized(component: float) -> float:
    """Linear channel (0-100) -> unrounded 8-bit channel."""
    normalized = component / 100.0
    if normalized <= 0.0031308:
        value = normalized * 12.92
    else:
        value = 1.055 * math.pow(normalized, 1.0 / 2.4) - 0.055
    return value * 255.0


def chromatic_adaptation(component: float) -> float:
    af = math.pow(abs(component), 0.42)
    return _signum(component) * 400.0 * af / (af + 27.13)


def inverse_chromatic_adaptation(adapted: float) -> float:
    adapted_abs = abs(adapted)
    base = max(0.0, 27.13 * adapted_abs / (400.0 - adapted_abs))
    return _signum(adapted) * math.pow(base, 1.0 / 0.42)


def hue_of(linrgb: Sequence[float]) -> float:
    """CAM16 hue of a linear RGB color, in radians."""
    scaled = matrix_multiply(linrgb, SCALED_DISCOUNT_FROM_LINRGB)
    r_a = chromatic_adaptation(scaled[0])
    g_a = chromatic_adaptation(scaled[1])
    b_a = chromatic_adaptation(scaled[2])
    a = (11.0 * r_a + -12.0 * g_a + b_a) / 11.0
    b = (r_a + g_a - 2.0 * b_a) / 9.0
    return math.atan2(b, a)


def are_in_cyclic_order(a: float, b: float, c: float) -> bool:
    return sanitize_radians(b - a) < sanitize_radians(c - a)


def _intercept(source: float, mid: float, target: float) -> float:
    return (mid - source) / (target - source)


def _lerp_point(source: Vector, t: float, target: Vector) -> Vector:
    return (
        source[0] + (target[0] - source[0]) * t,
        source[1] + (target[1] - source[1]) * t,
        source[2] + (target[2] - source[2]) * t,
    )


def _set_coordinate(source: Vector, coordinate: float, target: Vector, axis: int) -> Vector:
    t = _intercept(source[axis], coordinate, target[axis])
    return _lerp_point(source, t, target)


def _is_bounded(x: float) -> bool:
    return 0.0 <= x <= 100.0


def nth_vertex(y: float, n: int) -> Vector:
    """
    The nth of 12 possible intersections of the Y plane with the RGB cube edges.

    Returns (-1, -1, -1) when the intersection falls outside the cube.
    """
    k_r, k_g, k_b = Y_FROM_LINRGB
    coord_a = 0.0 if n % 4 <= 1 else 100.0
    coord_b = 0.0 if n % 2 == 0 else 100.0
    if n < 4:
        g, b = coord_a, coord_b
        r = (y - g * k_g - b * k_b) / k_r
        return (r, g, b) if _is_bounded(r) else _NOT_FOUND
    if n < 8:
        b, r = coord_a, coord_b
        g = (y - r * k_r - b * k_b) / k_g
        return (r, g, b) if _is_bounded(g) else _NOT_FOUND
    r, g = coord_a, coord_b
    b = (y - r * k_r - g * k_g) / k_b
    return (r, g, b) if _is_bounded(b) else _NOT_FOUND


def bisect_to_segment(y: float, target_hue: float) -> Tuple[Vector, Vector]:
    """Edge of the Y-plane polygon whose endpoints bracket target_hue."""
    left = _NOT_FOUND
    right = _NOT_FOUND
    left_hue = 0.0
    right_hue = 0.0
    initialized = False
    uncut = True
    for n in range(12):
        mid = nth_vertex(y, n)
        if mid[0] < 0:
            continue
        mid_hue = hue_of(mid)
        if not initialized:
            left, right = mid, mid
            left_hue, right_hue = mid_hue, mid_hue
            initialized = True
            continue
        if uncut or are_in_cyclic_order(left_hue, mid_hue, right_hue):
            uncut = False
            if are_in_cyclic_order(left_hue, target_hue, mid_hue):
                right = mid
                right_hue = mid_hue
            else:
                left = mid
                left_hue = mid_hue
    return left, right


def _midpoint(a: Vector, b: Vector) -> Vector:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2, (a[2] + b[2]) / 2)


def _critical_plane_below(x: float) -> int:
    return int(math.floor(x - 0.5))


def _critical_plane_above(x: float) -> int:
    return int(math.ceil(x - 0.5))


def bisect_to_limit(y: float, target_hue: float) -> Vector:
    """Most chromatic in-gamut linear RGB color with luminance y and the given hue."""
    left, right = bisect_to_segment(y, target_hue)
    left_hue = hue_of(left)
    for axis in range(3):
        if left[axis] == right[axis]:
            continue
        if left[axis] < right[axis]:
            l_plane = _critical_plane_below(true_delinearized(left[axis]))
            r_plane = _critical_plane_above(true_delinearized(right[axis]))
        else:
            l_plane = _critical_plane_above(true_delinearized(left[axis]))
            r_plane = _critical_plane_below(true_delinearized(right[axis]))
        for _ in range(8):
            if abs(r_plane - l_plane) <= 1:
                break
            m_plane = int(math.floor((l_plane + r_plane) / 2.0))
            mid = _set_coordinate(left, CRITICAL_PLANES[m_plane], right, axis)
            mid_hue = hue_of(mid)
            if are_in_cyclic_order(left_hue, target_hue, mid_hue):
                right = mid
                r_plane = m_plane
            else:
                left = mid
                left_hue = mid_hue
                l_plane = m_plane
    return _midpoint(left, right)


def find_result_by_j(hue_radians: float, chroma: float, y: float) -> Optional[RGBColor]:
    """Newton iteration on J; None when the answer is out of gamut."""
    conditions = DEFAULT
    j = math.sqrt(y) * 11.0
    t_inner_coeff = 1 / math.pow(1.64 - math.pow(0.29, conditions.n), 0.73)
    e_hue = 0.25 * (math.cos(hue_radians + 2.0) + 3.8)
    p1 = e_hue * (50000.0 / 13.0) * conditions.nc * conditions.ncb
    h_sin = math.sin(hue_radians)
    h_cos = math.cos(hue_radians)
    for iteration in range(5):
        j_normalized = j / 100.0
        alpha = 0.0 if chroma == 0.0 or j == 0.0 else chroma / math.sqrt(j_normalized)
        t = math.pow(alpha * t_inner_coeff, 1.0 / 0.9)
        ac = conditions.aw * math.pow(j_normalized, 1.0 / conditions.c / conditions.z)
        p2 = ac / conditions.nbb
        gamma = 23.0 * (p2 + 0.305) * t / (23.0 * p1 + 11 * t * h_cos + 108.0 * t * h_sin)
        a = gamma * h_cos
        b = gamma * h_sin
        r_a = (460.0 * p2 + 451.0 * a + 288.0 * b) / 1403.0
        g_a = (460.0 * p2 - 891.0 * a - 261.0 * b) / 1403.0
        b_a = (460.0 * p2 - 220.0 * a - 6300.0 * b) / 1403.0
        scaled = (
            inverse_chromatic_adaptation(r_a),
            inverse_chromatic_adaptation(g_a),
            inverse_chromatic_adaptation(b_a),
        )
        linrgb = matrix_multiply(scaled, LINRGB_FROM_SCALED_DISCOUNT)
        if linrgb[0] < 0 or linrgb[1] < 0 or linrgb[2] < 0:
            return None
        fnj = Y_FROM_LINRGB[0] * linrgb[0] + Y_FROM_LINRGB[1] * linrgb[1] + Y_FROM_LINRGB[2] * linrgb[2]
        if fnj <= 0:
            return None
        if iteration == 4 or abs(fnj - y) < 0.002:
            if linrgb[0] > 100.01 or linrgb[1] > 100.01 or linrgb[2] > 100.01:
                return None
            return rgb_from_linrgb(linrgb)
        # 2 * fn(j) / j approximates fn'(j)
        j = j - (fnj - y) * j / (2 * fnj)
    return None


def solve_to_rgb(hue_degrees: float, chroma: float, lstar: float) -> RGBColor:
    """
    sRGB color closest to the requested HCT.

    Out-of-gamut requests keep hue and tone and reduce chroma.
    """
    if chroma < 0.0001 or lstar < 0.0001 or lstar > 99.9999:
        return rgb_from_lstar(lstar)
    hue_radians = math.radians(sanitize_degrees(hue_degrees))
    y = y_from_lstar(lstar)
    exact = find_result_by_j(hue_radians, chroma, y)
    if exact is not None:
        return exact
    return rgb_from_linrgb(bisect_to_limit(y, hue_radians))


def scaled_discount_matrix() -> List[List[float]]:
    """Recompute SCALED_DISCOUNT_FROM_LINRGB from the CAM16 model constants."""
    rows = []
    for i in range(3):
        scale = DEFAULT.fl * DEFAULT.rgb_d[i] / 100.0
        row = []
        for col in range(3):
            value = sum(XYZ_TO_CAM16RGB[i][k] * SRGB_TO_XYZ[k][col] for k in range(3))
            row.append(scale * value)
        rows.append(row)
    return rows
