"""
CAM16 color appearance model (forward direction).

Provides the hue and chroma half of HCT. The inverse direction lives in
solver.py, which searches sRGB for a CAM16 hue/chroma at a given L*.
"""

import math
from dataclasses import dataclass

from ..color_utils import RGBColor, xyz_from_rgb
from .viewing_conditions import DEFAULT, XYZ_TO_CAM16RGB, ViewingConditions


def _signum(value: float) -> float:
    if value < 0:
        return -1.0
    if value > 0:
        return 1.0
    return 0.0


@dataclass(frozen=True)
class Cam16:
    hue: float
    chroma: float
    j: float
    q: float
    m: float
    s: float
    jstar: float
    astar: float
    bstar: float

    @classmethod
    def from_rgb(cls, rgb: RGBColor, conditions: ViewingConditions = DEFAULT) -> "Cam16":
        return cls.from_xyz(*xyz_from_rgb(rgb), conditions=conditions)

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float,
                 conditions: ViewingConditions = DEFAULT) -> "Cam16":
        m = XYZ_TO_CAM16RGB
        r_t = x * m[0][0] + y * m[0][1] + z * m[0][2]
        g_t = x * m[1][0] + y * m[1][1] + z * m[1][2]
        b_t = x * m[2][0] + y * m[2][1] + z * m[2][2]

        # Chromatic adaptation
        r_d = conditions.rgb_d[0] * r_t
        g_d = conditions.rgb_d[1] * g_t
        b_d = conditions.rgb_d[2] * b_t

        r_af = math.pow(conditions.fl * abs(r_d) / 100.0, 0.42)
        g_af = math.pow(conditions.fl * abs(g_d) / 100.0, 0.42)
        b_af = math.pow(conditions.fl * abs(b_d) / 100.0, 0.42)
        r_a = _signum(r_d) * 400.0 * r_af / (r_af + 27.13)
        g_a = _signum(g_d) * 400.0 * g_af / (g_af + 27.13)
        b_a = _signum(b_d) * 400.0 * b_af / (b_af + 27.13)

        # Opponent color dimensions
        a = (11.0 * r_a + -12.0 * g_a + b_a) / 11.0
        b = (r_a + g_a - 2.0 * b_a) / 9.0
        u = (20.0 * r_a + 20.0 * g_a + 21.0 * b_a) / 20.0
        p2 = (40.0 * r_a + 20.0 * g_a + b_a) / 20.0

        atan_degrees = math.degrees(math.atan2(b, a))
        if atan_degrees < 0:
            hue = atan_degrees + 360.0
        elif atan_degrees >= 360.0:
            hue = atan_degrees - 360.0
        else:
            hue = atan_degrees
        hue_radians = math.radians(hue)

        ac = p2 * conditions.nbb
        j = 100.0 * math.pow(ac / conditions.aw, conditions.c * conditions.z)
        q = (4.0 / conditions.c) * math.sqrt(j / 100.0) * (conditions.aw + 4.0) * conditions.fl_root

        hue_prime = hue + 360.0 if hue < 20.14 else hue
        e_hue = 0.25 * (math.cos(math.radians(hue_prime) + 2.0) + 3.8)
        p1 = 50000.0 / 13.0 * e_hue * conditions.nc * conditions.ncb
        t = p1 * math.hypot(a, b) / (u + 0.305)
        alpha = math.pow(1.64 - math.pow(0.29, conditions.n), 0.73) * math.pow(t, 0.9)

        chroma = alpha * math.sqrt(j / 100.0)
        m_ = chroma * conditions.fl_root
        s = 50.0 * math.sqrt((alpha * conditions.c) / (conditions.aw + 4.0))

        jstar = (1.0 + 100.0 * 0.007) * j / (1.0 + 0.007 * j)
        mstar = 1.0 / 0.0228 * math.log1p(0.0228 * m_)
        astar = mstar * math.cos(hue_radians)
        bstar = mstar * math.sin(hue_radians)

        return cls(hue=hue, chroma=chroma, j=j, q=q, m=m_, s=s,
                   jstar=jstar, astar=astar, bstar=bstar)
