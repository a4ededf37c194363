"""
CAM16 viewing conditions.

Only the default conditions are used by the pipeline: sRGB D65 white point,
adapting luminance of a 200 lux room and a mid-gray (L* 50) background.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from ..color_utils import WHITE_POINT_D65, clamp_double, y_from_lstar


XYZ_TO_CAM16RGB = (
    (0.401288, 0.650173, -0.051461),
    (-0.250268, 1.204414, 0.045854),
    (-0.002079, 0.048952, 0.953127),
)

CAM16RGB_TO_XYZ = (
    (1.8620678, -1.0112547, 0.14918678),
    (0.38752654, 0.62144744, -0.00897398),
    (-0.0158415, -0.03412294, 1.0499644),
)


def _lerp(start: float, stop: float, amount: float) -> float:
    return (1.0 - amount) * start + amount * stop


@dataclass(frozen=True)
class ViewingConditions:
    n: float
    aw: float
    nbb: float
    ncb: float
    c: float
    nc: float
    rgb_d: Tuple[float, float, float]
    fl: float
    fl_root: float
    z: float

    @classmethod
    def make(cls,
             white_point: Sequence[float] = WHITE_POINT_D65,
             adapting_luminance: float = 200.0 / math.pi * y_from_lstar(50.0) / 100.0,
             background_lstar: float = 50.0,
             surround: float = 2.0,
             discounting_illuminant: bool = False) -> "ViewingConditions":
        """
        Build viewing conditions.

        Args:
            white_point: XYZ of the reference white
            adapting_luminance: Luminance of the adapting field in cd/m^2
            background_lstar: L* of the background
            surround: 0 = dark room, 1 = dim, 2 = average
            discounting_illuminant: Whether the eye fully adapts to the illuminant
        """
        background_lstar = max(0.1, background_lstar)
        m = XYZ_TO_CAM16RGB
        x, y, z = white_point
        r_w = x * m[0][0] + y * m[0][1] + z * m[0][2]
        g_w = x * m[1][0] + y * m[1][1] + z * m[1][2]
        b_w = x * m[2][0] + y * m[2][1] + z * m[2][2]

        f = 0.8 + surround / 10.0
        if f >= 0.9:
            c = _lerp(0.59, 0.69, (f - 0.9) * 10.0)
        else:
            c = _lerp(0.525, 0.59, (f - 0.8) * 10.0)

        if discounting_illuminant:
            d = 1.0
        else:
            d = f * (1.0 - (1.0 / 3.6) * math.exp((-adapting_luminance - 42.0) / 92.0))
        d = clamp_double(0.0, 1.0, d)

        nc = f
        rgb_d = (
            d * (100.0 / r_w) + 1.0 - d,
            d * (100.0 / g_w) + 1.0 - d,
            d * (100.0 / b_w) + 1.0 - d,
        )

        k = 1.0 / (5.0 * adapting_luminance + 1.0)
        k4 = k * k * k * k
        k4f = 1.0 - k4
        fl = k4 * adapting_luminance + 0.1 * k4f * k4f * math.pow(5.0 * adapting_luminance, 1.0 / 3.0)

        n = y_from_lstar(background_lstar) / white_point[1]
        z_exp = 1.48 + math.sqrt(n)
        nbb = 0.725 / math.pow(n, 0.2)
        ncb = nbb

        factors = [
            math.pow(fl * rgb_d[i] * w / 100.0, 0.42)
            for i, w in enumerate((r_w, g_w, b_w))
        ]
        rgb_a = [400.0 * f_ / (f_ + 27.13) for f_ in factors]
        aw = (2.0 * rgb_a[0] + rgb_a[1] + 0.05 * rgb_a[2]) * nbb

        return cls(
            n=n, aw=aw, nbb=nbb, ncb=ncb, c=c, nc=nc, rgb_d=rgb_d,
            fl=fl, fl_root=math.pow(fl, 0.25), z=z_exp,
        )


DEFAULT = ViewingConditions.make()
