from __future__ import annotations

import math
from typing import Optional, Tuple


def heading_deg_from_delta(dx: float, dy: float) -> float:
    ang = math.degrees(math.atan2(dy, dx))
    if ang < 0.0:
        ang += 360.0
    return float(ang)


def vector_norm(dx: float, dy: float) -> float:
    return float(math.hypot(dx, dy))


def angle_between_deg(a_dx: float, a_dy: float, b_dx: float, b_dy: float, min_norm: float = 0.0) -> Optional[float]:
    """Unsigned angle between two vectors in [0, 180].

    Returns None when either vector is not longer than ``min_norm``; callers
    treat that as "no turn" instead of propagating NaN.
    """
    a_norm = math.hypot(a_dx, a_dy)
    b_norm = math.hypot(b_dx, b_dy)
    if a_norm <= min_norm or b_norm <= min_norm or a_norm == 0.0 or b_norm == 0.0:
        return None
    dot = (a_dx * b_dx + a_dy * b_dy) / (a_norm * b_norm)
    dot = max(-1.0, min(1.0, dot))
    return float(math.degrees(math.acos(dot)))


def distance_px(p0: Tuple[float, float], p1: Tuple[float, float]) -> float:
    return float(math.hypot(float(p1[0] - p0[0]), float(p1[1] - p0[1])))


def speed_px_per_frame(p0: Tuple[float, float], f0: float, p1: Tuple[float, float], f1: float) -> Optional[float]:
    df = float(f1 - f0)
    if df <= 0.0:
        return None
    return float(distance_px(p0, p1) / df)
