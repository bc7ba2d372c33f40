from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from trajectoryanalysis.motion.math import distance_px, speed_px_per_frame
from trajectoryanalysis.motion.units import frames_to_seconds
from trajectoryanalysis.utils.types import Point


@dataclass(frozen=True)
class MotionSummary:
    first_frame: int
    last_frame: int
    duration_s: float
    total_distance_px: float
    average_speed_px_per_frame: float


def is_valid_point(p: object) -> bool:
    if not isinstance(p, Point):
        return False
    try:
        return math.isfinite(float(p.x)) and math.isfinite(float(p.y))
    except (TypeError, ValueError):
        return False


def sort_points(points: Sequence[Point]) -> List[Point]:
    """Order points by frame; a missing frame sorts at its position in the input.

    Ties keep input order, so duplicate frames stay stable.
    """
    keyed = [(p.frame if p.frame is not None else i, i, p) for i, p in enumerate(points)]
    keyed.sort(key=lambda k: (k[0], k[1]))
    return [p for _, _, p in keyed]


def frame_or_index(p: Point, index: int) -> int:
    return int(p.frame) if p.frame is not None else int(index)


def summarize_motion(sorted_points: Sequence[Point], fps: float) -> MotionSummary:
    """Distance, per-step speed and detection span of an already sorted trajectory.

    Steps whose frame delta is not positive add distance but no speed sample.
    """
    if len(sorted_points) < 2:
        raise ValueError(f"At least 2 points are required, got {len(sorted_points)}")

    first_frame = sorted_points[0].frame if sorted_points[0].frame is not None else 0
    last_frame = sorted_points[-1].frame if sorted_points[-1].frame is not None else 0

    total = 0.0
    speeds: List[float] = []
    for i in range(1, len(sorted_points)):
        p0 = sorted_points[i - 1]
        p1 = sorted_points[i]
        total += distance_px(p0.xy, p1.xy)
        v = speed_px_per_frame(p0.xy, frame_or_index(p0, i - 1), p1.xy, frame_or_index(p1, i))
        if v is not None:
            speeds.append(v)

    avg = sum(speeds) / len(speeds) if speeds else 0.0
    return MotionSummary(
        first_frame=int(first_frame),
        last_frame=int(last_frame),
        duration_s=frames_to_seconds(last_frame - first_frame, fps),
        total_distance_px=float(total),
        average_speed_px_per_frame=float(avg),
    )
