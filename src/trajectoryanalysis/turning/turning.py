"""
Direction-change detection along noisy 2-D pixel trajectories.

Two strategies are provided and selected per analyzer, never combined:

* ``simple``: every interior point whose incoming and outgoing vectors differ
  by more than the angle threshold is a direction change.
* ``segmented``: coordinates are optionally smoothed with a centered moving
  average (``smoothing_window``; 1 scans the raw points), candidate turns must
  be separated by a minimum segment length, and each accepted turn is
  described by the mean direction of the whole segment before and after it.
  The same scan runs on every trajectory regardless of its length.

Both expect points already sorted by frame and treat vectors shorter than
``min_vector_norm`` as "no direction", never as a numeric fault.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from trajectoryanalysis.motion.math import angle_between_deg
from trajectoryanalysis.motion.smoothing import mean_delta, smooth_points
from trajectoryanalysis.motion.stats import frame_or_index
from trajectoryanalysis.turning.directions import available_label_sets, direction_label
from trajectoryanalysis.utils.types import DirectionChangeEvent, Point

logger = logging.getLogger(__name__)

MIN_POINTS_FOR_TURNS = 3


class DirectionChangeConfig:
    """Parameters shared by the direction-change strategies."""

    def __init__(self,
                 min_vector_norm: float = 0.1,
                 smoothing_window: int = 1,
                 min_segment_points: int = 5,
                 direction_labels: str = "en"):

        if min_vector_norm < 0:
            raise ValueError(f"min_vector_norm must be non-negative, got {min_vector_norm}")
        if smoothing_window < 1:
            raise ValueError(f"smoothing_window must be >= 1, got {smoothing_window}")
        if min_segment_points < 2:
            raise ValueError(f"min_segment_points must be >= 2, got {min_segment_points}")
        if direction_labels not in available_label_sets():
            raise ValueError(f"direction_labels must be one of {available_label_sets()}, got {direction_labels!r}")

        self.min_vector_norm = float(min_vector_norm)
        self.smoothing_window = int(smoothing_window)
        self.min_segment_points = int(min_segment_points)
        self.direction_labels = str(direction_labels)

    def __repr__(self) -> str:
        return (
            f"DirectionChangeConfig(min_vector_norm={self.min_vector_norm}, smoothing_window={self.smoothing_window}, "
            f"min_segment_points={self.min_segment_points}, direction_labels={self.direction_labels!r})"
        )


class DirectionChangeDetector(Protocol):
    name: str

    def detect(self, points: Sequence[Point], angle_threshold_deg: float) -> List[DirectionChangeEvent]:
        ...


def turn_angle_at(points: Sequence[Point], i: int, min_norm: float) -> Optional[float]:
    """Angle between ``points[i-1] -> points[i]`` and ``points[i] -> points[i+1]``."""
    prev, curr, nxt = points[i - 1], points[i], points[i + 1]
    return angle_between_deg(
        curr.x - prev.x,
        curr.y - prev.y,
        nxt.x - curr.x,
        nxt.y - curr.y,
        min_norm=min_norm,
    )


def _vector(a: Point, b: Point) -> Tuple[float, float]:
    return (float(b.x - a.x), float(b.y - a.y))


class SimpleDirectionChangeDetector:
    name = "simple"

    def __init__(self, cfg: DirectionChangeConfig) -> None:
        self._cfg = cfg

    def detect(self, points: Sequence[Point], angle_threshold_deg: float) -> List[DirectionChangeEvent]:
        events: List[DirectionChangeEvent] = []
        if len(points) < MIN_POINTS_FOR_TURNS:
            return events
        for i in range(1, len(points) - 1):
            angle = turn_angle_at(points, i, self._cfg.min_vector_norm)
            if angle is None or angle <= angle_threshold_deg:
                continue
            v1 = _vector(points[i - 1], points[i])
            v2 = _vector(points[i], points[i + 1])
            events.append(
                DirectionChangeEvent(
                    frame=frame_or_index(points[i], i),
                    angle_deg=float(angle),
                    from_coord=points[i - 1],
                    to_coord=points[i + 1],
                    from_direction=direction_label(v1[0], v1[1], self._cfg.direction_labels),
                    to_direction=direction_label(v2[0], v2[1], self._cfg.direction_labels),
                )
            )
        return events


class SegmentedDirectionChangeDetector:
    name = "segmented"

    def __init__(self, cfg: DirectionChangeConfig) -> None:
        self._cfg = cfg

    def _scan_points(self, points: Sequence[Point]) -> List[Point]:
        return smooth_points(list(points), self._cfg.smoothing_window)

    def find_breaks(self, points: Sequence[Point], angle_threshold_deg: float) -> List[Tuple[int, float]]:
        """Indices of accepted turns with the angle measured on the scanned points."""
        scanned = self._scan_points(points)
        min_gap = self._cfg.min_segment_points - 1
        breaks: List[Tuple[int, float]] = []
        last_break: Optional[int] = None
        for i in range(1, len(scanned) - 1):
            angle = turn_angle_at(scanned, i, self._cfg.min_vector_norm)
            if angle is None or angle <= angle_threshold_deg:
                continue
            if last_break is not None and (i - last_break) < min_gap:
                continue
            breaks.append((i, float(angle)))
            last_break = i
        return breaks

    def detect(self, points: Sequence[Point], angle_threshold_deg: float) -> List[DirectionChangeEvent]:
        events: List[DirectionChangeEvent] = []
        if len(points) < MIN_POINTS_FOR_TURNS:
            return events
        pts = list(points)
        breaks = self.find_breaks(pts, angle_threshold_deg)
        bounds = [0] + [i for i, _ in breaks] + [len(pts) - 1]
        labels = self._cfg.direction_labels
        for k, (i, angle) in enumerate(breaks):
            prev_dir = mean_delta(pts[bounds[k]:i + 1])
            next_dir = mean_delta(pts[i:bounds[k + 2] + 1])
            events.append(
                DirectionChangeEvent(
                    frame=frame_or_index(pts[i], i),
                    angle_deg=angle,
                    from_coord=pts[i - 1],
                    to_coord=pts[i + 1],
                    from_direction=direction_label(float(prev_dir[0]), float(prev_dir[1]), labels),
                    to_direction=direction_label(float(next_dir[0]), float(next_dir[1]), labels),
                )
            )
        logger.debug("Segmented scan: %d points, %d breaks, threshold=%.1f", len(pts), len(events), angle_threshold_deg)
        return events
