from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

PointXY = Tuple[float, float]

DEFAULT_VIDEO_WIDTH = 1280
DEFAULT_VIDEO_HEIGHT = 720


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    frame: Optional[int] = None

    @property
    def xy(self) -> PointXY:
        return (float(self.x), float(self.y))


@dataclass(frozen=True)
class DetectionBox:
    object_id: str
    x: float
    y: float


@dataclass(frozen=True)
class FrameRecord:
    frame_index: int
    boxes: List[DetectionBox]


@dataclass(frozen=True)
class VideoDimensions:
    width: int = DEFAULT_VIDEO_WIDTH
    height: int = DEFAULT_VIDEO_HEIGHT

    @staticmethod
    def from_metrics(d: Optional[Dict[str, Any]]) -> "VideoDimensions":
        res = (d or {}).get("processed_resolution") or {}
        try:
            width = int(res.get("width", DEFAULT_VIDEO_WIDTH))
            height = int(res.get("height", DEFAULT_VIDEO_HEIGHT))
        except (TypeError, ValueError, AttributeError):
            return VideoDimensions()
        if width <= 0 or height <= 0:
            return VideoDimensions()
        return VideoDimensions(width=width, height=height)


@dataclass(frozen=True)
class DirectionChangeEvent:
    frame: int
    angle_deg: float
    from_coord: Point
    to_coord: Point
    from_direction: str
    to_direction: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame": int(self.frame),
            "angle": float(self.angle_deg),
            "fromCoord": {"x": float(self.from_coord.x), "y": float(self.from_coord.y)},
            "toCoord": {"x": float(self.to_coord.x), "y": float(self.to_coord.y)},
            "fromDirection": self.from_direction,
            "toDirection": self.to_direction,
        }


@dataclass(frozen=True)
class TrajectoryAnalysis:
    object_id: str
    first_detection_frame: int
    last_detection_frame: int
    duration_s: float
    total_distance_px: float
    average_speed_px_per_frame: float
    direction_changes: List[DirectionChangeEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.object_id,
            "firstDetection": int(self.first_detection_frame),
            "lastDetection": int(self.last_detection_frame),
            "durationSeconds": float(self.duration_s),
            "directionChanges": [ev.to_dict() for ev in self.direction_changes],
            "totalDistance": float(self.total_distance_px),
            "averageSpeed": float(self.average_speed_px_per_frame),
        }


def canonical_id(raw: Any) -> Optional[str]:
    """Normalize a tracker id to the string key used throughout the package.

    Integral floats (``3.0``) collapse to ``"3"`` so that numeric and string ids
    coming from the backend land on the same trajectory.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        if raw != raw:
            return None
        if raw.is_integer():
            return str(int(raw))
    s = str(raw).strip()
    return s or None


def as_np_xy(points: List[Point]) -> np.ndarray:
    return np.asarray([p.xy for p in points], dtype=np.float64).reshape(-1, 2)
