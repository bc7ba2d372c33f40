from .config import get_section, load_yaml, resolve_path
from .logging import setup_logging
from .types import (
    DetectionBox,
    DirectionChangeEvent,
    FrameRecord,
    Point,
    PointXY,
    TrajectoryAnalysis,
    VideoDimensions,
    canonical_id,
)

__all__ = [
    "DetectionBox",
    "DirectionChangeEvent",
    "FrameRecord",
    "Point",
    "PointXY",
    "TrajectoryAnalysis",
    "VideoDimensions",
    "canonical_id",
    "get_section",
    "load_yaml",
    "resolve_path",
    "setup_logging",
]
