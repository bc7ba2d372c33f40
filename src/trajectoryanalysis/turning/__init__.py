from .directions import available_label_sets, compass_sector, direction_label
from .registry import STRATEGIES, create_direction_detector
from .turning import (
    DirectionChangeConfig,
    DirectionChangeDetector,
    SegmentedDirectionChangeDetector,
    SimpleDirectionChangeDetector,
    turn_angle_at,
)

__all__ = [
    "DirectionChangeConfig",
    "DirectionChangeDetector",
    "STRATEGIES",
    "SegmentedDirectionChangeDetector",
    "SimpleDirectionChangeDetector",
    "available_label_sets",
    "compass_sector",
    "create_direction_detector",
    "direction_label",
    "turn_angle_at",
]
