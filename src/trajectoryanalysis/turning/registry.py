from __future__ import annotations

from typing import Optional

from trajectoryanalysis.turning.turning import (
    DirectionChangeConfig,
    DirectionChangeDetector,
    SegmentedDirectionChangeDetector,
    SimpleDirectionChangeDetector,
)

STRATEGIES = ("segmented", "simple")


def create_direction_detector(strategy: str, cfg: Optional[DirectionChangeConfig] = None) -> DirectionChangeDetector:
    if cfg is None:
        cfg = DirectionChangeConfig()
    name = str(strategy).lower()
    if name == "segmented":
        return SegmentedDirectionChangeDetector(cfg)
    if name == "simple":
        return SimpleDirectionChangeDetector(cfg)
    raise ValueError(f"Unknown direction-change strategy: {strategy}")
