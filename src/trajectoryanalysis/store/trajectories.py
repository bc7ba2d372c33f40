"""
Trajectory store: per-object point sequences built from per-frame detections.

The backend returns ``{"detections": [{"frame": int, "boxes": [{"id", "x", "y", ...}]}]}``.
Only ``frame`` and the per-box ``id``/``x``/``y`` are consumed; anything that
cannot be read is skipped so a partially broken payload still yields the
trajectories it does contain.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from trajectoryanalysis.utils.types import DetectionBox, FrameRecord, Point, canonical_id

logger = logging.getLogger(__name__)


@dataclass
class TrajectoryStore:
    trajectories: Dict[str, List[Point]] = field(default_factory=dict)
    total_frames: int = 0

    def ids(self) -> List[str]:
        return list(self.trajectories.keys())

    def is_empty(self) -> bool:
        return not self.trajectories

    def get(self, object_id: Any) -> List[Point]:
        key = canonical_id(object_id)
        if key is None:
            return []
        return list(self.trajectories.get(key, []))

    def __len__(self) -> int:
        return len(self.trajectories)


def _finite_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f):
        return None
    return f


def _frame_index(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int):
        try:
            value = int(str(value).strip())
        except ValueError:
            return None
    if value < 0:
        return None
    return int(value)


def _parse_box(raw: Any, frame_index: int) -> Optional[DetectionBox]:
    if not isinstance(raw, dict):
        logger.debug("Skipping non-mapping box at frame %d: %r", frame_index, raw)
        return None
    object_id = canonical_id(raw.get("id"))
    x = _finite_float(raw.get("x"))
    y = _finite_float(raw.get("y"))
    if object_id is None or x is None or y is None:
        logger.debug("Skipping malformed box at frame %d: id=%r x=%r y=%r", frame_index, raw.get("id"), raw.get("x"), raw.get("y"))
        return None
    return DetectionBox(object_id=object_id, x=x, y=y)


def _frame_list(payload: Any) -> Optional[List[Any]]:
    if isinstance(payload, dict):
        frames = payload.get("detections")
        if frames is None:
            return []
        return frames if isinstance(frames, list) else None
    if isinstance(payload, (list, tuple)):
        return list(payload)
    return None


def parse_detections(payload: Any) -> List[FrameRecord]:
    """Parse a detections payload (envelope or bare list) into frame records.

    Frame records without a usable non-negative frame index are dropped.
    """
    frames = _frame_list(payload)
    if frames is None:
        logger.warning("Detections payload has unexpected shape: %s", type(payload).__name__)
        return []

    records: List[FrameRecord] = []
    for raw in frames:
        if not isinstance(raw, dict):
            logger.debug("Skipping non-mapping frame record: %r", raw)
            continue
        frame_index = _frame_index(raw.get("frame"))
        if frame_index is None:
            logger.debug("Skipping frame record with invalid frame: %r", raw.get("frame"))
            continue
        raw_boxes = raw.get("boxes") or []
        if not isinstance(raw_boxes, list):
            logger.debug("Skipping boxes of frame %d: not a list", frame_index)
            raw_boxes = []
        boxes = [b for b in (_parse_box(rb, frame_index) for rb in raw_boxes) if b is not None]
        records.append(FrameRecord(frame_index=frame_index, boxes=boxes))
    return records


def build_trajectories_from_records(records: Iterable[FrameRecord]) -> TrajectoryStore:
    trajectories: Dict[str, List[Point]] = {}
    max_frame = 0
    for rec in records:
        for box in rec.boxes:
            trajectories.setdefault(box.object_id, []).append(Point(x=box.x, y=box.y, frame=rec.frame_index))
        max_frame = max(max_frame, int(rec.frame_index))
    return TrajectoryStore(trajectories=trajectories, total_frames=max_frame)


def build_trajectories(payload: Any) -> TrajectoryStore:
    """Build the id -> points mapping and the highest frame index seen.

    Points keep the order in which they were encountered; ordering by frame
    happens at analysis time. Duplicate (id, frame) entries are kept.
    """
    store = build_trajectories_from_records(parse_detections(payload))
    logger.debug("Built %d trajectories, total_frames=%d", len(store), store.total_frames)
    return store
