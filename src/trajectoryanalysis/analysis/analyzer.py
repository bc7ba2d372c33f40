from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from trajectoryanalysis.motion.stats import is_valid_point, sort_points, summarize_motion
from trajectoryanalysis.motion.units import DEFAULT_FPS
from trajectoryanalysis.turning.registry import STRATEGIES, create_direction_detector
from trajectoryanalysis.turning.turning import MIN_POINTS_FOR_TURNS, DirectionChangeConfig
from trajectoryanalysis.utils.types import Point, TrajectoryAnalysis, canonical_id

logger = logging.getLogger(__name__)

MIN_POINTS_FOR_MOTION = 2


@dataclass(frozen=True)
class AnalyzerConfig:
    angle_threshold_deg: float = 45.0
    frames_per_second: float = DEFAULT_FPS
    strategy: str = "segmented"
    min_vector_norm: float = 0.1
    smoothing_window: int = 1
    min_segment_points: int = 5
    direction_labels: str = "en"

    def __post_init__(self) -> None:
        if not math.isfinite(self.angle_threshold_deg) or self.angle_threshold_deg <= 0.0:
            raise ValueError(f"angle_threshold_deg must be positive, got {self.angle_threshold_deg}")
        if not math.isfinite(self.frames_per_second) or self.frames_per_second <= 0.0:
            raise ValueError(f"frames_per_second must be positive, got {self.frames_per_second}")
        if self.strategy not in STRATEGIES:
            raise ValueError(f"strategy must be one of {STRATEGIES}, got {self.strategy!r}")
        # Remaining fields are validated by DirectionChangeConfig.
        self.direction_change_config()

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AnalyzerConfig":
        segmented = d.get("segmented", {}) or {}
        return AnalyzerConfig(
            angle_threshold_deg=float(d.get("angle_threshold_deg", 45.0)),
            frames_per_second=float(d.get("frames_per_second", DEFAULT_FPS)),
            strategy=str(d.get("strategy", "segmented")).lower(),
            min_vector_norm=float(d.get("min_vector_norm", 0.1)),
            smoothing_window=int(segmented.get("smoothing_window", 1)),
            min_segment_points=int(segmented.get("min_segment_points", 5)),
            direction_labels=str(d.get("direction_labels", "en")).lower(),
        )

    def direction_change_config(self) -> DirectionChangeConfig:
        return DirectionChangeConfig(
            min_vector_norm=self.min_vector_norm,
            smoothing_window=self.smoothing_window,
            min_segment_points=self.min_segment_points,
            direction_labels=self.direction_labels,
        )


class TrajectoryAnalyzer:
    """Per-object motion report for a selection of trajectories.

    Stateless between calls: inputs are never mutated and every call returns a
    fresh list, so re-running with another selection or threshold is safe.
    """

    def __init__(self, cfg: Optional[AnalyzerConfig] = None) -> None:
        self._cfg = cfg or AnalyzerConfig()
        self._detector = create_direction_detector(self._cfg.strategy, self._cfg.direction_change_config())

    @property
    def config(self) -> AnalyzerConfig:
        return self._cfg

    def analyze(
        self,
        selected_ids: Iterable[Any],
        trajectories: Mapping[str, Sequence[Point]],
        angle_threshold_deg: Optional[float] = None,
    ) -> List[TrajectoryAnalysis]:
        ids = list(selected_ids)
        if not ids:
            return []

        threshold = self._cfg.angle_threshold_deg if angle_threshold_deg is None else float(angle_threshold_deg)
        if not math.isfinite(threshold) or threshold <= 0.0:
            raise ValueError(f"angle_threshold_deg must be positive, got {angle_threshold_deg}")

        out: List[TrajectoryAnalysis] = []
        seen = set()
        for raw_id in ids:
            key = canonical_id(raw_id)
            if key is None or key in seen:
                continue
            seen.add(key)
            points = trajectories.get(key)
            if not points:
                continue
            try:
                result = self._analyze_one(key, points, threshold)
            except Exception:
                logger.exception("Trajectory analysis failed for id=%s; omitting it", key)
                continue
            if result is not None:
                out.append(result)
        logger.debug("Analyzed %d/%d selected trajectories (threshold=%.1f, strategy=%s)", len(out), len(ids), threshold, self._cfg.strategy)
        return out

    def _analyze_one(self, object_id: str, points: Sequence[Point], threshold: float) -> Optional[TrajectoryAnalysis]:
        valid = [p for p in points if is_valid_point(p)]
        if len(valid) != len(points):
            logger.debug("id=%s: dropped %d malformed points", object_id, len(points) - len(valid))
        if len(valid) < MIN_POINTS_FOR_MOTION:
            return None

        sorted_points = sort_points(valid)
        motion = summarize_motion(sorted_points, self._cfg.frames_per_second)
        changes = []
        if len(sorted_points) >= MIN_POINTS_FOR_TURNS:
            changes = self._detector.detect(sorted_points, threshold)

        return TrajectoryAnalysis(
            object_id=object_id,
            first_detection_frame=motion.first_frame,
            last_detection_frame=motion.last_frame,
            duration_s=motion.duration_s,
            total_distance_px=motion.total_distance_px,
            average_speed_px_per_frame=motion.average_speed_px_per_frame,
            direction_changes=changes,
        )


def analyze_trajectories(
    selected_ids: Iterable[Any],
    trajectories: Mapping[str, Sequence[Point]],
    angle_threshold_deg: float = 45.0,
    cfg: Optional[AnalyzerConfig] = None,
) -> List[TrajectoryAnalysis]:
    return TrajectoryAnalyzer(cfg).analyze(selected_ids, trajectories, angle_threshold_deg)
