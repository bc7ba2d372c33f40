from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from trajectoryanalysis.analysis.analyzer import AnalyzerConfig, TrajectoryAnalyzer
from trajectoryanalysis.io.backend import BackendConfig, DetectionBackendClient
from trajectoryanalysis.output.trails import TrailView, ViewTransform
from trajectoryanalysis.store.trajectories import TrajectoryStore, build_trajectories
from trajectoryanalysis.utils.config import get_section
from trajectoryanalysis.utils.types import Point, TrajectoryAnalysis, VideoDimensions, canonical_id


logger = logging.getLogger("trajectoryanalysis.pipeline.session")

DEFAULT_INITIAL_SELECTION = 3


@dataclass(frozen=True)
class AnalysisSessionConfig:
    analyzer: AnalyzerConfig
    backend: BackendConfig
    initial_selection: int = DEFAULT_INITIAL_SELECTION

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AnalysisSessionConfig":
        analysis = get_section(d, "analysis")
        initial_selection = int(analysis.get("initial_selection", DEFAULT_INITIAL_SELECTION))
        if initial_selection < 0:
            raise ValueError(f"analysis.initial_selection must be non-negative, got {initial_selection}")
        return AnalysisSessionConfig(
            analyzer=AnalyzerConfig.from_dict(analysis),
            backend=BackendConfig.from_dict(get_section(d, "backend")),
            initial_selection=initial_selection,
        )


class AnalysisSession:
    """View-model holding the state a trajectory dashboard works on.

    Selection and angle sensitivity are explicit fields passed to the analyzer
    on every run; ``results`` only caches the latest run for display.
    """

    def __init__(self, cfg: Optional[AnalysisSessionConfig] = None, client: Optional[DetectionBackendClient] = None) -> None:
        if cfg is None:
            cfg = AnalysisSessionConfig(analyzer=AnalyzerConfig(), backend=BackendConfig())
        self._cfg = cfg
        self._client = client
        self._analyzer = TrajectoryAnalyzer(cfg.analyzer)
        self.store = TrajectoryStore()
        self.video = VideoDimensions()
        self.selected_ids: List[str] = []
        self.angle_threshold_deg = float(cfg.analyzer.angle_threshold_deg)
        self.results: List[TrajectoryAnalysis] = []
        self.current_frame = 0
        self.playing = False
        self.playback_speed = 1
        self.view = ViewTransform()

    def _get_client(self) -> DetectionBackendClient:
        if self._client is None:
            self._client = DetectionBackendClient(self._cfg.backend)
        return self._client

    def load_payload(self, payload: Any, video: Optional[VideoDimensions] = None) -> TrajectoryStore:
        """Replace the store from a detections payload and reset selection, results and playback."""
        self.store = build_trajectories(payload)
        self.video = video or VideoDimensions()
        self.selected_ids = self.store.ids()[: self._cfg.initial_selection]
        self.results = []
        self.current_frame = 0
        self.playing = False
        self.view.reset()
        logger.info(
            "Loaded %d trajectories (total_frames=%d), selected %s",
            len(self.store),
            self.store.total_frames,
            self.selected_ids,
        )
        return self.store

    def load_task(self, task_id: str) -> TrajectoryStore:
        client = self._get_client()
        payload = client.fetch_detections(task_id)
        if payload is None:
            logger.warning("No detections available for task %s", task_id)
            return self.load_payload([])
        return self.load_payload(payload, client.fetch_video_dimensions(task_id))

    def select(self, object_ids: Iterable[Any]) -> List[str]:
        selected: List[str] = []
        for raw in object_ids:
            key = canonical_id(raw)
            if key is not None and key not in selected:
                selected.append(key)
        self.selected_ids = selected
        return list(self.selected_ids)

    def toggle(self, object_id: Any) -> bool:
        """Flip one id in the selection; returns whether it is selected afterwards."""
        key = canonical_id(object_id)
        if key is None:
            return False
        if key in self.selected_ids:
            self.selected_ids.remove(key)
            return False
        self.selected_ids.append(key)
        return True

    def set_angle_threshold(self, angle_threshold_deg: float) -> None:
        if not math.isfinite(angle_threshold_deg) or angle_threshold_deg <= 0.0:
            raise ValueError(f"angle_threshold_deg must be positive, got {angle_threshold_deg}")
        self.angle_threshold_deg = float(angle_threshold_deg)

    def analyze(self) -> List[TrajectoryAnalysis]:
        self.results = self._analyzer.analyze(self.selected_ids, self.store.trajectories, self.angle_threshold_deg)
        return self.results

    def trail_view(self, display: Optional[VideoDimensions] = None) -> TrailView:
        return TrailView(
            trajectories=self.store.trajectories,
            total_frames=self.store.total_frames,
            video=self.video,
            display=display or self.video,
            fps=self._cfg.analyzer.frames_per_second,
        )

    def set_playback_speed(self, frames_per_tick: int) -> None:
        if int(frames_per_tick) <= 0:
            raise ValueError(f"playback speed must be positive, got {frames_per_tick}")
        self.playback_speed = int(frames_per_tick)

    def play(self) -> None:
        self.playing = self.current_frame < self.store.total_frames

    def pause(self) -> None:
        self.playing = False

    def tick(self) -> int:
        """Advance playback by one step; a no-op while paused."""
        if self.playing:
            self.current_frame, self.playing = self.trail_view().advance(self.current_frame, self.playback_speed)
        return self.current_frame

    def seek(self, seconds: float) -> int:
        """Skip forward or backward without changing the play state."""
        self.current_frame = self.trail_view().seek(self.current_frame, seconds)
        return self.current_frame

    def scrub_to(self, seconds: float) -> int:
        """Jump to an absolute scrubber position; scrubbing pauses playback."""
        self.current_frame = self.trail_view().frame_at(seconds)
        self.playing = False
        return self.current_frame

    def restart(self) -> None:
        self.current_frame = 0
        self.playing = False

    def visible_trails(self, display: Optional[VideoDimensions] = None) -> Dict[str, List[Point]]:
        """Selected trails at the current frame, scaled to the display and zoom/pan applied."""
        trails = self.trail_view(display).trails(self.selected_ids, self.current_frame)
        return {oid: self.view.apply(points) for oid, points in trails.items()}
