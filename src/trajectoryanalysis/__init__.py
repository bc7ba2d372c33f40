"""Trajectory analysis for tracked objects in processed video."""

from .analysis import AnalyzerConfig, TrajectoryAnalyzer, analyze_trajectories
from .store import TrajectoryStore, build_trajectories
from .utils.types import DirectionChangeEvent, Point, TrajectoryAnalysis

__all__ = [
    "AnalyzerConfig",
    "DirectionChangeEvent",
    "Point",
    "TrajectoryAnalysis",
    "TrajectoryAnalyzer",
    "TrajectoryStore",
    "analyze_trajectories",
    "build_trajectories",
]
