from .analyzer import AnalyzerConfig, TrajectoryAnalyzer, analyze_trajectories

__all__ = ["AnalyzerConfig", "TrajectoryAnalyzer", "analyze_trajectories"]
