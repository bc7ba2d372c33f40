from .trajectories import TrajectoryStore, build_trajectories, build_trajectories_from_records, parse_detections

__all__ = ["TrajectoryStore", "build_trajectories", "build_trajectories_from_records", "parse_detections"]
