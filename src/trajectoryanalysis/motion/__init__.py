from .math import angle_between_deg, distance_px, heading_deg_from_delta, speed_px_per_frame
from .smoothing import mean_delta, moving_average_xy, smooth_points
from .stats import MotionSummary, sort_points, summarize_motion
from .units import DEFAULT_FPS, frames_to_seconds, seconds_to_frames

__all__ = [
    "DEFAULT_FPS",
    "MotionSummary",
    "angle_between_deg",
    "distance_px",
    "frames_to_seconds",
    "heading_deg_from_delta",
    "mean_delta",
    "moving_average_xy",
    "seconds_to_frames",
    "smooth_points",
    "sort_points",
    "speed_px_per_frame",
    "summarize_motion",
]
