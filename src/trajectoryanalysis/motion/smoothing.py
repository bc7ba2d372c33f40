from __future__ import annotations

import logging
from typing import List

import numpy as np

from trajectoryanalysis.utils.types import Point, as_np_xy

logger = logging.getLogger(__name__)


def moving_average_xy(xy: np.ndarray, window_size: int = 3) -> np.ndarray:
    """Centered moving average over an (n, 2) array.

    The window is clamped at both ends, so the first and last samples are
    averaged with the neighbours that exist.
    """
    n = len(xy)
    if n == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if window_size < 2:
        return xy.astype(np.float64)

    half_window = window_size // 2
    smoothed = np.zeros((n, 2), dtype=np.float64)
    for i in range(n):
        start_idx = max(0, i - half_window)
        end_idx = min(n, i + half_window + 1)
        smoothed[i] = np.mean(xy[start_idx:end_idx], axis=0)
    return smoothed


def smooth_points(points: List[Point], window_size: int = 3) -> List[Point]:
    """Smooth point coordinates, keeping each point's original frame tag."""
    if len(points) < 2:
        return list(points)
    smoothed = moving_average_xy(as_np_xy(points), window_size)
    logger.debug("Smoothed %d points with window=%d", len(points), window_size)
    return [Point(x=float(s[0]), y=float(s[1]), frame=p.frame) for s, p in zip(smoothed, points)]


def mean_delta(points: List[Point]) -> np.ndarray:
    """Per-axis mean of consecutive deltas; zero vector for fewer than 2 points."""
    if len(points) < 2:
        return np.zeros(2, dtype=np.float64)
    return np.mean(np.diff(as_np_xy(points), axis=0), axis=0)
