import math

import numpy as np
import pytest

from trajectoryanalysis.motion.math import angle_between_deg, distance_px, heading_deg_from_delta, speed_px_per_frame
from trajectoryanalysis.motion.smoothing import mean_delta, moving_average_xy, smooth_points
from trajectoryanalysis.motion.stats import sort_points, summarize_motion
from trajectoryanalysis.motion.units import frames_to_seconds, seconds_to_frames
from trajectoryanalysis.utils.types import Point


def test_speed_px_per_frame_basic() -> None:
    v = speed_px_per_frame((0.0, 0.0), 0, (3.0, 4.0), 2)
    assert v is not None
    assert abs(v - 2.5) < 1e-9


def test_speed_px_per_frame_requires_positive_delta() -> None:
    assert speed_px_per_frame((0.0, 0.0), 3, (3.0, 4.0), 3) is None


def test_heading_deg_quadrants() -> None:
    assert heading_deg_from_delta(1.0, 0.0) == 0.0
    assert heading_deg_from_delta(0.0, 1.0) == 90.0
    assert heading_deg_from_delta(-1.0, 0.0) == 180.0
    assert heading_deg_from_delta(0.0, -1.0) == 270.0


def test_angle_between_deg() -> None:
    assert abs(angle_between_deg(1.0, 0.0, 0.0, 1.0) - 90.0) < 1e-9
    assert abs(angle_between_deg(1.0, 0.0, -2.0, 0.0) - 180.0) < 1e-9


def test_angle_between_deg_guards_short_vectors() -> None:
    assert angle_between_deg(0.0, 0.0, 1.0, 0.0) is None
    assert angle_between_deg(0.05, 0.0, 1.0, 0.0, min_norm=0.1) is None
    assert angle_between_deg(0.2, 0.0, 1.0, 0.0, min_norm=0.1) == 0.0


def test_distance_px() -> None:
    assert distance_px((0.0, 0.0), (3.0, 4.0)) == 5.0


def test_units_round_trip_default_fps() -> None:
    assert frames_to_seconds(60) == 2.0
    assert seconds_to_frames(2.0) == 60
    assert frames_to_seconds(50, fps=25.0) == 2.0
    with pytest.raises(ValueError):
        frames_to_seconds(10, fps=0.0)


def test_moving_average_clamps_at_boundaries() -> None:
    xy = np.array([[0.0, 0.0], [3.0, 0.0], [6.0, 3.0], [9.0, 3.0]])
    out = moving_average_xy(xy, 3)
    assert np.allclose(out[0], [1.5, 0.0])
    assert np.allclose(out[1], [3.0, 1.0])
    assert np.allclose(out[2], [6.0, 2.0])
    assert np.allclose(out[3], [7.5, 3.0])


def test_smooth_points_preserves_frames() -> None:
    pts = [Point(0.0, 0.0, 10), Point(3.0, 0.0, 11), Point(6.0, 0.0, None)]
    out = smooth_points(pts, 3)
    assert [p.frame for p in out] == [10, 11, None]
    assert abs(out[1].x - 3.0) < 1e-9


def test_mean_delta() -> None:
    pts = [Point(0.0, 0.0), Point(10.0, 0.0), Point(10.0, 10.0)]
    assert np.allclose(mean_delta(pts), [5.0, 5.0])
    assert np.allclose(mean_delta(pts[:1]), [0.0, 0.0])


def test_sort_points_by_frame_with_missing_frames_at_input_position() -> None:
    pts = [Point(0.0, 0.0, 5), Point(1.0, 0.0, None), Point(2.0, 0.0, 0)]
    out = sort_points(pts)
    assert [p.x for p in out] == [2.0, 1.0, 0.0]


def test_summarize_motion_distance_and_speed() -> None:
    pts = [Point(0.0, 0.0, 0), Point(3.0, 4.0, 1), Point(3.0, 4.0, 2)]
    m = summarize_motion(pts, fps=30.0)
    assert m.total_distance_px == 5.0
    assert abs(m.average_speed_px_per_frame - 2.5) < 1e-9


def test_summarize_motion_zero_frame_delta_adds_no_sample() -> None:
    pts = [Point(0.0, 0.0, 4), Point(3.0, 4.0, 4)]
    m = summarize_motion(pts, fps=30.0)
    assert m.total_distance_px == 5.0
    assert m.average_speed_px_per_frame == 0.0


def test_summarize_motion_duration() -> None:
    pts = [Point(0.0, 0.0, 30), Point(1.0, 0.0, 90)]
    m = summarize_motion(pts, fps=30.0)
    assert m.first_frame == 30
    assert m.last_frame == 90
    assert math.isclose(m.duration_s, 2.0)
