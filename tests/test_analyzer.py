import pytest

from trajectoryanalysis.analysis.analyzer import AnalyzerConfig, TrajectoryAnalyzer, analyze_trajectories
from trajectoryanalysis.utils.types import Point


def _pts(coords, frames=None):
    if frames is None:
        frames = list(range(len(coords)))
    return [Point(float(x), float(y), f) for (x, y), f in zip(coords, frames)]


def _turn_path():
    return _pts([(0, 0), (10, 0), (10, 10), (20, 10)])


def _l_path():
    coords = [(i * 10.0, 0.0) for i in range(8)] + [(70.0, j * 10.0) for j in range(1, 8)]
    return _pts(coords)


class _ExplodingMapping(dict):
    def get(self, key, default=None):
        raise AssertionError("trajectories must not be read for an empty selection")


def test_empty_selection_returns_empty_list_without_reading_trajectories() -> None:
    assert analyze_trajectories(set(), _ExplodingMapping(), 45.0) == []
    assert analyze_trajectories([], {"1": _turn_path()}, 45.0) == []


def test_single_point_id_is_omitted() -> None:
    out = analyze_trajectories(["a", "b"], {"a": [Point(1.0, 1.0, 0)], "b": _turn_path()}, 10.0)
    assert [a.object_id for a in out] == ["b"]


def test_two_point_id_has_motion_but_no_direction_changes() -> None:
    out = analyze_trajectories(["a"], {"a": _pts([(0, 0), (3, 4)])}, 10.0)
    assert len(out) == 1
    assert out[0].direction_changes == []
    assert out[0].total_distance_px == 5.0
    assert abs(out[0].average_speed_px_per_frame - 5.0) < 1e-9


def test_distance_with_stationary_step() -> None:
    out = analyze_trajectories(["a"], {"a": _pts([(0, 0), (3, 4), (3, 4)])}, 45.0)
    a = out[0]
    assert a.total_distance_px == 5.0
    assert abs(a.average_speed_px_per_frame - 2.5) < 1e-9
    assert a.direction_changes == []


def test_duration_uses_configured_fps() -> None:
    pts = _pts([(0, 0), (5, 0), (10, 0)], frames=[30, 60, 90])
    a = analyze_trajectories(["a"], {"a": pts}, 45.0)[0]
    assert a.first_detection_frame == 30
    assert a.last_detection_frame == 90
    assert abs(a.duration_s - 2.0) < 1e-9

    a15 = analyze_trajectories(["a"], {"a": pts}, 45.0, cfg=AnalyzerConfig(frames_per_second=15.0))[0]
    assert abs(a15.duration_s - 4.0) < 1e-9


def test_missing_frames_default_to_zero_for_detection_span() -> None:
    pts = [Point(0.0, 0.0), Point(3.0, 4.0), Point(6.0, 8.0)]
    a = analyze_trajectories(["a"], {"a": pts}, 45.0)[0]
    assert a.first_detection_frame == 0
    assert a.last_detection_frame == 0
    assert a.duration_s == 0.0
    assert abs(a.average_speed_px_per_frame - 5.0) < 1e-9


def test_turn_scenario_detects_one_change() -> None:
    out = analyze_trajectories(["a"], {"a": _turn_path()}, 45.0)
    changes = out[0].direction_changes
    assert len(changes) == 1
    ev = changes[0]
    assert 1 <= ev.frame <= 2
    assert "right" in ev.from_direction and "down" not in ev.from_direction
    assert "down" in ev.to_direction


def test_default_config_reports_right_angle_corner_of_long_path() -> None:
    a = TrajectoryAnalyzer().analyze(["a"], {"a": _l_path()})[0]
    assert len(a.direction_changes) == 1
    ev = a.direction_changes[0]
    assert ev.frame == 7
    assert abs(ev.angle_deg - 90.0) < 1e-9
    assert ev.from_direction == "right"
    assert ev.to_direction == "down"


def test_collinear_points_after_turn_keep_the_change() -> None:
    short = analyze_trajectories(["a"], {"a": _turn_path()}, 45.0)[0]
    longer_pts = _turn_path() + _pts([(30, 10), (40, 10), (50, 10)], frames=[4, 5, 6])
    longer = analyze_trajectories(["a"], {"a": longer_pts}, 45.0)[0]
    assert [e.frame for e in short.direction_changes] == [1]
    assert [e.frame for e in longer.direction_changes] == [1]
    assert longer.direction_changes[0].angle_deg == short.direction_changes[0].angle_deg


def test_reverse_input_order_gives_identical_result() -> None:
    for strategy in ("segmented", "simple"):
        cfg = AnalyzerConfig(strategy=strategy)
        pts = _l_path()
        forward = analyze_trajectories(["a"], {"a": pts}, 30.0, cfg=cfg)
        backward = analyze_trajectories(["a"], {"a": list(reversed(pts))}, 30.0, cfg=cfg)
        assert forward == backward


def test_threshold_monotonicity() -> None:
    for strategy in ("segmented", "simple"):
        cfg = AnalyzerConfig(strategy=strategy)
        trajectories = {"a": _turn_path(), "b": _l_path()}
        low = analyze_trajectories(["a", "b"], trajectories, 45.0, cfg=cfg)
        high = analyze_trajectories(["a", "b"], trajectories, 100.0, cfg=cfg)
        for lo, hi in zip(low, high):
            assert len(hi.direction_changes) <= len(lo.direction_changes)


def test_duplicate_consecutive_points_do_not_register_a_turn() -> None:
    for strategy in ("segmented", "simple"):
        pts = _pts([(0, 0), (10, 0), (10, 0), (20, 0), (30, 0), (40, 0)])
        out = analyze_trajectories(["a"], {"a": pts}, 10.0, cfg=AnalyzerConfig(strategy=strategy))
        assert out[0].direction_changes == []


def test_malformed_points_are_dropped() -> None:
    pts = _pts([(0, 0), (3, 4)]) + [Point(float("nan"), 1.0, 2), "junk"]
    out = analyze_trajectories(["a"], {"a": pts}, 45.0)
    assert len(out) == 1
    assert out[0].total_distance_px == 5.0


def test_results_follow_selection_order_and_normalize_ids() -> None:
    trajectories = {"2": _turn_path(), "10": _turn_path(), "3": _turn_path()}
    out = analyze_trajectories([10, "3", 2.0, "missing", "3"], trajectories, 45.0)
    assert [a.object_id for a in out] == ["10", "3", "2"]


def test_inputs_are_not_mutated() -> None:
    pts = list(reversed(_l_path()))
    snapshot = list(pts)
    trajectories = {"a": pts}
    TrajectoryAnalyzer().analyze(["a"], trajectories, 30.0)
    assert trajectories["a"] == snapshot


def test_threshold_override_and_default() -> None:
    analyzer = TrajectoryAnalyzer(AnalyzerConfig(angle_threshold_deg=100.0, strategy="simple"))
    assert analyzer.analyze(["a"], {"a": _turn_path()})[0].direction_changes == []
    assert len(analyzer.analyze(["a"], {"a": _turn_path()}, 45.0)[0].direction_changes) == 2
    with pytest.raises(ValueError):
        analyzer.analyze(["a"], {"a": _turn_path()}, 0.0)


def test_to_dict_uses_report_keys() -> None:
    a = analyze_trajectories(["a"], {"a": _turn_path()}, 45.0)[0]
    d = a.to_dict()
    assert set(d.keys()) == {"id", "firstDetection", "lastDetection", "durationSeconds", "directionChanges", "totalDistance", "averageSpeed"}
    ev = d["directionChanges"][0]
    assert set(ev.keys()) == {"frame", "angle", "fromCoord", "toCoord", "fromDirection", "toDirection"}
    assert ev["fromCoord"] == {"x": 0.0, "y": 0.0}


def test_analyzer_config_from_dict_and_validation() -> None:
    cfg = AnalyzerConfig.from_dict(
        {
            "angle_threshold_deg": 60,
            "frames_per_second": 25,
            "strategy": "SIMPLE",
            "direction_labels": "es",
            "segmented": {"smoothing_window": 5, "min_segment_points": 7},
        }
    )
    assert cfg.angle_threshold_deg == 60.0
    assert cfg.frames_per_second == 25.0
    assert cfg.strategy == "simple"
    assert cfg.smoothing_window == 5
    assert cfg.min_segment_points == 7
    with pytest.raises(ValueError):
        AnalyzerConfig(strategy="hybrid")
    with pytest.raises(ValueError):
        AnalyzerConfig(frames_per_second=0.0)
    with pytest.raises(ValueError):
        AnalyzerConfig(angle_threshold_deg=-5.0)


def test_spanish_labels() -> None:
    cfg = AnalyzerConfig(direction_labels="es")
    ev = analyze_trajectories(["a"], {"a": _turn_path()}, 45.0, cfg=cfg)[0].direction_changes[0]
    assert ev.from_direction == "la derecha"
    assert ev.to_direction == "abajo a la derecha"
