from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from trajectoryanalysis.utils.config import resolve_path
from trajectoryanalysis.utils.types import DirectionChangeEvent, TrajectoryAnalysis


def _ensure_parent(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


CSV_FIELDS = [
    "id",
    "first_detection_frame",
    "last_detection_frame",
    "duration_s",
    "total_distance_px",
    "average_speed_px_per_frame",
    "direction_change_count",
    "change_frame",
    "change_angle_deg",
    "from_x",
    "from_y",
    "to_x",
    "to_y",
    "from_direction",
    "to_direction",
]


def _summary_row(a: TrajectoryAnalysis) -> Dict[str, Any]:
    row: Dict[str, Any] = {k: "" for k in CSV_FIELDS}
    row.update(
        {
            "id": a.object_id,
            "first_detection_frame": a.first_detection_frame,
            "last_detection_frame": a.last_detection_frame,
            "duration_s": a.duration_s,
            "total_distance_px": a.total_distance_px,
            "average_speed_px_per_frame": a.average_speed_px_per_frame,
            "direction_change_count": len(a.direction_changes),
        }
    )
    return row


def _change_row(a: TrajectoryAnalysis, ev: DirectionChangeEvent) -> Dict[str, Any]:
    row = _summary_row(a)
    row.update(
        {
            "change_frame": ev.frame,
            "change_angle_deg": ev.angle_deg,
            "from_x": ev.from_coord.x,
            "from_y": ev.from_coord.y,
            "to_x": ev.to_coord.x,
            "to_y": ev.to_coord.y,
            "from_direction": ev.from_direction,
            "to_direction": ev.to_direction,
        }
    )
    return row


@dataclass
class AnalysisCsvSink:
    """One summary row per object followed by one row per direction change."""

    path: str
    _f: Optional[object] = None
    _w: Optional[csv.DictWriter] = None

    def open(self) -> None:
        _ensure_parent(self.path)
        self._f = open(self.path, "w", newline="", encoding="utf-8")
        self._w = csv.DictWriter(self._f, fieldnames=CSV_FIELDS)
        self._w.writeheader()

    def write(self, a: TrajectoryAnalysis) -> None:
        if self._w is None:
            raise RuntimeError("AnalysisCsvSink not opened")
        self._w.writerow(_summary_row(a))
        for ev in a.direction_changes:
            self._w.writerow(_change_row(a, ev))

    def close(self) -> None:
        if self._f is not None:
            self._f.close()
        self._f = None
        self._w = None


@dataclass
class AnalysisJsonlSink:
    path: str
    _f: Optional[object] = None

    def open(self) -> None:
        _ensure_parent(self.path)
        self._f = open(self.path, "w", encoding="utf-8")

    def write(self, a: TrajectoryAnalysis) -> None:
        if self._f is None:
            raise RuntimeError("AnalysisJsonlSink not opened")
        self._f.write(json.dumps(a.to_dict(), ensure_ascii=False) + "\n")

    def close(self) -> None:
        if self._f is not None:
            self._f.close()
        self._f = None


def _enabled_path(d: Dict[str, Any], key: str, base_dir: Optional[str]) -> Optional[str]:
    """Resolved output path of an enabled sink, None when the sink is disabled."""
    cfg = d.get(key, {}) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"output.{key} must be a mapping")
    if not bool(cfg.get("enabled", False)):
        return None
    path = cfg.get("path")
    if path is None or not str(path).strip():
        raise ValueError(f"output.{key}.path is required when output.{key}.enabled is true")
    return resolve_path(str(path), base_dir)


@dataclass
class ReportSinks:
    csv: Optional[AnalysisCsvSink]
    jsonl: Optional[AnalysisJsonlSink]

    @staticmethod
    def from_dict(d: Dict[str, Any], base_dir: Optional[str] = None) -> "ReportSinks":
        csv_path = _enabled_path(d, "csv", base_dir)
        jsonl_path = _enabled_path(d, "jsonl", base_dir)
        return ReportSinks(
            csv=AnalysisCsvSink(csv_path) if csv_path is not None else None,
            jsonl=AnalysisJsonlSink(jsonl_path) if jsonl_path is not None else None,
        )

    def open(self) -> None:
        if self.csv is not None:
            self.csv.open()
        if self.jsonl is not None:
            self.jsonl.open()

    def write(self, a: TrajectoryAnalysis) -> None:
        if self.csv is not None:
            self.csv.write(a)
        if self.jsonl is not None:
            self.jsonl.write(a)

    def write_all(self, analyses: Iterable[TrajectoryAnalysis]) -> int:
        n = 0
        for a in analyses:
            self.write(a)
            n += 1
        return n

    def close(self) -> None:
        if self.csv is not None:
            self.csv.close()
        if self.jsonl is not None:
            self.jsonl.close()
