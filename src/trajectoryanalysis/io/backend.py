from __future__ import annotations

import json
import logging
import math
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from trajectoryanalysis.store.trajectories import TrajectoryStore, build_trajectories
from trajectoryanalysis.utils.types import VideoDimensions


logger = logging.getLogger("trajectoryanalysis.io.backend")

DEFAULT_BASE_URL = "http://localhost:8000"


@dataclass(frozen=True)
class BackendConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 5.0
    headers: Dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "BackendConfig":
        headers = d.get("headers", {}) or {}
        if not isinstance(headers, dict):
            raise ValueError("backend.headers must be a dict")
        timeout_s = float(d.get("timeout_s", 5.0))
        if timeout_s <= 0.0:
            raise ValueError(f"backend.timeout_s must be positive, got {timeout_s}")
        return BackendConfig(
            base_url=str(d.get("base_url", DEFAULT_BASE_URL)).rstrip("/"),
            timeout_s=timeout_s,
            headers={str(k): str(v) for k, v in headers.items()},
        )


class DetectionBackendClient:
    """Read-only client for the detection service's per-task endpoints.

    Transport and decoding failures are logged and reported as ``None`` so the
    caller can show an empty state instead of crashing.
    """

    def __init__(self, cfg: Optional[BackendConfig] = None) -> None:
        self._cfg = cfg or BackendConfig()

    def _url(self, task_id: str, resource: str) -> str:
        quoted = urllib.parse.quote(str(task_id), safe="")
        return f"{self._cfg.base_url.rstrip('/')}/videos/{quoted}/{resource}"

    def _get_json(self, url: str) -> Optional[Any]:
        req = urllib.request.Request(url, method="GET")
        req.add_header("Accept", "application/json")
        for k, v in self._cfg.headers.items():
            if k.lower() == "accept":
                continue
            req.add_header(str(k), str(v))
        try:
            with urllib.request.urlopen(req, timeout=float(self._cfg.timeout_s)) as resp:
                body = resp.read()
            return json.loads(body.decode("utf-8"))
        except Exception:
            logger.exception("GET %s failed", url)
            return None

    def fetch_detections(self, task_id: str) -> Optional[Any]:
        return self._get_json(self._url(task_id, "trajectories"))

    def fetch_video_dimensions(self, task_id: str) -> VideoDimensions:
        metrics = self._get_json(self._url(task_id, "metrics"))
        if not isinstance(metrics, dict):
            logger.info("No metrics for task %s, using default video dimensions", task_id)
            return VideoDimensions()
        return VideoDimensions.from_metrics(metrics)

    def load_store(self, task_id: str) -> TrajectoryStore:
        payload = self.fetch_detections(task_id)
        if payload is None:
            return TrajectoryStore()
        return build_trajectories(payload)

    def fetch_group_behavior(self, task_id: str) -> Optional["GroupBehaviorSummary"]:
        payload = self._get_json(self._url(task_id, "group_behavior"))
        if payload is None:
            return None
        summary = summarize_group_behavior(payload)
        if summary is None:
            logger.warning("Unexpected group behavior payload for task %s", task_id)
        return summary


@dataclass(frozen=True)
class GroupBehaviorSummary:
    """Group behavior events counted by type and by start frame."""

    total_events: int
    events_by_type: Dict[str, int]
    events_by_frame: Dict[int, int]


def summarize_group_behavior(payload: Any) -> Optional[GroupBehaviorSummary]:
    """Aggregate a ``group_behavior`` payload; None when it lacks events or types.

    Events without an integral ``start_frame`` are left out of the per-frame
    counts.
    """
    if not isinstance(payload, dict):
        return None
    events = payload.get("events")
    types = payload.get("behavior_types")
    if not isinstance(events, list) or not isinstance(types, dict):
        return None

    by_type: Dict[str, int] = {}
    for name, count in types.items():
        try:
            by_type[str(name)] = int(count)
        except (TypeError, ValueError):
            logger.debug("Skipping behavior type %r with count %r", name, count)

    by_frame: Dict[int, int] = {}
    for ev in events:
        frame = ev.get("start_frame") if isinstance(ev, dict) else None
        if isinstance(frame, bool) or not isinstance(frame, (int, float)):
            continue
        if not math.isfinite(frame) or float(frame) != int(frame):
            continue
        by_frame[int(frame)] = by_frame.get(int(frame), 0) + 1

    total = payload.get("total_events", len(events))
    try:
        total_events = int(total)
    except (TypeError, ValueError):
        total_events = len(events)
    return GroupBehaviorSummary(
        total_events=total_events,
        events_by_type=by_type,
        events_by_frame=dict(sorted(by_frame.items())),
    )
