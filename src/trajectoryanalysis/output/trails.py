from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from trajectoryanalysis.motion.units import DEFAULT_FPS, frames_to_seconds, seconds_to_frames
from trajectoryanalysis.utils.types import Point, VideoDimensions, canonical_id

MIN_ZOOM = 0.1
MAX_ZOOM = 5.0
WHEEL_ZOOM_IN = 1.1
WHEEL_ZOOM_OUT = 0.9
STEP_ZOOM_IN = 1.2
STEP_ZOOM_OUT = 0.8


def scale_points(points: Sequence[Point], src: VideoDimensions, dst: VideoDimensions) -> List[Point]:
    sx = float(dst.width) / float(src.width)
    sy = float(dst.height) / float(src.height)
    return [Point(x=p.x * sx, y=p.y * sy, frame=p.frame) for p in points]


def visible_points(points: Sequence[Point], current_frame: int) -> List[Point]:
    """Points drawn at ``current_frame``; untagged points are always visible."""
    return [p for p in points if p.frame is None or p.frame <= current_frame]


def _clamp_zoom(scale: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, float(scale)))


@dataclass
class ViewTransform:
    """Zoom and pan of the trail canvas.

    A display point ``p`` is drawn at ``p * scale + (tx, ty)``. Wheel zoom keeps
    the point under the cursor fixed; ``scale`` stays within
    [``MIN_ZOOM``, ``MAX_ZOOM``].
    """

    scale: float = 1.0
    tx: float = 0.0
    ty: float = 0.0
    _drag_origin: Optional[Tuple[float, float]] = None

    def zoom_at(self, cx: float, cy: float, factor: float) -> float:
        new_scale = _clamp_zoom(self.scale * float(factor))
        applied = new_scale / self.scale
        self.tx = cx - (cx - self.tx) * applied
        self.ty = cy - (cy - self.ty) * applied
        self.scale = new_scale
        return self.scale

    def wheel(self, cx: float, cy: float, delta_y: float) -> float:
        """Scroll down zooms out, scroll up zooms in, anchored at the cursor."""
        return self.zoom_at(cx, cy, WHEEL_ZOOM_OUT if delta_y > 0 else WHEEL_ZOOM_IN)

    def zoom_in(self) -> float:
        self.scale = _clamp_zoom(self.scale * STEP_ZOOM_IN)
        return self.scale

    def zoom_out(self) -> float:
        self.scale = _clamp_zoom(self.scale * STEP_ZOOM_OUT)
        return self.scale

    def start_drag(self, x: float, y: float) -> None:
        self._drag_origin = (x - self.tx, y - self.ty)

    def drag_to(self, x: float, y: float) -> None:
        if self._drag_origin is None:
            return
        self.tx = x - self._drag_origin[0]
        self.ty = y - self._drag_origin[1]

    def end_drag(self) -> None:
        self._drag_origin = None

    @property
    def dragging(self) -> bool:
        return self._drag_origin is not None

    def reset(self) -> None:
        self.scale = 1.0
        self.tx = 0.0
        self.ty = 0.0
        self._drag_origin = None

    def apply(self, points: Sequence[Point]) -> List[Point]:
        return [Point(x=p.x * self.scale + self.tx, y=p.y * self.scale + self.ty, frame=p.frame) for p in points]


@dataclass
class TrailView:
    """Playback view over stored trajectories for a scrubber-driven display."""

    trajectories: Mapping[str, Sequence[Point]]
    total_frames: int
    video: VideoDimensions = VideoDimensions()
    display: VideoDimensions = VideoDimensions()
    fps: float = DEFAULT_FPS

    def duration_s(self) -> float:
        return frames_to_seconds(self.total_frames, self.fps)

    def clamp_frame(self, frame: int) -> int:
        return max(0, min(int(self.total_frames), int(frame)))

    def frame_at(self, seconds: float) -> int:
        return self.clamp_frame(seconds_to_frames(seconds, self.fps))

    def advance(self, current_frame: int, speed: int = 1) -> Tuple[int, bool]:
        """One playback tick: the next frame and whether playback keeps running.

        Playback stops once the last frame is reached.
        """
        if speed <= 0:
            raise ValueError(f"playback speed must be positive, got {speed}")
        if current_frame >= self.total_frames:
            return int(self.total_frames), False
        nxt = self.clamp_frame(int(current_frame) + int(speed))
        return nxt, nxt < self.total_frames

    def seek(self, current_frame: int, seconds: float) -> int:
        """Jump forward (positive) or backward (negative) by ``seconds``."""
        return self.clamp_frame(int(current_frame) + seconds_to_frames(seconds, self.fps))

    def trail(self, object_id: str, current_frame: int) -> List[Point]:
        key = canonical_id(object_id)
        points = self.trajectories.get(key, []) if key is not None else []
        return visible_points(scale_points(points, self.video, self.display), self.clamp_frame(current_frame))

    def trails(self, object_ids: Sequence[str], current_frame: int) -> Dict[str, List[Point]]:
        return {str(oid): self.trail(oid, current_frame) for oid in object_ids}
