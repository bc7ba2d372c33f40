from __future__ import annotations

DEFAULT_FPS = 30.0


def frames_to_seconds(frames: float, fps: float = DEFAULT_FPS) -> float:
    if fps <= 0.0:
        raise ValueError(f"fps must be positive, got {fps}")
    return float(frames) / float(fps)


def seconds_to_frames(seconds: float, fps: float = DEFAULT_FPS) -> int:
    if fps <= 0.0:
        raise ValueError(f"fps must be positive, got {fps}")
    return int(float(seconds) * float(fps))
