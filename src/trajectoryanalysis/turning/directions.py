"""
Compass-style labels for 2-D displacement vectors in image coordinates.

Image y grows downward, so a negative ``dy`` is reported as "up". Vectors are
snapped to the nearest of eight sectors 45 degrees apart.
"""

from __future__ import annotations

import math
from typing import Dict, Tuple

from trajectoryanalysis.motion.math import heading_deg_from_delta

MIN_MOVEMENT_PX = 0.1

# Counter-clockwise from "right" with y pointing up, followed by the static label.
_LABELS: Dict[str, Tuple[str, ...]] = {
    "en": (
        "right",
        "up-right",
        "up",
        "up-left",
        "left",
        "down-left",
        "down",
        "down-right",
        "static",
    ),
    "es": (
        "la derecha",
        "arriba a la derecha",
        "arriba",
        "arriba a la izquierda",
        "la izquierda",
        "abajo a la izquierda",
        "abajo",
        "abajo a la derecha",
        "sin movimiento significativo",
    ),
}


def available_label_sets() -> Tuple[str, ...]:
    return tuple(sorted(_LABELS.keys()))


def compass_sector(dx: float, dy: float) -> int:
    """Index 0..7 of the nearest compass sector, 0 being "right", 2 being "up"."""
    heading = heading_deg_from_delta(float(dx), -float(dy))
    return int(math.floor(heading / 45.0 + 0.5)) % 8


def direction_label(dx: float, dy: float, labels: str = "en", min_movement: float = MIN_MOVEMENT_PX) -> str:
    table = _LABELS.get(labels)
    if table is None:
        raise ValueError(f"Unknown direction label set: {labels}")
    if not (math.isfinite(dx) and math.isfinite(dy)) or math.hypot(dx, dy) < min_movement:
        return table[8]
    return table[compass_sector(dx, dy)]
