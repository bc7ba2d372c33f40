from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def load_detections_json(path: str) -> Any:
    """Read a detections payload saved from the backend.

    A missing or unreadable file raises; the payload shape is checked later by
    the trajectory store.
    """
    with open(Path(path), "r", encoding="utf-8") as f:
        return json.load(f)
