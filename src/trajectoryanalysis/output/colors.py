from __future__ import annotations

from typing import Any, Sequence

from trajectoryanalysis.utils.types import canonical_id

DEFAULT_PALETTE = (
    "#4e79a7",
    "#f28e2b",
    "#e15759",
    "#76b7b2",
    "#59a14f",
    "#edc948",
    "#b07aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ac",
)

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def fnv1a_32(data: bytes) -> int:
    h = _FNV32_OFFSET
    for b in data:
        h ^= b
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


def color_for_id(object_id: Any, palette: Sequence[str] = DEFAULT_PALETTE) -> str:
    """Stable palette entry for an object id; the same id maps to the same color across runs."""
    if not palette:
        raise ValueError("palette must not be empty")
    key = canonical_id(object_id)
    if key is None:
        key = str(object_id)
    return palette[fnv1a_32(key.encode("utf-8")) % len(palette)]
