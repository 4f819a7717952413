"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .state import Selection
from .sync import SelectionError


def ensure_selection(text: str, selection: Selection) -> Selection:
    if selection.start < 0 or selection.end > len(text):
        raise SelectionError("Selection out of range", selection=selection)
    if selection.start > selection.end:
        raise SelectionError("Selection start after end", selection=selection)
    return selection


def clamp_caret(text: str, position: int) -> int:
    return max(0, min(len(text), position))
