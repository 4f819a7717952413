"""Boundary types exchanged between the editor core and host widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .state import Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing what the field should render."""

    text: str
    selection: Optional[Selection]
    status: str


class SelectionError(RuntimeError):
    """Raised when a host reports a selection that does not fit the buffer."""

    def __init__(self, message: str, *, selection: Selection | None = None) -> None:
        super().__init__(message)
        self.selection = selection


__all__ = ["BufferMirror", "SelectionError"]
