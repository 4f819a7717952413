"""Buffer selection state and undo/redo history."""

from .history import EditHistory, HistoryMode, HistoryStep
from .state import Selection, replace_range
from .sync import BufferMirror, SelectionError
from .validation import clamp_caret, ensure_selection

__all__ = [
    "BufferMirror",
    "EditHistory",
    "HistoryMode",
    "HistoryStep",
    "Selection",
    "SelectionError",
    "clamp_caret",
    "ensure_selection",
    "replace_range",
]
