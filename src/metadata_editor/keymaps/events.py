"""Key events in, editing decisions out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from metadata_editor.buffer import EditHistory, HistoryMode, Selection
from metadata_editor.config import EditorSettings

from .models import KeyStroke


@dataclass(frozen=True, slots=True)
class KeyInput:
    """Normalized key event reported by a host surface."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @property
    def stroke(self) -> KeyStroke:
        return KeyStroke(self.key, self.modifiers)


@dataclass(frozen=True, slots=True)
class KeyContext:
    """Everything an action may look at while handling one keystroke."""

    event: KeyInput
    stroke: KeyStroke
    text: str
    selection: Selection
    history: EditHistory
    settings: EditorSettings

    @property
    def preceding_char(self) -> str:
        start = self.selection.start
        return self.text[start - 1] if start > 0 else ""

    @property
    def char_at_caret(self) -> str:
        return self.text[self.selection.start : self.selection.start + 1]


@dataclass(frozen=True, slots=True)
class KeyDecision:
    """Whether the host must suppress default handling, and what to do instead.

    ``text`` and ``selection`` describe the buffer after the keystroke.
    ``history_mode`` tells the host how to record the change; ``None`` means
    nothing needs recording.
    """

    handled: bool
    text: Optional[str] = None
    selection: Optional[Selection] = None
    history_mode: Optional[HistoryMode] = None
    action: Optional[str] = None

    @classmethod
    def unhandled(cls) -> "KeyDecision":
        return cls(handled=False)


__all__ = ["KeyContext", "KeyDecision", "KeyInput"]
