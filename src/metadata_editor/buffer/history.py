"""Linear undo/redo over buffer snapshots with coalesced typing."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from metadata_editor.config import DEFAULT_TYPING_WINDOW_MS
from metadata_editor.runtime import telemetry

from .validation import clamp_caret

Clock = Callable[[], float]


class HistoryMode(str, Enum):
    TYPING = "typing"
    COMMAND = "command"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class HistoryStep:
    """Buffer the host should show after a history call, plus a caret hint."""

    text: str
    caret: int
    changed: bool


class EditHistory:
    """Snapshot stack owned by a single metadata field.

    ``stack`` always holds at least the value seen at mount. Typing edits
    that land within ``window_ms`` of the checkpoint they opened overwrite
    that checkpoint; commands and undo/redo close the open checkpoint so the
    next typing edit starts a fresh one.
    """

    def __init__(
        self,
        initial: str = "",
        *,
        window_ms: int = DEFAULT_TYPING_WINDOW_MS,
        clock: Optional[Clock] = None,
    ) -> None:
        self._clock: Clock = clock or time.monotonic
        self._window_ms = window_ms
        self._stack: List[str] = [initial]
        self._index = 0
        self._last_typing_snapshot: Optional[float] = None
        self.logger = telemetry.get_logger("metadata_editor.history")

    @property
    def current(self) -> str:
        return self._stack[self._index]

    @property
    def index(self) -> int:
        return self._index

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._stack)

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._stack) - 1

    def record(
        self,
        text: str,
        mode: HistoryMode | str = HistoryMode.TYPING,
        *,
        caret: Optional[int] = None,
    ) -> HistoryStep:
        mode = HistoryMode(mode)
        position = clamp_caret(text, len(text) if caret is None else caret)
        if mode is HistoryMode.SKIP or text == self.current:
            return HistoryStep(text=text, caret=position, changed=False)

        if self.can_redo():
            del self._stack[self._index + 1 :]

        now = self._clock()
        if mode is HistoryMode.TYPING and self._typing_checkpoint_open(now):
            if self._index > 0 and self._stack[self._index - 1] == text:
                # The burst was typed and then erased; neighbours may not repeat.
                self._stack.pop()
                self._index -= 1
                self._last_typing_snapshot = None
                action = "collapse"
            else:
                self._stack[self._index] = text
                action = "merge"
        else:
            self._stack.append(text)
            self._index = len(self._stack) - 1
            self._last_typing_snapshot = now if mode is HistoryMode.TYPING else None
            action = "push"

        telemetry.record_event(
            f"history.{action}",
            data={"mode": mode.value, "index": self._index, "size": len(self._stack)},
        )
        return HistoryStep(text=text, caret=position, changed=True)

    def undo(self, caret: Optional[int] = None) -> HistoryStep:
        return self._step(-1, caret)

    def redo(self, caret: Optional[int] = None) -> HistoryStep:
        return self._step(1, caret)

    def sync(self, external: str) -> bool:
        """Reseed the stack when the owner replaced the value behind our back."""

        if external == self.current:
            return False
        self._stack = [external]
        self._index = 0
        self._last_typing_snapshot = None
        telemetry.record_event("history.reset", data={"length": len(external)})
        return True

    def _step(self, direction: int, caret: Optional[int]) -> HistoryStep:
        target = self._index + direction
        if target < 0 or target >= len(self._stack):
            text = self.current
            position = len(text) if caret is None else caret
            return HistoryStep(text=text, caret=clamp_caret(text, position), changed=False)

        self._index = target
        self._last_typing_snapshot = None
        text = self.current
        position = len(text) if caret is None else caret
        telemetry.record_event(
            "history.undo" if direction < 0 else "history.redo",
            data={"index": self._index, "size": len(self._stack)},
        )
        return HistoryStep(text=text, caret=clamp_caret(text, position), changed=True)

    def _typing_checkpoint_open(self, now: float) -> bool:
        if self._last_typing_snapshot is None:
            return False
        # Compared in whole milliseconds; the window edge is inclusive.
        elapsed_ms = round((now - self._last_typing_snapshot) * 1000)
        return elapsed_ms <= self._window_ms


__all__ = ["EditHistory", "HistoryMode", "HistoryStep"]
