"""Selection state for a flat text buffer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Selection:
    """Half-open ``[start, end)`` range of offsets into a buffer."""

    start: int
    end: int

    @classmethod
    def caret(cls, position: int) -> "Selection":
        return cls(position, position)

    @property
    def collapsed(self) -> bool:
        return self.start == self.end

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


def replace_range(text: str, selection: Selection, insertion: str) -> str:
    """Return ``text`` with the selected range replaced by ``insertion``."""

    return text[: selection.start] + insertion + text[selection.end :]


__all__ = ["Selection", "replace_range"]
