"""Quote- and escape-aware character scanning shared by the repair passes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, NamedTuple


@dataclass(slots=True)
class QuoteState:
    """The three bits of state every repair scan carries."""

    in_double: bool = False
    in_single: bool = False
    escaped: bool = False

    @property
    def quoted(self) -> bool:
        return self.in_double or self.in_single

    def feed(self, char: str) -> bool:
        """Advance past ``char``; return ``True`` if it is structural.

        A structural character sits outside any quoted span and is neither a
        quote delimiter nor part of an escape sequence.
        """

        if self.escaped:
            self.escaped = False
            return False
        if char == "\\":
            self.escaped = True
            return False
        if char == '"' and not self.in_single:
            self.in_double = not self.in_double
            return False
        if char == "'" and not self.in_double:
            self.in_single = not self.in_single
            return False
        return not self.quoted


class ScannedChar(NamedTuple):
    index: int
    char: str
    structural: bool


def scan(value: str) -> Iterator[ScannedChar]:
    """Yield every character of ``value`` tagged with its structural flag."""

    state = QuoteState()
    for index, char in enumerate(value):
        yield ScannedChar(index, char, state.feed(char))


def double_quoted_offsets(value: str) -> frozenset[int]:
    """Offsets of characters that sit inside (or delimit) a double-quoted span."""

    offsets: set[int] = set()
    state = QuoteState()
    for index, char in enumerate(value):
        was_inside = state.in_double
        state.feed(char)
        if was_inside or state.in_double:
            offsets.add(index)
    return frozenset(offsets)


def next_significant(
    value: str, start: int, *, horizontal_only: bool = False, skip: str = ""
) -> str:
    """Return the first non-whitespace character at or after ``start``.

    With ``horizontal_only`` line breaks are not skipped and are returned
    as-is. Characters in ``skip`` are stepped over like whitespace. An empty
    string means end of input.
    """

    for char in value[start:]:
        if char in skip:
            continue
        if not char.isspace():
            return char
        if horizontal_only and char in "\r\n":
            return char
    return ""


__all__ = [
    "QuoteState",
    "ScannedChar",
    "double_quoted_offsets",
    "next_significant",
    "scan",
]
