"""Individual repair passes.

Each pass is a plain ``str -> str`` function that fixes one class of
hand-typed mistake. Passes are local on purpose: none of them tokenizes the
document, they only track whether the current character is quoted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .scanner import QuoteState, double_quoted_offsets, next_significant, scan

KEY_PATTERN = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_-]*)\s*:")
KEY_LINE_PATTERN = re.compile(r"^(\s*)([A-Za-z_][A-Za-z0-9_-]*)\s*:", re.MULTILINE)

# Opening delimiter -> closing delimiter for spans rewritten into JSON strings.
FOREIGN_QUOTES = {
    "'": "'",
    "‘": "’",
    "“": "”",
}

_TERMINATOR_FOLLOWERS = frozenset({"", "\n", "\r", "}", "]"})
_CLOSERS = {"{": "}", "[": "]"}


@dataclass(frozen=True, slots=True)
class RepairPass:
    """Named string-to-string repair step."""

    name: str
    apply: Callable[[str], str]
    description: str = ""

    def __call__(self, value: str) -> str:
        return self.apply(value)


def _as_json_string(content: str) -> str:
    return f'"{content}"'


def normalize_quotes(value: str) -> str:
    """Rewrite single-quoted (and typographic) spans as JSON strings."""

    result: list[str] = []
    span: list[str] = []
    closer: str | None = None
    in_double = False
    escaped = False

    for char in value:
        if closer is not None:
            if escaped:
                escaped = False
                if char == "'":
                    span.append("'")
                else:
                    span.append(f"\\{char}")
                continue
            if char == "\\":
                escaped = True
                continue
            if char == closer:
                result.append(_as_json_string("".join(span)))
                span = []
                closer = None
                continue
            span.append('\\"' if char == '"' else char)
            continue

        if escaped:
            result.append(char)
            escaped = False
            continue
        if char == "\\":
            result.append(char)
            escaped = True
            continue
        if char == '"':
            in_double = not in_double
            result.append(char)
            continue
        if not in_double and char in FOREIGN_QUOTES:
            closer = FOREIGN_QUOTES[char]
            continue
        result.append(char)

    if closer is not None:
        result.append(_as_json_string("".join(span)))

    return "".join(result)


def quote_bare_keys(value: str) -> str:
    """Wrap identifier-shaped object keys in double quotes."""

    def rewrite(pattern: re.Pattern[str], text: str) -> str:
        quoted = double_quoted_offsets(text)

        def _replace(match: re.Match[str]) -> str:
            if match.start(2) in quoted:
                return match.group(0)
            return f'{match.group(1)}"{match.group(2)}":'

        return pattern.sub(_replace, text)

    return rewrite(KEY_LINE_PATTERN, rewrite(KEY_PATTERN, value))


def strip_loose_semicolons(value: str) -> str:
    """Drop statement-terminator semicolons left at the end of a line or block.

    A run of separators counts as one, so ``1;;}`` loses both semicolons.
    """

    result: list[str] = []
    for index, char, structural in scan(value):
        if structural and char == ";":
            follower = next_significant(
                value, index + 1, horizontal_only=True, skip=";,"
            )
            if follower in _TERMINATOR_FOLLOWERS:
                continue
        result.append(char)
    return "".join(result)


def remove_trailing_commas(value: str) -> str:
    """Drop commas, runs included, that precede a closing brace or bracket."""

    result: list[str] = []
    for index, char, structural in scan(value):
        if structural and char == ",":
            if next_significant(value, index + 1, skip=",") in {"}", "]"}:
                continue
        result.append(char)
    return "".join(result)


def auto_close_structures(value: str) -> str:
    """Append closers for every ``{`` / ``[`` left open, innermost first."""

    stack: list[str] = []
    state = QuoteState()
    for char in value:
        if not state.feed(char):
            continue
        if char in _CLOSERS:
            stack.append(char)
        elif char in {"}", "]"} and stack and _CLOSERS[stack[-1]] == char:
            stack.pop()
    return value + "".join(_CLOSERS[opener] for opener in reversed(stack))


DEFAULT_PASSES: tuple[RepairPass, ...] = (
    RepairPass(
        name="normalize_quotes",
        apply=normalize_quotes,
        description="Convert single and typographic quotes to double quotes",
    ),
    RepairPass(
        name="quote_bare_keys",
        apply=quote_bare_keys,
        description="Quote unquoted object keys",
    ),
    RepairPass(
        name="strip_loose_semicolons",
        apply=strip_loose_semicolons,
        description="Remove trailing statement semicolons",
    ),
    RepairPass(
        name="remove_trailing_commas",
        apply=remove_trailing_commas,
        description="Remove commas before a closing brace or bracket",
    ),
    RepairPass(
        name="auto_close_structures",
        apply=auto_close_structures,
        description="Close unbalanced braces and brackets",
    ),
)


__all__ = [
    "DEFAULT_PASSES",
    "RepairPass",
    "auto_close_structures",
    "normalize_quotes",
    "quote_bare_keys",
    "remove_trailing_commas",
    "strip_loose_semicolons",
]
