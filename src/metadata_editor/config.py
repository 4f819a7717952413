"""Field-level settings shared by the history, interceptor, and hosts."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from metadata_editor.runtime import telemetry

DEFAULT_INDENT_UNIT = "  "
DEFAULT_TYPING_WINDOW_MS = 450
DEFAULT_PLACEHOLDER = '{"author": "John Doe", "tags": ["important"]}'
DEFAULT_LABEL = "Metadata (Optional JSON)"
DEFAULT_HELPER_TEXT = "Describe tags, authors, etc. in JSON."

BRACKET_PAIRS: Mapping[str, str] = MappingProxyType(
    {
        "{": "}",
        "[": "]",
        '"': '"',
    }
)


def reverse_pairs(pairs: Mapping[str, str]) -> Mapping[str, str]:
    """Closing delimiter -> opening delimiter lookup for skip-over."""

    return MappingProxyType({closer: opener for opener, closer in pairs.items()})


def _env_int(name: str, fallback: int) -> int:
    value = telemetry.env(name)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass(frozen=True, slots=True)
class EditorSettings:
    """Knobs a host may tune per metadata field."""

    indent_unit: str = DEFAULT_INDENT_UNIT
    typing_window_ms: int = DEFAULT_TYPING_WINDOW_MS
    auto_pairs: Mapping[str, str] = field(default_factory=lambda: BRACKET_PAIRS)
    placeholder: str = DEFAULT_PLACEHOLDER
    label: str = DEFAULT_LABEL
    helper_text: str = DEFAULT_HELPER_TEXT

    def __post_init__(self) -> None:
        if not self.indent_unit:
            raise ValueError("indent_unit cannot be empty")
        if self.typing_window_ms < 0:
            raise ValueError("typing_window_ms must not be negative")
        for opener, closer in self.auto_pairs.items():
            if len(opener) != 1 or len(closer) != 1:
                raise ValueError(f"Pair {opener!r}/{closer!r} must be single characters")
        object.__setattr__(self, "auto_pairs", MappingProxyType(dict(self.auto_pairs)))

    @classmethod
    def from_env(cls) -> "EditorSettings":
        """Build settings from ``METADATA_EDITOR_*`` environment variables."""

        indent_width = _env_int("INDENT_WIDTH", len(DEFAULT_INDENT_UNIT))
        window = _env_int("TYPING_WINDOW_MS", DEFAULT_TYPING_WINDOW_MS)
        return cls(
            indent_unit=" " * max(indent_width, 1),
            typing_window_ms=max(window, 0),
        )

    def with_overrides(self, **changes: object) -> "EditorSettings":
        return replace(self, **changes)


__all__ = [
    "BRACKET_PAIRS",
    "DEFAULT_INDENT_UNIT",
    "DEFAULT_TYPING_WINDOW_MS",
    "EditorSettings",
    "reverse_pairs",
]
