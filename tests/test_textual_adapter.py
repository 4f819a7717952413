from __future__ import annotations

from types import SimpleNamespace

import pytest

pytest.importorskip("textual")

from metadata_editor.adapters.textual.app import (  # noqa: E402
    _key_input,
    _parse_args,
    location_for_offset,
    offset_for_location,
)


def fake_key(key: str, character: str | None = None) -> SimpleNamespace:
    return SimpleNamespace(key=key, character=character)


def test_offsets_and_locations_agree() -> None:
    text = '{\n  "a": 1\n}'

    assert offset_for_location(text, (1, 2)) == 4
    assert location_for_offset(text, 4) == (1, 2)
    assert location_for_offset(text, len(text)) == (2, 1)
    assert offset_for_location(text, (9, 9)) == len(text)


def test_key_input_uses_printable_character() -> None:
    event_input = _key_input(fake_key("left_curly_bracket", "{"))

    assert event_input is not None
    assert event_input.stroke.token == "{"


def test_key_input_names_special_keys() -> None:
    event_input = _key_input(fake_key("tab", "\t"))

    assert event_input is not None
    assert event_input.stroke.token == "tab"


def test_key_input_leaves_command_chords_to_bindings() -> None:
    assert _key_input(fake_key("ctrl+z")) is None
    assert _key_input(fake_key("alt+left_curly_bracket", "{")) is None


def test_parse_args_defaults_to_quiet_logging() -> None:
    args = _parse_args(["--value", "{}"])

    assert args.value == "{}"
    assert args.log_preset == "quiet"
