from __future__ import annotations

from typing import List

from metadata_editor.buffer import Selection
from metadata_editor.field import (
    EMPTY_FORMAT_MESSAGE,
    FORMAT_FAILED_MESSAGE,
    FieldHooks,
    MetadataField,
)
from metadata_editor.keymaps import KeyInput
from metadata_editor.status import MetadataStatus


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms / 1000


class Recorder:
    def __init__(self) -> None:
        self.buffers: List[str] = []
        self.statuses: List[MetadataStatus] = []
        self.notices: List[tuple[str, str]] = []
        self.logs: List[str] = []

    def hooks(self) -> FieldHooks:
        return FieldHooks(
            update_buffer=lambda mirror: self.buffers.append(mirror.text),
            update_status=self.statuses.append,
            notify=lambda level, message: self.notices.append((level, message)),
            log=self.logs.append,
        )


def make_field(value: str = "") -> tuple[MetadataField, Recorder, FakeClock]:
    recorder = Recorder()
    clock = FakeClock()
    field = MetadataField(value, hooks=recorder.hooks(), clock=clock)
    return field, recorder, clock


def test_field_publishes_initial_state() -> None:
    _, recorder, _ = make_field('{"a": 1}')

    assert recorder.buffers == ['{"a": 1}']
    assert recorder.statuses == [MetadataStatus.VALID]


def test_input_updates_status_and_coalesces_typing() -> None:
    field, recorder, clock = make_field()

    field.handle_input("{")
    clock.advance(100)
    field.handle_input('{"a": 1}')

    assert field.status is MetadataStatus.VALID
    assert recorder.statuses[-1] is MetadataStatus.VALID
    assert field.history.entries == ("", '{"a": 1}')


def test_key_auto_pair_records_command_checkpoint() -> None:
    field, recorder, _ = make_field("ab")

    decision = field.handle_key(KeyInput("{"), Selection.caret(1))

    assert decision.handled is True
    assert field.value == "a{}b"
    assert field.selection == Selection.caret(2)
    assert field.history.entries == ("ab", "a{}b")
    assert recorder.buffers[-1] == "a{}b"


def test_key_skip_over_moves_caret_without_history() -> None:
    field, _, _ = make_field("a}b")

    field.handle_key(KeyInput("}"), Selection.caret(1))

    assert field.value == "a}b"
    assert field.selection == Selection.caret(2)
    assert field.history.entries == ("a}b",)


def test_key_undo_restores_previous_checkpoint() -> None:
    field, _, _ = make_field("x")
    field.handle_key(KeyInput("tab"), Selection.caret(1))

    field.handle_key(KeyInput("z", ("ctrl",)), Selection.caret(3))

    assert field.value == "x"
    assert field.selection == Selection.caret(1)
    assert field.history.entries == ("x", "x  ")
    assert field.history.can_redo() is True


def test_unhandled_key_leaves_buffer_to_host() -> None:
    field, recorder, _ = make_field("ab")
    published = len(recorder.buffers)

    decision = field.handle_key(KeyInput("c"), Selection.caret(2))

    assert decision.handled is False
    assert field.value == "ab"
    assert len(recorder.buffers) == published


def test_format_empty_buffer_notifies() -> None:
    field, recorder, _ = make_field("  ")

    assert field.format() is False
    assert recorder.notices == [("info", EMPTY_FORMAT_MESSAGE)]


def test_format_repairs_and_records_command() -> None:
    field, _, _ = make_field("{a: 1,}")

    assert field.format() is True
    assert field.value == '{\n  "a": 1\n}'
    assert field.status is MetadataStatus.VALID
    assert field.history.entries == ("{a: 1,}", '{\n  "a": 1\n}')


def test_format_failure_forces_invalid() -> None:
    field, recorder, _ = make_field("not json at all")

    assert field.format() is False
    assert recorder.notices == [("error", FORMAT_FAILED_MESSAGE)]
    assert recorder.statuses[-1] is MetadataStatus.INVALID
    assert field.value == "not json at all"


def test_blur_formats_only_invalid_repairable_input() -> None:
    valid, valid_recorder, _ = make_field('{"a":1}')
    broken, _, _ = make_field("{a: 'x'")
    hopeless, hopeless_recorder, _ = make_field("nope")

    valid.blur()
    broken.blur()
    hopeless.blur()

    assert valid.value == '{"a":1}'
    assert len(valid_recorder.buffers) == 1
    assert broken.value == '{\n  "a": "x"\n}'
    assert hopeless.value == "nope"
    assert hopeless_recorder.notices == []


def test_set_value_resets_history() -> None:
    field, recorder, _ = make_field("x")
    field.handle_key(KeyInput("["), Selection.caret(1))

    field.set_value("")

    assert field.history.entries == ("",)
    assert field.status is MetadataStatus.IDLE
    assert recorder.statuses[-1] is MetadataStatus.IDLE


def test_field_emits_log_lines() -> None:
    field, recorder, _ = make_field()

    field.handle_key(KeyInput("{"), Selection.caret(0))

    assert any(line.startswith("key ->") for line in recorder.logs)
    assert any("handled=True" in line for line in recorder.logs)
