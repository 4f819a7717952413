from __future__ import annotations

from metadata_editor.buffer import EditHistory, HistoryMode


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms / 1000


def make_history(initial: str = "x") -> tuple[EditHistory, FakeClock]:
    clock = FakeClock()
    return EditHistory(initial, clock=clock), clock


def test_typing_burst_coalesces_into_one_checkpoint() -> None:
    history, clock = make_history("x")

    history.record("xy", HistoryMode.TYPING)
    clock.advance(100)
    history.record("xyz", HistoryMode.TYPING)

    assert history.entries == ("x", "xyz")
    assert history.index == 1


def test_typing_after_window_opens_new_checkpoint() -> None:
    history, clock = make_history("x")

    history.record("xy", "typing")
    clock.advance(500)
    history.record("xyz", "typing")

    assert history.entries == ("x", "xy", "xyz")


def test_typing_exactly_at_window_edge_still_merges() -> None:
    history, clock = make_history("x")

    history.record("xy", HistoryMode.TYPING)
    clock.advance(450)
    history.record("xyz", HistoryMode.TYPING)

    assert history.entries == ("x", "xyz")


def test_typing_just_past_window_edge_pushes() -> None:
    history, clock = make_history("x")

    history.record("xy", HistoryMode.TYPING)
    clock.advance(451)
    history.record("xyz", HistoryMode.TYPING)

    assert history.entries == ("x", "xy", "xyz")


def test_command_always_grows_stack_by_one() -> None:
    history, _ = make_history("")

    history.record("a", HistoryMode.COMMAND)
    history.record("ab", HistoryMode.COMMAND)

    assert history.entries == ("", "a", "ab")


def test_command_closes_open_typing_checkpoint() -> None:
    history, clock = make_history("x")

    history.record("xy", HistoryMode.TYPING)
    clock.advance(10)
    history.record("xy{}", HistoryMode.COMMAND)
    clock.advance(10)
    history.record("xy{a}", HistoryMode.TYPING)

    assert history.entries == ("x", "xy", "xy{}", "xy{a}")


def test_identical_snapshot_is_not_recorded() -> None:
    history, _ = make_history("x")

    step = history.record("x", HistoryMode.COMMAND)

    assert step.changed is False
    assert history.entries == ("x",)


def test_skip_mode_is_never_recorded() -> None:
    history, _ = make_history("x")

    step = history.record("q", HistoryMode.SKIP)

    assert step.changed is False
    assert history.entries == ("x",)


def test_new_edit_after_undo_discards_redo_branch() -> None:
    history, _ = make_history("")
    history.record("x", HistoryMode.COMMAND)
    history.record("y", HistoryMode.COMMAND)

    step = history.undo()
    history.record("z", HistoryMode.TYPING)

    assert step.text == "x"
    assert history.entries == ("", "x", "z")
    assert history.can_redo() is False
    assert history.redo().changed is False


def test_typing_after_undo_starts_fresh_checkpoint() -> None:
    history, clock = make_history("a")
    history.record("ab", HistoryMode.TYPING)
    clock.advance(50)

    history.undo()
    clock.advance(50)
    history.record("ac", HistoryMode.TYPING)

    assert history.entries == ("a", "ac")
    assert history.index == 1


def test_undo_redo_clamped_at_bounds() -> None:
    history, _ = make_history("a")

    undo_step = history.undo()
    redo_step = history.redo()

    assert undo_step.changed is False
    assert undo_step.text == "a"
    assert redo_step.changed is False
    assert history.index == 0


def test_undo_redo_caret_hint() -> None:
    history, _ = make_history("hello")
    history.record("hi", HistoryMode.COMMAND)

    undo_step = history.undo(caret=2)
    redo_step = history.redo(caret=4)

    assert (undo_step.text, undo_step.caret) == ("hello", 2)
    assert (redo_step.text, redo_step.caret) == ("hi", 2)
    assert history.undo().caret == len("hello")


def test_sync_reseeds_on_external_change() -> None:
    history, _ = make_history("x")
    history.record("xy", HistoryMode.COMMAND)

    assert history.sync("xy") is False
    assert history.sync("fresh") is True
    assert history.entries == ("fresh",)
    assert history.index == 0
    assert history.can_undo() is False


def test_erased_burst_collapses_into_previous_checkpoint() -> None:
    history, clock = make_history("x")
    history.record("xy", HistoryMode.TYPING)
    clock.advance(50)

    history.record("x", HistoryMode.TYPING)
    history.record("xa", HistoryMode.TYPING)

    assert history.entries == ("x", "xa")


def test_consecutive_entries_never_repeat() -> None:
    history, clock = make_history("")
    for text, mode in [
        ("a", HistoryMode.TYPING),
        ("a", HistoryMode.COMMAND),
        ("ab", HistoryMode.TYPING),
        ("a", HistoryMode.TYPING),
        ("a{}", HistoryMode.COMMAND),
    ]:
        history.record(text, mode)
        clock.advance(30)

    entries = history.entries
    assert all(left != right for left, right in zip(entries, entries[1:]))
