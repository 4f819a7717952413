import pytest

from metadata_editor.keymaps import (
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    KeyStroke,
    WhenClause,
)
from metadata_editor.keymaps.defaults import load_default_keymaps, pair_bindings


def make_action(action_id: str = "edit.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    stroke: str = "ctrl+g",
    action_id: str = "edit.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(stroke),
        action_id=action_id,
        when=when,
    )


def test_keystroke_normalizes_modifiers_and_case() -> None:
    assert KeyStroke.parse("shift+ctrl+Z").token == "ctrl+shift+z"
    assert KeyStroke("{", ("shift",)).token == "{"
    assert KeyStroke("Tab").token == "tab"
    assert KeyStroke.parse("ctrl++").key == "+"
    assert KeyStroke.parse("+").key == "+"


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="edit.g")

    registry.register_binding(binding)

    assert list(registry.iter_bindings()) == [binding]
    assert list(registry.iter_bindings("ctrl+g")) == [binding]


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="edit.g"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="edit.g.duplicate"))


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="default"))
    registry.register_binding(
        make_binding(binding_id="selected", when=(WhenClause("has_selection"),))
    )
    registry.register_binding(
        make_binding(
            binding_id="collapsed", when=(WhenClause.parse("!has_selection"),)
        )
    )

    assert len(list(registry.iter_bindings("ctrl+g"))) == 3


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_load_default_keymaps_registers_without_conflicts() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    assert len(list(registry.iter_bindings())) == 12
    assert len(list(registry.iter_bindings('"'))) == 2
    assert [b.id for b in registry.iter_bindings("ctrl+shift+z")] == [
        "history.redo.ctrl_shift"
    ]
    assert registry.get_binding("pair.skip.quote").priority > 0


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, include_bindings=("edit.indent.tab",))

    assert [b.id for b in registry.iter_bindings()] == ["edit.indent.tab"]
    assert registry.get_binding("edit.indent.tab").action_id == "edit.indent"


def test_load_default_keymaps_extra_bindings() -> None:
    registry = KeymapRegistry()
    extra = Binding(
        id="history.undo.alt",
        stroke=KeyStroke.parse("alt+backspace"),
        action_id="history.undo",
    )

    load_default_keymaps(registry, extra_bindings=(extra,))

    assert registry.get_binding("history.undo.alt").key_signature == "alt+backspace"


def test_pair_bindings_guard_only_symmetric_pairs() -> None:
    bindings = {binding.id: binding for binding in pair_bindings({"(": ")", "'": "'"})}

    assert bindings["pair.open.u0028"].when == ()
    assert "escaped" in bindings["pair.open.u0027"].when_map
    assert bindings["pair.skip.u0029"].when_map["closer_at_caret"] is True


def test_pair_bindings_share_one_skip_per_closer() -> None:
    bindings = pair_bindings({"(": ")", "<": ")"})
    ids = sorted(binding.id for binding in bindings)

    assert ids == ["pair.open.u0028", "pair.open.u003c", "pair.skip.u0029"]

    registry = KeymapRegistry()
    load_default_keymaps(registry, pairs={"(": ")", "<": ")"})
    assert len(list(registry.iter_bindings(")"))) == 1


def test_register_binding_with_replace_evicts_conflicts() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="old"))
    before = registry.revision()

    registry.register_binding(make_binding(binding_id="new"), replace=True)

    assert [b.id for b in registry.iter_bindings("ctrl+g")] == ["new"]
    assert registry.revision() == before + 1
