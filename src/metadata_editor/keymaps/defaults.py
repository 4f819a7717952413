"""Built-in bindings for the metadata field."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from metadata_editor.actions import editing as editing_actions
from metadata_editor.actions import history as history_actions
from metadata_editor.config import BRACKET_PAIRS, reverse_pairs

from .models import ActionRef, Binding, KeyStroke, WhenClause
from .registry import KeymapRegistry

# Flags computed per keystroke by the interceptor.
HAS_SELECTION = "has_selection"
ESCAPED = "escaped"
CLOSER_AT_CARET = "closer_at_caret"

SKIP_PRIORITY = 10

_PAIR_NAMES = {"{": "brace", "[": "bracket", '"': "quote"}

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="history.undo",
        handler=history_actions.undo,
        description="Step back to the previous checkpoint",
    ),
    ActionRef(
        id="history.redo",
        handler=history_actions.redo,
        description="Step forward to the next checkpoint",
    ),
    ActionRef(
        id="edit.indent",
        handler=editing_actions.insert_indent,
        description="Insert one indent unit",
    ),
    ActionRef(
        id="edit.auto_pair",
        handler=editing_actions.insert_pair,
        description="Insert an opener with its closer",
    ),
    ActionRef(
        id="edit.skip_closer",
        handler=editing_actions.skip_closer,
        description="Move past an existing closer",
    ),
)

COMMAND_BINDINGS: tuple[Binding, ...] = (
    Binding(
        id="history.undo.ctrl",
        stroke=KeyStroke("z", ("ctrl",)),
        action_id="history.undo",
        description="Undo",
    ),
    Binding(
        id="history.undo.meta",
        stroke=KeyStroke("z", ("meta",)),
        action_id="history.undo",
        description="Undo",
    ),
    Binding(
        id="history.redo.ctrl_shift",
        stroke=KeyStroke("z", ("ctrl", "shift")),
        action_id="history.redo",
        description="Redo",
    ),
    Binding(
        id="history.redo.meta_shift",
        stroke=KeyStroke("z", ("meta", "shift")),
        action_id="history.redo",
        description="Redo",
    ),
    Binding(
        id="history.redo.ctrl_y",
        stroke=KeyStroke("y", ("ctrl",)),
        action_id="history.redo",
        description="Redo",
    ),
    Binding(
        id="edit.indent.tab",
        stroke=KeyStroke("tab"),
        action_id="edit.indent",
        description="Indent",
    ),
)


def _pair_name(char: str) -> str:
    return _PAIR_NAMES.get(char, f"u{ord(char):04x}")


def pair_bindings(pairs: Mapping[str, str] = BRACKET_PAIRS) -> tuple[Binding, ...]:
    """Auto-pair bindings per opener and skip-over bindings per closer.

    Auto-pairing a symmetric pair (quotes) is disabled right after a
    backslash, as is every skip-over. Skip-over outranks auto-pairing when
    the caret sits on a closer. Openers sharing a closer get one skip-over.
    """

    not_escaped = WhenClause(ESCAPED, False)
    bindings: list[Binding] = []
    for opener, closer in pairs.items():
        bindings.append(
            Binding(
                id=f"pair.open.{_pair_name(opener)}",
                stroke=KeyStroke(opener),
                action_id="edit.auto_pair",
                description=f"Insert {opener}{closer}",
                when=(not_escaped,) if opener == closer else (),
            )
        )
    for closer in reverse_pairs(pairs):
        bindings.append(
            Binding(
                id=f"pair.skip.{_pair_name(closer)}",
                stroke=KeyStroke(closer),
                action_id="edit.skip_closer",
                description=f"Skip over {closer}",
                when=(
                    WhenClause(CLOSER_AT_CARET),
                    WhenClause(HAS_SELECTION, False),
                    not_escaped,
                ),
                priority=SKIP_PRIORITY,
            )
        )
    return tuple(bindings)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    pairs: Mapping[str, str] = BRACKET_PAIRS,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions plus command and pair bindings."""

    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in COMMAND_BINDINGS + pair_bindings(pairs):
        if not _selected(binding.id, allowed_bindings):
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True


__all__ = [
    "CLOSER_AT_CARET",
    "COMMAND_BINDINGS",
    "DEFAULT_ACTIONS",
    "ESCAPED",
    "HAS_SELECTION",
    "load_default_keymaps",
    "pair_bindings",
]
