"""Text actions that replace default insertion for structural keys."""

from __future__ import annotations

from metadata_editor.buffer import HistoryMode, Selection, replace_range
from metadata_editor.keymaps.events import KeyContext, KeyDecision
from metadata_editor.keymaps.resolver import ResolutionMatch


def insert_indent(context: KeyContext, match: ResolutionMatch) -> KeyDecision:
    indent = context.settings.indent_unit
    caret = context.selection.start + len(indent)
    return KeyDecision(
        handled=True,
        text=replace_range(context.text, context.selection, indent),
        selection=Selection.caret(caret),
        history_mode=HistoryMode.COMMAND,
        action=match.action.id,
    )


def insert_pair(context: KeyContext, match: ResolutionMatch) -> KeyDecision:
    """Insert the opener and its closer around the current selection."""

    opener = context.stroke.key
    closer = context.settings.auto_pairs[opener]
    selected = context.selection.slice(context.text)
    start = context.selection.start + len(opener)
    return KeyDecision(
        handled=True,
        text=replace_range(context.text, context.selection, f"{opener}{selected}{closer}"),
        selection=Selection(start, start + len(selected)),
        history_mode=HistoryMode.COMMAND,
        action=match.action.id,
    )


def skip_closer(context: KeyContext, match: ResolutionMatch) -> KeyDecision:
    """Step over a closer that is already at the caret instead of doubling it."""

    return KeyDecision(
        handled=True,
        text=context.text,
        selection=Selection.caret(context.selection.start + 1),
        history_mode=None,
        action=match.action.id,
    )


__all__ = ["insert_indent", "insert_pair", "skip_closer"]
