"""Undo/redo actions bound to the history shortcuts."""

from __future__ import annotations

from metadata_editor.buffer import HistoryMode, HistoryStep, Selection
from metadata_editor.keymaps.events import KeyContext, KeyDecision
from metadata_editor.keymaps.resolver import ResolutionMatch


def _navigate(step: HistoryStep, match: ResolutionMatch) -> KeyDecision:
    return KeyDecision(
        handled=True,
        text=step.text,
        selection=Selection.caret(step.caret),
        history_mode=HistoryMode.SKIP,
        action=match.action.id,
    )


def undo(context: KeyContext, match: ResolutionMatch) -> KeyDecision:
    return _navigate(context.history.undo(caret=context.selection.start), match)


def redo(context: KeyContext, match: ResolutionMatch) -> KeyDecision:
    return _navigate(context.history.redo(caret=context.selection.start), match)


__all__ = ["undo", "redo"]
