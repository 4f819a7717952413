"""Per-keystroke decisions for the metadata field."""

from __future__ import annotations

from typing import Dict, Optional

from metadata_editor.buffer import EditHistory, Selection, ensure_selection
from metadata_editor.config import EditorSettings
from metadata_editor.keymaps import (
    KeyContext,
    KeyDecision,
    KeyInput,
    KeymapRegistry,
    KeymapResolver,
    ResolutionMatch,
)
from metadata_editor.keymaps.defaults import (
    CLOSER_AT_CARET,
    ESCAPED,
    HAS_SELECTION,
    load_default_keymaps,
)
from metadata_editor.runtime import telemetry

ESCAPE_MARKER = "\\"


class KeystrokeInterceptor:
    """Decides whether a key press replaces default text insertion.

    The interceptor keeps no state between calls; undo/redo bindings act on
    the ``history`` handed in at construction.
    """

    def __init__(
        self,
        history: EditHistory,
        *,
        settings: Optional[EditorSettings] = None,
        registry: Optional[KeymapRegistry] = None,
    ) -> None:
        self.history = history
        self.settings = settings or EditorSettings()
        if registry is None:
            registry = KeymapRegistry(logger_name="metadata_editor.keymaps")
            load_default_keymaps(registry, pairs=self.settings.auto_pairs)
        self.registry = registry
        self.resolver = KeymapResolver(registry, logger_name="metadata_editor.keymaps")

    def decide(self, event: KeyInput, text: str, selection: Selection) -> KeyDecision:
        ensure_selection(text, selection)
        context = KeyContext(
            event=event,
            stroke=event.stroke,
            text=text,
            selection=selection,
            history=self.history,
            settings=self.settings,
        )
        result = self.resolver.resolve(context.stroke, context=self._flags(context))
        if result.status != "match" or result.match is None:
            return KeyDecision.unhandled()
        return self._execute_match(context, result.match)

    def _flags(self, context: KeyContext) -> Dict[str, bool]:
        return {
            HAS_SELECTION: not context.selection.collapsed,
            ESCAPED: context.preceding_char == ESCAPE_MARKER,
            CLOSER_AT_CARET: context.char_at_caret == context.stroke.key,
        }

    def _execute_match(self, context: KeyContext, match: ResolutionMatch) -> KeyDecision:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(context, match)

        if isinstance(outcome, KeyDecision):
            return outcome
        return KeyDecision(handled=True, action=match.action.id)


__all__ = ["ESCAPE_MARKER", "KeystrokeInterceptor"]
