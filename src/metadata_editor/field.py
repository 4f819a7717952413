"""Host-agnostic controller for one metadata JSON field."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from metadata_editor.buffer import (
    BufferMirror,
    EditHistory,
    HistoryMode,
    Selection,
    clamp_caret,
)
from metadata_editor.buffer.history import Clock
from metadata_editor.config import EditorSettings
from metadata_editor.interceptor import KeystrokeInterceptor
from metadata_editor.keymaps import KeyDecision, KeyInput
from metadata_editor.runtime import telemetry
from metadata_editor.status import MetadataStatus, classify, format_metadata

EMPTY_FORMAT_MESSAGE = "Add metadata before formatting"
FORMAT_FAILED_MESSAGE = "Unable to format metadata. Please fix the JSON syntax."


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class FieldHooks:
    """Callbacks the field uses to push state back to its host."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[MetadataStatus], None] = _noop
    # level is "info" or "error"
    notify: Callable[[str, str], None] = _noop
    log: Callable[[str], None] = _noop


class MetadataField:
    """Owns the history and interceptor for a mounted field.

    Every buffer change goes through :meth:`_apply`, which classifies the new
    text, records it with the requested history mode, and notifies the host.
    """

    def __init__(
        self,
        value: str = "",
        *,
        hooks: FieldHooks,
        settings: Optional[EditorSettings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.settings = settings or EditorSettings()
        self.hooks = hooks
        self.history = EditHistory(
            value, window_ms=self.settings.typing_window_ms, clock=clock
        )
        self.interceptor = KeystrokeInterceptor(self.history, settings=self.settings)
        self._value = value
        self._selection = Selection.caret(len(value))
        self._status = MetadataStatus.IDLE
        self._set_status(classify(value))

    @property
    def value(self) -> str:
        return self._value

    @property
    def status(self) -> MetadataStatus:
        return self._status

    @property
    def selection(self) -> Selection:
        return self._selection

    def handle_input(self, text: str, *, selection: Optional[Selection] = None) -> None:
        """Default insertion path: the host already changed the text."""

        self._apply(text, HistoryMode.TYPING, selection)

    def handle_key(self, event: KeyInput, selection: Selection) -> KeyDecision:
        self._log_state("key ->", key=event.key, mods=event.modifiers)
        decision = self.interceptor.decide(event, self._value, selection)
        if decision.handled and decision.text is not None:
            if decision.history_mode is None and decision.text == self._value:
                self._selection = decision.selection or selection
                self._refresh()
            else:
                self._apply(
                    decision.text,
                    decision.history_mode or HistoryMode.COMMAND,
                    decision.selection,
                )
        self._log_state(
            "result <-", handled=decision.handled, action=decision.action
        )
        return decision

    def format(self) -> bool:
        """Format button: repair and pretty-print, or tell the user why not."""

        if not self._value.strip():
            self.hooks.notify("info", EMPTY_FORMAT_MESSAGE)
            return False

        formatted = format_metadata(self._value, attempt_repair=True)
        if formatted is None:
            self.hooks.notify("error", FORMAT_FAILED_MESSAGE)
            self._set_status(MetadataStatus.INVALID)
            return False

        self._apply(formatted, HistoryMode.COMMAND, None)
        return True

    def blur(self) -> None:
        """Format-on-blur; failures are left for the user to fix."""

        if not self._value.strip() or self._status is MetadataStatus.VALID:
            return
        formatted = format_metadata(self._value, attempt_repair=True)
        if formatted is not None:
            self._apply(formatted, HistoryMode.COMMAND, None)

    def set_value(self, text: str) -> None:
        """The owner replaced the value (reset, reload); history starts over."""

        if self.history.sync(text):
            self._log_state("reset ->", length=len(text))
        self._value = text
        self._selection = Selection.caret(clamp_caret(text, self._selection.start))
        self._set_status(classify(text), refresh=False)
        self._refresh()

    def _apply(
        self, text: str, mode: HistoryMode, selection: Optional[Selection]
    ) -> None:
        self._value = text
        self._selection = selection or Selection.caret(len(text))
        self._set_status(classify(text), refresh=False)
        self.history.record(text, mode, caret=self._selection.start)
        self._refresh()

    def _set_status(self, status: MetadataStatus, *, refresh: bool = True) -> None:
        self._status = status
        self.hooks.update_status(status)
        if refresh:
            self._refresh()

    def _refresh(self) -> None:
        self.hooks.update_buffer(
            BufferMirror(
                text=self._value,
                selection=self._selection,
                status=self._status.value,
            )
        )

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "status": self._status.value,
            "selection": (self._selection.start, self._selection.end),
            "history_index": self.history.index,
            "history_size": len(self.history.entries),
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        line = " ".join(parts)
        telemetry.record_event("field.state", data={"line": line})
        self.hooks.log(line)


__all__ = [
    "EMPTY_FORMAT_MESSAGE",
    "FORMAT_FAILED_MESSAGE",
    "FieldHooks",
    "MetadataField",
]
