"""Executable Textual app hosting a single metadata field."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static, TextArea
    from textual.widgets.text_area import Selection as AreaSelection
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use metadata_editor.adapters.textual.app"
    ) from exc

from metadata_editor.buffer import BufferMirror, Selection
from metadata_editor.config import EditorSettings
from metadata_editor.field import FieldHooks, MetadataField
from metadata_editor.keymaps import KeyInput
from metadata_editor.keymaps.models import COMMAND_MODIFIERS
from metadata_editor.runtime import telemetry
from metadata_editor.status import MetadataStatus

Location = Tuple[int, int]  # (row, column)


def offset_for_location(text: str, location: Location) -> int:
    lines = text.split("\n")
    row, col = location
    row = min(max(row, 0), len(lines) - 1)
    offset = sum(len(line) + 1 for line in lines[:row])
    return offset + min(col, len(lines[row]))


def location_for_offset(text: str, offset: int) -> Location:
    running = 0
    lines = text.split("\n")
    for row, line in enumerate(lines):
        if offset <= running + len(line):
            return (row, offset - running)
        running += len(line) + 1
    return (len(lines) - 1, len(lines[-1]))


class MetadataTextArea(TextArea):
    """TextArea that routes structural keys and undo/redo through the field."""

    def __init__(self, field: MetadataField, **kwargs: object) -> None:
        super().__init__(field.value, tab_behavior="indent", **kwargs)  # type: ignore[arg-type]
        self.field = field

    @property
    def offsets(self) -> Selection:
        start = offset_for_location(self.text, self.selection.start)
        end = offset_for_location(self.text, self.selection.end)
        return Selection(min(start, end), max(start, end))

    def show(self, mirror: BufferMirror) -> None:
        if mirror.text != self.text:
            self.replace(mirror.text, (0, 0), self.document.end)
        if mirror.selection is not None:
            self.selection = AreaSelection(
                location_for_offset(mirror.text, mirror.selection.start),
                location_for_offset(mirror.text, mirror.selection.end),
            )

    async def _on_key(self, event: events.Key) -> None:
        event_input = _key_input(event)
        if event_input is not None:
            decision = self.field.handle_key(event_input, self.offsets)
            if decision.handled:
                event.prevent_default()
                event.stop()
                return
        await super()._on_key(event)

    def action_undo(self) -> None:
        self.field.handle_key(KeyInput("z", ("ctrl",)), self.offsets)

    def action_redo(self) -> None:
        self.field.handle_key(KeyInput("z", ("ctrl", "shift")), self.offsets)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area.text == self.field.value:
            return
        self.field.handle_input(event.text_area.text, selection=self.offsets)

    def on_blur(self, event: events.Blur) -> None:
        del event
        self.field.blur()


def _key_input(event: events.Key) -> Optional[KeyInput]:
    """Translate a Textual key event; command chords are left to bindings."""

    parts = event.key.split("+")
    modifiers = tuple(parts[:-1])
    if COMMAND_MODIFIERS.intersection(modifiers):
        return None
    character = event.character
    if character and len(character) == 1 and character.isprintable():
        return KeyInput(character, modifiers, text=character)
    return KeyInput(parts[-1], modifiers)


class MetadataEditorApp(App[None]):
    """Minimal Textual UI embedding one metadata field."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#field-label {
		height: 1;
		padding: 0 1;
	}

	#metadata {
		height: 1fr;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+f", "format", "Format JSON"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self, *, value: str = "", settings: Optional[EditorSettings] = None
    ) -> None:
        super().__init__()
        self.settings = settings or EditorSettings.from_env()
        self._initial = value
        self._status_widget = Static("", id="status-line")
        self._area: MetadataTextArea | None = None
        self.field: MetadataField | None = None

    def compose(self) -> ComposeResult:
        hooks = FieldHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            notify=self._notify,
        )
        self.field = MetadataField(self._initial, hooks=hooks, settings=self.settings)
        self._area = MetadataTextArea(self.field, id="metadata")
        yield Header()
        with Vertical():
            yield Static(self.settings.label, id="field-label")
            yield self._area
        yield self._status_widget
        yield Footer()

    def action_format(self) -> None:
        if self.field:
            self.field.format()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        if self._area is not None and self._area.is_mounted:
            self._area.show(mirror)

    def _update_status(self, status: MetadataStatus) -> None:
        if status is MetadataStatus.IDLE:
            self._status_widget.update(self.settings.helper_text)
        elif status is MetadataStatus.VALID:
            self._status_widget.update("[green]● Valid JSON[/]")
        else:
            self._status_widget.update("[red]● Invalid JSON[/]")

    def _notify(self, level: str, message: str) -> None:
        severity = "error" if level == "error" else "information"
        self.notify(message, severity=severity)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit JSON metadata in the terminal.")
    parser.add_argument(
        "--value",
        default=telemetry.env("INITIAL_VALUE", ""),
        help="Initial metadata text",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default="quiet",
        help="Telemetry preset (default: quiet, the terminal belongs to the UI)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    app = MetadataEditorApp(value=args.value)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
