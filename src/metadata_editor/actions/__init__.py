"""Editing verbs the keymap can bind to."""

from .editing import insert_indent, insert_pair, skip_closer
from .history import redo, undo

__all__ = [
    "insert_indent",
    "insert_pair",
    "skip_closer",
    "undo",
    "redo",
]
