"""Declarative keymap registry and resolver.

Built-in bindings live in :mod:`metadata_editor.keymaps.defaults`, which is
imported on demand because it pulls in the action handlers.
"""

from .models import ActionRef, Binding, KeyStroke, WhenClause
from .registry import KeymapConflictError, KeymapRegistry
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult
from .events import KeyContext, KeyDecision, KeyInput

__all__ = [
    "ActionRef",
    "Binding",
    "KeyStroke",
    "WhenClause",
    "KeymapRegistry",
    "KeymapConflictError",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "KeyContext",
    "KeyDecision",
    "KeyInput",
]
