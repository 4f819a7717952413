"""Tolerant repair engine for hand-typed JSON."""

from .engine import RepairReport, repair_report, sanitize
from .passes import (
    DEFAULT_PASSES,
    RepairPass,
    auto_close_structures,
    normalize_quotes,
    quote_bare_keys,
    remove_trailing_commas,
    strip_loose_semicolons,
)
from .scanner import QuoteState, scan

__all__ = [
    "DEFAULT_PASSES",
    "QuoteState",
    "RepairPass",
    "RepairReport",
    "auto_close_structures",
    "normalize_quotes",
    "quote_bare_keys",
    "remove_trailing_commas",
    "repair_report",
    "sanitize",
    "scan",
    "strip_loose_semicolons",
]
