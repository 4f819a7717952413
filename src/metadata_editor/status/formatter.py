"""Canonical re-serialization, optionally after a repair attempt."""

from __future__ import annotations

import json
from typing import Optional

from metadata_editor.repair import sanitize
from metadata_editor.runtime import telemetry

from .classifier import strict_loads

INDENT_WIDTH = 2


def _canonical(candidate: str) -> Optional[str]:
    try:
        parsed = strict_loads(candidate)
    except (ValueError, RecursionError):
        return None
    return json.dumps(parsed, indent=INDENT_WIDTH, ensure_ascii=False)


def format_metadata(buffer: str, attempt_repair: bool = False) -> Optional[str]:
    """Return ``buffer`` pretty-printed with two-space indentation.

    Empty input formats to ``""``. With ``attempt_repair`` a failed strict
    parse is retried once on the sanitized text. ``None`` means the text
    could not be turned into JSON; nothing is raised.
    """

    trimmed = buffer.strip()
    if not trimmed:
        return ""

    formatted = _canonical(trimmed)
    if formatted is not None:
        return formatted

    if not attempt_repair:
        return None

    repaired = sanitize(buffer)
    if repaired and repaired != trimmed:
        formatted = _canonical(repaired)

    telemetry.record_event(
        "format.repair",
        data={"repaired": formatted is not None, "length": len(trimmed)},
    )
    return formatted


__all__ = ["INDENT_WIDTH", "format_metadata"]
