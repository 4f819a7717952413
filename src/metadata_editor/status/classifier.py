"""Tri-state validity classification of a metadata buffer."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class MetadataStatus(str, Enum):
    IDLE = "idle"
    VALID = "valid"
    INVALID = "invalid"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def strict_loads(text: str) -> Any:
    """``json.loads`` without the NaN/Infinity extensions.

    Raises ``ValueError`` (``json.JSONDecodeError`` included) or
    ``RecursionError`` for anything that is not strict JSON.
    """

    return json.loads(text, parse_constant=_reject_constant)


def is_strict_json(text: str) -> bool:
    try:
        strict_loads(text)
    except (ValueError, RecursionError):
        return False
    return True


def classify(buffer: str) -> MetadataStatus:
    """Classify ``buffer`` as it is. No repair is attempted."""

    if not buffer.strip():
        return MetadataStatus.IDLE
    return MetadataStatus.VALID if is_strict_json(buffer) else MetadataStatus.INVALID


__all__ = ["MetadataStatus", "classify", "is_strict_json", "strict_loads"]
