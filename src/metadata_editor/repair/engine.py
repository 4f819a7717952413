"""Best-effort repair of loosely typed JSON."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from metadata_editor.runtime.telemetry import span

from .passes import DEFAULT_PASSES, RepairPass


@dataclass(frozen=True, slots=True)
class RepairReport:
    """Outcome of a repair run: the text plus the passes that touched it."""

    text: str
    applied: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def repair_report(
    raw: str, *, passes: Sequence[RepairPass] = DEFAULT_PASSES
) -> RepairReport:
    """Run ``passes`` in order over the trimmed input.

    Never raises for any string input; the result may still be invalid JSON
    and callers are expected to re-validate it.
    """

    value = raw.strip()
    if not value:
        return RepairReport(text="")

    applied: list[str] = []
    with span(
        "repair::sanitize",
        component="repair",
        metadata={"length": len(value), "passes": len(passes)},
    ) as handle:
        for repair in passes:
            updated = repair(value)
            if updated != value:
                applied.append(repair.name)
                value = updated
        handle.add_metadata("applied", ",".join(applied) or "-")

    return RepairReport(text=value, applied=tuple(applied))


def sanitize(raw: str, *, passes: Sequence[RepairPass] = DEFAULT_PASSES) -> str:
    """Attempt to turn human-typed pseudo-JSON into strict JSON text."""

    return repair_report(raw, passes=passes).text


__all__ = ["RepairReport", "repair_report", "sanitize"]
