"""Keystroke resolution against the registry with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Mapping, Optional

from metadata_editor.runtime.telemetry import span

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver."""

    status: Literal["match", "miss"]
    match: Optional[ResolutionMatch] = None
    candidates: int = 0


class KeymapResolver:
    """Picks the highest-priority binding whose ``when`` clauses hold."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Dict[str, tuple[int, tuple[Binding, ...]]] = {}

    def resolve(
        self,
        stroke: KeyStroke,
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"key": stroke.token},
        ) as handle:
            candidates = self._candidates(stroke.token)
            match = self._select_match(candidates, ctx)
            if match is None:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss", candidates=len(candidates))

            handle.add_metadata("status", "match")
            handle.add_metadata("binding_id", match.binding.id)
            return ResolutionResult(
                status="match", match=match, candidates=len(candidates)
            )

    def _candidates(self, token: str) -> tuple[Binding, ...]:
        revision = self._registry.revision()
        cached = self._cache.get(token)
        if cached and cached[0] == revision:
            return cached[1]

        bindings = tuple(self._registry.iter_bindings(token))
        self._cache[token] = (revision, bindings)
        return bindings

    def _select_match(
        self, candidates: tuple[Binding, ...], context: Mapping[str, bool]
    ) -> Optional[ResolutionMatch]:
        matches: list[ResolutionMatch] = []
        for binding in candidates:
            if not binding.allows(context):
                continue
            action = self._registry.get_action(binding.action_id)
            matches.append(ResolutionMatch(binding=binding, action=action))

        if not matches:
            return None

        matches.sort(key=lambda m: (-m.binding.priority, m.binding.id))
        return matches[0]


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
