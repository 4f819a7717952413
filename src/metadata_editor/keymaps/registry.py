"""Store of actions and the bindings that trigger them."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, Iterator, Optional, Sequence

from metadata_editor.runtime.telemetry import span

from .models import ActionRef, Binding


class KeymapConflictError(RuntimeError):
    """Two bindings on one stroke could both fire for the same flags."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        clashing = ", ".join(existing.id for existing in self.conflicts)
        super().__init__(
            f"Binding '{binding.id}' on '{binding.key_signature}' clashes with {clashing}"
        )


class KeymapRegistry:
    """Actions by id plus bindings indexed by stroke token.

    ``revision()`` moves whenever the binding set changes so resolvers know
    when their cached candidate lists are stale.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._by_token: Dict[str, set[str]] = defaultdict(set)
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        if action_id not in self._actions:
            raise KeyError(f"Action '{action_id}' is not registered")
        return self._actions[action_id]

    def get_binding(self, binding_id: str) -> Binding:
        if binding_id not in self._bindings:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return self._bindings[binding_id]

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if action.id in self._actions and not replace:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts whatever it clashes with."""

        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "key": binding.key_signature},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.fail("unknown_action")
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )

            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if not replace:
                if binding.id in self._bindings:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
                if conflicts:
                    handle.fail("conflict")
                    raise KeymapConflictError(binding, conflicts)

            for stale in (*conflicts, self._bindings.get(binding.id)):
                if stale is not None:
                    self._drop(stale)

            self._bindings[binding.id] = binding
            self._by_token[binding.key_signature].add(binding.id)
            self._revision += 1
            return binding

    def iter_bindings(self, signature: Optional[str] = None) -> Iterator[Binding]:
        """Every binding, or only those on ``signature``, in id order."""

        if signature is None:
            ids: Iterable[str] = self._bindings
        else:
            ids = self._by_token.get(signature, ())
        for binding_id in sorted(ids):
            yield self._bindings[binding_id]

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] = ()
    ) -> list[Binding]:
        return [
            existing
            for existing in self.iter_bindings(binding.key_signature)
            if existing.id not in ignore and _contexts_overlap(binding, existing)
        ]

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        bucket = self._by_token.get(binding.key_signature)
        if bucket is not None:
            bucket.discard(binding.id)
            if not bucket:
                del self._by_token[binding.key_signature]


def _contexts_overlap(left: Binding, right: Binding) -> bool:
    """Whether one set of flags could satisfy both bindings at equal footing.

    Contradicting clauses never overlap. An ungated binding only clashes
    with another ungated one; gated bindings clash when their clauses agree.
    """

    left_map = left.when_map
    right_map = right.when_map
    for flag, expected in left_map.items():
        if flag in right_map and right_map[flag] != expected:
            return False
    if not left_map or not right_map:
        return not left_map and not right_map
    return dict(left_map) == dict(right_map)


__all__ = ["KeymapConflictError", "KeymapRegistry"]
