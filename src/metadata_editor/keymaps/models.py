"""Dataclasses describing key bindings and action metadata."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

COMMAND_MODIFIERS = frozenset({"ctrl", "meta", "alt"})


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press.

    Printable keys typed without a command modifier drop ``shift`` (``{`` is
    ``{`` whichever keyboard layout produced it). Named keys, and letters
    pressed with a command modifier, are lower-cased so ``ctrl+shift+Z``
    reads ``ctrl+shift+z`` and ``Tab`` reads ``tab``.
    """

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        modifiers = _normalize_modifiers(self.modifiers)
        key = self.key
        if len(key) > 1:
            key = key.lower()
        elif COMMAND_MODIFIERS.intersection(modifiers):
            key = key.lower()
        else:
            modifiers = tuple(m for m in modifiers if m != "shift")
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "modifiers", modifiers)

    @property
    def token(self) -> str:
        if self.modifiers:
            modifier = "+".join(self.modifiers)
            return f"{modifier}+{self.key}"
        return self.key

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        """Parse ``"ctrl+shift+z"`` style tokens; a bare ``+`` is the plus key."""

        if len(token) <= 1:
            return cls(token)
        head, _, key = token.rpartition("+")
        if not key:
            head, key = token[:-2], "+"
        return cls(key, tuple(part for part in head.split("+") if part))


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Simple boolean condition used to gate bindings."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if not expr:
            raise ValueError("expression cannot be empty")
        expected = True
        if expr.startswith("!"):
            expected = False
            expr = expr[1:]
        return cls(expr, expected)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named handler a binding points at."""

    id: str
    handler: Callable[..., object]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a keystroke with an action, gated by ``when`` clauses."""

    id: str
    stroke: KeyStroke
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        if isinstance(self.stroke, str):
            object.__setattr__(self, "stroke", KeyStroke.parse(self.stroke))
        normalized_when = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        object.__setattr__(self, "when", normalized_when)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    @property
    def key_signature(self) -> str:
        return self.stroke.token


__all__ = [
    "COMMAND_MODIFIERS",
    "KeyStroke",
    "WhenClause",
    "ActionRef",
    "Binding",
]
