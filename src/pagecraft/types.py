"""Core data contracts for pagecraft.

Contexts flow from pages and custom fields into templates:
  Page → Context → (manipulation) → template → rendered text
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

__all__ = [
    "Context",
    "ContextManipulation",
    "Deferred",
    "FieldValue",
    "Literal",
    "Page",
    "resolve_value",
]

# Template field name → string value. Insertion order is kept but carries no meaning.
Context: TypeAlias = dict[str, str]

ContextManipulation: TypeAlias = Callable[[Context], Context]


@dataclass(frozen=True)
class Literal:
    """A field value known at page-definition time."""

    value: str

    def resolve(self) -> str:
        return self.value


@dataclass(frozen=True)
class Deferred:
    """A field value computed when the owning page is built.

    ``compute`` is invoked once per build and may fail; the failure is
    not caught here.
    """

    compute: Callable[[], str]

    def resolve(self) -> str:
        return self.compute()


FieldValue: TypeAlias = Literal | Deferred


def resolve_value(value: FieldValue | str | Callable[[], str]) -> str:
    """Resolve an association-list value to its string.

    Bare strings are treated as :class:`Literal`, bare callables as
    :class:`Deferred`.
    """
    if isinstance(value, (Literal, Deferred)):
        return value.resolve()
    if isinstance(value, str):
        return value
    if callable(value):
        return value()
    raise TypeError(f"Unsupported field value: {value!r}")


@dataclass(frozen=True)
class Page:
    """A source page read from disk."""

    path: str
    body: str
    metadata: tuple[tuple[str, str], ...] = ()

    def get(self, key: str, default: str = "") -> str:
        for k, v in self.metadata:
            if k == key:
                return v
        return default
