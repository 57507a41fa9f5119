"""StateKey — name-based identity for a slot in the store.

Two keys with the same name are the same slot, even when constructed
separately. Name uniqueness is the caller's job: nothing checks for
collisions, they simply alias.
"""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class StateKey(Generic[T]):
    """Names one state slot. T is the value type, for type checkers only.

    Usage:
        Counter = StateKey[int]("counter")
        store.put(Counter, 1)
    """

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateKey):
            return NotImplemented
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"StateKey({self._name!r})"
