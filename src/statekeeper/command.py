"""Commands — the only sanctioned way to write state.

A command carries an execution context (its parameters) and an execute()
method. The Dispatcher calls execute(context, state) where state is a
StateAccess bound to the store for the duration of that call only.

Commands should read with state.get_latest() and write with
state.put_state(). Don't observe or subscribe from inside execute(),
every dispatch would leak another subscription.
"""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, NamedTuple, Protocol, TypeVar, runtime_checkable

from statekeeper.errors import UninitializedDependencyError
from statekeeper.key import StateKey
from statekeeper.store import ReactiveStore

T = TypeVar("T")
P = TypeVar("P")


class StateAccess:
    """Borrowed handle on the store, valid only while a command executes."""

    __slots__ = ("_store",)

    def __init__(self, store: ReactiveStore | None = None) -> None:
        self._store = store

    @property
    def bound(self) -> bool:
        return self._store is not None

    def put_state(self, key: StateKey[T], value: T) -> None:
        """Write value for key; observers are notified before this returns.

        Usage:
            state.put_state(StateKey[int]("counter"), 0)
        """
        self._require().put(key, value)

    def get_latest(self, key: StateKey[T]) -> T | None:
        """Latest value for key, or None if it was never written."""
        return self._require().get_latest(key)

    def release(self) -> None:
        self._store = None

    def _require(self) -> ReactiveStore:
        if self._store is None:
            raise UninitializedDependencyError(
                "State accessed outside of dispatch; store is not bound"
            )
        return self._store


@runtime_checkable
class Command(Protocol[P]):
    """Anything the Dispatcher can run."""

    def get_execution_context(self) -> P: ...

    def execute(self, context: P, state: StateAccess) -> None: ...


class BaseCommand(ABC, Generic[P]):
    """Holds the execution context; subclasses implement execute().

    Usage:
        class Increment(BaseCommand[int]):
            def execute(self, by, state):
                state.put_state(Counter, (state.get_latest(Counter) or 0) + by)

        dispatcher.dispatch(Increment(5))
    """

    def __init__(self, execution_context: P) -> None:
        self._execution_context = execution_context

    @property
    def execution_context(self) -> P:
        return self._execution_context

    def get_execution_context(self) -> P:
        return self._execution_context

    @abstractmethod
    def execute(self, context: P, state: StateAccess) -> None:
        """Run the mutation logic against state."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._execution_context!r})"


class UpdateStateParam(NamedTuple, Generic[T]):
    key: StateKey[T]
    value: T


class UpdateStateCommand(BaseCommand[UpdateStateParam[T]]):
    """Set key to value. No other logic."""

    def __init__(self, key: StateKey[T], value: T) -> None:
        super().__init__(UpdateStateParam(key, value))

    def execute(self, context: UpdateStateParam[T], state: StateAccess) -> None:
        state.put_state(context.key, context.value)


class FunctionCommand(BaseCommand[dict[str, Any]]):
    """Command built by @command: context is the factory's keyword arguments."""

    def __init__(self, fn: Callable[[dict[str, Any], StateAccess], None], context: dict[str, Any]) -> None:
        super().__init__(context)
        self._fn = fn

    def execute(self, context: dict[str, Any], state: StateAccess) -> None:
        self._fn(context, state)

    def __repr__(self) -> str:
        return f"FunctionCommand({self._fn.__name__}, {self._execution_context!r})"


def command(fn: Callable[[dict[str, Any], StateAccess], None]) -> Callable[..., FunctionCommand]:
    """Decorator: turn fn(context, state) into a command factory.

    Usage:
        @command
        def increment(ctx, state):
            state.put_state(Counter, (state.get_latest(Counter) or 0) + ctx["by"])

        dispatcher.dispatch(increment(by=5))
    """

    @functools.wraps(fn)
    def factory(**context: Any) -> FunctionCommand:
        return FunctionCommand(fn, dict(context))

    return factory
