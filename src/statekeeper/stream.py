"""Push-based stream that remembers its current value.

A StateStream is the public face of one slot in the store. New subscribers
get the current value replayed immediately (None if nothing was written
yet), then every later emission, synchronously and in subscription order.

map()/filter() return derived streams. dispose() on a derived stream
detaches it from its source and disposes the streams derived from it.
Streams handed out by the store cannot be disposed.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from statekeeper.errors import StateKeeperError

T = TypeVar("T")
U = TypeVar("U")


class Subscription:
    """Handle returned by subscribe(). unsubscribe() is idempotent."""

    __slots__ = ("_stream", "_callback")

    def __init__(self, stream: StateStream, callback: Callable) -> None:
        self._stream: StateStream | None = stream
        self._callback = callback

    @property
    def closed(self) -> bool:
        return self._stream is None

    def unsubscribe(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            stream._remove(self)

    def _deliver(self, value) -> None:
        if self._stream is not None:
            self._callback(value)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "active"
        return f"Subscription({getattr(self._callback, '__name__', self._callback)!r}, {state})"


class StateStream(Generic[T]):
    """Multicast stream with current-value replay."""

    def __init__(self, value: T | None = None) -> None:
        self._value = value
        self._subscriptions: list[Subscription] = []
        self._disposed = False
        # Set on derived streams only.
        self._parent: StateStream | None = None
        self._source: Subscription | None = None
        self._children: list[StateStream] = []

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def emit(self, value: T) -> None:
        """Set the current value and push it to all subscribers."""
        if self._disposed:
            return
        self._value = value
        # Snapshot: callbacks may subscribe or unsubscribe while we iterate.
        for sub in list(self._subscriptions):
            sub._deliver(value)

    def subscribe(self, callback: Callable[[T | None], None]) -> Subscription:
        """Register callback, replay the current value to it, return a handle."""
        sub = Subscription(self, callback)
        self._subscriptions.append(sub)
        sub._deliver(self._value)
        return sub

    def map(self, fn: Callable[[T | None], U]) -> StateStream[U]:
        """Derived stream of fn(value)."""
        child: StateStream[U] = StateStream()
        self._attach(child, self.subscribe(lambda v: child.emit(fn(v))))
        return child

    def filter(self, fn: Callable[[T | None], bool]) -> StateStream[T]:
        """Derived stream that only forwards values where fn returns True."""
        child: StateStream[T] = StateStream()
        self._attach(child, self.subscribe(lambda v: child.emit(v) if fn(v) else None))
        return child

    def dispose(self) -> None:
        """Tear down this derived stream and everything derived from it.

        Only streams made by map()/filter() can be disposed. Streams owned
        by a store live as long as the store does.
        """
        if self._parent is None:
            raise StateKeeperError("Only derived streams can be disposed")
        self._disposed = True
        for child in list(self._children):
            child.dispose()
        for sub in list(self._subscriptions):
            sub.unsubscribe()
        if self._source is not None:
            self._source.unsubscribe()
            self._source = None
        self._parent._detach(self)

    def _attach(self, child: StateStream, source: Subscription) -> None:
        child._parent = self
        child._source = source
        self._children.append(child)

    def _detach(self, child: StateStream) -> None:
        try:
            self._children.remove(child)
        except ValueError:
            pass

    def _remove(self, sub: Subscription) -> None:
        try:
            self._subscriptions.remove(sub)
        except ValueError:
            pass  # already removed

    def __repr__(self) -> str:
        return f"StateStream({self._value!r}, subscribers={len(self._subscriptions)})"
