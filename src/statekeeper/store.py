"""ReactiveStore — one StateStream per key name, created lazily.

put() writes, observe() hands out the stream, get_latest() reads without
side effects. Cells are never evicted.

Thread safety: none by default, the store assumes one logical thread.
Call set_scheduler() once from the owner thread and any put() from another
thread is handed to the scheduler instead of running directly.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterator, TypeVar

from statekeeper.key import StateKey
from statekeeper.stream import StateStream

T = TypeVar("T")

logger = logging.getLogger("statekeeper.store")

Scheduler = Callable[[Callable[[], None]], object]


class ReactiveStore:
    """Keyed container of current-value streams."""

    def __init__(self, *, scheduler: Scheduler | None = None) -> None:
        self._streams: dict[str, StateStream] = {}
        self._scheduler: Scheduler | None = None
        self._scheduler_thread: threading.Thread | None = None
        if scheduler is not None:
            self.set_scheduler(scheduler)

    def set_scheduler(self, scheduler: Scheduler | None) -> None:
        """Marshal put() calls from other threads through scheduler.

        Call from the thread that owns the store:
            store.set_scheduler(app.call_from_thread)

        Passing None turns marshaling off again.
        """
        self._scheduler = scheduler
        self._scheduler_thread = threading.current_thread() if scheduler is not None else None

    def put(self, key: StateKey[T], value: T) -> None:
        """Write value for key. Subscribers are notified before this returns."""
        if self._scheduler is not None and threading.current_thread() is not self._scheduler_thread:
            logger.debug("Marshaling put(%r) to scheduler thread", key.name)
            self._scheduler(lambda: self._put_direct(key, value))
        else:
            self._put_direct(key, value)

    def _put_direct(self, key: StateKey[T], value: T) -> None:
        stream = self._streams.get(key.name)
        if stream is None:
            logger.debug("Creating stream for %r on put", key.name)
            self._streams[key.name] = StateStream(value)
        else:
            stream.emit(value)

    def observe(self, key: StateKey[T]) -> StateStream[T]:
        """Stream for key. Same object for every key with this name."""
        stream = self._streams.get(key.name)
        if stream is None:
            logger.debug("Creating stream for %r on observe", key.name)
            stream = self._streams[key.name] = StateStream()
        return stream

    def get_latest(self, key: StateKey[T]) -> T | None:
        """Most recent value, or None. Never creates a stream."""
        stream = self._streams.get(key.name)
        return stream.value if stream is not None else None

    def names(self) -> Iterator[str]:
        return iter(list(self._streams))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, StateKey) and key.name in self._streams

    def __len__(self) -> int:
        return len(self._streams)

    def __repr__(self) -> str:
        return f"ReactiveStore({sorted(self._streams)!r})"


_default: ReactiveStore | None = None


def default_store() -> ReactiveStore:
    """The process-wide store, created on first use."""
    global _default
    if _default is None:
        _default = ReactiveStore()
    return _default
