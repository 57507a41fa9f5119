"""Dispatcher — runs commands against the store and exposes observation.

dispatch() is synchronous: when it returns, every put the command made
has landed and every subscriber has been notified.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from statekeeper.command import Command, StateAccess
from statekeeper.errors import MissingStreamError
from statekeeper.key import StateKey
from statekeeper.store import ReactiveStore, default_store
from statekeeper.stream import StateStream, Subscription

T = TypeVar("T")

logger = logging.getLogger("statekeeper.dispatcher")


class Dispatcher:
    """Single entry point for writing (dispatch) and reading (observe/get_latest)."""

    def __init__(self, store: ReactiveStore | None = None) -> None:
        self._store = store if store is not None else ReactiveStore()

    @property
    def store(self) -> ReactiveStore:
        return self._store

    def dispatch(self, command: Command) -> None:
        """Run command.execute(context, state) with state bound to the store.

        Usage:
            dispatcher.dispatch(UpdateStateCommand(Counter, 0))
        """
        name = type(command).__name__
        access = StateAccess(self._store)
        logger.debug("Dispatching %s", name)
        try:
            command.execute(command.get_execution_context(), access)
        except Exception as exc:
            logger.debug("Command %s raised %s", name, type(exc).__name__)
            raise
        finally:
            access.release()
        logger.debug("Dispatched %s", name)

    def observe(self, key: StateKey[T]) -> StateStream[T]:
        """Stream for key, usable even before anything was written."""
        return self._store.observe(key)

    def on_change(self, key: StateKey[T], callback: Callable[[T | None], None]) -> Subscription:
        """Call callback with the current value now and on every later put.

        Usage:
            sub = dispatcher.on_change(Counter, lambda v: print("counter", v))
            sub.unsubscribe()
        """
        stream = self.observe(key)
        if stream is None:
            raise MissingStreamError(key.name)
        return stream.subscribe(callback)

    def get_latest(self, key: StateKey[T]) -> T | None:
        return self._store.get_latest(key)


_default: Dispatcher | None = None


def default_dispatcher() -> Dispatcher:
    """The process-wide dispatcher, bound to default_store()."""
    global _default
    if _default is None:
        _default = Dispatcher(default_store())
    return _default
