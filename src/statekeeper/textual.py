"""Textual integration for statekeeper. Opt-in, requires textual.

Subscriptions made with on_change() here only reach the callback while the
app is running and not paused. Values put from worker threads are handed to
app.call_from_thread before the callback sees them. Nothing else in
statekeeper imports textual.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

from statekeeper.dispatcher import Dispatcher
from statekeeper.key import StateKey
from statekeeper.store import ReactiveStore
from statekeeper.stream import Subscription

# id(app) of every app currently inside pause().
_paused_apps: set[int] = set()


def bind(app, store: ReactiveStore) -> None:
    """Marshal puts from worker threads onto the app's thread.

    Call from the app's thread, e.g. in on_mount.
    """
    store.set_scheduler(app.call_from_thread)


@contextmanager
def pause(app):
    """Hold back on_change() deliveries for app while the block runs.

    Values put meanwhile are not replayed afterwards; read them with
    get_latest() once the widgets are back.
    """
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """True when on_change() callbacks for app may run."""
    return app.is_running and id(app) not in _paused_apps


def on_change(app, dispatcher: Dispatcher, key: StateKey, callback) -> Subscription:
    """Subscribe callback to key, delivering only when is_safe(app).

    A callback that queries a widget which is not mounted yet raises
    NoMatches; that value is dropped and the subscription stays live.
    Deliveries from a thread other than the caller's go through
    app.call_from_thread.

    Usage:
        stx.on_change(self, dispatcher, Status, lambda v: self.query_one(Footer).update(v))
    """
    owner = threading.get_ident()

    def _run(value):
        try:
            callback(value)
        except NoMatches:
            pass  # widget not mounted

    def _deliver(value):
        if not is_safe(app):
            return
        if threading.get_ident() == owner:
            _run(value)
        else:
            app.call_from_thread(_run, value)

    return dispatcher.on_change(key, _deliver)
