"""Tests for statekeeper.textual — Textual integration layer."""

import threading

import pytest
from textual.css.query import NoMatches

from statekeeper import Dispatcher, ReactiveStore, StateKey, UpdateStateCommand
from statekeeper import textual as stx

Status = StateKey[str]("status")


class _MockApp:
    """Minimal mock matching the Textual App interface stx needs."""

    def __init__(self, *, is_running=True):
        self.is_running = is_running
        self._call_from_thread_log = []

    def call_from_thread(self, fn, *args):
        self._call_from_thread_log.append((fn, args))
        fn(*args)


class TestOnChange:
    def test_skips_when_not_running(self):
        app = _MockApp(is_running=False)
        d = Dispatcher()
        effects = []
        stx.on_change(app, d, Status, lambda v: effects.append(v))
        d.dispatch(UpdateStateCommand(Status, "ok"))
        assert effects == []

    def test_skips_during_pause(self):
        app = _MockApp()
        d = Dispatcher()
        effects = []
        stx.on_change(app, d, Status, lambda v: effects.append(v))
        with stx.pause(app):
            d.dispatch(UpdateStateCommand(Status, "ok"))
        assert effects == [None]

    def test_fires_when_safe(self):
        app = _MockApp()
        d = Dispatcher()
        effects = []
        stx.on_change(app, d, Status, lambda v: effects.append(v))
        d.dispatch(UpdateStateCommand(Status, "ok"))
        assert effects == [None, "ok"]

    def test_catches_nomatch(self):
        """NoMatches from widget queries are silently swallowed."""
        app = _MockApp()
        d = Dispatcher()

        def _raise_nomatch(v):
            raise NoMatches("StatusFooter")

        stx.on_change(app, d, Status, _raise_nomatch)
        d.dispatch(UpdateStateCommand(Status, "ok"))  # should not raise

    def test_other_errors_propagate(self):
        app = _MockApp()
        d = Dispatcher()

        def _boom(v):
            if v is not None:
                raise RuntimeError("boom")

        stx.on_change(app, d, Status, _boom)
        with pytest.raises(RuntimeError, match="boom"):
            d.dispatch(UpdateStateCommand(Status, "ok"))

    def test_cross_thread_marshals(self):
        app = _MockApp()
        d = Dispatcher()
        effects = []
        stx.on_change(app, d, Status, lambda v: effects.append(v))

        t = threading.Thread(target=lambda: d.store.put(Status, "bg"))
        t.start()
        t.join(timeout=2)

        assert effects == [None, "bg"]
        assert len(app._call_from_thread_log) == 1

    def test_unsubscribe(self):
        app = _MockApp()
        d = Dispatcher()
        effects = []
        sub = stx.on_change(app, d, Status, lambda v: effects.append(v))
        sub.unsubscribe()
        d.dispatch(UpdateStateCommand(Status, "ok"))
        assert effects == [None]


class TestPause:
    def test_values_put_while_paused_are_not_replayed(self):
        app = _MockApp()
        d = Dispatcher()
        effects = []
        stx.on_change(app, d, Status, lambda v: effects.append(v))
        with stx.pause(app):
            d.dispatch(UpdateStateCommand(Status, "hidden"))
        d.dispatch(UpdateStateCommand(Status, "shown"))
        assert effects == [None, "shown"]
        assert d.get_latest(Status) == "shown"

    def test_is_safe(self):
        app = _MockApp()
        assert stx.is_safe(app)
        with stx.pause(app):
            assert not stx.is_safe(app)
        assert stx.is_safe(app)

    def test_pause_releases_on_error(self):
        app = _MockApp()
        with pytest.raises(ValueError):
            with stx.pause(app):
                raise ValueError
        assert stx.is_safe(app)


class TestBind:
    def test_bind_marshals_background_puts(self):
        app = _MockApp()
        store = ReactiveStore()
        stx.bind(app, store)

        t = threading.Thread(target=lambda: store.put(Status, "bg"))
        t.start()
        t.join(timeout=2)

        assert store.get_latest(Status) == "bg"
        assert len(app._call_from_thread_log) == 1
