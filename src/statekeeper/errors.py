"""Exceptions raised by statekeeper."""

from __future__ import annotations


class StateKeeperError(Exception):
    """Base class for all statekeeper errors."""


class UninitializedDependencyError(StateKeeperError):
    """A command touched the store outside of a dispatch."""


class MissingStreamError(StateKeeperError):
    """The store produced no stream for a key. Should never happen."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No stream found for key: {name}")
        self.name = name
