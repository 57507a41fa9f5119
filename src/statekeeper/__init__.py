"""statekeeper: keyed reactive state with command-based writes."""

from importlib.metadata import version as _version

__version__ = _version("statekeeper")

from statekeeper.key import StateKey
from statekeeper.stream import StateStream, Subscription
from statekeeper.store import ReactiveStore, default_store
from statekeeper.command import (
    BaseCommand,
    Command,
    FunctionCommand,
    StateAccess,
    UpdateStateCommand,
    UpdateStateParam,
    command,
)
from statekeeper.dispatcher import Dispatcher, default_dispatcher
from statekeeper.errors import MissingStreamError, StateKeeperError, UninitializedDependencyError
# textual NOT auto-imported — opt-in only

__all__ = [
    "StateKey",
    "StateStream",
    "Subscription",
    "ReactiveStore",
    "default_store",
    "Command",
    "BaseCommand",
    "FunctionCommand",
    "StateAccess",
    "UpdateStateCommand",
    "UpdateStateParam",
    "command",
    "Dispatcher",
    "default_dispatcher",
    "StateKeeperError",
    "UninitializedDependencyError",
    "MissingStreamError",
]
