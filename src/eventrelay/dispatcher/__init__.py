"""Event dispatch: validation, per-client debouncing and command execution."""

from eventrelay.dispatcher.debounce import DebounceState
from eventrelay.dispatcher.dispatcher import EventDispatcher
from eventrelay.dispatcher.errors import (
    CommandFailed,
    DispatchError,
    InvalidInterval,
    InvalidPayload,
    MalformedJSON,
    UnsupportedEvent,
)
from eventrelay.dispatcher.runner import CommandRunner, ShellCommandRunner

__all__ = [
    "CommandFailed",
    "CommandRunner",
    "DebounceState",
    "DispatchError",
    "EventDispatcher",
    "InvalidInterval",
    "InvalidPayload",
    "MalformedJSON",
    "ShellCommandRunner",
    "UnsupportedEvent",
]
