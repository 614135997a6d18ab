"""Shared test fixtures for the eventrelay test suite.

Provides a controllable clock, a command runner that records commands
instead of spawning processes, and payload builders.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from eventrelay.dispatcher.debounce import DebounceState
from eventrelay.dispatcher.dispatcher import EventDispatcher
from eventrelay.dispatcher.runner import CommandRunner
from eventrelay.domain.models import CommandResult

CLIENT_MAC = "AA:BB:CC:DD:EE:FF"
OTHER_MAC = "11:22:33:44:55:66"


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingRunner(CommandRunner):
    """CommandRunner that records commands and returns a canned result."""

    def __init__(self, exit_code: int = 0, output: str = "") -> None:
        self.commands: list[str] = []
        self.exit_code = exit_code
        self.output = output

    async def run(self, cmd: str) -> CommandResult:
        self.commands.append(cmd)
        return CommandResult(exit_code=self.exit_code, output=self.output)


# ---------------------------------------------------------------------------
# Dispatcher Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner(output="hi\n")


@pytest.fixture
def state(clock: FakeClock) -> DebounceState:
    return DebounceState(clock=clock)


@pytest.fixture
def dispatcher(runner: RecordingRunner, state: DebounceState) -> EventDispatcher:
    """A dispatcher wired to the fake clock and recording runner."""
    return EventDispatcher(runner=runner, state=state)


# ---------------------------------------------------------------------------
# Payload Fixtures
# ---------------------------------------------------------------------------


def make_payload(
    action: str = "AP-STA-CONNECTED",
    mac: str | None = CLIENT_MAC,
    cmd: str | None = "echo hi",
    name: str = "wireless_status_update",
    **action_params: Any,
) -> dict[str, Any]:
    """Build a wireless_status_update payload as a plain dict."""
    event_params: dict[str, Any] = {"action": action}
    if mac is not None:
        event_params["client_mac_address"] = mac
    action_section: dict[str, Any] = {"params": action_params}
    if cmd is not None:
        action_section["cmd"] = cmd
    return {
        "event": {"name": name, "params": event_params, "separator": " "},
        "action": action_section,
    }


def make_body(*args: Any, **kwargs: Any) -> bytes:
    return json.dumps(make_payload(*args, **kwargs)).encode()
