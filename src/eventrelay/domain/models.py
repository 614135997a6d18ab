"""Core domain models for the eventrelay system.

These models describe the JSON payload accepted by the listener (an
event plus the action to take for it), the validated view of the one
supported event type, and the results flowing back out of the
dispatcher.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class EventName(str, enum.Enum):
    """Event types the dispatcher knows how to handle."""

    WIRELESS_STATUS_UPDATE = "wireless_status_update"


class ClientAction(str, enum.Enum):
    """Connection transition reported for a wireless client."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"

    @classmethod
    def from_raw(cls, raw: Any) -> ClientAction | None:
        """Map a raw hostapd action string onto a tag.

        Accepts ``AP-STA-CONNECTED`` / ``AP-STA-DISCONNECTED`` as sent by
        hostapd_cli action scripts, as well as the bare words, in any case.
        Returns None for anything else.
        """
        if not isinstance(raw, str):
            return None
        value = raw.strip().lower()
        if value.startswith("ap-sta-"):
            value = value[len("ap-sta-"):]
        try:
            return cls(value)
        except ValueError:
            return None


class OutcomeStatus(str, enum.Enum):
    """What the dispatcher did with an accepted event."""

    EXECUTED = "executed"  # Command ran and exited 0
    NO_COMMAND = "no_command"  # Event qualified but the action has no cmd
    DEBOUNCED = "debounced"  # Inside the debounce window
    FILTERED = "filtered"  # Client not in the only_for allow-list


# ---------------------------------------------------------------------------
# Payload Models
# ---------------------------------------------------------------------------


class Event(BaseModel):
    """The event half of a payload.

    ``params`` is an arbitrary JSON object; which keys are required
    depends on ``name``.
    """

    name: str = Field(default="", description="Event type, e.g. 'wireless_status_update'")
    params: dict[str, JsonValue] = Field(default_factory=dict)
    separator: str = Field(default="", description="Field separator used by the sender")

    @field_validator("params", mode="before")
    @classmethod
    def _params_none(cls, value: Any) -> Any:
        return {} if value is None else value


class Action(BaseModel):
    """The action half of a payload.

    ``cmd`` is handed to ``sh -c`` verbatim. A missing cmd means the event
    is only recorded, never acted upon.
    """

    cmd: str | None = Field(default=None, description="Shell command to execute")
    params: dict[str, JsonValue] = Field(default_factory=dict)

    @field_validator("params", mode="before")
    @classmethod
    def _params_none(cls, value: Any) -> Any:
        return {} if value is None else value


class Payload(BaseModel):
    """A complete request body: an event and what to do about it."""

    event: Event = Field(default_factory=Event)
    action: Action = Field(default_factory=Action)

    @field_validator("event", "action", mode="before")
    @classmethod
    def _section_none(cls, value: Any) -> Any:
        return {} if value is None else value


class WirelessStatusUpdate(BaseModel):
    """Validated view of a ``wireless_status_update`` event."""

    model_config = ConfigDict(frozen=True)

    client_mac: str = Field(min_length=1, description="MAC address of the wireless client")
    action: ClientAction
    interface: str | None = Field(default=None, description="Access point interface, if reported")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class CommandResult(BaseModel):
    """Exit status and combined stdout/stderr of a finished command."""

    model_config = ConfigDict(frozen=True)

    exit_code: int
    output: str = ""


class DispatchOutcome(BaseModel):
    """Result of a successful dispatch."""

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    client_mac: str | None = None
    output: str | None = None

    @property
    def executed(self) -> bool:
        return self.status == OutcomeStatus.EXECUTED
