"""Domain models for eventrelay."""

from eventrelay.domain.models import (
    Action,
    ClientAction,
    CommandResult,
    DispatchOutcome,
    Event,
    EventName,
    OutcomeStatus,
    Payload,
    WirelessStatusUpdate,
)

__all__ = [
    "Action",
    "ClientAction",
    "CommandResult",
    "DispatchOutcome",
    "Event",
    "EventName",
    "OutcomeStatus",
    "Payload",
    "WirelessStatusUpdate",
]
