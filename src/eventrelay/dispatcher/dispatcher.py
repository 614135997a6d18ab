"""Event dispatcher: validate, debounce, filter, execute.

The dispatcher owns the debounce state for the lifetime of the process
and is shared by every request the endpoint handles.
"""

from __future__ import annotations

import logging
import math

from pydantic import JsonValue, ValidationError

from eventrelay.dispatcher.debounce import Clock, DebounceState
from eventrelay.dispatcher.errors import (
    CommandFailed,
    InvalidInterval,
    InvalidPayload,
    MalformedJSON,
    UnsupportedEvent,
    describe_value,
)
from eventrelay.dispatcher.runner import CommandRunner, ShellCommandRunner
from eventrelay.domain.models import (
    Action,
    ClientAction,
    DispatchOutcome,
    Event,
    EventName,
    OutcomeStatus,
    Payload,
    WirelessStatusUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 3600.0


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def coerce_interval(value: JsonValue, default: float = DEFAULT_INTERVAL) -> float:
    """Read the debounce window (seconds) from a raw JSON value.

    Accepts numbers and numeric strings. None means "use the default".
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidInterval(value)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise InvalidInterval(value) from None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidInterval(value) from None
    else:
        raise InvalidInterval(value)
    if not math.isfinite(number):
        raise InvalidInterval(value)
    return number


def coerce_identifier_list(value: JsonValue, key: str = "only_for") -> list[str]:
    """Read a list of client identifiers. None means an empty list."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidPayload(f'"{key}" must be a list of client identifiers')
    identifiers = []
    for item in value:
        if isinstance(item, str):
            identifiers.append(item)
            continue
        try:
            identifiers.append(str(item))
        except ValueError:
            # int too large for str conversion; cannot match a MAC address
            continue
    return identifiers


def matches_any(client: str, identifiers: list[str]) -> bool:
    """Case-insensitive membership test for MAC addresses."""
    folded = client.casefold()
    return any(folded == identifier.casefold() for identifier in identifiers)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class EventDispatcher:
    """Validates events and runs their actions subject to debouncing.

    Args:
        runner: Executes action commands. Defaults to ``sh -c``.
        state: Debounce state shared across requests. A fresh one is
               created when omitted.
        default_interval: Debounce window used when the action does not
                          specify ``interval``.
        clock: Time source for a freshly created state.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        state: DebounceState | None = None,
        default_interval: float = DEFAULT_INTERVAL,
        clock: Clock | None = None,
    ) -> None:
        self._runner = runner or ShellCommandRunner()
        if state is None:
            state = DebounceState(clock=clock) if clock is not None else DebounceState()
        self._state = state
        self._default_interval = default_interval

    @property
    def state(self) -> DebounceState:
        return self._state

    @property
    def runner(self) -> CommandRunner:
        return self._runner

    def validate(self, event: Event) -> WirelessStatusUpdate:
        """Check the event has everything its processing rule needs."""
        if event.name != EventName.WIRELESS_STATUS_UPDATE.value:
            raise UnsupportedEvent(event.name)
        return self._wireless_status_update(event)

    async def process(self, event: Event, action: Action) -> DispatchOutcome:
        """Apply the debounce window and allow-list, then run the command."""
        update = self.validate(event)
        interval = coerce_interval(action.params.get("interval"), self._default_interval)
        client = update.client_mac

        bypass = update.action is ClientAction.CONNECTED
        if not self._state.claim(client, interval, bypass=bypass):
            logger.info("Debounced %s event for %s", update.action.value, client)
            return DispatchOutcome(status=OutcomeStatus.DEBOUNCED, client_mac=client)

        only_for = coerce_identifier_list(action.params.get("only_for"))
        if only_for and not matches_any(client, only_for):
            logger.info("Client %s not in only_for, skipping action", client)
            return DispatchOutcome(status=OutcomeStatus.FILTERED, client_mac=client)

        if action.cmd is None:
            logger.info("No command for %s event from %s", update.action.value, client)
            return DispatchOutcome(status=OutcomeStatus.NO_COMMAND, client_mac=client)

        logger.info(
            "Running action for %s event from %s (params=%s)",
            update.action.value, client, action.params,
        )
        result = await self._runner.run(action.cmd)
        if result.exit_code != 0:
            logger.warning("Command exited with %d for %s", result.exit_code, client)
            raise CommandFailed(result.exit_code, result.output)
        logger.info("output: '%s'", result.output)
        return DispatchOutcome(
            status=OutcomeStatus.EXECUTED, client_mac=client, output=result.output,
        )

    async def dispatch(self, payload: Payload) -> DispatchOutcome:
        self.validate(payload.event)
        return await self.process(payload.event, payload.action)

    async def handle_body(self, body: bytes | str) -> DispatchOutcome:
        """Decode a raw request body and dispatch it."""
        try:
            payload = Payload.model_validate_json(body)
        except ValidationError as e:
            raise MalformedJSON(f"failed to unmarshal body bytes: {_summarize(e)}") from e
        return await self.dispatch(payload)

    @staticmethod
    def _wireless_status_update(event: Event) -> WirelessStatusUpdate:
        params = event.params
        client_mac = params.get("client_mac_address")
        if not isinstance(client_mac, str) or not client_mac:
            raise InvalidPayload(
                'mandatory key "client_mac_address" is missing from event params'
            )
        raw_action = params.get("action")
        action = ClientAction.from_raw(raw_action)
        if action is None:
            raise InvalidPayload(
                f'mandatory key "action" is missing or has invalid value: {describe_value(raw_action)}'
            )
        interface = params.get("interface")
        return WirelessStatusUpdate(
            client_mac=client_mac,
            action=action,
            interface=interface if isinstance(interface, str) else None,
        )


def _summarize(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]
