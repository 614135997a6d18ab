"""HTTP client for posting events to a running listener.

Meant to be called from a hostapd_cli action script, which is invoked
as ``<script> <interface> <event> <mac>`` for every station event.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from eventrelay.domain.models import Action, Event, EventName, Payload

logger = logging.getLogger(__name__)


class EventClientError(Exception):
    """Raised when the listener rejects an event or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EventClient:
    """Sends event payloads to the eventrelay listener."""

    def __init__(
        self,
        base_url: str = "http://localhost:9200",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def send(self, payload: Payload) -> None:
        """POST a payload; raise EventClientError on any non-200 reply."""
        body = payload.model_dump_json(exclude_none=True)
        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport,
        ) as client:
            try:
                resp = await client.post(
                    "/", content=body, headers={"Content-Type": "application/json"},
                )
            except httpx.HTTPError as e:
                raise EventClientError(f"HTTP request to {self._base_url} failed: {e}") from e
        if resp.status_code != 200:
            raise EventClientError(resp.text, status_code=resp.status_code)
        logger.debug("Event %s accepted", payload.event.name)

    async def send_wireless_status_update(
        self,
        client_mac: str,
        action: str,
        interface: str | None = None,
        cmd: str | None = None,
        interval: float | None = None,
        only_for: list[str] | None = None,
    ) -> None:
        event_params: dict[str, Any] = {"client_mac_address": client_mac, "action": action}
        if interface:
            event_params["interface"] = interface
        action_params: dict[str, Any] = {}
        if interval is not None:
            action_params["interval"] = interval
        if only_for:
            action_params["only_for"] = list(only_for)
        payload = Payload(
            event=Event(
                name=EventName.WIRELESS_STATUS_UPDATE.value,
                params=event_params,
                separator=" ",
            ),
            action=Action(cmd=cmd, params=action_params),
        )
        await self.send(payload)
