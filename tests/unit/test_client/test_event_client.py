"""Tests for the EventClient HTTP sender."""

from __future__ import annotations

import json

import httpx
import pytest

from eventrelay.client import EventClient, EventClientError


def _transport(status: int = 200, text: str = "", seen: list | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, text=text)
    return httpx.MockTransport(handler)


class TestEventClient:
    def test_init_defaults(self) -> None:
        client = EventClient()
        assert client._base_url == "http://localhost:9200"

    def test_init_strips_slash(self) -> None:
        assert EventClient(base_url="http://ap.lan:9200/")._base_url == "http://ap.lan:9200"

    @pytest.mark.asyncio
    async def test_sends_wireless_status_update(self) -> None:
        seen: list[httpx.Request] = []
        client = EventClient(transport=_transport(seen=seen))
        await client.send_wireless_status_update(
            client_mac="AA:BB:CC:DD:EE:FF",
            action="AP-STA-CONNECTED",
            interface="wlan0",
            cmd="echo hi",
            interval=60,
            only_for=["AA:BB:CC:DD:EE:FF"],
        )

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert request.headers["content-type"] == "application/json"
        body = json.loads(request.content)
        assert body["event"]["name"] == "wireless_status_update"
        assert body["event"]["params"] == {
            "client_mac_address": "AA:BB:CC:DD:EE:FF",
            "action": "AP-STA-CONNECTED",
            "interface": "wlan0",
        }
        assert body["action"] == {
            "cmd": "echo hi",
            "params": {"interval": 60, "only_for": ["AA:BB:CC:DD:EE:FF"]},
        }

    @pytest.mark.asyncio
    async def test_no_cmd_is_omitted(self) -> None:
        seen: list[httpx.Request] = []
        client = EventClient(transport=_transport(seen=seen))
        await client.send_wireless_status_update("AA:BB", "AP-STA-DISCONNECTED")
        body = json.loads(seen[0].content)
        assert "cmd" not in body["action"]
        assert body["action"]["params"] == {}

    @pytest.mark.asyncio
    async def test_rejection_raises(self) -> None:
        client = EventClient(transport=_transport(400, "failed processing body: nope"))
        with pytest.raises(EventClientError, match="nope") as excinfo:
            await client.send_wireless_status_update("AA:BB", "AP-STA-CONNECTED")
        assert excinfo.value.status_code == 400

    @pytest.mark.asyncio
    async def test_connection_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = EventClient(transport=httpx.MockTransport(handler))
        with pytest.raises(EventClientError, match="failed"):
            await client.send_wireless_status_update("AA:BB", "AP-STA-CONNECTED")
