"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from conftest import make_payload
from eventrelay.cli import build_dispatcher, main, parse_args
from eventrelay.client import EventClientError
from eventrelay.config.settings import Settings
from eventrelay.dispatcher.runner import ShellCommandRunner


class TestParseArgs:
    def test_serve(self) -> None:
        args = parse_args(["serve", "--port", "9300"])
        assert args.command == "serve"
        assert args.port == 9300
        assert args.host is None

    def test_notify(self) -> None:
        args = parse_args([
            "notify", "wlan0", "AP-STA-CONNECTED", "aa:bb",
            "--only-for", "aa:bb", "--only-for", "cc:dd", "--interval", "60",
        ])
        assert args.interface == "wlan0"
        assert args.only_for == ["aa:bb", "cc:dd"]
        assert args.interval == 60.0

    def test_no_command(self) -> None:
        assert parse_args([]).command is None


class TestBuildDispatcher:
    def test_uses_dispatch_settings(self) -> None:
        settings = Settings(dispatch={"shell": "/bin/bash", "command_timeout": 5, "state_max_age": 60})
        dispatcher = build_dispatcher(settings)
        assert isinstance(dispatcher.runner, ShellCommandRunner)
        assert dispatcher.runner.shell == "/bin/bash"
        assert dispatcher.runner.timeout == 5
        assert dispatcher.state.max_age == 60


class TestMain:
    def _config(self, tmp_path: Path) -> str:
        path = tmp_path / "eventrelay.yaml"
        path.write_text("logging:\n  level: WARNING\n")
        return str(path)

    def test_dispatch_runs_payload(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        payload = tmp_path / "event.json"
        payload.write_text(json.dumps(make_payload(cmd="echo relayed")))
        with pytest.raises(SystemExit) as excinfo:
            main(["-c", self._config(tmp_path), "dispatch", str(payload)])
        assert excinfo.value.code == 0
        out = capsys.readouterr().out
        assert "Result: executed" in out
        assert "relayed" in out

    def test_dispatch_reports_errors(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        payload = tmp_path / "event.json"
        payload.write_text(json.dumps(make_payload(name="unknown")))
        with pytest.raises(SystemExit) as excinfo:
            main(["-c", self._config(tmp_path), "dispatch", str(payload)])
        assert excinfo.value.code == 1
        assert "is not supported" in capsys.readouterr().err

    def test_notify_ignores_other_hostapd_events(self, tmp_path: Path) -> None:
        with patch("eventrelay.client.EventClient.send", new=AsyncMock()) as send:
            with pytest.raises(SystemExit) as excinfo:
                main(["-c", self._config(tmp_path), "notify", "wlan0", "WPS-PBC-ACTIVE", "aa:bb"])
        assert excinfo.value.code == 0
        send.assert_not_called()

    def test_notify_forwards_station_events(self, tmp_path: Path) -> None:
        with patch("eventrelay.client.EventClient.send", new=AsyncMock()) as send:
            with pytest.raises(SystemExit) as excinfo:
                main([
                    "-c", self._config(tmp_path),
                    "notify", "wlan0", "AP-STA-CONNECTED", "aa:bb", "--cmd", "true",
                ])
        assert excinfo.value.code == 0
        payload = send.call_args.args[0]
        assert payload.event.params["client_mac_address"] == "aa:bb"
        assert payload.action.cmd == "true"

    def test_notify_reports_rejection(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        error = EventClientError("listener returned 400")
        with patch("eventrelay.client.EventClient.send", new=AsyncMock(side_effect=error)):
            with pytest.raises(SystemExit) as excinfo:
                main([
                    "-c", self._config(tmp_path),
                    "notify", "wlan0", "AP-STA-DISCONNECTED", "aa:bb",
                ])
        assert excinfo.value.code == 1
        assert "listener returned 400" in capsys.readouterr().err

    def test_serve_starts_uvicorn(self, tmp_path: Path) -> None:
        with patch("uvicorn.run") as run:
            main(["-c", self._config(tmp_path), "serve", "--port", "9301"])
        run.assert_called_once()
        assert run.call_args.kwargs["port"] == 9301
        assert run.call_args.kwargs["host"] == "0.0.0.0"
