"""Command-line interface for eventrelay.

Provides the main entry point for running the HTTP listener, or for
pushing a single payload file through the dispatcher without a server.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from eventrelay.config.settings import Settings
from eventrelay.dispatcher.debounce import DebounceState
from eventrelay.dispatcher.dispatcher import EventDispatcher
from eventrelay.dispatcher.errors import DispatchError
from eventrelay.dispatcher.runner import ShellCommandRunner

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="eventrelay",
        description="Debounced event-to-command relay",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/eventrelay.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP event listener")
    serve_parser.add_argument("--host", type=str, default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")

    dispatch_parser = subparsers.add_parser(
        "dispatch", help="Dispatch one JSON payload file and print the outcome",
    )
    dispatch_parser.add_argument(
        "payload", type=Path,
        help="Path to a JSON payload file ('-' reads stdin)",
    )

    notify_parser = subparsers.add_parser(
        "notify",
        help="Forward a hostapd_cli action event (<interface> <event> <mac>) to a listener",
    )
    notify_parser.add_argument("interface", help="Access point interface")
    notify_parser.add_argument("event", help="hostapd event, e.g. AP-STA-CONNECTED")
    notify_parser.add_argument("mac", help="Client MAC address")
    notify_parser.add_argument(
        "--url", default="http://localhost:9200", help="Listener base URL",
    )
    notify_parser.add_argument("--cmd", default=None, help="Command for the listener to run")
    notify_parser.add_argument(
        "--interval", type=float, default=None, help="Debounce window in seconds",
    )
    notify_parser.add_argument(
        "--only-for", action="append", default=None, metavar="MAC",
        help="Restrict the command to this client (repeatable)",
    )

    return parser.parse_args(argv)


def build_dispatcher(settings: Settings) -> EventDispatcher:
    """Wire an EventDispatcher from the dispatch settings."""
    cfg = settings.dispatch
    return EventDispatcher(
        runner=ShellCommandRunner(shell=cfg.shell, timeout=cfg.command_timeout),
        state=DebounceState(max_age=cfg.state_max_age),
        default_interval=cfg.default_interval,
    )


async def _dispatch_file(dispatcher: EventDispatcher, path: Path) -> int:
    """Run a payload file through the dispatcher. Returns the exit status."""
    body = sys.stdin.read() if str(path) == "-" else path.read_text()
    try:
        outcome = await dispatcher.handle_body(body)
    except DispatchError as e:
        print(f"failed processing body: {e}", file=sys.stderr)
        return 1
    print(f"Result: {outcome.status.value}")
    if outcome.output:
        print(outcome.output, end="" if outcome.output.endswith("\n") else "\n")
    return 0


async def _notify(args: argparse.Namespace) -> int:
    """Forward one hostapd station event. Returns the exit status."""
    from eventrelay.client import EventClient, EventClientError
    from eventrelay.domain.models import ClientAction

    if ClientAction.from_raw(args.event) is None:
        logger.debug("Ignoring hostapd event %s", args.event)
        return 0

    client = EventClient(base_url=args.url)
    try:
        await client.send_wireless_status_update(
            client_mac=args.mac,
            action=args.event,
            interface=args.interface,
            cmd=args.cmd,
            interval=args.interval,
            only_for=args.only_for,
        )
    except EventClientError as e:
        print(f"Listener rejected event: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the eventrelay CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from eventrelay.config.settings import load_settings
    from eventrelay.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)
    dispatcher = build_dispatcher(settings)

    if args.command == "serve":
        from eventrelay.endpoint.server import create_app
        import uvicorn

        host = args.host or settings.server.host
        port = args.port or settings.server.port
        logger.info("Starting web handler on %s:%d", host, port)
        uvicorn.run(create_app(dispatcher=dispatcher), host=host, port=port)

    elif args.command == "dispatch":
        sys.exit(asyncio.run(_dispatch_file(dispatcher, args.payload)))

    elif args.command == "notify":
        sys.exit(asyncio.run(_notify(args)))


if __name__ == "__main__":
    main()
