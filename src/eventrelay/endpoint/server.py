"""FastAPI HTTP server for the event listener.

Every request, whatever its path, lands in a single handler that accepts
only ``POST`` with a JSON content type, hands the raw body to the
EventDispatcher and reports the result:

    200  (empty body)                          event accepted
    400  Only POST requests with ...           wrong method / content type
    400  failed processing body: <detail>      bad JSON, validation or command failure
    500  Failed to read request body           body could not be read
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.requests import ClientDisconnect

from eventrelay.dispatcher.debounce import DebounceState
from eventrelay.dispatcher.dispatcher import EventDispatcher
from eventrelay.dispatcher.errors import DispatchError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 9200

ONLY_POST_JSON = "Only POST requests with application/json Content-Type are allowed"
UNREADABLE_BODY = "Failed to read request body"


class UnreadableBody(Exception):
    """Raised when the request body cannot be read from the client."""


def _is_json(content_type: str | None) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json"


async def _read_body(request: Request) -> bytes:
    try:
        return await request.body()
    except ClientDisconnect as e:
        raise UnreadableBody(UNREADABLE_BODY) from e


def create_app(dispatcher: EventDispatcher | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        dispatcher: Optional pre-configured dispatcher (for testing or
                    custom runners). A default one with ``sh -c`` execution
                    is created otherwise.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state: DebounceState = app.state.dispatcher.state
        prune_task = None
        if state.max_age is not None:
            prune_task = asyncio.create_task(_prune_state(state, state.max_age))
        logger.info("Event listener started")
        yield
        if prune_task is not None:
            prune_task.cancel()
            try:
                await prune_task
            except asyncio.CancelledError:
                pass
        logger.info(
            "Event listener stopped (%d client(s) tracked)",
            len(app.state.dispatcher.state),
        )

    app = FastAPI(
        title="eventrelay",
        description="Debounced event-to-command relay",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.dispatcher = dispatcher or EventDispatcher()

    async def handle_event(request: Request) -> Response:
        if not _is_json(request.headers.get("content-type")):
            return PlainTextResponse(ONLY_POST_JSON, status_code=400)

        try:
            body = await _read_body(request)
        except UnreadableBody:
            logger.warning("Client went away before the body was read")
            return PlainTextResponse(UNREADABLE_BODY, status_code=500)

        d: EventDispatcher = app.state.dispatcher
        try:
            outcome = await d.handle_body(body)
        except DispatchError as e:
            logger.warning("Rejected event: %s", e)
            return PlainTextResponse(f"failed processing body: {e}", status_code=400)

        logger.debug("Dispatched event: %s", outcome.status.value)
        return Response(status_code=200)

    async def reject_method(request: Request, exc: Exception) -> Response:
        return PlainTextResponse(ONLY_POST_JSON, status_code=400)

    # Routes only accept POST; every other method, including ones Starlette
    # has no name for, surfaces as a 405 which is answered here instead.
    app.add_exception_handler(405, reject_method)
    app.add_api_route("/", handle_event, methods=["POST"], include_in_schema=False)
    app.add_api_route(
        "/{path:path}", handle_event, methods=["POST"], include_in_schema=False,
    )

    return app


async def _prune_state(state: DebounceState, period: float) -> None:
    """Periodically forget clients that have not been seen for max_age."""
    while True:
        removed = state.prune()
        if removed:
            logger.info("Forgot %d stale client(s)", removed)
        await asyncio.sleep(period)


def main(host: str = "0.0.0.0", port: int = DEFAULT_PORT) -> None:
    """Entry point for running the listener standalone."""
    app = create_app()
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
