"""ASGI application wrapping a synchronous response handler.

A handler is a plain function that receives the ASGI scope and a fresh
transport, builds a ``ResponseState`` on it, and sends it::

    def hello(scope, transport):
        ResponseState("hi", transport=transport).add_header(
            "Content-Type", "text/plain"
        ).send()

    app = asgi_app(hello, config=ResponseConfig(powered_by="herald"))

Handlers run in a worker thread so a blocking handler never stalls the
event loop. Each request gets its own transport; nothing is shared.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeAlias

import anyio.to_thread

from herald._internal.asgi import ASGIApp, Receive, Scope, Send
from herald.config import ResponseConfig
from herald.http.transport import BufferedTransport
from herald.server.sender import send_response

logger = logging.getLogger("herald.server")

Handler: TypeAlias = Callable[[Scope, BufferedTransport], Any]


def asgi_app(handler: Handler, *, config: ResponseConfig | None = None) -> ASGIApp:
    """Build an ASGI callable that serves every HTTP request with *handler*."""
    config = config or ResponseConfig()

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await _handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        transport = BufferedTransport(config=config)
        try:
            await anyio.to_thread.run_sync(handler, scope, transport)
        except Exception:
            logger.exception("Handler failed for %s %s", scope.get("method"), scope.get("path"))
            raise

        if not transport.is_terminated:
            logger.warning(
                "Handler for %s %s returned without sending a response",
                scope.get("method"),
                scope.get("path"),
            )
            transport = BufferedTransport()
            transport.set_status_code(500)
            transport.write_body_and_terminate(b"")

        await send_response(transport, send)

    return app


async def _handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge the ASGI lifespan protocol; there is nothing to set up."""
    while True:
        message = await receive()
        msg_type = message["type"]

        if msg_type == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif msg_type == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
