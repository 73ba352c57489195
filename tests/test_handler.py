"""Tests for herald.server.handler — the ASGI bridge around sync handlers."""

import logging

import pytest

from herald.config import ResponseConfig
from herald.http.response import ResponseState
from herald.server.handler import asgi_app

_SCOPE = {"type": "http", "method": "GET", "path": "/", "headers": []}


async def _call(app, scope: dict = _SCOPE) -> list[dict]:
    messages: list[dict] = []

    async def receive() -> dict:
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message: dict) -> None:
        messages.append(message)

    await app(scope, receive, send)
    return messages


class TestAsgiApp:
    @pytest.mark.asyncio
    async def test_handler_response_is_sent(self) -> None:
        def handler(scope, transport) -> None:
            ResponseState("hi", 201, transport=transport).add_header(
                "Content-Type", "text/plain"
            ).send()

        messages = await _call(asgi_app(handler))

        assert messages[0]["status"] == 201
        assert (b"content-type", b"text/plain") in messages[0]["headers"]
        assert messages[1]["body"] == b"hi"

    @pytest.mark.asyncio
    async def test_handler_sees_configured_defaults(self) -> None:
        seen: list[bool] = []

        def handler(scope, transport) -> None:
            response = ResponseState({"path": scope["path"]}, transport=transport)
            seen.append(response.has_response_header("X-Powered-By"))
            response.remove_x_powered_by_header().send_json()

        config = ResponseConfig(powered_by="herald", default_headers=(("Server", "herald"),))
        messages = await _call(asgi_app(handler, config=config))

        assert seen == [True]
        headers = dict(messages[0]["headers"])
        assert b"x-powered-by" not in headers
        assert headers[b"server"] == b"herald"
        assert messages[1]["body"] == b'{"path":"/"}'

    @pytest.mark.asyncio
    async def test_planned_header_is_sent_once(self) -> None:
        def handler(scope, transport) -> None:
            ResponseState("hi", transport=transport).add_header("X-Powered-By", "app").send()

        messages = await _call(asgi_app(handler, config=ResponseConfig(powered_by="herald")))

        powered = [v for n, v in messages[0]["headers"] if n == b"x-powered-by"]
        assert powered == [b"app"]

    @pytest.mark.asyncio
    async def test_handler_that_never_sends_yields_500(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(scope, transport) -> None:
            ResponseState("forgotten", transport=transport)

        with caplog.at_level(logging.WARNING, logger="herald.server"):
            messages = await _call(asgi_app(handler))

        assert messages[0]["status"] == 500
        assert messages[1]["body"] == b""
        assert "without sending a response" in caplog.text

    @pytest.mark.asyncio
    async def test_handler_error_propagates(self) -> None:
        def handler(scope, transport) -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await _call(asgi_app(handler))

    @pytest.mark.asyncio
    async def test_lifespan_is_acknowledged(self) -> None:
        incoming = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        messages: list[dict] = []

        async def receive() -> dict:
            return next(incoming)

        async def send(message: dict) -> None:
            messages.append(message)

        app = asgi_app(lambda scope, transport: None)
        await app({"type": "lifespan"}, receive, send)

        assert messages == [
            {"type": "lifespan.startup.complete"},
            {"type": "lifespan.shutdown.complete"},
        ]

    @pytest.mark.asyncio
    async def test_other_scopes_are_ignored(self) -> None:
        messages = await _call(asgi_app(lambda scope, transport: None), {"type": "websocket"})
        assert messages == []
