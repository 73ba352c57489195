"""ASGI response sending: translates a committed BufferedTransport to ASGI messages."""

import logging

from herald._internal.asgi import Send
from herald.http.transport import BufferedTransport

logger = logging.getLogger("herald.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(transport: BufferedTransport, send: Send) -> None:
    """Translate a terminated transport into ASGI send() calls."""
    status = transport.status_code
    raw_headers: list[tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in transport.headers
        if name.lower() != "content-length"
    ]

    body = transport.body if _body_allowed(status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
