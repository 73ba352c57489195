"""The Transport protocol and an in-memory implementation.

A transport is the protocol layer underneath a ResponseState. It may
already hold headers (server defaults, a framework's ``X-Powered-By``)
before any handler runs, it may hold stray output that has not been
flushed yet, and once the headers hit the wire it refuses to change them.

Any object with the right methods is a transport. The framework checks
the shape, not the lineage.
"""

import logging
from typing import Protocol, runtime_checkable

from herald.config import ResponseConfig
from herald.errors import HeadersAlreadySentError, TransportClosedError
from herald.http.headers import format_header, header_key

logger = logging.getLogger("herald.http")


@runtime_checkable
class Transport(Protocol):
    """What ResponseState needs from the layer that transmits a response."""

    def is_headers_sent(self) -> bool: ...

    def list_queued_headers(self) -> list[tuple[str, str]]: ...

    def queue_header(self, name: str, value: str, replace: bool) -> None: ...

    def drop_header(self, name: str) -> None: ...

    def set_status_code(self, code: int) -> None: ...

    def write_body_and_terminate(self, body: bytes) -> None: ...

    def has_buffered_unflushed_output(self) -> bool: ...

    def discard_buffered_output(self) -> None: ...


class BufferedTransport:
    """A transport that keeps the whole response in memory.

    Behaves like a real protocol layer: headers are mutable until the
    first flush or the terminal write, after which every header change
    raises ``HeadersAlreadySentError``. The ASGI bridge reads the
    committed ``status_code``, ``headers`` and ``body`` once the handler
    has terminated the cycle.

    Usage::

        transport = BufferedTransport([("X-Powered-By", "herald")])
        ResponseState("hi", transport=transport).send()
        transport.status_code, transport.body  # (200, b"hi")
    """

    __slots__ = ("_body", "_buffer", "_headers", "_headers_sent", "_status", "_terminated")

    def __init__(
        self,
        default_headers: tuple[tuple[str, str], ...] | list[tuple[str, str]] = (),
        *,
        config: ResponseConfig | None = None,
    ) -> None:
        if config is not None:
            default_headers = (*config.transport_defaults, *default_headers)
        self._headers: list[tuple[str, str]] = list(default_headers)
        self._status = 200
        self._buffer: list[bytes] = []
        self._body = b""
        self._headers_sent = False
        self._terminated = False

    # -- Transport protocol --

    def is_headers_sent(self) -> bool:
        return self._headers_sent

    def list_queued_headers(self) -> list[tuple[str, str]]:
        return list(self._headers)

    def queue_header(self, name: str, value: str, replace: bool) -> None:
        self._guard_headers(name)
        if replace:
            key = header_key(name)
            self._headers = [(n, v) for n, v in self._headers if header_key(n) != key]
        self._headers.append((name, value))

    def drop_header(self, name: str) -> None:
        self._guard_headers(name)
        key = header_key(name)
        self._headers = [(n, v) for n, v in self._headers if header_key(n) != key]

    def set_status_code(self, code: int) -> None:
        self._guard_headers()
        self._status = code

    def write_body_and_terminate(self, body: bytes) -> None:
        self._guard_open()
        self._headers_sent = True
        self._body += b"".join(self._buffer) + body
        self._buffer.clear()
        self._terminated = True
        logger.debug("Transport terminated: %d, %d body bytes", self._status, len(self._body))

    def has_buffered_unflushed_output(self) -> bool:
        return any(self._buffer)

    def discard_buffered_output(self) -> None:
        self._buffer.clear()

    # -- Output buffering --

    def write(self, data: bytes | str) -> None:
        """Buffer output without committing it (stray handler output)."""
        self._guard_open()
        self._buffer.append(data.encode("utf-8") if isinstance(data, str) else data)

    def flush(self) -> None:
        """Commit buffered output. Headers are considered sent from here on."""
        self._guard_open()
        self._headers_sent = True
        self._body += b"".join(self._buffer)
        self._buffer.clear()

    # -- Committed state --

    @property
    def status_code(self) -> int:
        return self._status

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._headers)

    @property
    def body(self) -> bytes:
        return self._body

    @property
    def is_terminated(self) -> bool:
        return self._terminated

    def raw_lines(self) -> list[str]:
        """Queued headers as ``Canonical-Name: value`` lines."""
        return [format_header(name, value) for name, value in self._headers]

    def _guard_headers(self, name: str = "") -> None:
        if self._headers_sent:
            raise HeadersAlreadySentError(name)

    def _guard_open(self) -> None:
        if self._terminated:
            msg = "Response cycle already terminated, no further output is permitted"
            raise TransportClosedError(msg)
