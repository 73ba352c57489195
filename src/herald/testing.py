"""Test helpers for code that drives a ResponseState.

``RecordingTransport`` is a fake transport that records every call it
receives, in order, so tests can assert exactly what reached the wire::

    transport = RecordingTransport()
    ResponseState("hi", 201, transport=transport).send()
    assert transport.calls[-1] == ("write_body_and_terminate", b"hi")
"""

from typing import Any

from herald.http.headers import header_key


class RecordingTransport:
    """Transport double with scriptable state and a call log.

    ``queued`` is the live header queue, ``buffered`` the unflushed output
    and ``headers_sent`` the wire flag; tests set them directly to model
    whatever the protocol layer did before the response was assembled.
    """

    __test__ = False  # Tell pytest this is not a test class

    def __init__(
        self,
        queued: list[tuple[str, str]] | None = None,
        *,
        headers_sent: bool = False,
        buffered: bytes = b"",
    ) -> None:
        self.queued: list[tuple[str, str]] = list(queued or [])
        self.headers_sent = headers_sent
        self.buffered = buffered
        self.status: int | None = None
        self.body: bytes | None = None
        self.calls: list[tuple[Any, ...]] = []

    def is_headers_sent(self) -> bool:
        return self.headers_sent

    def list_queued_headers(self) -> list[tuple[str, str]]:
        return list(self.queued)

    def queue_header(self, name: str, value: str, replace: bool) -> None:
        self.calls.append(("queue_header", name, value, replace))
        if replace:
            self.queued = [(n, v) for n, v in self.queued if header_key(n) != header_key(name)]
        self.queued.append((name, value))

    def drop_header(self, name: str) -> None:
        self.calls.append(("drop_header", name))
        self.queued = [(n, v) for n, v in self.queued if header_key(n) != header_key(name)]

    def set_status_code(self, code: int) -> None:
        self.calls.append(("set_status_code", code))
        self.status = code

    def write_body_and_terminate(self, body: bytes) -> None:
        self.calls.append(("write_body_and_terminate", body))
        self.headers_sent = True
        self.body = body

    def has_buffered_unflushed_output(self) -> bool:
        return bool(self.buffered)

    def discard_buffered_output(self) -> None:
        self.calls.append(("discard_buffered_output",))
        self.buffered = b""

    def raw_header_lines(self) -> list[str]:
        """The ``Name: value`` lines queued through ``queue_header``."""
        return [f"{call[1]}: {call[2]}" for call in self.calls if call[0] == "queue_header"]
