"""Outgoing HTTP response state, committed to a Transport exactly once.

A ResponseState collects a status code, a body, and the headers the
handler plans to send. The transport underneath may already have headers
queued; reads see both, planned headers taking precedence. ``send()`` and
``send_json()`` are terminal: they commit everything and return a
``SentResponse``, after which the state refuses further use.
"""

from __future__ import annotations

import json as json_module
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from herald.config import ResponseConfig
from herald.errors import (
    DuplicateHeaderError,
    HeadersAlreadySentError,
    MissingHeaderError,
    ResponseAlreadySentError,
    SerializationError,
)
from herald.http.headers import Headers, canonical_name, header_key, merge_headers
from herald.http.transport import Transport

logger = logging.getLogger("herald.http")

_DEFAULT_CONFIG = ResponseConfig()


@dataclass(frozen=True, slots=True)
class SentResponse:
    """What a terminal send committed to the transport.

    ``status`` is ``None`` when the transport had already sent its headers,
    so no status code went out with this response.
    """

    status: int | None
    headers: tuple[tuple[str, str], ...]
    body: bytes


class ResponseState:
    """An HTTP response being assembled by its (single) owner.

    Construct with the content, then add or overwrite headers and finish
    with ``send()`` or ``send_json()``. Header mutators return the state
    itself so calls chain::

        ResponseState("hi", 201, transport=transport).add_header(
            "Content-Type", "text/plain"
        ).send()
    """

    __slots__ = ("_config", "_planned", "_sent", "_transport", "content", "status_code")

    def __init__(
        self,
        content: Any = None,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
        *,
        transport: Transport,
        config: ResponseConfig | None = None,
    ) -> None:
        self.content = content
        self.status_code = status_code
        self._transport = transport
        self._config = config or _DEFAULT_CONFIG
        # lowercased name -> (name as given, value)
        self._planned: dict[str, tuple[str, str]] = {}
        for name, value in (headers or {}).items():
            self._planned[header_key(name)] = (name, value)
        self._sent = False

    # -- Planned headers --

    def add_header(self, name: str, value: str) -> ResponseState:
        """Plan a new header. Raises ``DuplicateHeaderError`` if already planned."""
        self._guard_sent()
        key = header_key(name)
        if key in self._planned:
            raise DuplicateHeaderError(name)
        self._planned[key] = (name, value)
        return self

    def set_header(self, name: str, value: str) -> ResponseState:
        """Overwrite a planned header. Raises ``MissingHeaderError`` if not planned.

        Only planned headers count: a header that exists solely in the
        transport's queue cannot be overwritten here.
        """
        self._guard_sent()
        key = header_key(name)
        if key not in self._planned:
            raise MissingHeaderError(name, "overwrite")
        self._planned[key] = (self._planned[key][0], value)
        return self

    def remove_header(self, name: str) -> ResponseState:
        """Remove a header from the transport queue and from the plan.

        Raises ``MissingHeaderError`` if the header is neither planned nor
        queued, and ``HeadersAlreadySentError`` once the transport has put
        headers on the wire.
        """
        self._guard_sent()
        if not self.has_response_header(name):
            raise MissingHeaderError(name, "remove")
        if self._transport.is_headers_sent():
            raise HeadersAlreadySentError(name)
        self._transport.drop_header(name)
        self._planned.pop(header_key(name), None)
        return self

    # -- Effective headers --

    def get_response_headers(self) -> Headers:
        """Every header that would go out: planned ones, then transport ones."""
        self._guard_sent()
        return merge_headers(self._planned.values(), self._transport.list_queued_headers())

    def has_response_header(self, name: str) -> bool:
        return name in self.get_response_headers()

    # -- Transport housekeeping --

    def remove_x_powered_by_header(self) -> ResponseState:
        """Strip the diagnostic powered-by header from the transport, if possible.

        Never fails: a missing header or already-sent headers make this a
        no-op.
        """
        self._guard_sent()
        header = self._config.powered_by_header
        if self._transport.is_headers_sent():
            logger.debug("Headers already sent, leaving %s in place", header)
            return self
        if self.has_response_header(header):
            self._transport.drop_header(header)
        return self

    def clear_ready_headers(self) -> ResponseState:
        """Drop every header the transport has queued. Planned headers stay."""
        self._guard_sent()
        if self._transport.is_headers_sent():
            logger.warning("Headers already sent, cannot clear queued headers")
            return self
        queued = self._transport.list_queued_headers()
        if not queued:
            return self
        for name in dict.fromkeys(header_key(n) for n, _ in queued):
            self._transport.drop_header(name)
        return self

    def clean_content(self) -> ResponseState:
        """Discard output the transport buffered but has not flushed."""
        self._guard_sent()
        if self._transport.has_buffered_unflushed_output():
            self._transport.discard_buffered_output()
        return self

    # -- Terminal send --

    def send(self) -> SentResponse:
        """Commit headers, status and body. The state is unusable afterwards."""
        self._guard_sent()
        return self._commit(self._encode(self.content))

    def send_json(self) -> SentResponse:
        """Like ``send()``, with the content serialised to JSON text first.

        Raises ``SerializationError`` before anything reaches the transport
        when the content cannot be serialised.
        """
        self._guard_sent()
        config = self._config
        try:
            text = json_module.dumps(
                self.content,
                ensure_ascii=config.json_ensure_ascii,
                allow_nan=config.json_allow_nan,
                separators=config.json_separators,
            )
        except (TypeError, ValueError, RecursionError) as exc:
            msg = f"Cannot serialise response body to JSON: {exc}"
            raise SerializationError(msg) from exc
        return self._commit(text.encode(config.encoding))

    @property
    def is_sent(self) -> bool:
        return self._sent

    def _encode(self, content: Any) -> bytes:
        if content is None:
            return b""
        if isinstance(content, bytes | bytearray):
            return bytes(content)
        return str(content).encode(self._config.encoding)

    def _commit(self, body: bytes) -> SentResponse:
        transport = self._transport
        lines = tuple((canonical_name(name), value) for name, value in self._planned.values())
        status: int | None = None
        if transport.is_headers_sent():
            if lines:
                raise HeadersAlreadySentError(lines[0][0])
            logger.warning("Headers already sent, writing body only")
        else:
            queued = {header_key(n) for n, _ in transport.list_queued_headers()}
            for name, value in lines:
                transport.queue_header(name, value, replace=header_key(name) in queued)
            transport.set_status_code(self.status_code)
            status = self.status_code
        self._sent = True
        logger.debug(
            "Sending response: %d, %d headers, %d body bytes",
            self.status_code,
            len(lines),
            len(body),
        )
        transport.write_body_and_terminate(body)
        return SentResponse(status=status, headers=lines, body=body)

    def _guard_sent(self) -> None:
        if self._sent:
            msg = "Response was already sent; a ResponseState commits exactly once"
            raise ResponseAlreadySentError(msg)

    def __repr__(self) -> str:
        state = "sent" if self._sent else "assembling"
        return f"<ResponseState {self.status_code} {state} headers={len(self._planned)}>"
