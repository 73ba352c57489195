"""Herald exception hierarchy.

Shared by ResponseState, the transports, and the ASGI bridge so every
module raises and catches the same types. Header operations validate
before they mutate, so a raised error never leaves partial state behind.
"""

from dataclasses import dataclass


class HeraldError(Exception):
    """Base for all herald-specific errors."""


class ConfigurationError(HeraldError):
    """Raised when a ``ResponseConfig`` value is invalid."""


@dataclass(frozen=True, slots=True)
class HeaderError(HeraldError):
    """A header operation that the current response state does not allow."""

    name: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return self.detail
        return f"Invalid operation on HTTP header [{self.name}]"


class DuplicateHeaderError(HeaderError):
    """``add_header`` on a name that is already planned.

    Use ``set_header`` to overwrite an existing value.
    """

    def __init__(self, name: str) -> None:
        super().__init__(name=name, detail=f"Cannot add HTTP header [{name}], it already exists.")


class MissingHeaderError(HeaderError):
    """``set_header`` or ``remove_header`` on a name that does not exist."""

    def __init__(self, name: str, action: str = "modify") -> None:
        super().__init__(
            name=name,
            detail=f"HTTP header [{name}] doesn't exist, nothing to {action}.",
        )


class HeadersAlreadySentError(HeaderError):
    """The transport already put the headers on the wire."""

    def __init__(self, name: str = "") -> None:
        detail = (
            f"Cannot change HTTP header [{name}], headers were already sent."
            if name
            else "Cannot change HTTP headers, headers were already sent."
        )
        super().__init__(name=name, detail=detail)


class SerializationError(HeraldError):
    """The response body could not be converted to JSON text.

    Raised by ``send_json`` before anything reaches the transport. The
    original encoder error is chained as ``__cause__``.
    """


class ResponseAlreadySentError(HeraldError):
    """An operation was attempted on a response that was already sent."""


class TransportClosedError(HeraldError):
    """Output was written to a transport after the response cycle ended."""
