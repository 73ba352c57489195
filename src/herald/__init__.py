"""Herald: outgoing HTTP response state for synchronous handlers.

A ResponseState collects status, body and headers, reconciles them with
whatever the transport underneath already queued, and commits exactly once.

Basic usage::

    from herald import BufferedTransport, ResponseState

    transport = BufferedTransport([("X-Powered-By", "herald")])
    response = ResponseState({"a": 1}, transport=transport)
    response.remove_x_powered_by_header()
    response.add_header("Content-Type", "application/json")
    sent = response.send_json()  # SentResponse(status=200, ...)

Serving handlers over ASGI::

    from herald.server.handler import asgi_app

    app = asgi_app(handler)
"""

__version__ = "0.1.0"
__all__ = [
    "BufferedTransport",
    "ConfigurationError",
    "DuplicateHeaderError",
    "HeaderError",
    "Headers",
    "HeadersAlreadySentError",
    "HeraldError",
    "MissingHeaderError",
    "ResponseAlreadySentError",
    "ResponseConfig",
    "ResponseState",
    "SentResponse",
    "SerializationError",
    "Transport",
    "TransportClosedError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import herald`` fast while providing a clean top-level API.
    """
    if name in ("ResponseState", "SentResponse"):
        from herald.http import response as _resp

        return getattr(_resp, name)

    if name in ("BufferedTransport", "Transport"):
        from herald.http import transport as _transport

        return getattr(_transport, name)

    if name == "Headers":
        from herald.http.headers import Headers

        return Headers

    if name == "ResponseConfig":
        from herald.config import ResponseConfig

        return ResponseConfig

    if name in (
        "ConfigurationError",
        "DuplicateHeaderError",
        "HeaderError",
        "HeadersAlreadySentError",
        "HeraldError",
        "MissingHeaderError",
        "ResponseAlreadySentError",
        "SerializationError",
        "TransportClosedError",
    ):
        from herald import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
