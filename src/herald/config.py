"""Response configuration.

ResponseConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, validated once at construction.
"""

from dataclasses import dataclass

from herald.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ResponseConfig:
    """How responses are encoded and which transport defaults exist.

    All fields have sensible defaults. Override what you need::

        config = ResponseConfig(powered_by="herald", json_ensure_ascii=False)
    """

    # Body encoding
    encoding: str = "utf-8"

    # JSON bodies (send_json). Defaults are strict: escaped non-ASCII, no NaN.
    json_ensure_ascii: bool = True
    json_allow_nan: bool = False
    json_separators: tuple[str, str] = (",", ":")

    # Diagnostic header stripped by remove_x_powered_by_header()
    powered_by_header: str = "X-Powered-By"

    # Transport defaults, queued before any handler runs (ASGI bridge)
    powered_by: str | None = None
    default_headers: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        if not self.powered_by_header.strip():
            msg = "powered_by_header must be a non-empty header name"
            raise ConfigurationError(msg)
        try:
            "".encode(self.encoding)
        except LookupError:
            msg = f"Unknown body encoding: {self.encoding!r}"
            raise ConfigurationError(msg) from None
        if len(self.json_separators) != 2:
            msg = "json_separators must be an (item, key) pair"
            raise ConfigurationError(msg)
        for pair in self.default_headers:
            if len(pair) != 2 or not pair[0]:
                msg = f"default_headers entries must be (name, value) pairs, got {pair!r}"
                raise ConfigurationError(msg)

    @property
    def transport_defaults(self) -> tuple[tuple[str, str], ...]:
        """Headers a fresh transport starts with, powered-by first."""
        if self.powered_by is None:
            return self.default_headers
        return ((self.powered_by_header, self.powered_by), *self.default_headers)
