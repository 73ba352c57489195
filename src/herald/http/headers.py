"""Header names, the read-only Headers view, and the effective-header merge.

Header names are matched case-insensitively everywhere. On the wire
they take their canonical display form: every hyphen-separated segment
capitalised (``content-TYPE`` -> ``Content-Type``).
"""

from collections.abc import Iterable, Iterator, Mapping


def canonical_name(name: str) -> str:
    """Return the display form of a header name."""
    return "-".join(segment[:1].upper() + segment[1:].lower() for segment in name.split("-"))


def header_key(name: str) -> str:
    """Return the lookup key of a header name."""
    return name.lower()


def format_header(name: str, value: str) -> str:
    """Render one ``Canonical-Name: value`` header line."""
    return f"{canonical_name(name)}: {value}"


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value. Iteration yields
    each distinct name once, in canonical form, in insertion order.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        object.__setattr__(self, "_pairs", tuple(pairs))

    def __getitem__(self, key: str) -> str:
        key_lower = header_key(key)
        for name, value in self._pairs:
            if header_key(name) == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = header_key(key)
        return any(header_key(name) == key_lower for name, _ in self._pairs)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._pairs:
            key = header_key(name)
            if key not in seen:
                seen.add(key)
                yield canonical_name(name)

    def __len__(self) -> int:
        return len({header_key(name) for name, _ in self._pairs})

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            if not all(isinstance(k, str) for k in other):
                return False
            return {header_key(k): v for k, v in self.items()} == {
                header_key(k): v for k, v in other.items()
            }
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (e.g. multiple ``Set-Cookie``)."""
        key_lower = header_key(key)
        return [value for name, value in self._pairs if header_key(name) == key_lower]

    def raw_lines(self) -> list[str]:
        """Every header as a ``Canonical-Name: value`` line."""
        return [format_header(name, value) for name, value in self._pairs]

    @property
    def pairs(self) -> tuple[tuple[str, str], ...]:
        """The underlying name/value pairs, as given."""
        return self._pairs


def merge_headers(
    planned: Iterable[tuple[str, str]],
    queued: Iterable[tuple[str, str]],
) -> Headers:
    """Combine planned headers with the ones a transport already queued.

    Planned entries win on a name collision. Planned headers come first,
    in their own order, followed by transport-only headers in queue order.
    Neither input is modified.
    """
    planned = tuple(planned)
    taken = {header_key(name) for name, _ in planned}
    return Headers((*planned, *((n, v) for n, v in queued if header_key(n) not in taken)))
