"""Immutable, case-insensitive request headers.

Keeps the raw byte pairs the gateway handed over and indexes them once,
by lower-cased name, on construction.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Case-insensitive header view; a name maps to its first value."""

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._raw = raw
        index: dict[str, list[str]] = {}
        for name, value in raw:
            index.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        self._index = index

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str] | None) -> "Headers":
        """Headers from a ``str`` mapping, as route helpers and tests pass them."""
        pairs = (headers or {}).items()
        return cls(tuple((k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in pairs))

    def __getitem__(self, name: str) -> str:
        return self._index[name.lower()][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"Headers({dict(self)!r})"

    def get_list(self, name: str) -> list[str]:
        """Every value sent for *name*, in arrival order."""
        return list(self._index.get(name.lower(), ()))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        return self._raw
