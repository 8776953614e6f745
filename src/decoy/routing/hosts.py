"""Virtual-host selection.

Maps Host values to route tables: exact names first, then patterns in
registration order, then the default table (the server itself).
"""

import re
from dataclasses import dataclass

from decoy.http.request import normalize_host
from decoy.routing.table import RouteTable, compile_pattern


@dataclass(frozen=True, slots=True)
class HostEntry:
    """A host matcher paired with the table that serves it."""

    matcher: str | re.Pattern[str]
    table: RouteTable

    def matches(self, host: str) -> bool:
        if isinstance(self.matcher, re.Pattern):
            return self.matcher.search(host) is not None
        return self.matcher == host


class HostRegistry:
    """Host name/pattern -> RouteTable lookup.

    Usage::

        registry = HostRegistry(RouteTable())
        registry.register_host("virtual.host.com", RouteTable())
        registry.register_host_pattern(r"^virtual[0-9]\\.", RouteTable())
        table = registry.select("virtual0.host.com:8000")
    """

    __slots__ = ("_default", "_frozen", "_names", "_patterns")

    def __init__(self, default: RouteTable | None = None) -> None:
        self._default = default or RouteTable()
        self._names: dict[str, HostEntry] = {}
        self._patterns: list[HostEntry] = []
        self._frozen = False

    @property
    def default(self) -> RouteTable:
        return self._default

    @property
    def entries(self) -> tuple[HostEntry, ...]:
        """Exact-name entries followed by pattern entries, each in registration order."""
        return (*self._names.values(), *self._patterns)

    def register_host(self, name: str, table: RouteTable) -> RouteTable:
        """Serve the exact host *name* (case-insensitive, port ignored) with *table*."""
        self._check_not_frozen()
        key = normalize_host(name)
        if key is None:
            msg = "Host name must not be empty."
            raise ValueError(msg)
        self._names[key] = HostEntry(key, table)
        return table

    def register_host_pattern(self, pattern: str | re.Pattern[str], table: RouteTable) -> RouteTable:
        """Serve every host *pattern* matches (``re.search``) with *table*.

        String patterns match case-insensitively. Patterns passed already
        compiled keep their own flags and see the host lower-cased, with
        any port removed.
        """
        self._check_not_frozen()
        self._patterns.append(HostEntry(compile_pattern(pattern, re.IGNORECASE), table))
        return table

    def lookup(self, name: str) -> RouteTable | None:
        """The table registered for the exact host *name*, if any."""
        key = normalize_host(name)
        entry = self._names.get(key) if key is not None else None
        return entry.table if entry is not None else None

    def select(self, host: str | None) -> RouteTable:
        """Pick the table for a Host value. Missing hosts get the default."""
        key = normalize_host(host)
        if key is None:
            return self._default

        entry = self._names.get(key)
        if entry is not None:
            return entry.table

        for entry in self._patterns:
            if entry.matches(key):
                return entry.table

        return self._default

    def freeze(self) -> None:
        """Freeze the registry and every table it owns."""
        self._frozen = True
        self._default.freeze()
        for entry in self.entries:
            entry.table.freeze()

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot register hosts after the server has started. "
                "Register hosts before calling run()."
            )
            raise RuntimeError(msg)
