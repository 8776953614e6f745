"""Binding variants held by a RouteTable.

Each binding is a frozen dataclass created at registration time. Exact
and pattern bindings may restrict the HTTP methods they answer; ``None``
answers every method.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

from decoy._internal.types import Handler

if TYPE_CHECKING:
    from decoy.routing.table import RouteTable


def normalize_methods(methods: Iterable[str] | None) -> frozenset[str] | None:
    if methods is None:
        return None
    if isinstance(methods, str):
        methods = (methods,)
    return frozenset(m.upper() for m in methods)


def normalize_prefix(prefix: str) -> str:
    """``"/test/map/"`` -> ``"/test/map"``; the root prefix becomes ``""``."""
    stripped = "/" + prefix.strip("/")
    return stripped if stripped != "/" else ""


def _allows(methods: frozenset[str] | None, method: str) -> bool:
    if methods is None or method in methods:
        return True
    return method == "HEAD" and "GET" in methods


@dataclass(frozen=True, slots=True)
class ExactPath:
    """A literal path answered by a handler."""

    path: str
    handler: Handler
    methods: frozenset[str] | None = None

    def allows(self, method: str) -> bool:
        return _allows(self.methods, method)


@dataclass(frozen=True, slots=True)
class PatternPath:
    """A regex searched against the full request path."""

    pattern: re.Pattern[str]
    handler: Handler
    methods: frozenset[str] | None = None

    def allows(self, method: str) -> bool:
        return _allows(self.methods, method)


@dataclass(frozen=True, slots=True)
class Mount:
    """A path prefix delegated to a nested table or a directory.

    ``prefix`` is normalized (no trailing slash, ``""`` for the root).
    """

    prefix: str
    target: RouteTable | Path

    def remainder(self, path: str) -> str | None:
        """The part of *path* below the prefix, or ``None`` if it does not apply.

        Matching is by whole segments: ``/test/map`` covers ``/test/map``
        and ``/test/map/x`` but not ``/test/mapping``. The remainder keeps
        its leading slash.
        """
        if not self.prefix:
            return path
        if path == self.prefix:
            return "/"
        if path.startswith(self.prefix + "/"):
            return path[len(self.prefix) :]
        return None


@dataclass(frozen=True, slots=True)
class FileBinding:
    """A literal path served from one file on disk."""

    path: str
    filesystem_path: Path


Binding: TypeAlias = ExactPath | PatternPath | Mount | FileBinding
