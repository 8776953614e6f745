"""Filesystem resolution for directory mounts and file bindings.

Request paths are normalized segment by segment and joined under a
root; anything that would land outside that root resolves to ``None``.
The symlink-resolved result is checked again against the resolved root,
so a link inside the root cannot point the server elsewhere.

All methods here perform blocking I/O. The route table calls them
through ``anyio.to_thread.run_sync``.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from decoy.config import DEFAULT_INDICES

logger = logging.getLogger("decoy.routing")


def normalize_path(request_path: str) -> tuple[str, ...] | None:
    """Split *request_path* into safe segments, collapsing ``.`` and ``..``.

    Returns ``None`` when a ``..`` would climb above the starting point
    or a segment carries a NUL byte or a backslash. Empty segments
    (``//``) are dropped.

        normalize_path("/a/./b/../c")   -> ("a", "c")
        normalize_path("/../etc/passwd") -> None
    """
    segments: list[str] = []
    for part in request_path.split("/"):
        if part in ("", "."):
            continue
        if "\x00" in part or "\\" in part:
            return None
        if part == "..":
            if not segments:
                return None
            segments.pop()
            continue
        segments.append(part)
    return tuple(segments)


def _contained(path: Path, root: Path) -> Path | None:
    """*path* with symlinks followed, or ``None`` if that lands outside *root*."""
    try:
        resolved = path.resolve()
    except (OSError, RuntimeError):
        # Symlink loops and unreadable components
        return None
    return resolved if resolved.is_relative_to(root) else None


class StaticResolver:
    """Resolve request paths to files under a root directory.

    Usage::

        resolver = StaticResolver(["index.html", "default.htm"])
        resolver.resolve("/srv/site", "/docs/")      # /srv/site/docs/index.html
        resolver.resolve("/srv/site", "/../secret")  # None
    """

    __slots__ = ("_indices",)

    def __init__(self, indices: Iterable[str] = DEFAULT_INDICES) -> None:
        self._indices = tuple(indices)

    @property
    def indices(self) -> tuple[str, ...]:
        return self._indices

    def index_of(self, directory: str | Path) -> Path | None:
        """First configured index file that exists under *directory*."""
        directory = Path(directory)
        for name in self._indices:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    def resolve(self, root: str | Path, request_path: str) -> Path | None:
        """Map *request_path* to an existing file under *root*, or ``None``.

        Fails closed: traversal outside *root*, symlinks leaving *root*,
        missing entries and directories without an index all give ``None``.
        """
        segments = normalize_path(request_path)
        if segments is None:
            logger.debug("Rejected traversal %r under %s", request_path, root)
            return None

        root = Path(root).resolve()
        resolved = _contained(root.joinpath(*segments), root)
        if resolved is None:
            logger.debug("Rejected %r: resolves outside %s", request_path, root)
            return None

        if resolved.is_dir():
            index = self.index_of(resolved)
            if index is None:
                return None
            if _contained(index, root) is None:
                logger.debug("Rejected index %s: resolves outside %s", index, root)
                return None
            return index
        if resolved.is_file():
            return resolved
        return None

    @staticmethod
    def read(path: str | Path) -> bytes:
        return Path(path).read_bytes()
