"""Extension to MIME-type lookup.

A static table seeded with common web types. Lookups are case-insensitive
and never fail: anything unknown maps to ``UNKNOWN_CONTENT_TYPE``.
"""

from collections.abc import Mapping
from pathlib import PurePath

UNKNOWN_CONTENT_TYPE = "application/x-unknown-content-type"

DEFAULT_CONTENT_TYPES: dict[str, str] = {
    # Markup
    "html": "text/html",
    "htm": "text/html",
    "xhtml": "application/xhtml+xml",
    "xml": "text/xml",
    "xsl": "text/xml",
    "rss": "application/rss+xml",
    "atom": "application/atom+xml",
    # Text
    "txt": "text/plain",
    "text": "text/plain",
    "csv": "text/csv",
    "css": "text/css",
    "md": "text/markdown",
    # Scripts and data
    "js": "application/javascript",
    "mjs": "application/javascript",
    "json": "application/json",
    "map": "application/json",
    "wasm": "application/wasm",
    # Images
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "ico": "image/x-icon",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    # Fonts
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    # Media
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "swf": "application/x-shockwave-flash",
    # Documents and archives
    "pdf": "application/pdf",
    "doc": "application/msword",
    "xls": "application/vnd.ms-excel",
    "ppt": "application/vnd.ms-powerpoint",
    "rtf": "application/rtf",
    "zip": "application/zip",
    "gz": "application/gzip",
    "tar": "application/x-tar",
    "jar": "application/java-archive",
    "exe": "application/octet-stream",
    "bin": "application/octet-stream",
}


class ContentTypes:
    """Case-insensitive extension -> MIME lookup with a fixed fallback.

    Usage::

        types = ContentTypes({"jsp": "text/html"})
        types.content_type("HTML")      # "text/html"
        types.for_path("a/b/c.jsp")     # "text/html"
        types.content_type("lol")       # "application/x-unknown-content-type"
    """

    __slots__ = ("_table",)

    def __init__(self, extra: Mapping[str, str] | None = None) -> None:
        table = dict(DEFAULT_CONTENT_TYPES)
        for ext, mime in (extra or {}).items():
            table[ext.lstrip(".").lower()] = mime
        self._table = table

    def content_type(self, extension: str | None) -> str:
        """MIME type for *extension* (leading dot optional)."""
        if not extension:
            return UNKNOWN_CONTENT_TYPE
        return self._table.get(extension.lstrip(".").lower(), UNKNOWN_CONTENT_TYPE)

    def for_path(self, path: str | PurePath) -> str:
        """MIME type derived from the extension of *path*."""
        return self.content_type(PurePath(path).suffix)

    def __contains__(self, extension: object) -> bool:
        if not isinstance(extension, str):
            return False
        return extension.lstrip(".").lower() in self._table

    def __len__(self) -> int:
        return len(self._table)
