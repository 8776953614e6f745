"""Canned HTTP responses.

A Response is a frozen value: bindings can share one instance, and the
``with_*`` methods derive variants without touching the original.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

HTML = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """Status, body, content type and extra headers of one answer."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def with_header(self, name: str, value: str) -> Response:
        """Copy with *name* appended; earlier values for *name* are kept."""
        return self.with_headers({name: value})

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=self.headers + tuple(headers.items()))

    @property
    def body_bytes(self) -> bytes:
        """The body as sent on the wire (``str`` bodies are UTF-8)."""
        return self.body.encode() if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body if isinstance(self.body, str) else self.body.decode()

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or ``None``."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), None)


def response(
    body: str | bytes = "",
    *,
    status: int = 200,
    content_type: str = HTML,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Build a canned response in one call::

        table.bind("/login.xml", lambda: response("<ok/>", content_type="text/xml"))
    """
    return Response(body, status, content_type, tuple((headers or {}).items()))


def not_found() -> Response:
    """The built-in answer for unmatched paths: 404 with an empty body."""
    return Response(b"", 404)
