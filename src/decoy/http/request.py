"""Immutable HTTP request.

Frozen metadata with async body access. Mount dispatch derives new
requests with ``replace()`` instead of mutating the original.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qs, unquote, urlsplit

from decoy._internal.types import Receive, Scope
from decoy.http.headers import Headers


async def _empty_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


def _body_receiver(body: bytes) -> Receive:
    """A one-shot ASGI receive callable yielding *body*."""
    sent = False

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return receive


def normalize_host(value: str | None) -> str | None:
    """Lower-case a Host value and drop any ``:port`` suffix.

    ``None`` and empty values normalize to ``None``.
    """
    if not value:
        return None
    value = value.strip().lower()
    if value.startswith("["):
        # IPv6 literal: [::1]:8000
        end = value.find("]")
        return value[: end + 1] if end != -1 else value
    host, _, _port = value.partition(":")
    return host or None


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request as seen by route handlers.

    ``path`` is relative to the table currently dispatching; when a mount
    strips a prefix the stripped part moves into ``mount_path``.
    ``path_params`` holds named pattern groups, ``captures`` every group.
    """

    method: str
    path: str
    host: str | None = None
    query: str = ""
    headers: Headers = field(default_factory=Headers)
    scheme: str = "http"
    mount_path: str = ""
    path_params: Mapping[str, str] = field(default_factory=dict)
    captures: tuple[str | None, ...] = ()
    client: tuple[str, int] | None = None

    _receive: Receive = field(default=_empty_body, repr=False, compare=False)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Derived views --

    @property
    def full_path(self) -> str:
        """The path as received, before any mount prefix was stripped."""
        if not self.mount_path:
            return self.path
        return self.mount_path.rstrip("/") + self.path

    @property
    def url(self) -> str:
        """Absolute URL rebuilt from scheme, host, full path and query."""
        base = f"{self.scheme}://{self.host}" if self.host else ""
        if self.query:
            return f"{base}{self.full_path}?{self.query}"
        return f"{base}{self.full_path}"

    @property
    def params(self) -> dict[str, list[str]]:
        """Parsed query string."""
        return parse_qs(self.query, keep_blank_values=True)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    # -- Derivation --

    def with_path(self, path: str, mount_path: str) -> Request:
        """Request for a mounted table: *path* is the remainder after *mount_path*."""
        return replace(self, path=path, mount_path=mount_path, path_params={}, captures=())

    def with_captures(self, path_params: Mapping[str, str], captures: tuple[str | None, ...]) -> Request:
        return replace(self, path_params=dict(path_params), captures=captures)

    # -- Body --

    async def body(self) -> bytes:
        """Drain the ASGI body messages into one bytes value.

        Derived requests (mounts, captures) share the cache, so the body
        is received once however many tables see the request.
        """
        cached = self._cache.get("body")
        if cached is None:
            buffer = bytearray()
            more = True
            while more:
                message = await self._receive()
                buffer += message.get("body", b"")
                more = message.get("more_body", False)
            cached = self._cache["body"] = bytes(buffer)
        return cached

    async def text(self, encoding: str = "utf-8") -> str:
        return (await self.body()).decode(encoding)

    # -- Factories --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope.

        The host comes from the Host header only. Without one the request
        has no host, whatever address the listener is bound to.
        """
        headers = Headers(tuple(scope.get("headers", ())))
        host = normalize_host(headers.get("host"))
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope.get("path") or "/",
            host=host,
            query=scope.get("query_string", b"").decode("latin-1"),
            headers=headers,
            scheme=scope.get("scheme", "http"),
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Create a Request from a full URL such as ``http://host/path?q=1``."""
        parts = urlsplit(url)
        return cls(
            method=method.upper(),
            path=unquote(parts.path) or "/",
            host=normalize_host(parts.netloc.rpartition("@")[2]),
            query=parts.query,
            headers=Headers.from_mapping(headers),
            scheme=parts.scheme or "http",
            _receive=_body_receiver(body),
        )

    @classmethod
    def for_path(
        cls,
        path: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Create a host-less Request for a bare path (``/a/b?x=1``)."""
        path, _, query = path.partition("?")
        built = Headers.from_mapping(headers)
        return cls(
            method=method.upper(),
            path=unquote(path) or "/",
            host=normalize_host(built.get("host")),
            query=query,
            headers=built,
            _receive=_body_receiver(body),
        )
