"""In-process client for exercising a MockServer through ASGI.

No sockets and no gateway: each call builds an HTTP scope, feeds the
body through ``receive`` and collects what the app sends back into the
same ``Response`` type handlers return.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from decoy.app import MockServer
from decoy.http.response import Response


def _split_target(target: str, host: str | None) -> tuple[str, str | None, str, str]:
    """``(scheme, host, path, query)`` for a bare path or a full URL.

    A URL's authority becomes the Host header unless *host* overrides it.
    """
    if "://" not in target:
        path, _, query = target.partition("?")
        return "http", host, path or "/", query
    parts = urlsplit(target)
    return parts.scheme or "http", host or parts.netloc, parts.path or "/", parts.query


def _http_scope(
    method: str,
    target: str,
    host: str | None,
    headers: Mapping[str, str] | None,
) -> dict[str, Any]:
    scheme, host, path, query = _split_target(target, host)
    pairs = [] if host is None else [("host", host)]
    pairs.extend((headers or {}).items())
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "scheme": scheme,
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in pairs],
        "server": None,
        "client": ("127.0.0.1", 0),
    }


class _Exchange:
    """One request body going in, the app's response messages coming out."""

    __slots__ = ("_pending", "chunks", "headers", "status")

    def __init__(self, body: bytes) -> None:
        self._pending: list[dict[str, Any]] = [
            {"type": "http.request", "body": body, "more_body": False},
        ]
        self.status = 500
        self.headers: list[tuple[bytes, bytes]] = []
        self.chunks: list[bytes] = []

    async def receive(self) -> dict[str, Any]:
        if self._pending:
            return self._pending.pop(0)
        return {"type": "http.disconnect"}

    async def send(self, message: dict[str, Any]) -> None:
        match message["type"]:
            case "http.response.start":
                self.status = message["status"]
                self.headers = list(message.get("headers", ()))
            case "http.response.body":
                self.chunks.append(message.get("body", b""))

    def response(self) -> Response:
        content_type = "text/html; charset=utf-8"
        others: list[tuple[str, str]] = []
        for raw_name, raw_value in self.headers:
            name, value = raw_name.decode("latin-1"), raw_value.decode("latin-1")
            if name == "content-type":
                content_type = value
            else:
                others.append((name, value))
        return Response(
            body=b"".join(self.chunks),
            status=self.status,
            content_type=content_type,
            headers=tuple(others),
        )


class TestClient:
    """Async test client for a MockServer.

    Usage::

        async with TestClient(server) as client:
            response = await client.get("/test/bind.xml")
            response = await client.get("/x", host="virtual.host.com")
            response = await client.get("http://virtual0.host.com/x")
    """

    __test__ = False  # Not a pytest test class

    __slots__ = ("app",)

    def __init__(self, app: MockServer) -> None:
        self.app = app

    async def __aenter__(self) -> "TestClient":
        await self._lifespan("startup")
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self._lifespan("shutdown")

    async def get(self, target: str, **kwargs: Any) -> Response:
        return await self.request("GET", target, **kwargs)

    async def head(self, target: str, **kwargs: Any) -> Response:
        return await self.request("HEAD", target, **kwargs)

    async def post(self, target: str, **kwargs: Any) -> Response:
        return await self.request("POST", target, **kwargs)

    async def request(
        self,
        method: str,
        target: str,
        *,
        host: str | None = None,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        """Send one request through the app and return what it answered.

        *target* is a path (``/a?b=1``) or a full URL; a URL's host is
        sent as the Host header unless *host* is given.
        """
        exchange = _Exchange(body)
        await self.app(_http_scope(method, target, host, headers), exchange.receive, exchange.send)
        return exchange.response()

    async def _lifespan(self, phase: str) -> None:
        """Run one lifespan phase: deliver its event, then let the app return."""
        events = [{"type": f"lifespan.{phase}"}, {"type": "lifespan.shutdown"}]

        async def receive() -> dict[str, Any]:
            return events.pop(0) if events else {"type": "lifespan.shutdown"}

        async def send(message: dict[str, Any]) -> None:
            return None

        await self.app({"type": "lifespan", "asgi": {"version": "3.0"}}, receive, send)
