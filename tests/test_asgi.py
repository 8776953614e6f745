"""Tests for the ASGI surface, driven through decoy.testing.TestClient."""

from pathlib import Path

from decoy.app import MockServer
from decoy.http.response import response
from decoy.testing import TestClient


def _server(web_root: Path) -> MockServer:
    server = MockServer()
    server.bind("/hello", lambda: response("hi", headers={"X-Decoy": "1"}))
    server.bind("/echo", lambda request: f"{request.host}|{request.path}|{request.query}", methods=["GET"])

    @server.bind("/upload", methods=["POST"])
    async def upload(request):
        return (await request.body()).upper()

    server.mount("/files", web_root)
    server.host("virtual.host.com").bind("/hello", lambda: "virtual hi")
    return server


class TestClientDispatch:
    async def test_get(self, web_root: Path) -> None:
        async with TestClient(_server(web_root)) as client:
            resp = await client.get("/hello")
        assert resp.status == 200
        assert resp.text == "hi"
        assert resp.header("x-decoy") == "1"
        assert resp.header("content-length") == "2"

    async def test_host_header(self, web_root: Path) -> None:
        async with TestClient(_server(web_root)) as client:
            resp = await client.get("/hello", host="virtual.host.com:8000")
        assert resp.text == "virtual hi"

    async def test_full_url(self, web_root: Path) -> None:
        async with TestClient(_server(web_root)) as client:
            resp = await client.get("http://virtual.host.com/hello")
        assert resp.text == "virtual hi"

    async def test_query_and_host_reach_handler(self, web_root: Path) -> None:
        async with TestClient(_server(web_root)) as client:
            resp = await client.get("/echo?a=1&b=2", host="Example.COM")
        assert resp.text == "example.com|/echo|a=1&b=2"

    async def test_post_body(self, web_root: Path) -> None:
        async with TestClient(_server(web_root)) as client:
            resp = await client.post("/upload", body=b"payload")
        assert resp.body == b"PAYLOAD"
        assert resp.content_type == "application/octet-stream"

    async def test_static_file(self, web_root: Path) -> None:
        async with TestClient(_server(web_root)) as client:
            resp = await client.get("/files/test.txt")
        assert resp.body == b"This is a test.\n"
        assert resp.content_type == "text/plain"

    async def test_head_has_no_body(self, web_root: Path) -> None:
        async with TestClient(_server(web_root)) as client:
            resp = await client.head("/files/test.txt")
        assert resp.status == 200
        assert resp.body == b""
        assert resp.header("content-length") == str(len(b"This is a test.\n"))

    async def test_unmatched_is_empty_404(self, web_root: Path) -> None:
        async with TestClient(_server(web_root)) as client:
            resp = await client.get("/nothing/here")
        assert resp.status == 404
        assert resp.body == b""

    async def test_method_not_bound(self, web_root: Path) -> None:
        async with TestClient(_server(web_root)) as client:
            resp = await client.request("DELETE", "/echo")
        assert resp.status == 404


class TestLifespan:
    async def test_startup_freezes(self, web_root: Path) -> None:
        server = _server(web_root)
        async with TestClient(server):
            assert server.frozen


class TestHostlessRequests:
    async def test_missing_host_header_uses_default_table(self) -> None:
        server = MockServer()
        server.default(lambda: "default")
        server.hosts_like(r"^127\.").default(lambda: "pattern")
        server.hosts_like(r".*").default(lambda: "catch-all")

        scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": "/anything",
            "raw_path": b"/anything",
            "query_string": b"",
            "root_path": "",
            "headers": [],
            "server": ("127.0.0.1", 8000),
            "client": ("127.0.0.1", 50000),
        }
        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message: dict) -> None:
            sent.append(message)

        await server(scope, receive, send)

        assert sent[0]["status"] == 200
        assert sent[1]["body"] == b"default"

    async def test_host_header_still_selects_pattern(self) -> None:
        server = MockServer()
        server.default(lambda: "default")
        server.hosts_like(r"^127\.").default(lambda: "pattern")

        async with TestClient(server) as client:
            resp = await client.get("/anything", host="127.0.0.1:8000")
        assert resp.text == "pattern"
