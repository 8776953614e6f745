"""Tests for decoy.dispatch — host-then-path dispatch."""

import logging

import pytest

from decoy.dispatch import Dispatcher
from decoy.errors import HTTPError, NotFound
from decoy.routing.hosts import HostRegistry
from decoy.routing.table import RouteTable


@pytest.fixture
def dispatcher() -> Dispatcher:
    default = RouteTable()
    default.bind("/x", lambda: "default x")

    vhost = RouteTable()
    vhost.bind("/x", lambda request: f"vhost x for {request.host}")

    patterned = RouteTable()
    patterned.bind("/x", lambda: "pattern x")

    registry = HostRegistry(default)
    registry.register_host("virtual.host.com", vhost)
    registry.register_host_pattern(r"virtual[0-9]\.host\.com", patterned)
    return Dispatcher(registry)


class TestRoute:
    async def test_virtual_host(self, dispatcher: Dispatcher) -> None:
        resp = await dispatcher.route("http://virtual.host.com/x")
        assert resp.text == "vhost x for virtual.host.com"

    async def test_host_pattern(self, dispatcher: Dispatcher) -> None:
        resp = await dispatcher.route("http://virtual0.host.com/x")
        assert resp.text == "pattern x"

    async def test_default_host(self, dispatcher: Dispatcher) -> None:
        resp = await dispatcher.route("http://elsewhere.com/x")
        assert resp.text == "default x"

    async def test_unbound_on_default_host(self, dispatcher: Dispatcher) -> None:
        resp = await dispatcher.route("http://elsewhere.com/y")
        assert resp.status == 404
        assert resp.body == b""

    async def test_port_userinfo_and_query(self, dispatcher: Dispatcher) -> None:
        resp = await dispatcher.route("http://user:pw@virtual.host.com:8080/x?q=1")
        assert resp.text == "vhost x for virtual.host.com"

    async def test_relative_url_uses_default(self, dispatcher: Dispatcher) -> None:
        resp = await dispatcher.route("/x")
        assert resp.text == "default x"


class TestRoutePath:
    async def test_bypasses_host_resolution(self, dispatcher: Dispatcher) -> None:
        resp = await dispatcher.route_path("/x", headers={"Host": "virtual.host.com"})
        assert resp.text == "default x"


class TestErrors:
    async def test_http_error_from_handler(self) -> None:
        table = RouteTable()

        def forbidden():
            raise HTTPError(status=403, detail="go away", headers=(("X-Reason", "test"),))

        table.bind("/f", forbidden)
        resp = await Dispatcher(HostRegistry(table)).route_path("/f")
        assert resp.status == 403
        assert resp.text == "go away"
        assert resp.header("x-reason") == "test"

    async def test_not_found_from_handler(self) -> None:
        table = RouteTable()

        def missing():
            raise NotFound()

        table.bind("/m", missing)
        resp = await Dispatcher(HostRegistry(table)).route_path("/m")
        assert resp.status == 404

    async def test_unexpected_error_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        table = RouteTable()

        def broken():
            raise ValueError("boom")

        table.bind("/b", broken)
        with caplog.at_level(logging.ERROR, logger="decoy.server"):
            resp = await Dispatcher(HostRegistry(table)).route_path("/b")
        assert resp.status == 500
        assert "500 GET /b" in caplog.text

    async def test_unconvertible_return_is_500(self) -> None:
        table = RouteTable()
        table.bind("/o", lambda: object())
        resp = await Dispatcher(HostRegistry(table)).route_path("/o")
        assert resp.status == 500
