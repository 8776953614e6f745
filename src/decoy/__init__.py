"""Decoy — a programmable mock HTTP server for security testing.

Script arbitrary request/response behavior: canned XML endpoints, fake
login pages, static site mirrors and virtual hosts, all dispatched
through one deterministic route table per host.

Basic usage::

    from decoy import MockServer, response

    server = MockServer()
    server.bind("/login.xml", lambda: response("<ok/>", content_type="text/xml"))
    server.mount("/static/", "./www")
    server.host("intranet.example.com").bind("/", lambda: "internal")
    server.run(port=8080)
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "ContentTypes",
    "DecoyError",
    "Dispatcher",
    "GatewayUnavailable",
    "HTTPError",
    "HostRegistry",
    "MockServer",
    "NotFound",
    "Request",
    "Response",
    "RouteTable",
    "ServerConfig",
    "StaticResolver",
    "response",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import decoy`` fast and free of gateway imports.
    """
    if name == "MockServer":
        from decoy.app import MockServer

        return MockServer

    if name == "ServerConfig":
        from decoy.config import ServerConfig

        return ServerConfig

    if name == "Dispatcher":
        from decoy.dispatch import Dispatcher

        return Dispatcher

    if name in ("RouteTable", "HostRegistry"):
        from decoy import routing as _routing

        return getattr(_routing, name)

    if name == "StaticResolver":
        from decoy.static import StaticResolver

        return StaticResolver

    if name in ("Request", "Response", "ContentTypes", "response"):
        from decoy import http as _http

        return getattr(_http, name)

    if name in ("ConfigurationError", "DecoyError", "GatewayUnavailable", "HTTPError", "NotFound"):
        from decoy import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
