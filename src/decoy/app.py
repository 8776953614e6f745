"""The mock server facade.

Mutable during setup (bindings, mounts, virtual hosts). Frozen when
``run()`` is called or the first ASGI message arrives.
"""

import re
import threading
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

from decoy._internal.types import Handler, Receive, Scope, Send
from decoy.config import ServerConfig
from decoy.dispatch import Dispatcher
from decoy.http.content_types import ContentTypes
from decoy.http.response import Response
from decoy.routing.hosts import HostRegistry
from decoy.routing.table import RouteTable
from decoy.server.gateways import Gateway
from decoy.server.handler import handle_lifespan, handle_request
from decoy.server.lifecycle import ServerHandle, run_server
from decoy.static import StaticResolver


class MockServer:
    """A programmable mock HTTP server.

    The server is its own default route table; virtual hosts get tables
    of their own. All of them share the server's index list and content
    types::

        server = MockServer()

        @server.default
        def fallback():
            return "This is default."

        server.bind("/test/bind.xml", lambda: response("<secret/>", content_type="text/xml"))
        server.mount("/test/mount/", "./www")

        vhost = server.host("virtual.host.com")
        vhost.bind("/test/virtual_host.xml", lambda: "<virtual/>")

        server.run(port=8080)

    Thread safety:
        Setup is single-threaded. Freezing uses a lock with a double
        check so exactly one thread performs it, even when several
        gateway workers deliver their first request at once. After that
        every structure is read-only.
    """

    __slots__ = (
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_registry",
        "config",
        "content_types",
        "static",
    )

    def __init__(self, config: ServerConfig | None = None) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self.content_types = ContentTypes(self.config.content_types)
        self.static = StaticResolver(self.config.indices)
        self._registry = HostRegistry(self.table())
        self._dispatcher = Dispatcher(self._registry)
        self._frozen = False
        self._freeze_lock = threading.Lock()

    # -- Tables and hosts --

    def table(self) -> RouteTable:
        """A new, unregistered table sharing this server's resolvers.

        Use it as a sub-router with ``mount()``.
        """
        return RouteTable(static=self.static, content_types=self.content_types)

    @property
    def routes(self) -> RouteTable:
        """The default table (requests for unregistered hosts)."""
        return self._registry.default

    @property
    def hosts(self) -> HostRegistry:
        return self._registry

    def host(self, name: str, table: RouteTable | None = None) -> RouteTable:
        """The table serving host *name*, created on first use."""
        if table is None:
            existing = self._registry.lookup(name)
            if existing is not None:
                return existing
            table = self.table()
        return self._registry.register_host(name, table)

    def hosts_like(self, pattern: str | re.Pattern[str], table: RouteTable | None = None) -> RouteTable:
        """Register and return a table for every host matching *pattern*."""
        return self._registry.register_host_pattern(pattern, table or self.table())

    # -- Default-table registration --

    def bind(
        self,
        path: str,
        handler: Handler | None = None,
        *,
        methods: Iterable[str] | None = None,
    ) -> Handler | Callable[[Handler], Handler]:
        """See ``RouteTable.bind``."""
        return self.routes.bind(path, handler, methods=methods)

    def bind_pattern(
        self,
        pattern: str | re.Pattern[str],
        handler: Handler | None = None,
        *,
        methods: Iterable[str] | None = None,
    ) -> Handler | Callable[[Handler], Handler]:
        """See ``RouteTable.bind_pattern``."""
        return self.routes.bind_pattern(pattern, handler, methods=methods)

    def mount(self, prefix: str, target: RouteTable | str | Path) -> None:
        self.routes.mount(prefix, target)

    def public_dir(self, directory: str | Path) -> None:
        self.routes.public_dir(directory)

    def file(self, path: str, filesystem_path: str | Path) -> None:
        self.routes.file(path, filesystem_path)

    def default(self, handler: Handler) -> Handler:
        return self.routes.default(handler)

    # -- Helpers --

    def content_type(self, extension: str) -> str:
        """MIME type this server uses for *extension*."""
        return self.content_types.content_type(extension)

    def index_of(self, directory: str | Path) -> Path | None:
        """Index file this server would serve for *directory*."""
        return self.static.index_of(directory)

    # -- Dispatch --

    async def route(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        """Dispatch a full URL as if it had arrived over the network."""
        self._ensure_frozen()
        return await self._dispatcher.route(url, method=method, headers=headers, body=body)

    async def route_path(
        self,
        path: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        """Dispatch *path* against the default table."""
        self._ensure_frozen()
        return await self._dispatcher.route_path(path, method=method, headers=headers, body=body)

    # -- Serving --

    def run(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        background: bool | None = None,
        gateway: str | Gateway | None = None,
    ) -> ServerHandle:
        """Freeze the server and start serving.

        Arguments override the matching ``ServerConfig`` fields for this
        run. Raises ``GatewayUnavailable`` when no gateway can be provided.
        """
        self._ensure_frozen()
        return run_server(
            self,
            host=self.config.host if host is None else host,
            port=self.config.port if port is None else port,
            background=self.config.background if background is None else background,
            gateway=gateway or self.config.gateway,
            log_level=self.config.log_level,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            self._ensure_frozen()
            await handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        await handle_request(scope, receive, send, dispatcher=self._dispatcher)

    # -- Internal --

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._registry.freeze()
            self._frozen = True
