"""Top-level request dispatch.

Selects the route table for a request's host, then resolves the path
within it. Dispatch only reads the frozen tables, so concurrent workers
share one Dispatcher without locking.
"""

from collections.abc import Mapping

from decoy.errors import HTTPError
from decoy.http.request import Request
from decoy.http.response import Response
from decoy.routing.hosts import HostRegistry
from decoy.routing.table import RouteTable
from decoy.server.errors import http_error_response, internal_error_response


class Dispatcher:
    """Host-then-path dispatch over a HostRegistry.

    Usage::

        dispatcher = Dispatcher(registry)
        response = await dispatcher.route("http://virtual.host.com/test.xml")
        response = await dispatcher.route_path("/test.xml")  # default host
    """

    __slots__ = ("registry",)

    def __init__(self, registry: HostRegistry) -> None:
        self.registry = registry

    async def dispatch(self, request: Request) -> Response:
        """Resolve *request* against the table serving its host."""
        return await self._resolve(self.registry.select(request.host), request)

    async def route(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        """Dispatch a full URL; its host picks the table."""
        request = Request.from_url(url, method=method, headers=headers, body=body)
        return await self.dispatch(request)

    async def route_path(
        self,
        path: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        """Dispatch *path* against the default table, ignoring any host."""
        request = Request.for_path(path, method=method, headers=headers, body=body)
        return await self._resolve(self.registry.default, request)

    async def _resolve(self, table: RouteTable, request: Request) -> Response:
        try:
            return await table.resolve(request.path, request)
        except HTTPError as exc:
            return http_error_response(exc, request)
        except Exception as exc:
            return internal_error_response(exc, request)
