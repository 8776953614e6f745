"""Gateway adapters — the ASGI servers decoy can run on.

Each adapter reports whether this environment can provide it
(``available()``), runs the app until stopped (``serve()``), and stops
it from another thread or a signal handler (``stop()``). Adapters that
can abort without waiting on open connections also expose
``force_stop()``.

Selection walks an explicit preference list and takes the first adapter
that is available; the server packages are imported only by ``serve()``.
"""

from __future__ import annotations

import asyncio
import importlib.util
import logging
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from decoy.errors import GatewayUnavailable

logger = logging.getLogger("decoy.server")

# Tried in this order unless an override is given
DEFAULT_GATEWAYS: tuple[str, ...] = ("pounce", "hypercorn")


@runtime_checkable
class Gateway(Protocol):
    """Protocol for gateway adapters."""

    name: str

    def available(self) -> bool: ...

    def serve(self, app: Any, host: str, port: int, *, log_level: str = "info") -> None: ...

    def stop(self) -> None: ...


class _ModuleGateway:
    """Adapter whose availability is the presence of one importable module."""

    name = ""
    module = ""

    def available(self) -> bool:
        return importlib.util.find_spec(self.module) is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PounceGateway(_ModuleGateway):
    """pounce, single worker. Pounce handles SIGINT itself in the foreground."""

    name = "pounce"
    module = "pounce"

    def __init__(self) -> None:
        self._server: Any = None

    def serve(self, app: Any, host: str, port: int, *, log_level: str = "info") -> None:
        from pounce.config import ServerConfig
        from pounce.server import Server

        config = ServerConfig(host=host, port=port, workers=1, log_level=log_level)
        self._server = Server(config, app)
        self._server.run()

    def stop(self) -> None:
        if self._server is None:
            return
        shutdown = getattr(self._server, "shutdown", None)
        if shutdown is None:
            logger.warning("pounce server exposes no shutdown(); leaving it to its own signal handling")
            return
        shutdown()


class HypercornGateway(_ModuleGateway):
    """hypercorn on asyncio, stopped through its shutdown trigger.

    ``force_stop()`` zeroes the graceful timeout first, so open
    connections are dropped instead of drained.
    """

    name = "hypercorn"
    module = "hypercorn"

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._shutdown: asyncio.Event | None = None
        self._config: Any = None

    def serve(self, app: Any, host: str, port: int, *, log_level: str = "info") -> None:
        from hypercorn.asyncio import serve
        from hypercorn.config import Config

        config = Config()
        config.bind = [f"{host}:{port}"]
        config.loglevel = log_level.upper()
        self._config = config

        async def main() -> None:
            self._shutdown = asyncio.Event()
            await serve(app, config, shutdown_trigger=self._shutdown.wait)

        self._loop = asyncio.new_event_loop()
        try:
            self._loop.run_until_complete(main())
        finally:
            self._loop.close()
            self._loop = None

    def stop(self) -> None:
        loop, shutdown = self._loop, self._shutdown
        if loop is not None and shutdown is not None and not loop.is_closed():
            loop.call_soon_threadsafe(shutdown.set)

    def force_stop(self) -> None:
        if self._config is not None:
            self._config.graceful_timeout = 0
        self.stop()


GATEWAYS: dict[str, type[_ModuleGateway]] = {
    PounceGateway.name: PounceGateway,
    HypercornGateway.name: HypercornGateway,
}


def default_gateways(names: Sequence[str] = DEFAULT_GATEWAYS) -> list[Gateway]:
    """Fresh adapter instances for *names*; unknown names are skipped with a warning."""
    gateways: list[Gateway] = []
    for name in names:
        factory = GATEWAYS.get(name)
        if factory is None:
            logger.warning("Unknown gateway %r, skipping", name)
            continue
        gateways.append(factory())
    return gateways


def select_gateway(
    override: str | Gateway | None = None,
    providers: Sequence[Gateway] | None = None,
) -> Gateway:
    """Return the first available gateway.

    *override* (a registered name or an adapter instance) is tried before
    *providers*, which default to ``DEFAULT_GATEWAYS``.

    Raises ``GatewayUnavailable`` when none can be provided.
    """
    candidates: list[Gateway] = []
    if isinstance(override, str):
        candidates.extend(default_gateways((override,)))
    elif override is not None:
        candidates.append(override)
    candidates.extend(providers if providers is not None else default_gateways())

    tried: list[str] = []
    for gateway in candidates:
        if gateway.available():
            return gateway
        logger.debug("Gateway %s is not available", gateway.name)
        tried.append(gateway.name)

    raise GatewayUnavailable(tuple(tried))
