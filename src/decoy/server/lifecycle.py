"""Foreground/background server startup and interrupt handling.

The gateway is selected before anything is bound; when none is usable,
``GatewayUnavailable`` propagates and nothing starts. SIGINT triggers a
best-effort stop on the gateway. In-flight requests are not drained.
"""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from decoy.server.gateways import Gateway, select_gateway

logger = logging.getLogger("decoy.server")

# Marks a handle that has no SIGINT handler of its own to undo
_NOT_INSTALLED: Any = object()


def stop_gateway(gateway: Gateway) -> None:
    """Stop *gateway*, using its hard stop when it has one."""
    force_stop = getattr(gateway, "force_stop", None)
    if callable(force_stop):
        force_stop()
    else:
        gateway.stop()


@dataclass(slots=True)
class ServerHandle:
    """A started server. ``thread`` is ``None`` for foreground runs.

    Background runs keep decoy's SIGINT handler installed while the
    thread lives. ``join()`` puts the previous handler back once the
    thread has finished; only the main thread can do that.
    """

    gateway: Gateway
    host: str
    port: int
    thread: threading.Thread | None = None
    previous_handler: Any = field(default=_NOT_INSTALLED, repr=False)

    @property
    def running(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def stop(self) -> None:
        stop_gateway(self.gateway)

    def join(self, timeout: float | None = None) -> None:
        if self.thread is not None:
            self.thread.join(timeout)
        if not self.running:
            self.restore_interrupt_handler()

    def restore_interrupt_handler(self) -> None:
        """Reinstate the SIGINT handler that was active before the run."""
        if self.previous_handler is _NOT_INSTALLED:
            return
        if threading.current_thread() is not threading.main_thread():
            return
        # None: the previous handler was not installed from Python
        previous = signal.SIG_DFL if self.previous_handler is None else self.previous_handler
        signal.signal(signal.SIGINT, previous)
        self.previous_handler = _NOT_INSTALLED


def _pass_on_interrupt(previous: Any, signum: int, frame: Any) -> None:
    """Deliver an interrupt the way the handler before decoy's would have."""
    if previous is signal.SIG_IGN:
        return
    if callable(previous):
        previous(signum, frame)
        return
    raise KeyboardInterrupt


def _install_interrupt_handler(handle: ServerHandle) -> None:
    """Route SIGINT to the handle's gateway, remembering the previous handler.

    Signal handlers can only be installed from the main thread; elsewhere
    this is a no-op. An interrupt arriving after a background run has
    ended restores the previous handler and is passed on to it.
    """
    if threading.current_thread() is not threading.main_thread():
        return

    def on_interrupt(signum: int, frame: Any) -> None:
        if handle.thread is not None and not handle.running:
            previous = handle.previous_handler
            handle.restore_interrupt_handler()
            _pass_on_interrupt(previous, signum, frame)
            return
        logger.info("Interrupt received, stopping %s", handle.gateway.name)
        stop_gateway(handle.gateway)

    handle.previous_handler = signal.signal(signal.SIGINT, on_interrupt)


def run_server(
    app: Any,
    *,
    host: str,
    port: int,
    background: bool = False,
    gateway: str | Gateway | None = None,
    providers: Sequence[Gateway] | None = None,
    log_level: str = "info",
) -> ServerHandle:
    """Serve *app* on the first usable gateway.

    Foreground runs block until the gateway stops. Background runs start
    a daemon thread and return immediately; call ``join()`` on the
    returned handle to wait for it and restore the SIGINT handler.

    Raises ``GatewayUnavailable`` when no gateway can be provided.
    """
    selected = select_gateway(gateway, providers)
    handle = ServerHandle(selected, host, port)

    def runner() -> None:
        logger.info("Starting web server on %s:%d", host, port)
        logger.debug("Using gateway %s", selected.name)
        selected.serve(app, host, port, log_level=log_level)
        logger.info("Web server on %s:%d stopped", host, port)

    _install_interrupt_handler(handle)

    if background:
        handle.thread = threading.Thread(target=runner, name=f"decoy-{selected.name}", daemon=True)
        handle.thread.start()
        return handle

    try:
        runner()
    finally:
        handle.restore_interrupt_handler()
    return handle
