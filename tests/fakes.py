"""Gateway stand-ins for lifecycle tests."""

import threading
from typing import Any


class FakeGateway:
    """Records calls; ``serve()`` blocks until stopped."""

    def __init__(self, name: str = "fake", *, available: bool = True) -> None:
        self.name = name
        self._available = available
        self.served: list[tuple[Any, str, int, str]] = []
        self.stopped = threading.Event()
        self.started = threading.Event()
        self.calls: list[str] = []

    def available(self) -> bool:
        return self._available

    def serve(self, app: Any, host: str, port: int, *, log_level: str = "info") -> None:
        self.served.append((app, host, port, log_level))
        self.started.set()
        self.stopped.wait(5)

    def stop(self) -> None:
        self.calls.append("stop")
        self.stopped.set()


class ForcefulGateway(FakeGateway):
    def force_stop(self) -> None:
        self.calls.append("force_stop")
        self.stopped.set()
