"""Server configuration.

ServerConfig is a frozen dataclass: built once during setup, immutable
once serving begins. The appendable settings (index names, content types)
grow through ``with_*`` calls that return a new config.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
DEFAULT_INDICES = ("index.html", "index.htm")


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Mock server configuration. Immutable after creation.

    Override what you need::

        config = ServerConfig(port=8080, gateway="hypercorn")
        config = config.with_index("default.htm").with_content_type("jsp", "text/html")
    """

    # Listener
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    background: bool = False  # Run the gateway on a worker thread

    # Gateway adapter tried before the default preference order
    gateway: str | None = None

    # Directory index names, searched in order
    indices: tuple[str, ...] = DEFAULT_INDICES

    # Extension -> MIME overrides layered on the built-in table
    content_types: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    # Forwarded to the gateway
    log_level: str = "info"

    def with_index(self, name: str) -> "ServerConfig":
        """Return a new config with *name* appended to the index list."""
        if name in self.indices:
            return self
        return replace(self, indices=(*self.indices, name))

    def with_content_type(self, extension: str, mime_type: str) -> "ServerConfig":
        """Return a new config mapping *extension* to *mime_type*."""
        merged = {**self.content_types, extension.lstrip(".").lower(): mime_type}
        return replace(self, content_types=MappingProxyType(merged))
