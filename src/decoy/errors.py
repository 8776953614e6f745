"""Decoy exception hierarchy.

Shared across the route table, host registry, dispatcher and gateway
lifecycle so every module raises and catches the same types.
"""

from dataclasses import dataclass


class DecoyError(Exception):
    """Base for all decoy-specific errors."""


class ConfigurationError(DecoyError):
    """Raised when server setup is invalid.

    Surfaced at registration time (bad pattern, missing mount directory),
    never deferred to the first matching request.
    """


class GatewayUnavailable(ConfigurationError):  # noqa: N818
    """No configured gateway adapter can be provided by this environment."""

    def __init__(self, tried: tuple[str, ...]) -> None:
        self.tried = tried
        names = ", ".join(tried) or "none"
        super().__init__(f"no usable HTTP gateway (tried: {names})")


@dataclass(frozen=True, slots=True)
class HTTPError(DecoyError):
    """An error that maps directly to an HTTP status code.

    Handlers may raise it to short-circuit dispatch; the dispatcher turns
    it into a response with the same status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: nothing answered the request path."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(status=404, detail=detail)
