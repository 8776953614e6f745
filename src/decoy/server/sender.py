"""Write a Response to ASGI as one start message and one body message."""

from decoy._internal.types import Send
from decoy.http.response import Response

# Statuses that never carry a message body
_BODYLESS = frozenset({204, 304})

# Computed by the sender; handler-supplied copies are dropped
_OWNED_HEADERS = frozenset({"content-type", "content-length"})


def _has_body(status: int) -> bool:
    return status >= 200 and status not in _BODYLESS


def _encode_headers(response: Response, length: int) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type)]
    pairs.extend((name.lower(), value) for name, value in response.headers if name.lower() not in _OWNED_HEADERS)
    pairs.append(("content-length", str(length)))
    return [(name.encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response* through *send*.

    HEAD answers keep the Content-Length of the full body and drop the
    body itself.
    """
    body = response.body_bytes if _has_body(response.status) else b""
    await send({
        "type": "http.response.start",
        "status": response.status,
        "headers": _encode_headers(response, len(body)),
    })
    await send({"type": "http.response.body", "body": b"" if head else body})
