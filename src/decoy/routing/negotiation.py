"""Turn whatever a handler returned into a Response.

Accepted shapes:

- ``Response``: used as is
- ``None``: empty 200
- ``str``: text/html
- ``bytes``: application/octet-stream
- ``dict`` / ``list``: JSON
- ``(value, status)`` or ``(value, status, headers)``
"""

import json
from typing import Any

from decoy.http.response import Response

OCTET_STREAM = "application/octet-stream"
JSON = "application/json; charset=utf-8"


def negotiate(value: Any) -> Response:
    """Convert a route handler's return value to a Response.

    Raises ``TypeError`` for anything else; the dispatcher answers that
    with a 500.
    """
    if isinstance(value, Response):
        return value
    if value is None or isinstance(value, str):
        return Response(value or "")
    if isinstance(value, bytes):
        return Response(value, content_type=OCTET_STREAM)
    if isinstance(value, dict | list):
        return Response(json.dumps(value, default=str), content_type=JSON)

    match value:
        case (body, int(status)):
            return negotiate(body).with_status(status)
        case (body, int(status), dict(headers)):
            return negotiate(body).with_status(status).with_headers(headers)

    msg = f"Cannot convert {type(value).__name__} to a response"
    raise TypeError(msg)
