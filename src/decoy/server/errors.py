"""Map exceptions escaping a handler to responses."""

import logging

from decoy.errors import HTTPError
from decoy.http.request import Request
from decoy.http.response import Response

logger = logging.getLogger("decoy.server")


def http_error_response(exc: HTTPError, request: Request) -> Response:
    """Answer with the status (and headers) an HTTPError carries."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.full_path, exc.detail)
    resp = Response(body=exc.detail, status=exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def internal_error_response(exc: Exception, request: Request) -> Response:
    """Log an unexpected handler failure and answer 500."""
    logger.exception("500 %s %s", request.method, request.full_path, exc_info=exc)
    return Response(body="Internal Server Error", status=500)
