"""HTTP value types: requests, responses, headers and content types."""

from decoy.http.content_types import UNKNOWN_CONTENT_TYPE, ContentTypes
from decoy.http.headers import Headers
from decoy.http.request import Request
from decoy.http.response import Response, not_found, response

__all__ = [
    "UNKNOWN_CONTENT_TYPE",
    "ContentTypes",
    "Headers",
    "Request",
    "Response",
    "not_found",
    "response",
]
