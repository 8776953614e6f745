"""Call route handlers uniformly.

Handlers may be ``def`` or ``async def`` and may ask for any subset of
``request`` plus the named groups of the pattern that matched them.
"""

import inspect
from typing import Any

from decoy._internal.types import Handler
from decoy.http.request import Request


def handler_kwargs(handler: Handler, request: Request) -> dict[str, Any]:
    """Build keyword arguments from *handler*'s signature.

    ``request`` (by name or annotation) receives the Request; any other
    parameter named after a captured group receives its value. A handler
    taking ``**kwargs`` receives every named group.
    """
    sig = inspect.signature(handler)
    kwargs: dict[str, Any] = {}
    accepts_var_kw = False

    for name, param in sig.parameters.items():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            accepts_var_kw = True
        elif name == "request" or param.annotation in (Request, "Request"):
            kwargs[name] = request
        elif name in request.path_params:
            kwargs[name] = request.path_params[name]

    if accepts_var_kw:
        for name, value in request.path_params.items():
            kwargs.setdefault(name, value)
    return kwargs


async def invoke(handler: Handler, request: Request) -> Any:
    """Call *handler* for *request*, awaiting the result if needed."""
    result = handler(**handler_kwargs(handler, request))
    if inspect.isawaitable(result):
        result = await result
    return result
