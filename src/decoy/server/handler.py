"""ASGI handler — the only code that touches raw HTTP scopes.

Converts a scope into a Request, runs it through the Dispatcher and
sends the resulting Response back through ASGI ``send()``.
"""

from decoy._internal.types import Receive, Scope, Send
from decoy.dispatch import Dispatcher
from decoy.http.request import Request
from decoy.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
) -> None:
    """Process a single HTTP request."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = await dispatcher.dispatch(request)
    await send_response(response, send, head=request.method == "HEAD")


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge lifespan startup/shutdown; decoy has no hooks to run."""
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
