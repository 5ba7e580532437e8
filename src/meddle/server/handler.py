"""ASGI handler — translates ASGI scope/messages to meddle types.

The only component that touches raw ASGI directly. Reads the request
body, builds a Request, dispatches through the composed stack, and sends
the Response back through ASGI send().
"""

from urllib.parse import quote

from meddle._internal.asgi import Receive, Scope, Send
from meddle.http.request import Request
from meddle.http.response import Response
from meddle.middleware.protocol import Next
from meddle.server.sender import send_response


async def read_body(receive: Receive) -> bytes:
    """Read the full request body from ASGI receive()."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def resource_from_scope(scope: Scope) -> str:
    """Rebuild the raw path+query string from an ASGI scope."""
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1")
    else:
        path = quote(scope.get("path", "/"), safe="/:@!$&'()*+,;=-._~")
    query = scope.get("query_string", b"")
    if query:
        return f"{path}?{query.decode('latin-1')}"
    return path


async def build_request(scope: Scope, receive: Receive) -> Request:
    """Create a Request from an ASGI HTTP scope and receive callable."""
    headers = tuple(
        (name.decode("latin-1"), value.decode("latin-1")) for name, value in scope.get("headers", ())
    )
    return Request(
        method=scope["method"],
        resource=resource_from_scope(scope),
        headers=headers,
        body=await read_body(receive),
    )


async def handle_request(scope: Scope, receive: Receive, send: Send, *, handler: Next) -> None:
    """Process a single HTTP request through the composed stack.

    Exceptions from middleware are not caught here; the ASGI server
    answers them with its own 500.
    """
    if scope["type"] != "http":
        return

    request = await build_request(scope, receive)
    response = await handler(request, Response())
    await send_response(response, send)
