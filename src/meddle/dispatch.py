"""Dispatcher — run a stack against one request/response pair.

``handle`` is the single entry point the HTTP layer calls per request.
It performs no retries and no error recovery: an exception raised inside
a middleware propagates to the caller unchanged.
"""

from typing import Any

import anyio

from meddle.http.request import Request
from meddle.http.response import Response
from meddle.stack import Stack


async def handle(stack: Any, request: Request, response: Response) -> Response:
    """Dispatch *request* through *stack*, starting from *response*.

    *stack* is a Stack, a sequence of middleware, or one middleware.
    Returns the response of the first middleware that short-circuits, or
    *response* itself (possibly mutated) when the stack is exhausted.
    """
    return await Stack.of(stack).compose()(request, response)


def handle_sync(stack: Any, request: Request, response: Response) -> Response:
    """Blocking form of :func:`handle` for callers without an event loop."""
    return anyio.run(handle, stack, request, response)
