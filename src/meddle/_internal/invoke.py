"""Invoke helpers — call sync or async handlers uniformly.

Middleware handlers can be ``def`` or ``async def``. Anything that calls
a user-provided handler goes through ``invoke`` so the sync/async check
lives in exactly one place.

Usage::

    from meddle._internal.invoke import invoke

    result = await invoke(handler, request, response, next)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        def stamp(request, response, next):
            response.headers["X-Stamp"] = "1"
            return next(request, response)  # coroutine, awaited here

        async def timing(request, response, next):
            return await next(request, response)
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
