"""Handler shapes and the terminal handler.

Two handler shapes exist. A middleware handler takes a continuation::

    async def mw(request: Request, response: Response, next: Next) -> Response: ...

and either returns ``await next(request, response)`` to continue or
returns a Response directly to short-circuit.

A step handler uses the flag convention instead::

    def mw(request: Request, response: Response) -> tuple[Request, Response]: ...

and stops the chain by finishing the response (see ``respond``).

Either shape may be ``def`` or ``async def``.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from meddle.http.request import Request
from meddle.http.response import Response

# The rest of the chain; also the shape of a composed stack
Next: TypeAlias = Callable[[Request, Response], Awaitable[Response]]

# A continuation-form handler
Handler: TypeAlias = Callable[[Request, Response, Next], Response | Awaitable[Response]]

# A flag-form handler
StepHandler: TypeAlias = Callable[[Request, Response], Any]


async def passthrough(request: Request, response: Response) -> Response:
    """Terminal handler: return the response unchanged.

    Implicitly appended to every composed stack so composition is well
    defined for zero or one middleware.
    """
    return response
