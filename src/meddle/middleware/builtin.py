"""Built-in middleware: headers, decoders, logging, not-found fallback.

Each class is a stateless callable object usable directly in a Stack.
Per-request data goes into ``request.state``, never onto the instance,
so one instance can serve any number of concurrent requests.

Decoders declare the capability labels they provide so ``Stack.unmet()``
can check stacks that depend on them.
"""

import logging
from urllib.parse import unquote

from meddle import __version__
from meddle.http.cookies import parse_cookies
from meddle.http.query import QueryParams
from meddle.http.request import Request, State
from meddle.http.response import Response
from meddle.middleware.protocol import Next

request_logger = logging.getLogger("meddle.request")


def short_circuit(response: Response, status: int) -> Response:
    """A finished response with *status*, keeping the headers set so far."""
    return Response(status, headers=dict(response.headers)).finish()


class DefaultHeaders:
    """Append the ``<product>/<version>`` token to the ``Server`` header.

    Not idempotent: listing it twice appends the token twice.

    Usage::

        Stack([DefaultHeaders(config.version), ...])
    """

    __slots__ = ("_token",)

    def __init__(self, version: str = __version__, *, product: str = "Meddle") -> None:
        self._token = f"{product}/{version}"

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        current = response.headers.get("Server")
        response.headers["Server"] = f"{current} {self._token}" if current else self._token
        return await next(request, response)


class URLDecoder:
    """Split the resource into decoded path, raw query and parsed params.

    Writes ``state[resource]`` always, ``state[url_query]`` when the
    resource has a ``?``, and ``state[url_params]`` when that query
    contains ``=``.
    """

    __slots__ = ()

    provides = frozenset({"resource", "url_query", "url_params"})

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        path, sep, query = request.resource.partition("?")
        request.state[State.RESOURCE] = unquote(path)
        if sep:
            request.state[State.URL_QUERY] = query
            if "=" in query:
                request.state[State.URL_PARAMS] = QueryParams(query)
        return await next(request, response)


class CookieDecoder:
    """Parse the ``Cookie`` header into ``state[cookies]``."""

    __slots__ = ()

    provides = frozenset({"cookies"})

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        request.state[State.COOKIES] = parse_cookies(request.headers.get("Cookie"))
        return await next(request, response)


class BodyDecoder:
    """Parse a URL-encoded body into ``state[data]`` when it contains ``=``."""

    __slots__ = ()

    provides = frozenset({"data"})

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        if b"=" in request.body:
            request.state[State.DATA] = QueryParams(request.body)
        return await next(request, response)


class NotFound:
    """Short-circuit with 404. Put it last to catch everything unhandled."""

    __slots__ = ()

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        return short_circuit(response, 404)


class LogRequest:
    """Log method, resource and current status, then continue."""

    __slots__ = ("_level", "_logger")

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self._logger = logger or request_logger
        self._level = level

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        self._logger.log(self._level, "%s %s %s", request.method, request.resource, response.status)
        return await next(request, response)
