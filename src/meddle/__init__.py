"""Meddle — the middleware meddler.

Compose small request handlers into one, and hand it to an HTTP server.

Basic usage::

    from meddle import LogRequest, Response, Stack, middleware

    @middleware
    async def hello(request, response, next):
        response.write("<h1>Hello, World!</h1>")
        return await next(request, response)

    handler = Stack([LogRequest(), hello]).compose()
    response = await handler(request, Response())

Serving over ASGI::

    from meddle import MeddleApp
    app = MeddleApp([LogRequest(), hello])
"""

__version__ = "0.1.0"
__all__ = [
    "BodyDecoder",
    "ConfigurationError",
    "CookieDecoder",
    "DefaultHeaders",
    "FileServer",
    "LogRequest",
    "MeddleApp",
    "MeddleConfig",
    "MeddleError",
    "Middleware",
    "Next",
    "NotFound",
    "Request",
    "Response",
    "Stack",
    "State",
    "URLDecoder",
    "compose",
    "default_stack",
    "handle",
    "handle_sync",
    "middleware",
    "respond",
    "step",
    "write",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import meddle`` fast while providing a clean top-level API.
    """
    if name in ("MeddleApp", "default_stack"):
        from meddle import app as _app

        return getattr(_app, name)

    if name == "MeddleConfig":
        from meddle.config import MeddleConfig

        return MeddleConfig

    if name in ("Request", "State"):
        from meddle.http import request as _req

        return getattr(_req, name)

    if name in ("Response", "respond", "write"):
        from meddle.http import response as _resp

        return getattr(_resp, name)

    if name in ("Middleware", "middleware", "step"):
        from meddle.middleware import base as _base

        return getattr(_base, name)

    if name == "Next":
        from meddle.middleware.protocol import Next

        return Next

    if name in ("BodyDecoder", "CookieDecoder", "DefaultHeaders", "LogRequest", "NotFound", "URLDecoder"):
        from meddle.middleware import builtin as _builtin

        return getattr(_builtin, name)

    if name == "FileServer":
        from meddle.middleware.static import FileServer

        return FileServer

    if name in ("Stack", "compose"):
        from meddle import stack as _stack

        return getattr(_stack, name)

    if name in ("handle", "handle_sync"):
        from meddle import dispatch as _dispatch

        return getattr(_dispatch, name)

    if name in ("ConfigurationError", "MeddleError"):
        from meddle import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
