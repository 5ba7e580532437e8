"""Middleware — continuation handlers with optional capability metadata.

A middleware handler is any callable matching:
    async def mw(request: Request, response: Response, next: Next) -> Response

or, in step form (see ``step``):
    def mw(request: Request, response: Response) -> tuple[Request, Response]

Built-in middleware:
    BodyDecoder -- URL-encoded body into state[data]
    CookieDecoder -- Cookie header into state[cookies]
    DefaultHeaders -- Append the Meddle token to the Server header
    FileServer -- Serve files under a root directory
    LogRequest -- Log method, resource and status
    NotFound -- Short-circuit with 404
    URLDecoder -- Decoded path, raw query and params into state
"""

from meddle.middleware.base import Middleware, middleware, step
from meddle.middleware.builtin import (
    BodyDecoder,
    CookieDecoder,
    DefaultHeaders,
    LogRequest,
    NotFound,
    URLDecoder,
)
from meddle.middleware.protocol import Handler, Next, StepHandler, passthrough
from meddle.middleware.static import FileServer

__all__ = [
    "BodyDecoder",
    "CookieDecoder",
    "DefaultHeaders",
    "FileServer",
    "Handler",
    "LogRequest",
    "Middleware",
    "Next",
    "NotFound",
    "StepHandler",
    "URLDecoder",
    "middleware",
    "passthrough",
    "step",
]
