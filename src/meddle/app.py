"""MeddleApp — mount a composed stack on any ASGI server.

Meddle is not a server. ``MeddleApp`` is the boundary object an ASGI
server (uvicorn, hypercorn, pounce) calls once per connection::

    from meddle import MeddleApp, MeddleConfig

    app = MeddleApp(config=MeddleConfig(static_root="./public"))

    # uvicorn module:app
"""

import logging
from collections.abc import Iterable
from typing import Any

from meddle._internal.asgi import Receive, Scope, Send
from meddle.config import MeddleConfig
from meddle.middleware.builtin import (
    BodyDecoder,
    CookieDecoder,
    DefaultHeaders,
    LogRequest,
    NotFound,
    URLDecoder,
)
from meddle.middleware.static import FileServer
from meddle.server.handler import handle_request
from meddle.stack import Stack

logger = logging.getLogger("meddle.server")


def default_stack(config: MeddleConfig | None = None, *, handlers: Iterable[Any] = ()) -> Stack:
    """Assemble the standard stack around application *handlers*.

    Order: server header, request log, decoders, file server (when
    ``config.static_root`` is set), *handlers*, then ``NotFound``.
    """
    config = config or MeddleConfig()
    items: list[Any] = [DefaultHeaders(config.version, product=config.product)]
    if config.log_requests:
        items.append(LogRequest())
    items.extend((URLDecoder(), CookieDecoder(), BodyDecoder()))
    if config.static_root is not None:
        items.append(FileServer(config.static_root))
    items.extend(handlers)
    items.append(NotFound())
    return Stack(items)


class MeddleApp:
    """ASGI 3 application wrapping one Stack.

    The stack is composed once at construction and reused for every
    request. Lifespan events are acknowledged; websocket scopes are
    ignored.
    """

    __slots__ = ("_handler", "config", "stack")

    def __init__(
        self,
        stack: Stack | Iterable[Any] | None = None,
        config: MeddleConfig | None = None,
    ) -> None:
        self.config = config or MeddleConfig()
        if stack is None:
            stack = default_stack(self.config)
        elif not isinstance(stack, Stack):
            stack = Stack(stack)
        self.stack = stack
        self._handler = stack.compose()
        logging.getLogger("meddle").setLevel(self.config.log_level.upper())

        for name, label in stack.unmet():
            logger.warning("Middleware %s expects %r but nothing earlier provides it", name, label)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        await handle_request(scope, receive, send, handler=self._handler)

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.debug("Serving %r", self.stack)
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
