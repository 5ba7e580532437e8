"""Hello — the smallest useful stack.

Demonstrates:
- Continuation middleware that writes and continues
- Step middleware that finishes the response
- LogRequest and NotFound from the default library

Run with any ASGI server:
    cd examples/hello && uvicorn app:app --port 8000
"""

import logging

from meddle import LogRequest, MeddleApp, NotFound, URLDecoder, middleware, respond, step
from meddle.http.request import State

logger = logging.getLogger("examples.hello")


@middleware
async def just_for_kicks(request, response, next):
    """Log something, just for kicks, and pass along."""
    logger.info("This is just for kicks")
    return await next(request, response)


@step
def hello_world(request, response):
    """Answer ``/`` and stop; everything else falls through."""
    if request.state[State.RESOURCE] != "/":
        return request, response
    response.headers["Content-Type"] = "text/html; charset=utf-8"
    response.write("<h1>Hello, World!</h1>")
    return respond(request, response)


app = MeddleApp([just_for_kicks, LogRequest(), URLDecoder(), hello_world, NotFound()])
