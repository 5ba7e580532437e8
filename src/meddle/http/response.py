"""Mutable HTTP response shared by every middleware in the chain.

Status, headers and body are written in place. ``finished`` marks the
response as final: once set, no downstream middleware runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meddle.http.request import Request


def _to_bytes(chunk: str | bytes | bytearray) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    return bytes(chunk)


@dataclass(slots=True)
class Response:
    """An HTTP response built up as it moves through the chain.

    ``Response(404)`` sets the status only. The body may be given as text
    (UTF-8 encoded) or bytes and is always stored as bytes.
    """

    status: int = 200
    body: bytes | str = b""
    headers: dict[str, str] = field(default_factory=dict)
    finished: bool = False

    def __post_init__(self) -> None:
        self.body = _to_bytes(self.body)

    def write(self, chunk: str | bytes | bytearray) -> Response:
        """Append *chunk* to the body and return the response.

        Text is encoded as UTF-8 first, so ``write("é")`` and
        ``write("é".encode())`` leave identical bytes.
        """
        self.body = self.body + _to_bytes(chunk)
        return self

    def finish(self) -> Response:
        """Mark the response as final and return it."""
        self.finished = True
        return self

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body.decode("utf-8")


def write(response: Response, chunk: str | bytes | bytearray) -> Response:
    """Append *chunk* to ``response.body``. See :meth:`Response.write`."""
    return response.write(chunk)


def respond(request: Request, response: Response) -> tuple[Request, Response]:
    """Finish *response* from a step-style middleware.

    Step middleware return ``(request, response)``; returning
    ``respond(request, response)`` ends the chain there::

        @step
        def maintenance(request, response):
            response.status = 503
            return respond(request, response)
    """
    response.finish()
    return request, response
