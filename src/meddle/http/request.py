"""Mutable per-request context.

The request is created once by the HTTP layer and threaded through the
whole chain. Its identity (method, resource, headers, body) is fixed;
``state`` is the bag middleware use to hand derived data forward.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from meddle.http.headers import Headers


class State(StrEnum):
    """Well-known ``Request.state`` keys written by the default middleware."""

    RESOURCE = "resource"
    URL_QUERY = "url_query"
    URL_PARAMS = "url_params"
    COOKIES = "cookies"
    DATA = "data"


@dataclass(slots=True)
class Request:
    """One inbound HTTP request as seen by the chain.

    ``resource`` is the raw path plus query string, exactly as received.
    ``headers`` accepts a mapping or ``(name, value)`` pairs and is
    normalized to :class:`Headers`, which is read-only: request headers stay
    as received, and only the response carries writable headers. ``body``
    accepts ``str`` or bytes.

    The state bag belongs to this request alone. Middleware add to it and
    conventionally never remove from it::

        request.state[State.COOKIES]["session"]
    """

    method: str = "GET"
    resource: str = "/"
    headers: Headers | Mapping[str, str] | Iterable[tuple[str, str]] = ()
    body: bytes | str = b""
    state: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @property
    def path(self) -> str:
        """The resource up to the first ``?``, still percent-encoded."""
        return self.resource.partition("?")[0]

    @property
    def query_string(self) -> str:
        """The resource after the first ``?``, or ``""``."""
        return self.resource.partition("?")[2]
