"""The Middleware value and the builders that produce it.

A Middleware wraps one handler plus capability metadata. ``expects`` and
``provides`` are labels (``"cookies"``, ``"sessions"``) describing what a
middleware needs from earlier ones and what it adds for later ones. They
are not enforced during dispatch; ``Stack.unmet()`` reports gaps on
request.

Usage::

    @middleware
    async def hello(request, response, next):
        response.write("<h1>Hello, World!</h1>")
        return await next(request, response)

    @middleware(expects=["cookies"], provides=["sessions"])
    async def sessions(request, response, next):
        ...

    @step
    def maintenance(request, response):
        response.status = 503
        return respond(request, response)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, overload

from meddle._internal.invoke import invoke
from meddle.errors import ConfigurationError
from meddle.http.request import Request
from meddle.http.response import Response
from meddle.middleware.protocol import Next, StepHandler


def _labels(value: Iterable[str], field_name: str) -> frozenset[str]:
    # A bare string would silently become a set of characters
    if isinstance(value, str):
        msg = f"{field_name} must be a collection of labels, not a string: {value!r}"
        raise ConfigurationError(msg)
    return frozenset(value)


def _resolve_name(handler: Any) -> str:
    name = getattr(handler, "__name__", None)
    if isinstance(name, str) and name:
        return name
    return type(handler).__name__


@dataclass(frozen=True, slots=True)
class Middleware:
    """A named handler unit in a stack.

    ``handler`` has the continuation shape ``(request, response, next)``.
    Build step-shaped middleware with :meth:`Middleware.step`.

    Raises:
        ConfigurationError: If *handler* is not callable, is a class
            rather than an instance, or if *expects*/*provides* is a
            plain string.
    """

    handler: Callable[..., Any]
    expects: frozenset[str] = frozenset()
    provides: frozenset[str] = frozenset()
    name: str = ""

    def __post_init__(self) -> None:
        if not callable(self.handler):
            msg = f"Middleware handler must be callable, got {type(self.handler).__name__}"
            raise ConfigurationError(msg)
        if isinstance(self.handler, type):
            msg = (
                f"Middleware handler {self.handler.__name__} is a class; "
                f"pass an instance, e.g. {self.handler.__name__}()"
            )
            raise ConfigurationError(msg)
        object.__setattr__(self, "expects", _labels(self.expects, "expects"))
        object.__setattr__(self, "provides", _labels(self.provides, "provides"))
        if not self.name:
            object.__setattr__(self, "name", _resolve_name(self.handler))

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        result = await invoke(self.handler, request, response, next)
        if not isinstance(result, Response):
            msg = f"Middleware {self.name!r} returned {type(result).__name__}, expected Response"
            raise TypeError(msg)
        return result

    @classmethod
    def of(cls, item: Any) -> Middleware:
        """Wrap a raw callable, picking up any declared capabilities.

        Callable objects may declare ``expects``/``provides`` as class
        attributes; the built-in middleware do.
        """
        if isinstance(item, cls):
            return item
        return cls(
            item,
            expects=getattr(item, "expects", frozenset()),
            provides=getattr(item, "provides", frozenset()),
        )

    @classmethod
    def step(
        cls,
        handler: StepHandler,
        *,
        expects: Iterable[str] = (),
        provides: Iterable[str] = (),
        name: str = "",
    ) -> Middleware:
        """Adapt a flag-form handler ``(request, response) -> (request, response)``.

        After the handler returns, the chain continues with the returned
        pair unless the response is finished. A handler may also return
        just a Response, in which case the request is passed on as is.
        """
        if not callable(handler):
            msg = f"Step handler must be callable, got {type(handler).__name__}"
            raise ConfigurationError(msg)

        async def run_step(request: Request, response: Response, next: Next) -> Response:
            result = await invoke(handler, request, response)
            if isinstance(result, Response):
                response = result
            else:
                try:
                    request, response = result
                except (TypeError, ValueError):
                    msg = (
                        f"Step {name or _resolve_name(handler)!r} must return "
                        f"(request, response), got {type(result).__name__}"
                    )
                    raise TypeError(msg) from None
            if response.finished:
                return response
            return await next(request, response)

        return cls(run_step, expects, provides, name or _resolve_name(handler))


@overload
def middleware(handler: Callable[..., Any], /) -> Middleware: ...


@overload
def middleware(
    *,
    expects: Iterable[str] = (),
    provides: Iterable[str] = (),
    name: str = "",
) -> Callable[[Callable[..., Any]], Middleware]: ...


def middleware(
    handler: Callable[..., Any] | None = None,
    /,
    *,
    expects: Iterable[str] = (),
    provides: Iterable[str] = (),
    name: str = "",
) -> Middleware | Callable[[Callable[..., Any]], Middleware]:
    """Turn a ``(request, response, next)`` function into a Middleware.

    Usable bare (``@middleware``) or with capability metadata
    (``@middleware(expects=["cookies"])``).
    """

    def decorate(fn: Callable[..., Any]) -> Middleware:
        return Middleware(fn, expects, provides, name)

    if handler is None:
        return decorate
    return decorate(handler)


@overload
def step(handler: StepHandler, /) -> Middleware: ...


@overload
def step(
    *,
    expects: Iterable[str] = (),
    provides: Iterable[str] = (),
    name: str = "",
) -> Callable[[StepHandler], Middleware]: ...


def step(
    handler: StepHandler | None = None,
    /,
    *,
    expects: Iterable[str] = (),
    provides: Iterable[str] = (),
    name: str = "",
) -> Middleware | Callable[[StepHandler], Middleware]:
    """Turn a ``(request, response) -> (request, response)`` function into a Middleware."""

    def decorate(fn: StepHandler) -> Middleware:
        return Middleware.step(fn, expects=expects, provides=provides, name=name)

    if handler is None:
        return decorate
    return decorate(handler)
