"""Stack — an ordered, immutable sequence of middleware composed into one handler.

Composition is a right-to-left fold: each middleware is linked to the
handler built from everything after it, ending with the terminal
``passthrough``. The result has the same shape as ``next``::

    handler = Stack([LogRequest(), URLDecoder(), hello, NotFound()]).compose()
    response = await handler(request, Response())

A Stack is itself a continuation-form handler, so stacks nest::

    api = Stack([CookieDecoder(), BodyDecoder()])
    app = Stack([DefaultHeaders(), api, NotFound()])

Every link checks ``response.finished`` before running its middleware.
That makes the flag convention (``finish()`` then ``next``) stop the chain
exactly like returning without calling ``next`` does.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any, overload

from meddle.errors import ConfigurationError
from meddle.http.request import Request
from meddle.http.response import Response
from meddle.middleware.base import Middleware
from meddle.middleware.protocol import Next, passthrough


def _link(item: Middleware | Stack, rest: Next) -> Next:
    async def run(request: Request, response: Response) -> Response:
        if response.finished:
            return response
        return await item(request, response, rest)

    return run


def _guard(terminal: Next) -> Next:
    async def run(request: Request, response: Response) -> Response:
        if response.finished:
            return response
        return await terminal(request, response)

    return run


class Stack(Sequence["Middleware | Stack"]):
    """An ordered sequence of middleware.

    Items may be :class:`Middleware` values, other stacks, or plain
    callables (wrapped with :meth:`Middleware.of`). Order is preserved
    exactly as declared. The contents never change after construction;
    build a new Stack to add or remove middleware.

    Raises:
        ConfigurationError: If any item cannot be turned into a Middleware.
    """

    __slots__ = ("_items",)

    _items: tuple[Middleware | Stack, ...]

    def __init__(self, items: Iterable[Any] = ()) -> None:
        single = callable(items) and not isinstance(items, Stack)
        if single or isinstance(items, str):
            msg = f"Stack expects a sequence of middleware, got a single {type(items).__name__}"
            raise ConfigurationError(msg)
        coerced = tuple(item if isinstance(item, Stack) else Middleware.of(item) for item in items)
        object.__setattr__(self, "_items", coerced)

    @classmethod
    def of(cls, items: Any) -> Stack:
        """Coerce *items* to a Stack.

        A single middleware or callable becomes a one-item stack; an
        existing Stack is returned as is.
        """
        if isinstance(items, Stack):
            return items
        if callable(items):
            return cls([items])
        return cls(items)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Stack is immutable"
        raise AttributeError(msg)

    @overload
    def __getitem__(self, index: int) -> Middleware | Stack: ...

    @overload
    def __getitem__(self, index: slice) -> Stack: ...

    def __getitem__(self, index: int | slice) -> Middleware | Stack:
        if isinstance(index, slice):
            return Stack(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Middleware | Stack]:
        return iter(self._items)

    def __repr__(self) -> str:
        names = ", ".join(repr(item) if isinstance(item, Stack) else item.name for item in self._items)
        return f"Stack([{names}])"

    # -- Composition --

    def compose(self, terminal: Next = passthrough) -> Next:
        """Fold the stack into a single ``(request, response) -> response`` handler.

        *terminal* runs when no middleware short-circuits. It defaults to
        ``passthrough``, which returns the response unchanged.
        """
        handler = _guard(terminal)
        for item in reversed(self._items):
            handler = _link(item, handler)
        return handler

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        """Run the stack as one middleware, continuing into *next* at the end."""
        return await self.compose(next)(request, response)

    # -- Capability metadata --

    def flatten(self) -> tuple[Middleware, ...]:
        """All middleware in execution order, with nested stacks expanded."""
        flat: list[Middleware] = []
        for item in self._items:
            if isinstance(item, Stack):
                flat.extend(item.flatten())
            else:
                flat.append(item)
        return tuple(flat)

    def unmet(self) -> list[tuple[str, str]]:
        """Report ``expects`` labels not provided by an earlier middleware.

        Returns ``(middleware name, label)`` pairs in stack order. Never
        called during dispatch; run it at startup if you want the check::

            for name, label in stack.unmet():
                logger.warning("%s expects %s", name, label)
        """
        provided: set[str] = set()
        missing: list[tuple[str, str]] = []
        for mw in self.flatten():
            missing.extend((mw.name, label) for label in sorted(mw.expects - provided))
            provided |= mw.provides
        return missing


def compose(items: Any, terminal: Next = passthrough) -> Next:
    """Build a Stack from *items* and compose it in one call.

    *items* may also be a single middleware: ``compose(hello)``.
    """
    return Stack.of(items).compose(terminal)
