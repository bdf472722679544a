"""Handler normalization.

A route handler is one of exactly two things:

* an ASGI application, ``async (scope, receive, send)``;
* a bare function ``(writer, request)``, sync or async.

Both are normalized to an ASGI callable when the route is registered.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any

from switchyard.errors import InvalidHandlerError
from switchyard.request import Request
from switchyard.response import ResponseWriter

if TYPE_CHECKING:
    from collections.abc import Callable

    from switchyard._types import ASGIApp, Receive, Scope, Send

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class HandlerFunc:
    """Adapts a ``(writer, request)`` function to the ASGI interface.

    Sync functions run in the default executor so they never block the
    event loop.
    """

    __slots__ = ("func", "is_coroutine")

    def __init__(self, func: Callable[[ResponseWriter, Request], Any]) -> None:
        self.func = func
        self.is_coroutine = _is_coroutine_callable(func)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        writer = ResponseWriter(send)
        request = Request(scope, receive)
        if self.is_coroutine:
            await self.func(writer, request)
        else:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.func, writer, request)
        await writer.finish()

    def __repr__(self) -> str:
        return f"HandlerFunc({self.func!r})"


def as_asgi(handler: Any) -> ASGIApp:
    """Normalize *handler* to an ASGI callable.

    Raises :class:`InvalidHandlerError` for anything that is not an ASGI
    app or a ``(writer, request)`` function.
    """
    if isinstance(handler, HandlerFunc):
        return handler
    if not callable(handler):
        msg = f"Handler must be callable, got {type(handler).__name__}"
        raise InvalidHandlerError(msg)

    arity = _positional_arity(handler)
    if arity == 3:
        if not _is_coroutine_callable(handler):
            name = getattr(handler, "__name__", repr(handler))
            msg = f"ASGI handler {name!r} must be a coroutine function or have an async __call__"
            raise InvalidHandlerError(msg)
        return handler
    if arity == 2:
        return HandlerFunc(handler)

    name = getattr(handler, "__name__", repr(handler))
    got = "an unsupported signature" if arity is None else f"{arity} positional parameters"
    msg = f"Handler {name!r} must take (scope, receive, send) or (writer, request), got {got}"
    raise InvalidHandlerError(msg)


def _is_coroutine_callable(func: Any) -> bool:
    return inspect.iscoroutinefunction(func) or inspect.iscoroutinefunction(getattr(func, "__call__", None))


def _positional_arity(func: Callable[..., Any]) -> int | None:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in sig.parameters.values()):
        return None
    # Parameters with defaults are not part of the calling convention.
    return sum(1 for p in sig.parameters.values() if p.kind in _POSITIONAL and p.default is inspect.Parameter.empty)
