"""Built-in middleware.

A middleware takes the next ASGI app and returns a new one::

    def add_header(app):
        async def middleware(scope, receive, send):
            ...
            await app(scope, receive, send)

        return middleware

    router.use(recoverer)
    router.use(request_logger)

The last middleware passed to ``Router.use`` is the outermost: it sees the
request first and the response last. Registering ``recoverer`` before
``request_logger`` therefore logs requests whose handler raised, with the
500 written by ``recoverer``.
"""

from __future__ import annotations

import base64
import binascii
import inspect
import logging
import time
from typing import TYPE_CHECKING

from switchyard.response import send_json_error

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from switchyard._types import ASGIApp, Message, Receive, Scope, Send

    Verify = Callable[[str, str], bool | Awaitable[bool]]

access_logger = logging.getLogger("switchyard.access")
server_logger = logging.getLogger("switchyard.server")


def recoverer(app: ASGIApp) -> ASGIApp:
    """Turn exceptions raised by *app* into a 500 JSON error response.

    Once *app* has started its response nothing else can be sent, so the
    exception is re-raised to the server.
    """

    async def middleware(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        started = False

        async def tracking_send(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await app(scope, receive, tracking_send)
        except Exception:
            if started:
                raise
            server_logger.exception("Unhandled error in %s %s", scope.get("method"), scope.get("path"))
            await send_json_error(send, 500, "an unknown error occured")

    return middleware


def request_logger(app: ASGIApp) -> ASGIApp:
    """Log method, path, status and duration of every completed request.

    Exceptions from *app* pass straight through without a log line; place
    a ``recoverer`` inside this middleware to log failed requests too.
    """

    async def middleware(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        status = 0

        async def recording_send(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            await send(message)

        start = time.perf_counter()
        await app(scope, receive, recording_send)
        duration_ms = (time.perf_counter() - start) * 1000

        method = scope["method"]
        path = _full_path(scope)
        access_logger.info(
            "%-7s %s %d in %.2fms",
            method,
            path,
            status,
            duration_ms,
            extra={"method": method, "path": path, "status": status, "duration_ms": duration_ms},
        )

    return middleware


def basic_auth(verify: Verify) -> Callable[[ASGIApp], ASGIApp]:
    """Protect an app with HTTP Basic authentication.

    *verify* receives the username and password and returns whether they
    are valid; it may be a coroutine function. Missing or malformed
    credentials get a 400, rejected credentials a 401.
    """

    def wrap(app: ASGIApp) -> ASGIApp:
        async def middleware(scope: Scope, receive: Receive, send: Send) -> None:
            if scope["type"] != "http":
                await app(scope, receive, send)
                return

            credentials = parse_basic_auth(_header(scope, b"authorization"))
            if credentials is None:
                await send_json_error(send, 400, "Authorization requiried")
                return

            ok = verify(*credentials)
            if inspect.isawaitable(ok):
                ok = await ok
            if not ok:
                await send_json_error(send, 401, "Invalid username or password")
                return

            await app(scope, receive, send)

        return middleware

    return wrap


def parse_basic_auth(header: str | None) -> tuple[str, str] | None:
    """Return ``(username, password)`` from a Basic ``Authorization`` header."""
    if not header:
        return None
    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic":
        return None
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _header(scope: Scope, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def _full_path(scope: Scope) -> str:
    query = scope.get("query_string", b"")
    if query:
        return f"{scope['path']}?{query.decode('latin-1')}"
    return scope["path"]
