"""Switchyard ASGI router."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from switchyard.params import PathParams, with_params
from switchyard.response import send_json_error
from switchyard.routing import Route, RouteTable

if TYPE_CHECKING:
    from collections.abc import Callable

    from switchyard._types import ASGIApp, Middleware, Receive, Scope, Send


class Router:
    """ASGI 3.0 application that dispatches requests to registered routes.

    Routes are tried in registration order and the first one whose method
    and full-path pattern match wins. Path templates are regular
    expressions; named groups become path parameters::

        router = Router()
        router.handle("GET", r"/people/(?P<id>\\d+)", get_person)
        router.use(recoverer)
        router.use(request_logger)

    Register routes and middleware before serving; the router is read-only
    while it handles requests.
    """

    def __init__(self) -> None:
        self.routes = RouteTable()
        self._middleware: list[Middleware] = []
        self._app: ASGIApp | None = None

    # ------------------------------------------------------------------
    # Route registration
    # ------------------------------------------------------------------

    def handle(self, method: str, path: str, handler: Any) -> Route:
        """Register *handler* for *method* requests whose path matches *path*.

        *handler* is an ASGI app or a ``(writer, request)`` function.
        Raises :class:`InvalidPatternError` or :class:`InvalidHandlerError`.
        """
        return self.routes.register(method, path, handler)

    def route(self, method: str, path: str) -> Callable[..., Any]:
        def decorator(handler: Any) -> Any:
            self.handle(method, path, handler)
            return handler

        return decorator

    def get(self, path: str) -> Callable[..., Any]:
        return self.route("GET", path)

    def post(self, path: str) -> Callable[..., Any]:
        return self.route("POST", path)

    def put(self, path: str) -> Callable[..., Any]:
        return self.route("PUT", path)

    def delete(self, path: str) -> Callable[..., Any]:
        return self.route("DELETE", path)

    def patch(self, path: str) -> Callable[..., Any]:
        return self.route("PATCH", path)

    def options(self, path: str) -> Callable[..., Any]:
        return self.route("OPTIONS", path)

    def head(self, path: str) -> Callable[..., Any]:
        return self.route("HEAD", path)

    # ------------------------------------------------------------------
    # Middleware
    # ------------------------------------------------------------------

    def use(self, middleware: Middleware) -> None:
        """Register a middleware that wraps the dispatcher.

        Called as ``middleware(app)`` and must return an ASGI callable.
        The most recently registered middleware is the outermost.
        """
        self._middleware.append(middleware)
        self._app = None  # invalidate cached chain

    def _build_app(self) -> ASGIApp:
        app: ASGIApp = self._dispatch
        for mw in self._middleware:
            app = mw(app)
        return app

    # ------------------------------------------------------------------
    # ASGI interface
    # ------------------------------------------------------------------

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await _handle_lifespan(receive, send)
            return

        if self._app is None:
            self._app = self._build_app()
        await self._app(scope, receive, send)

    async def _dispatch(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        result = self.routes.lookup(scope["method"], scope["path"])
        if result is None:
            await send_json_error(send, 404, "resource could not be found")
            return

        route, captures = result
        await route.app(with_params(scope, PathParams(captures)), receive, send)

    # ------------------------------------------------------------------
    # Granian convenience
    # ------------------------------------------------------------------

    def run(
        self,
        host: str = "127.0.0.1",
        port: int = 8000,
        *,
        dev: bool = False,
        reload: bool | None = None,
        workers: int = 1,
        log_level: str = "info",
        **granian_kwargs: Any,
    ) -> None:
        """Start the router with Granian.

        Parameters
        ----------
        dev:
            When ``True``, enables reload, debug logging, and access logs.
        reload:
            Auto-reload on code changes.  ``None`` follows *dev*.
        workers:
            Number of worker processes.
        log_level:
            Granian log level.
        """
        from switchyard._server import serve
        from switchyard.config import ServerConfig

        if dev:
            config = ServerConfig.for_dev(host=host, port=port, workers=workers, reload=reload)
        else:
            config = ServerConfig(host=host, port=port, workers=workers, log_level=log_level, reload=bool(reload))
        serve(_resolve_target(self), config, granian_kwargs=granian_kwargs)


# ------------------------------------------------------------------
# Module-level helpers
# ------------------------------------------------------------------


def _resolve_target(router: Router) -> str:
    """Derive a ``"module:var"`` string for the given router instance.

    Searches ``__main__`` for a module-level variable whose value *is* the
    router.  Falls back to the caller's ``__file__`` stem when running as a
    script (``python main.py``) so Granian workers can import it.
    """
    main = sys.modules.get("__main__")
    if main is None:
        raise RuntimeError(
            "Cannot auto-detect Granian target: __main__ module not found. "
            "Serve it with the CLI instead, e.g. `switchyard run myapp:router`."
        )

    var_name: str | None = None
    for name, val in vars(main).items():
        if val is router:
            var_name = name
            break

    if var_name is None:
        raise RuntimeError(
            "Cannot auto-detect Granian target: no module-level variable in "
            "__main__ references this Router instance. "
            "Serve it with the CLI instead, e.g. `switchyard run myapp:router`."
        )

    spec = getattr(main, "__spec__", None)
    module_name: str | None = spec.name if spec else None
    if not module_name:
        # Running as a script: use the filename stem so granian can import it.
        main_file = getattr(main, "__file__", None)
        module_name = Path(main_file).stem if main_file else None

    return f"{module_name}:{var_name}"


async def _handle_lifespan(receive: Receive, send: Send) -> None:
    """Minimal lifespan responder: accept startup/shutdown with no-ops."""
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
