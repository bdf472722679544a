"""Ordered route table with first-match-wins lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from switchyard.handlers import as_asgi
from switchyard.patterns import CompiledPattern, compile_pattern

if TYPE_CHECKING:
    from switchyard._types import ASGIApp


class Route:
    """A single route mapping a method + path pattern to a handler.

    The pattern is compiled once, here, and never changes afterwards.
    """

    __slots__ = ("app", "endpoint", "method", "path", "pattern")

    def __init__(self, method: str, path: str, handler: Any) -> None:
        self.method = method
        self.path = path
        self.pattern: CompiledPattern = compile_pattern(path)
        self.app: ASGIApp = as_asgi(handler)
        self.endpoint = handler

    def match(self, path: str) -> dict[str, str] | None:
        """Return named captures if *path* matches in full, else ``None``."""
        return self.pattern.match(path)

    def __repr__(self) -> str:
        return f"Route({self.method!r}, {self.path!r})"


class RouteTable:
    """Append-only sequence of routes, scanned in registration order."""

    __slots__ = ("routes",)

    def __init__(self) -> None:
        self.routes: list[Route] = []

    def register(self, method: str, path: str, handler: Any) -> Route:
        route = Route(method, path, handler)
        self.routes.append(route)
        return route

    def lookup(self, method: str, path: str) -> tuple[Route, dict[str, str]] | None:
        """Return ``(route, captures)`` for the first match, or ``None``.

        Methods are compared exactly; there is no ranking by specificity.
        """
        for route in self.routes:
            if route.method != method:
                continue
            captures = route.match(path)
            if captures is not None:
                return route, captures
        return None

    def __iter__(self):
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)
