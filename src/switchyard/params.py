"""Per-request path parameters.

The dispatcher builds a :class:`PathParams` from the captures of the
matched route and hands the handler a child ASGI scope carrying it.
Handlers read it back with :func:`params`::

    async def get_person(writer, request):
        person_id = params(request).get_int("id")
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from switchyard.errors import ParamNotFoundError, ParamParseError, ParamsUnavailableError

if TYPE_CHECKING:
    from switchyard._types import Scope
    from switchyard.request import Request

# Scope key under which the dispatcher stores the params. Not part of the API.
_SCOPE_KEY = "switchyard.path_params"

_INT_RE = re.compile(r"[+-]?[0-9]+")


class PathParams(Mapping[str, str]):
    """Read-only view over the named captures of a matched route."""

    __slots__ = ("_values",)

    def __init__(self, captures: Mapping[str, str] | None = None) -> None:
        self._values: Mapping[str, str] = MappingProxyType(dict(captures or {}))

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str, default: str = "") -> str:  # type: ignore[override]
        """Return the captured value, or *default* (empty string) if absent."""
        return self._values.get(name, default)

    def get_int(self, name: str) -> int:
        """Return the captured value parsed as a base-10 integer.

        Raises :class:`ParamNotFoundError` if nothing was captured under
        *name* and :class:`ParamParseError` if the value is not an integer.
        """
        try:
            value = self._values[name]
        except KeyError:
            raise ParamNotFoundError(name) from None
        if _INT_RE.fullmatch(value) is None:
            raise ParamParseError(name, value)
        return int(value)

    def __repr__(self) -> str:
        return f"PathParams({dict(self._values)!r})"


def with_params(scope: Scope, path_params: PathParams) -> Scope:
    """Return a copy of *scope* carrying *path_params*."""
    return {**scope, _SCOPE_KEY: path_params}


def scope_params(scope: Scope) -> PathParams:
    try:
        return scope[_SCOPE_KEY]
    except KeyError:
        raise ParamsUnavailableError(
            "Path parameters are only available inside a handler dispatched by a Router"
        ) from None


def params(request: Request) -> PathParams:
    """Return the path parameters of a routed *request*.

    Raises :class:`ParamsUnavailableError` when *request* did not come
    through a matching route.
    """
    return scope_params(request.scope)
