"""ASGI request wrapper."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import parse_qs

from pydantic import TypeAdapter, ValidationError

from switchyard.errors import DecodeError

if TYPE_CHECKING:
    from switchyard._types import Receive, Scope

T = TypeVar("T")


class Request:
    """Thin wrapper around an ASGI *scope* and *receive* callable."""

    __slots__ = ("_body", "_receive", "_scope")

    def __init__(self, scope: Scope, receive: Receive) -> None:
        self._scope = scope
        self._receive = receive
        self._body: bytes | None = None

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def method(self) -> str:
        return self._scope["method"]

    @property
    def path(self) -> str:
        return self._scope["path"]

    @property
    def query_string(self) -> bytes:
        return self._scope.get("query_string", b"")

    @property
    def query_params(self) -> dict[str, list[str]]:
        return parse_qs(self.query_string.decode("latin-1"))

    @property
    def headers(self) -> dict[str, str]:
        """Headers as a lowercase-keyed dict (last value wins for dupes)."""
        return {k.decode("latin-1"): v.decode("latin-1") for k, v in self._scope.get("headers", [])}

    async def body(self) -> bytes:
        """Read and cache the full request body."""
        if self._body is not None:
            return self._body
        chunks: list[bytes] = []
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                chunks.append(chunk)
            if not message.get("more_body", False):
                break
        self._body = b"".join(chunks)
        return self._body

    async def json(self) -> Any:
        """Parse the request body as JSON."""
        return json.loads(await self.body())

    def __repr__(self) -> str:
        return f"Request({self.method!r}, {self.path!r})"


async def bind_json(request: Request, shape: type[T]) -> T:
    """Decode the body of *request* into *shape*.

    *shape* is anything pydantic can validate: a ``BaseModel``, a dataclass,
    a ``TypedDict`` or a plain builtin type such as ``list[int]``.
    Raises :class:`DecodeError` on malformed JSON or a validation failure.
    """
    body = await request.body()
    try:
        return TypeAdapter(shape).validate_json(body)
    except ValidationError as exc:
        raise DecodeError(f"Could not decode request body into {shape!r}: {exc}") from exc
