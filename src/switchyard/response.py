"""Buffered response writer and JSON response helpers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic_core import PydanticSerializationError, to_json

if TYPE_CHECKING:
    from switchyard._types import Send

logger = logging.getLogger("switchyard.response")

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

# Shorthand for building JSON objects: respond_json(w, 200, H(ok=True))
H = dict[str, Any]


def _body_allowed(status: int) -> bool:
    return not (100 <= status < 200 or status in {204, 304})


class ResponseWriter:
    """Collects a status, headers and body, then sends them over ASGI.

    The status is committed by the first :meth:`write_header` or
    :meth:`write` call (``write`` alone implies 200). Headers set after
    that point and further ``write_header`` calls have no effect.
    Nothing reaches the client until :meth:`finish` is awaited.
    """

    __slots__ = ("_chunks", "_finished", "_headers", "_send", "status")

    def __init__(self, send: Send) -> None:
        self._send = send
        self._headers: dict[str, tuple[str, str]] = {}
        self._chunks: list[bytes] = []
        self._finished = False
        self.status: int | None = None

    @property
    def committed(self) -> bool:
        return self.status is not None

    @property
    def headers(self) -> dict[str, str]:
        """Headers set so far, keyed by lowercase name."""
        return {key: value for key, (_name, value) in self._headers.items()}

    def set_header(self, name: str, value: str) -> None:
        if self.committed:
            logger.warning("Header %r set after the status was written; ignored", name)
            return
        self._headers[name.lower()] = (name, value)

    def write_header(self, status: int) -> None:
        if self.committed:
            logger.warning("Superfluous write_header(%d); status is already %d", status, self.status)
            return
        self.status = status

    def write(self, data: bytes | str) -> int:
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not self.committed:
            self.write_header(200)
        self._chunks.append(data)
        return len(data)

    async def finish(self) -> None:
        """Send the response. Later calls are no-ops."""
        if self._finished:
            return
        self._finished = True
        status = self.status if self.status is not None else 200
        body = b"".join(self._chunks) if _body_allowed(status) else b""

        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in self._headers.values()
        ]
        if _body_allowed(status):
            raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

        await self._send({"type": "http.response.start", "status": status, "headers": raw_headers})
        await self._send({"type": "http.response.body", "body": body})


def encode_json(value: Any) -> bytes:
    """Encode *value* as compact JSON followed by a single newline.

    Raises ``PydanticSerializationError`` for values that cannot be encoded.
    """
    return to_json(value) + b"\n"


def respond_json(writer: ResponseWriter, status: int, value: Any) -> None:
    """Write *value* as a JSON body with *status*.

    If *value* cannot be encoded, a 500 JSON error is written instead.
    """
    try:
        body = encode_json(value)
    except PydanticSerializationError:
        logger.exception("Could not encode JSON response body")
        respond_json_error(writer, 500, "Error writing JSON")
        return
    writer.set_header("Content-Type", JSON_CONTENT_TYPE)
    writer.write_header(status)
    writer.write(body)


def respond_json_error(writer: ResponseWriter, status: int, message: str) -> None:
    """Write ``{"error": message}`` with *status*."""
    respond_json(writer, status, {"error": message})


async def send_json_error(send: Send, status: int, message: str) -> None:
    """Send a complete JSON error response directly over ASGI *send*."""
    writer = ResponseWriter(send)
    respond_json_error(writer, status, message)
    await writer.finish()
