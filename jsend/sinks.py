"""Response sinks the envelope writers emit into."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from flask import Response
from werkzeug.datastructures import Headers

__all__ = ["ResponseSink", "ResponseRecorder", "WerkzeugResponseSink"]


@runtime_checkable
class ResponseSink(Protocol):
    """Minimal response surface: headers, a status code setter and a body writer."""

    @property
    def headers(self) -> Headers:  # pragma: no cover - protocol
        ...

    def set_status_code(self, code: int) -> None:  # pragma: no cover - protocol
        ...

    def write(self, data: bytes) -> int:  # pragma: no cover - protocol
        ...


class ResponseRecorder:
    """In-memory sink that records everything written to it.

    Mirrors how an HTTP server behaves: the first status code sent is the one
    on the wire, and writing a body before any status code implies ``200``.
    """

    def __init__(self) -> None:
        self._headers = Headers()
        self._body = bytearray()
        self.status_code = 200
        self.wrote_status = False

    @property
    def headers(self) -> Headers:
        return self._headers

    def set_status_code(self, code: int) -> None:
        if self.wrote_status:
            return
        self.status_code = int(code)
        self.wrote_status = True

    def write(self, data: bytes) -> int:
        if not self.wrote_status:
            self.set_status_code(200)
        self._body.extend(data)
        return len(data)

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    @property
    def text(self) -> str:
        return self._body.decode("utf-8")


class WerkzeugResponseSink:
    """Adapt a werkzeug (or Flask) ``Response`` to the sink interface."""

    def __init__(self, response: Response) -> None:
        self.response = response

    @classmethod
    def new(cls) -> "WerkzeugResponseSink":
        """Return a sink around an empty response with no ``Content-Type`` set."""

        response = Response()
        response.headers.pop("Content-Type", None)
        return cls(response)

    @property
    def headers(self) -> Headers:
        return self.response.headers

    def set_status_code(self, code: int) -> None:
        self.response.status_code = int(code)

    def write(self, data: bytes) -> int:
        self.response.stream.write(data)
        return len(data)
