"""Utilities for building JSend responses inside Flask views."""

from typing import Any, Optional

from flask import Response

from ..envelope import error, fail, success
from ..sinks import WerkzeugResponseSink
from ..writer import ResponseWriter, wrap


def success_response(data: Optional[Any] = None, status_code: int = 200) -> Response:
    """Return a ``success`` envelope carrying ``data``."""

    sink = WerkzeugResponseSink.new()
    success(sink, data, status_code)
    return sink.response


def fail_response(data: Optional[Any] = None, status_code: int = 400) -> Response:
    """Return a ``fail`` envelope carrying ``data``."""

    sink = WerkzeugResponseSink.new()
    fail(sink, data, status_code)
    return sink.response


def error_response(status_code: int = 500, message: str = "") -> Response:
    """Return an ``error`` envelope with the provided status code and message."""

    sink = WerkzeugResponseSink.new()
    error(sink, message, status_code)
    return sink.response


def wrapped_response() -> ResponseWriter:
    """Return a write-once writer around a fresh response.

    Views set a status code, write their raw JSON and return
    ``writer.sink.response``.
    """

    return wrap(WerkzeugResponseSink.new())
