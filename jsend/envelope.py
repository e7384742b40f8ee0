"""JSend envelope construction and the direct ``success``/``fail``/``error`` encoders.

An envelope is a JSON object carrying a ``status`` tag plus either a ``data``
payload (``success`` and ``fail``) or a ``message`` (``error``)::

    {"status": "success", "data": {"id": 1}}
    {"status": "error", "message": "we are closed"}

See https://github.com/omniti-labs/jsend for the convention itself.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, MutableMapping, Optional, Union

from .errors import EncodeError, InvalidRawJSONError
from .sinks import ResponseSink

__all__ = [
    "STATUS_SUCCESS",
    "STATUS_FAIL",
    "STATUS_ERROR",
    "JSON_CONTENT_TYPE",
    "Envelope",
    "classify",
    "ensure_content_type",
    "encode_payload",
    "build_raw_envelope",
    "emit_raw",
    "write_envelope",
    "success",
    "fail",
    "error",
]

STATUS_SUCCESS = "success"
STATUS_FAIL = "fail"
STATUS_ERROR = "error"

JSON_CONTENT_TYPE = "application/json"

_SEPARATORS = (",", ":")


@dataclass(frozen=True)
class Envelope:
    """A JSend envelope. ``data`` holds already-encoded JSON text."""

    status: str
    data: Optional[str] = None
    message: str = ""

    def to_json(self) -> str:
        parts = ['"status":' + json.dumps(self.status, ensure_ascii=False)]
        if self.data:
            parts.append('"data":' + self.data)
        if self.message:
            parts.append('"message":' + json.dumps(self.message, ensure_ascii=False))
        return "{" + ",".join(parts) + "}"

    def to_bytes(self) -> bytes:
        try:
            return self.to_json().encode("utf-8")
        except UnicodeEncodeError as exc:
            raise EncodeError() from exc


def classify(code: Optional[int]) -> str:
    """Map an HTTP status code to its JSend status tag.

    Anything outside 4xx/5xx, including informational and redirect codes and
    an unset code, counts as ``success``.
    """

    if code is None:
        return STATUS_SUCCESS
    if code >= 500:
        return STATUS_ERROR
    if code >= 400:
        return STATUS_FAIL
    return STATUS_SUCCESS


def ensure_content_type(headers: MutableMapping[str, str]) -> None:
    """Default ``Content-Type`` to JSON without overriding a caller's choice."""

    if not headers.get("Content-Type"):
        headers["Content-Type"] = JSON_CONTENT_TYPE


def encode_payload(payload: Any) -> Optional[str]:
    """Serialize ``payload`` to compact JSON; ``None`` means no payload."""

    if payload is None:
        return None
    try:
        return json.dumps(payload, separators=_SEPARATORS, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError, OverflowError, RecursionError) as exc:
        raise EncodeError() from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _validate_raw(raw: bytes) -> str:
    try:
        text = raw.decode("utf-8")
        json.loads(text, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise InvalidRawJSONError() from exc
    return text.strip()


def build_raw_envelope(status: str, raw: Union[bytes, str]) -> Envelope:
    """Build an envelope around caller-encoded bytes.

    For ``error`` the bytes become the message text verbatim. Otherwise they
    must be valid JSON and are embedded as ``data`` without re-encoding.
    """

    if isinstance(raw, str):
        raw = raw.encode("utf-8", errors="surrogatepass")
    elif isinstance(raw, (bytes, bytearray, memoryview)):
        raw = bytes(raw)
    else:
        raise TypeError(f"raw body must be bytes or str, not {type(raw).__name__}")
    if status == STATUS_ERROR:
        return Envelope(status=status, message=raw.decode("utf-8", errors="replace"))
    if not raw:
        return Envelope(status=status)
    return Envelope(status=status, data=_validate_raw(raw))


def write_envelope(sink: ResponseSink, envelope: Envelope) -> int:
    """Serialize ``envelope`` and hand it to ``sink`` in a single write."""

    return sink.write(envelope.to_bytes())


def emit_raw(sink: ResponseSink, status: str, raw: Union[bytes, str]) -> int:
    """Write an envelope around already-encoded JSON; nothing is written on failure."""

    return write_envelope(sink, build_raw_envelope(status, raw))


def _send(sink: ResponseSink, envelope: Envelope, code: int) -> int:
    body = envelope.to_bytes()
    ensure_content_type(sink.headers)
    sink.set_status_code(code)
    return sink.write(body)


def success(sink: ResponseSink, payload: Any, code: int = 200) -> int:
    """JSON-encode ``payload`` and write it to ``sink`` with ``success`` status."""

    return _send(sink, Envelope(status=STATUS_SUCCESS, data=encode_payload(payload)), code)


def fail(sink: ResponseSink, payload: Any, code: int = 400) -> int:
    """JSON-encode ``payload`` and write it to ``sink`` with ``fail`` status."""

    return _send(sink, Envelope(status=STATUS_FAIL, data=encode_payload(payload)), code)


def error(sink: ResponseSink, message: str, code: int = 500) -> int:
    """Write ``message`` to ``sink`` with ``error`` status."""

    return _send(sink, Envelope(status=STATUS_ERROR, message=message), code)
