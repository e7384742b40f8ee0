"""Write-once response decorator that reshapes a raw JSON body into a JSend envelope."""

from __future__ import annotations

import threading
from typing import Optional, Union

from werkzeug.datastructures import Headers

from .envelope import build_raw_envelope, classify, ensure_content_type, write_envelope
from .errors import WrittenAlreadyError
from .sinks import ResponseSink

__all__ = ["ResponseWriter", "wrap"]


class ResponseWriter:
    """Decorate a sink so its single body write is wrapped in an envelope.

    The envelope status is derived from the status code set before the write:
    ``fail`` for 4xx, ``error`` for 5xx and ``success`` otherwise. Only the
    first write is accepted; the flag is consumed before any I/O, so a failed
    write still uses it up.

    The lock covers the check-and-set and envelope construction only. The sink
    write happens after it is released; later writers are already rejected by
    then and never wait on I/O.
    """

    def __init__(self, sink: ResponseSink) -> None:
        self._sink = sink
        self._lock = threading.Lock()
        self._status_code: Optional[int] = None
        self._written = False

    @property
    def sink(self) -> ResponseSink:
        return self._sink

    @property
    def headers(self) -> Headers:
        return self._sink.headers

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    @property
    def written(self) -> bool:
        return self._written

    def set_status_code(self, code: int) -> None:
        """Record ``code`` and send it to the sink right away."""

        with self._lock:
            self._status_code = code
        self._sink.set_status_code(code)

    def write(self, data: Union[bytes, str]) -> int:
        """Write ``data`` as the envelope body and return the bytes sent to the sink."""

        with self._lock:
            if self._written:
                raise WrittenAlreadyError()
            self._written = True
            envelope = build_raw_envelope(classify(self._status_code), data)
        return write_envelope(self._sink, envelope)


def wrap(sink: ResponseSink) -> ResponseWriter:
    """Return a :class:`ResponseWriter` around ``sink``, defaulting its content type."""

    ensure_content_type(sink.headers)
    return ResponseWriter(sink)
