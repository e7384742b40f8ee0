"""JSend response envelopes for Flask and any other response sink.

Wrap a sink and write an already-encoded JSON body; the envelope status follows
the HTTP status code (``fail`` for 4xx, ``error`` for 5xx, ``success``
otherwise)::

    writer = jsend.wrap(sink)
    writer.set_status_code(400)
    writer.write(b'{"id": "missing"}')
    # {"status":"fail","data":{"id": "missing"}}

Or use the direct encoders, which JSON-encode the payload themselves::

    jsend.success(sink, {"id": 1}, 200)
    jsend.error(sink, "we are closed", 503)
"""

from .envelope import (
    JSON_CONTENT_TYPE,
    STATUS_ERROR,
    STATUS_FAIL,
    STATUS_SUCCESS,
    Envelope,
    classify,
    emit_raw,
    error,
    fail,
    success,
)
from .errors import (
    EncodeError,
    InvalidPayloadError,
    InvalidRawJSONError,
    JSendError,
    WrittenAlreadyError,
)
from .sinks import ResponseRecorder, ResponseSink, WerkzeugResponseSink
from .writer import ResponseWriter, wrap

__all__ = [
    "JSON_CONTENT_TYPE",
    "STATUS_ERROR",
    "STATUS_FAIL",
    "STATUS_SUCCESS",
    "Envelope",
    "classify",
    "emit_raw",
    "error",
    "fail",
    "success",
    "EncodeError",
    "InvalidPayloadError",
    "InvalidRawJSONError",
    "JSendError",
    "WrittenAlreadyError",
    "ResponseRecorder",
    "ResponseSink",
    "WerkzeugResponseSink",
    "ResponseWriter",
    "wrap",
]
