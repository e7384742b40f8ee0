"""Request logging middleware recording the JSend status of every response."""

import time
import uuid
from typing import Any, Dict

from flask import Flask, Response, g, request
from opentelemetry import trace

from ..envelope import classify


def setup_request_logging(app: Flask) -> None:
    """Attach request timing and access logging hooks to ``app``."""

    @app.before_request
    def _start_timer() -> None:  # pragma: no cover - invoked by Flask
        g.request_started_at = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

    @app.after_request
    def _log_request(response: Response) -> Response:  # pragma: no cover - invoked by Flask
        start = getattr(g, "request_started_at", None)
        duration_ms = None
        if start is not None:
            duration_ms = round((time.perf_counter() - start) * 1000, 3)

        record: Dict[str, Any] = {
            "method": request.method,
            "path": request.path,
            "http_status": response.status_code,
            "jsend_status": classify(response.status_code),
            "duration_ms": duration_ms,
            "request_id": getattr(g, "request_id", None),
        }

        context = trace.get_current_span().get_span_context()
        if context.is_valid:
            record["trace_id"] = format(context.trace_id, "032x")
            record["span_id"] = format(context.span_id, "016x")

        app.logger.info("request completed", extra=record)

        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response
