"""Structured JSON logging for the demo application."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging import Logger

from flask import Flask

_DEFAULT_LOGGER_NAME = "jsend.app"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render each record as one compact JSON object."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - obvious
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_") or key in payload:
                continue
            if value is None:
                continue
            payload[key] = value

        return json.dumps(
            payload, separators=(",", ":"), sort_keys=True, ensure_ascii=False, default=str
        )


def configure_structured_logging(app: Flask) -> Logger:
    """Point ``app.logger`` at a JSON stream logger named by ``LOGGER_NAME``."""

    logger = logging.getLogger(app.config.get("LOGGER_NAME", _DEFAULT_LOGGER_NAME))
    logger.setLevel(app.config.get("LOG_LEVEL", logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    app.logger = logger
    return logger
