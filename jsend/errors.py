"""Exceptions raised while building JSend envelopes."""

from __future__ import annotations

__all__ = [
    "JSendError",
    "EncodeError",
    "InvalidRawJSONError",
    "InvalidPayloadError",
    "WrittenAlreadyError",
]


class JSendError(Exception):
    """Base class for envelope construction failures."""


class EncodeError(JSendError):
    """Raised when a payload cannot be serialized to JSON."""

    def __init__(self, message: str = "jsend: could not json encode given data") -> None:
        super().__init__(message)


class InvalidRawJSONError(JSendError):
    """Raised when raw bytes meant for the ``data`` field are not valid JSON."""

    def __init__(self, message: str = "jsend: given data is not valid raw json") -> None:
        super().__init__(message)


InvalidPayloadError = InvalidRawJSONError


class WrittenAlreadyError(JSendError):
    """Raised on a second body write through the same response writer."""

    def __init__(self, message: str = "jsend: written already") -> None:
        super().__init__(message)
