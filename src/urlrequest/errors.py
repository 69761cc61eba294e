"""Custom exceptions raised by the urlrequest dispatch layer."""

from __future__ import annotations

from typing import Any


class UrlRequestError(Exception):
    """Base error for all dispatch failures."""

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class TransportError(UrlRequestError):
    """Raised when an exchange was attempted and failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        context: Any | None = None,
    ) -> None:
        super().__init__(message, context=context)
        self.status_code = status_code


class HttpStatusError(TransportError):
    """Raised when the peer answers with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int, context: Any | None = None) -> None:
        super().__init__(message, status_code=status_code, context=context)


class ConnectionError(TransportError):
    """Raised when the endpoint or socket cannot be reached."""


class TimeoutError(TransportError):
    """Raised when the configured timeout elapses."""


class CancelledError(TransportError):
    """Raised when the cancellation flag is observed set mid-call."""


class UsageError(UrlRequestError):
    """Raised when a call is malformed before any exchange happens."""


class InvalidPayloadError(UsageError):
    """Raised for payload objects that are not a known variant."""


__all__ = [
    "CancelledError",
    "ConnectionError",
    "HttpStatusError",
    "InvalidPayloadError",
    "TimeoutError",
    "TransportError",
    "UrlRequestError",
    "UsageError",
]
