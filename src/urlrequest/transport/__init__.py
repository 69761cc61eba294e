"""Transport implementations exposed to users."""

from .base import PreparedRequest, Transport, TransportKind, TransportResponse
from .factory import create_transport
from .http import BufferedHttpTransport, HttpTransport

__all__ = [
    "BufferedHttpTransport",
    "HttpTransport",
    "PreparedRequest",
    "Transport",
    "TransportKind",
    "TransportResponse",
    "create_transport",
]
