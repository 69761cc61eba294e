"""Public surface for the urlrequest dispatch layer."""

from .builder import BuilderState, RequestBuilder, Verb
from .client import HTTPRequest, NetworkTarget, UNIXSocketRequest, UnixSocketTarget, UrlRequest
from .config import DEFAULT_USER_AGENT, CancelFlag, Configuration
from .errors import (
    CancelledError,
    ConnectionError,
    HttpStatusError,
    InvalidPayloadError,
    TimeoutError,
    TransportError,
    UrlRequestError,
    UsageError,
)
from .payload import (
    BorrowedView,
    OwnedText,
    RequestParameters,
    SecureCommunication,
    StructuredDocument,
    Target,
)
from .sink import CompletionSink, ResponseBuffer, ResponseFile

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "BorrowedView",
    "BuilderState",
    "CancelFlag",
    "CancelledError",
    "CompletionSink",
    "Configuration",
    "ConnectionError",
    "DEFAULT_USER_AGENT",
    "HTTPRequest",
    "HttpStatusError",
    "InvalidPayloadError",
    "NetworkTarget",
    "OwnedText",
    "RequestBuilder",
    "RequestParameters",
    "ResponseBuffer",
    "ResponseFile",
    "SecureCommunication",
    "StructuredDocument",
    "Target",
    "TimeoutError",
    "TransportError",
    "UNIXSocketRequest",
    "UnixSocketTarget",
    "UrlRequest",
    "UrlRequestError",
    "UsageError",
    "Verb",
]
