"""Request-scoped configuration options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, get_args, runtime_checkable

from .errors import UsageError

TransportSelector = Literal["stream", "buffered"]

DEFAULT_USER_AGENT = "urlrequest/1.0"
DEFAULT_TRANSPORT: TransportSelector = "stream"


@runtime_checkable
class CancelFlag(Protocol):
    """Anything with the `threading.Event` read/write surface."""

    def is_set(self) -> bool: ...

    def set(self) -> None: ...


@dataclass(frozen=True)
class Configuration:
    """Options that shape a single call.

    ``timeout`` is in seconds, ``None`` meaning no timeout. ``cancel_flag`` is
    observed, never owned: the caller may set it from another thread to stop
    an in-flight exchange.
    """

    timeout: float | None = None
    user_agent: str = DEFAULT_USER_AGENT
    transport: TransportSelector = DEFAULT_TRANSPORT
    cancel_flag: CancelFlag | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise UsageError(f"Timeout must be non-negative, got {self.timeout}")
        if self.transport not in get_args(TransportSelector):
            raise UsageError(f"Unknown transport selector: {self.transport!r}")
        if self.cancel_flag is not None and not isinstance(self.cancel_flag, CancelFlag):
            raise UsageError("cancel_flag must provide is_set() and set()")


__all__ = [
    "CancelFlag",
    "Configuration",
    "DEFAULT_TRANSPORT",
    "DEFAULT_USER_AGENT",
    "TransportSelector",
]
