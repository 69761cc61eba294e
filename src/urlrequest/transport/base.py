"""Common transport abstractions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Protocol, runtime_checkable

from ..payload import HeaderSet, SecureCommunication
from ..sink import ResponseDestination

TransportKind = Literal["stream", "buffered"]


@dataclass
class PreparedRequest:
    method: str
    url: str
    headers: HeaderSet = ()
    body: bytes | None = None
    timeout: float | None = None
    user_agent: str | None = None
    unix_socket_path: str | None = None
    secure: SecureCommunication = field(default_factory=SecureCommunication)


@dataclass
class TransportResponse:
    status: int
    destination: ResponseDestination
    headers: Mapping[str, str] = field(default_factory=dict)


@runtime_checkable
class Transport(Protocol):
    Kind = TransportKind

    destination: ResponseDestination

    @property
    def kind(self) -> TransportKind: ...

    def exchange(self, request: PreparedRequest) -> TransportResponse: ...

    def close(self) -> None: ...


__all__ = ["PreparedRequest", "Transport", "TransportKind", "TransportResponse"]
