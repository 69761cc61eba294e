"""Request parameters and payload variant resolution."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .errors import InvalidPayloadError, UsageError

Header = tuple[str, str]
HeaderSet = tuple[Header, ...]


@dataclass(frozen=True)
class OwnedText:
    """Body text owned by the request."""

    data: str | bytes = ""


@dataclass(frozen=True)
class StructuredDocument:
    """A JSON-serializable document, encoded once right before sending."""

    document: Any


@dataclass(frozen=True)
class BorrowedView:
    """A view over caller-owned memory, consumed before the call returns."""

    view: bytes | bytearray | memoryview


Payload = Union[OwnedText, StructuredDocument, BorrowedView]


def serialize_document(document: Any) -> str:
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


def validate_payload(payload: object) -> None:
    if not isinstance(payload, (OwnedText, StructuredDocument, BorrowedView)):
        raise InvalidPayloadError(
            f"Invalid payload type: {type(payload).__name__}",
            context=payload,
        )


def resolve_payload(payload: object) -> bytes:
    """Turn a payload variant into the bytes sent on the wire."""
    validate_payload(payload)
    if isinstance(payload, OwnedText):
        data = payload.data
        if isinstance(data, str):
            return data.encode("utf-8")
        if isinstance(data, bytes):
            return data
        raise InvalidPayloadError(f"Invalid payload type: OwnedText({type(data).__name__})", context=payload)
    if isinstance(payload, StructuredDocument):
        try:
            text = serialize_document(payload.document)
        except (TypeError, ValueError) as exc:
            raise InvalidPayloadError(f"Document is not serializable: {exc}", context=payload) from exc
        return text.encode("utf-8")
    view = payload.view
    if not isinstance(view, (bytes, bytearray, memoryview)):
        raise InvalidPayloadError(f"Invalid payload type: BorrowedView({type(view).__name__})", context=payload)
    return bytes(view)


def normalize_headers(headers: Mapping[str, str] | Iterable[Header] | None) -> HeaderSet:
    """Keep insertion order and duplicate keys."""
    if not headers:
        return ()
    items = headers.items() if isinstance(headers, Mapping) else headers
    normalized: list[Header] = []
    for item in items:
        try:
            key, value = item
        except (TypeError, ValueError) as exc:
            raise UsageError(f"Header entries must be (key, value) pairs, got {item!r}") from exc
        normalized.append((str(key), str(value)))
    return tuple(normalized)


@dataclass(frozen=True)
class SecureCommunication:
    verify_peer: bool = True
    ca_root_certificate: str | None = None
    ssl_certificate: str | None = None
    ssl_key: str | None = None
    basic_auth: tuple[str, str] | None = None


@dataclass(frozen=True)
class Target:
    """Where a call goes: a URL, optionally reached through a UNIX socket."""

    url: str
    unix_socket_path: str | None = None
    secure: SecureCommunication = field(default_factory=SecureCommunication)


@dataclass(frozen=True)
class RequestParameters:
    target: Target
    payload: Payload = field(default_factory=OwnedText)
    headers: HeaderSet = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", normalize_headers(self.headers))


__all__ = [
    "BorrowedView",
    "Header",
    "HeaderSet",
    "OwnedText",
    "Payload",
    "RequestParameters",
    "SecureCommunication",
    "StructuredDocument",
    "Target",
    "normalize_headers",
    "resolve_payload",
    "serialize_document",
    "validate_payload",
]
