"""Fluent one-shot request builders, one generic type tagged by verb."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from enum import Enum

from .errors import UsageError
from .payload import Header, SecureCommunication, normalize_headers
from .sink import ResponseFile
from .transport.base import PreparedRequest, Transport, TransportResponse


class Verb(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    DOWNLOAD = "DOWNLOAD"

    @property
    def method(self) -> str:
        return "GET" if self is Verb.DOWNLOAD else self.value

    @property
    def carries_body(self) -> bool:
        return self in (Verb.POST, Verb.PUT, Verb.PATCH)


class BuilderState(str, Enum):
    IDLE = "idle"
    CONFIGURING = "configuring"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RequestBuilder:
    """Accumulates request parameters; only :meth:`execute` touches the network.

    Every step returns the builder so calls chain in any order. A builder
    executes once; any step after that raises :class:`UsageError`.
    """

    def __init__(self, verb: Verb, transport: Transport) -> None:
        self.verb = Verb(verb)
        self.state = BuilderState.IDLE
        self._transport = transport
        self._url: str | None = None
        self._secure = SecureCommunication()
        self._unix_socket_path: str | None = None
        self._headers: list[Header] = []
        self._body: bytes | None = None
        self._timeout: float | None = None
        self._user_agent: str | None = None

    @classmethod
    def builder(cls, verb: Verb, transport: Transport) -> "RequestBuilder":
        return cls(verb, transport)

    def url(self, url: str, secure: SecureCommunication | None = None) -> "RequestBuilder":
        self._configure()
        self._url = url
        if secure is not None:
            self._secure = secure
        return self

    def unix_socket_path(self, path: str | os.PathLike[str]) -> "RequestBuilder":
        self._configure()
        self._unix_socket_path = os.fspath(path)
        return self

    def append_headers(self, headers: Mapping[str, str] | Iterable[Header]) -> "RequestBuilder":
        self._configure()
        self._headers.extend(normalize_headers(headers))
        return self

    def post_data(self, body: bytes) -> "RequestBuilder":
        self._configure()
        if not self.verb.carries_body:
            raise UsageError(f"{self.verb.value} requests do not carry a body")
        self._body = body
        return self

    def timeout(self, seconds: float | None) -> "RequestBuilder":
        self._configure()
        self._timeout = seconds
        return self

    def user_agent(self, user_agent: str) -> "RequestBuilder":
        self._configure()
        self._user_agent = user_agent
        return self

    def output_file(self, path: str | os.PathLike[str] | None) -> "RequestBuilder":
        self._configure()
        if path is not None:
            self._transport.destination = ResponseFile(path)
        return self

    def prepare(self) -> PreparedRequest:
        if self._url is None:
            raise UsageError(f"{self.verb.value} request has no URL")
        return PreparedRequest(
            method=self.verb.method,
            url=self._url,
            headers=tuple(self._headers),
            body=self._body if self.verb.carries_body else None,
            timeout=self._timeout,
            user_agent=self._user_agent,
            unix_socket_path=self._unix_socket_path,
            secure=self._secure,
        )

    def execute(self) -> TransportResponse:
        if self.state in (BuilderState.EXECUTING, BuilderState.SUCCEEDED, BuilderState.FAILED):
            raise UsageError(f"{self.verb.value} builder was already executed")
        request = self.prepare()
        self.state = BuilderState.EXECUTING
        try:
            response = self._transport.exchange(request)
        except BaseException:
            self.state = BuilderState.FAILED
            raise
        finally:
            self._transport.close()
        self.state = BuilderState.SUCCEEDED
        return response

    def _configure(self) -> None:
        if self.state not in (BuilderState.IDLE, BuilderState.CONFIGURING):
            raise UsageError(f"{self.verb.value} builder cannot be reconfigured once executed")
        self.state = BuilderState.CONFIGURING


__all__ = ["BuilderState", "RequestBuilder", "Verb"]
