"""Public facades issuing one request per call over HTTP or a UNIX socket."""

from __future__ import annotations

from typing import Protocol

import httpx

from .builder import RequestBuilder, Verb
from .config import Configuration
from .errors import TransportError, UsageError
from .logger import BoundLogger, LogLevel, create_logger
from .payload import OwnedText, RequestParameters, Target, resolve_payload, validate_payload
from .sink import CompletionSink
from .transport import create_transport


class TargetResolver(Protocol):
    name: str

    def apply(self, builder: RequestBuilder, target: Target) -> None: ...


class NetworkTarget:
    name = "network"

    def apply(self, builder: RequestBuilder, target: Target) -> None:
        builder.url(target.url, target.secure)


class UnixSocketTarget:
    name = "unix"

    def apply(self, builder: RequestBuilder, target: Target) -> None:
        if not target.unix_socket_path:
            raise UsageError(f"Target {target.url!r} has no UNIX socket path")
        builder.url(target.url, target.secure).unix_socket_path(target.unix_socket_path)


class UrlRequest:
    """Shapes, dispatches and routes the outcome of single requests.

    Each operation takes the request parameters, an optional completion sink
    and an optional configuration. Transport failures go to ``sink.on_error``
    when one is set and are raised otherwise; usage errors are always raised.
    GET, DELETE and DOWNLOAD send no body: their payload is validated, then
    ignored.
    """

    def __init__(
        self,
        resolver: TargetResolver,
        *,
        backend: httpx.BaseTransport | None = None,
        logger: object | None = None,
        log_level: LogLevel = "info",
    ) -> None:
        self._resolver = resolver
        self._backend = backend
        self._logger = create_logger(logger=logger, level=log_level).child(resolver.name)

    def get(
        self,
        request: RequestParameters,
        sink: CompletionSink | None = None,
        configuration: Configuration | None = None,
    ) -> None:
        self._dispatch(Verb.GET, request, sink, configuration)

    def post(
        self,
        request: RequestParameters,
        sink: CompletionSink | None = None,
        configuration: Configuration | None = None,
    ) -> None:
        self._dispatch(Verb.POST, request, sink, configuration)

    def put(
        self,
        request: RequestParameters,
        sink: CompletionSink | None = None,
        configuration: Configuration | None = None,
    ) -> None:
        self._dispatch(Verb.PUT, request, sink, configuration)

    def patch(
        self,
        request: RequestParameters,
        sink: CompletionSink | None = None,
        configuration: Configuration | None = None,
    ) -> None:
        self._dispatch(Verb.PATCH, request, sink, configuration)

    def delete(
        self,
        request: RequestParameters,
        sink: CompletionSink | None = None,
        configuration: Configuration | None = None,
    ) -> None:
        self._dispatch(Verb.DELETE, request, sink, configuration)

    def download(
        self,
        request: RequestParameters,
        sink: CompletionSink | None = None,
        configuration: Configuration | None = None,
    ) -> None:
        """Fetch ``request.target`` into ``sink.output_file`` (or memory if unset)."""
        self._dispatch(Verb.DOWNLOAD, request, sink, configuration)

    def _dispatch(
        self,
        verb: Verb,
        request: RequestParameters,
        sink: CompletionSink | None,
        configuration: Configuration | None,
    ) -> None:
        if not isinstance(request, RequestParameters):
            raise UsageError(f"Expected RequestParameters, got {type(request).__name__}")
        sink = sink or CompletionSink()
        configuration = configuration or Configuration()

        body: bytes | None = None
        if verb.carries_body:
            body = resolve_payload(request.payload)
        else:
            validate_payload(request.payload)
            if request.payload != OwnedText():
                self._logger.debug("%s sends no body; ignoring %s payload", verb.value, type(request.payload).__name__)

        destination = sink.destination()
        transport = create_transport(
            destination,
            configuration.transport,
            configuration.cancel_flag,
            backend=self._backend,
            logger=self._logger,
        )
        builder = RequestBuilder.builder(verb, transport)
        self._resolver.apply(builder, request.target)
        builder.append_headers(request.headers).timeout(configuration.timeout).user_agent(configuration.user_agent)
        if body is not None:
            builder.post_data(body)

        self._logger.debug("Dispatching %s %s (%s)", verb.value, request.target.url, transport.kind)
        try:
            builder.execute()
        except TransportError as exc:
            self._logger.warn(
                "%s %s failed status=%s: %s",
                verb.value,
                request.target.url,
                exc.status_code,
                exc.message,
            )
            if sink.on_error is None:
                raise
            sink.on_error(exc.message, exc.status_code)
            return

        sink.deliver(destination)


class HTTPRequest(UrlRequest):
    """Requests against network endpoints (``http://`` / ``https://``)."""

    def __init__(
        self,
        *,
        backend: httpx.BaseTransport | None = None,
        logger: object | None = None,
        log_level: LogLevel = "info",
    ) -> None:
        super().__init__(NetworkTarget(), backend=backend, logger=logger, log_level=log_level)


class UNIXSocketRequest(UrlRequest):
    """Requests tunnelled through a UNIX domain socket bound per call."""

    def __init__(
        self,
        *,
        backend: httpx.BaseTransport | None = None,
        logger: object | None = None,
        log_level: LogLevel = "info",
    ) -> None:
        super().__init__(UnixSocketTarget(), backend=backend, logger=logger, log_level=log_level)


__all__ = [
    "HTTPRequest",
    "NetworkTarget",
    "TargetResolver",
    "UNIXSocketRequest",
    "UnixSocketTarget",
    "UrlRequest",
]
