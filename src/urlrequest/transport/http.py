"""HTTP transports built on top of httpx.

The same transports serve TCP/TLS endpoints and UNIX domain sockets: a socket
path only changes the httpx connection backend, never the exchange itself.
"""

from __future__ import annotations

import json
import ssl
import threading
from typing import IO, Any

import httpx

from .. import errors
from ..config import CancelFlag
from ..logger import BoundLogger, create_logger
from ..payload import SecureCommunication
from ..sink import ResponseBuffer, ResponseDestination, ResponseFile
from .base import PreparedRequest, Transport, TransportResponse

ERROR_BODY_LIMIT = 64 * 1024
CANCEL_POLL_INTERVAL = 0.05
CANCEL_GRACE_PERIOD = 0.25


def extract_error_message(body: str | None, fallback: str) -> str:
    if not body or not body.strip():
        return fallback
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return body.strip()

    if isinstance(parsed, dict) and "message" in parsed:
        message = parsed["message"]
        if isinstance(message, str):
            return message
        return str(message)
    return body.strip()


def build_verify(secure: SecureCommunication) -> bool | ssl.SSLContext:
    if not secure.verify_peer:
        return False
    if not secure.ca_root_certificate and not secure.ssl_certificate:
        return True
    context = ssl.create_default_context(cafile=secure.ca_root_certificate)
    if secure.ssl_certificate:
        context.load_cert_chain(secure.ssl_certificate, keyfile=secure.ssl_key)
    return context


class HttpTransport:
    """Streams the body chunk by chunk, checking the cancel flag in between.

    With a cancel flag the exchange runs on a worker thread while the calling
    thread watches the flag, so a stalled connect, header wait or body read is
    abandoned within ``CANCEL_POLL_INTERVAL + CANCEL_GRACE_PERIOD`` seconds.
    """

    kind: Transport.Kind = "stream"

    def __init__(
        self,
        destination: ResponseDestination,
        *,
        cancel_flag: CancelFlag | None = None,
        backend: httpx.BaseTransport | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self.destination = destination
        self._cancel_flag = cancel_flag
        self._backend = backend
        self._logger = (logger or create_logger()).child(self.kind)
        self._client: httpx.Client | None = None
        self._file: IO[bytes] | None = None
        self._created_file = False
        self._aborted = False
        self._lock = threading.Lock()

    def exchange(self, request: PreparedRequest) -> TransportResponse:
        self._check_cancelled(request)
        client = self._create_client(request)
        self._client = client
        try:
            if self._cancel_flag is None:
                return self._exchange(request, client)
            return self._exchange_watched(request, client)
        finally:
            self.close()

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None
            client, self._client = self._client, None
        # An injected backend belongs to the caller.
        if client is not None and self._backend is None:
            client.close()

    def _exchange_watched(self, request: PreparedRequest, client: httpx.Client) -> TransportResponse:
        outcome: dict[str, Any] = {}

        def run() -> None:
            try:
                outcome["response"] = self._exchange(request, client)
            except BaseException as exc:  # noqa: BLE001
                outcome["error"] = exc

        worker = threading.Thread(target=run, name=f"urlrequest-{self.kind}", daemon=True)
        worker.start()
        while True:
            worker.join(CANCEL_POLL_INTERVAL)
            if not worker.is_alive():
                break
            if self._cancel_flag is not None and self._cancel_flag.is_set():
                self._abort(request)
                worker.join(CANCEL_GRACE_PERIOD)
                raise errors.CancelledError(f"Request to {request.url} was cancelled")

        if "error" in outcome:
            raise outcome["error"]
        return outcome["response"]

    def _exchange(self, request: PreparedRequest, client: httpx.Client) -> TransportResponse:
        try:
            self._logger.debug(
                "%s %s%s bytes=%d",
                request.method,
                request.url,
                f" via {request.unix_socket_path}" if request.unix_socket_path else "",
                len(request.body or b""),
            )
            with client.stream(
                request.method,
                request.url,
                headers=list(request.headers),
                content=request.body,
            ) as response:
                self._check_cancelled(request)
                if not response.is_success:
                    raise self._status_error(response)
                self._open_destination()
                self._receive(response, request)
                self._logger.debug(
                    "%s %s <- status=%s bytes=%d",
                    request.method,
                    request.url,
                    response.status_code,
                    self._received_bytes(),
                )
                return TransportResponse(
                    status=response.status_code,
                    destination=self.destination,
                    headers={k.lower(): v for k, v in response.headers.items()},
                )
        except errors.TransportError:
            self._discard_partial_file()
            raise
        except httpx.TimeoutException as exc:
            self._discard_partial_file()
            raise errors.TimeoutError(
                f"Request to {request.url} timed out after {request.timeout}s", context=exc
            ) from exc
        except httpx.RequestError as exc:
            self._discard_partial_file()
            raise errors.ConnectionError(f"Cannot reach {self._describe(request)}: {exc}", context=exc) from exc
        except httpx.InvalidURL as exc:
            raise errors.UsageError(f"Invalid URL {request.url!r}: {exc}") from exc
        except OSError as exc:
            self._discard_partial_file()
            raise errors.TransportError(f"Local I/O failure: {exc}", context=exc) from exc

    def _abort(self, request: PreparedRequest) -> None:
        self._logger.info("Cancelled %s %s while in flight", request.method, request.url)
        with self._lock:
            self._aborted = True
        self._discard_partial_file()
        self.close()

    def _create_client(self, request: PreparedRequest) -> httpx.Client:
        backend = self._backend
        if backend is None:
            try:
                verify = build_verify(request.secure)
            except OSError as exc:
                raise errors.UsageError(f"Invalid TLS material for {request.url}: {exc}") from exc
            backend = httpx.HTTPTransport(verify=verify, uds=request.unix_socket_path)
        elif request.unix_socket_path:
            self._logger.trace("Injected backend ignores socket path %s", request.unix_socket_path)
        headers = {"User-Agent": request.user_agent} if request.user_agent else None
        return httpx.Client(
            transport=backend,
            headers=headers,
            auth=request.secure.basic_auth,
            timeout=httpx.Timeout(request.timeout),
            follow_redirects=True,
        )

    def _receive(self, response: httpx.Response, request: PreparedRequest) -> None:
        for chunk in response.iter_bytes():
            self._check_cancelled(request)
            if chunk:
                self._write(chunk)
                self._logger.trace("chunk bytes=%d", len(chunk))

    def _open_destination(self) -> None:
        # Created as soon as a 2xx arrives so an empty body still yields a file.
        with self._lock:
            if self._aborted:
                raise errors.CancelledError("Exchange was aborted")
            if isinstance(self.destination, ResponseFile) and self._file is None:
                self._file = self.destination.path.open("wb")
                self._created_file = True

    def _write(self, chunk: bytes) -> None:
        with self._lock:
            if self._aborted:
                raise errors.CancelledError("Exchange was aborted")
            destination = self.destination
            if isinstance(destination, ResponseBuffer):
                destination.write(chunk)
                return
            if self._file is None:
                raise errors.TransportError(f"Output file {destination.path} is not open")
            self._file.write(chunk)
            destination.bytes_written += len(chunk)

    def _received_bytes(self) -> int:
        if isinstance(self.destination, ResponseBuffer):
            return len(self.destination)
        return self.destination.bytes_written

    def _status_error(self, response: httpx.Response) -> errors.HttpStatusError:
        raw = response.read()[:ERROR_BODY_LIMIT]
        body = raw.decode(response.encoding or "utf-8", errors="replace")
        fallback = f"{response.status_code} {response.reason_phrase}".strip()
        message = extract_error_message(body, fallback)
        self._logger.debug("status=%s message=%s", response.status_code, message[:200])
        return errors.HttpStatusError(message, status_code=response.status_code, context=raw)

    def _check_cancelled(self, request: PreparedRequest) -> None:
        if self._cancel_flag is not None and self._cancel_flag.is_set():
            self._logger.info("Cancelled %s %s", request.method, request.url)
            raise errors.CancelledError(f"Request to {request.url} was cancelled")

    def _discard_partial_file(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None
            if self._created_file and isinstance(self.destination, ResponseFile):
                self.destination.path.unlink(missing_ok=True)
                self.destination.bytes_written = 0
                self._created_file = False

    @staticmethod
    def _describe(request: PreparedRequest) -> str:
        if request.unix_socket_path:
            return f"{request.url} via socket {request.unix_socket_path}"
        return request.url


class BufferedHttpTransport(HttpTransport):
    """Reads the whole body in one go; the cancel flag is checked around it."""

    kind: Transport.Kind = "buffered"

    def _receive(self, response: httpx.Response, request: PreparedRequest) -> None:
        body = response.read()
        self._check_cancelled(request)
        if body:
            self._write(body)


__all__ = ["BufferedHttpTransport", "HttpTransport", "build_verify", "extract_error_message"]
