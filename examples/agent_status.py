"""Usage walkthrough against a local endpoint and, optionally, a UNIX socket."""

from __future__ import annotations

import os
import threading

from urlrequest import (
    CompletionSink,
    Configuration,
    HTTPRequest,
    RequestParameters,
    StructuredDocument,
    Target,
    TransportError,
    UNIXSocketRequest,
)

BASE_URL = os.getenv("URLREQUEST_DEMO_URL", "http://localhost:8000")
SOCKET_PATH = os.getenv("URLREQUEST_DEMO_SOCKET")


def log_section(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def report_error(message: str, status: int | None) -> None:
    print(f"error status={status}: {message}")


def main() -> None:
    http = HTTPRequest(log_level="debug")

    log_section("GET with a borrowing sink")
    http.get(
        RequestParameters(Target(f"{BASE_URL}/status")),
        CompletionSink.borrowing(lambda body: print(bytes(body).decode("utf-8", errors="replace")), report_error),
        Configuration(timeout=5.0),
    )

    log_section("POST a structured document")
    http.post(
        RequestParameters(
            Target(f"{BASE_URL}/events"),
            payload=StructuredDocument({"event": "demo", "count": 1}),
            headers={"Content-Type": "application/json"},
        ),
        CompletionSink.owning(lambda body: print(f"created: {body!r}"), report_error),
    )

    log_section("Cancellable download")
    cancel = threading.Event()
    threading.Timer(2.0, cancel.set).start()
    try:
        http.download(
            RequestParameters(Target(f"{BASE_URL}/large.bin")),
            CompletionSink(output_file="large.bin"),
            Configuration(cancel_flag=cancel),
        )
    except TransportError as exc:
        print(f"download stopped: {exc} (status={exc.status_code})")

    if SOCKET_PATH:
        log_section(f"GET over UNIX socket {SOCKET_PATH}")
        UNIXSocketRequest().get(
            RequestParameters(Target("http://localhost/status", unix_socket_path=SOCKET_PATH)),
            CompletionSink.borrowing(lambda body: print(bytes(body).decode()), report_error),
        )


if __name__ == "__main__":
    main()
