"""Completion sinks and response destinations."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Literal, Union

from .errors import UsageError

Ownership = Literal["borrow", "take"]
SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[str, "int | None"], None]


def _ignore(_body: Any) -> None:
    return None


def _release(view: memoryview) -> bool:
    try:
        view.release()
    except BufferError:
        return False
    return True


class ResponseBuffer:
    """In-memory destination accumulating the response body."""

    kind = "memory"

    def __init__(self) -> None:
        self.data = bytearray()

    def write(self, chunk: bytes) -> None:
        self.data.extend(chunk)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"ResponseBuffer(bytes={len(self.data)})"


class ResponseFile:
    """File destination; the body never lands in memory as a whole."""

    kind = "file"

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self.bytes_written = 0

    def __repr__(self) -> str:
        return f"ResponseFile({str(self.path)!r})"


ResponseDestination = Union[ResponseBuffer, ResponseFile]


@dataclass(frozen=True)
class CompletionSink:
    """What happens after the exchange.

    A borrowing sink gets a read-only ``memoryview`` that is released as soon
    as ``on_success`` returns. An owning sink gets the ``bytearray`` itself.
    Exactly one of ``on_success`` / ``on_error`` runs per call; without
    ``on_error`` transport failures are raised to the caller instead.
    """

    on_success: SuccessCallback = _ignore
    on_error: ErrorCallback | None = None
    output_file: str | os.PathLike[str] | None = None
    ownership: Ownership = "borrow"

    def __post_init__(self) -> None:
        if self.ownership not in ("borrow", "take"):
            raise UsageError(f"Unknown ownership mode: {self.ownership!r}")
        if not callable(self.on_success):
            raise UsageError("on_success must be callable")
        if self.on_error is not None and not callable(self.on_error):
            raise UsageError("on_error must be callable")

    @classmethod
    def borrowing(
        cls,
        on_success: SuccessCallback,
        on_error: ErrorCallback | None = None,
        output_file: str | os.PathLike[str] | None = None,
    ) -> "CompletionSink":
        return cls(on_success=on_success, on_error=on_error, output_file=output_file, ownership="borrow")

    @classmethod
    def owning(
        cls,
        on_success: SuccessCallback,
        on_error: ErrorCallback | None = None,
        output_file: str | os.PathLike[str] | None = None,
    ) -> "CompletionSink":
        return cls(on_success=on_success, on_error=on_error, output_file=output_file, ownership="take")

    def destination(self) -> ResponseDestination:
        if self.output_file is not None:
            return ResponseFile(self.output_file)
        return ResponseBuffer()

    def deliver(self, destination: ResponseDestination) -> None:
        # File downloads report an empty body; the content lives on disk.
        body = destination.data if isinstance(destination, ResponseBuffer) else bytearray()
        if self.ownership == "take":
            if isinstance(destination, ResponseBuffer):
                destination.data = bytearray()
            self.on_success(body)
            return
        base = memoryview(body)
        view = base.toreadonly()
        try:
            self.on_success(view)
        finally:
            released = _release(view) and _release(base)
        if not released:
            raise UsageError(
                "Borrowed response body was still exported after on_success returned; "
                "copy it or use CompletionSink.owning to keep it"
            )


__all__ = [
    "CompletionSink",
    "ErrorCallback",
    "Ownership",
    "ResponseBuffer",
    "ResponseDestination",
    "ResponseFile",
    "SuccessCallback",
]
