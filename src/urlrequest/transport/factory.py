"""Maps a destination and configuration onto a concrete transport."""

from __future__ import annotations

import httpx

from ..config import CancelFlag, TransportSelector
from ..errors import UsageError
from ..logger import BoundLogger
from ..sink import ResponseDestination
from .base import Transport
from .http import BufferedHttpTransport, HttpTransport

TRANSPORTS: dict[str, type[HttpTransport]] = {
    "stream": HttpTransport,
    "buffered": BufferedHttpTransport,
}


def create_transport(
    destination: ResponseDestination,
    selector: TransportSelector,
    cancel_flag: CancelFlag | None = None,
    *,
    backend: httpx.BaseTransport | None = None,
    logger: BoundLogger | None = None,
) -> Transport:
    """Build the handle a builder drives. No I/O happens here."""
    try:
        transport_cls = TRANSPORTS[selector]
    except KeyError:
        raise UsageError(f"Unknown transport selector: {selector!r}") from None
    return transport_cls(destination, cancel_flag=cancel_flag, backend=backend, logger=logger)


__all__ = ["TRANSPORTS", "create_transport"]
