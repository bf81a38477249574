"""Server-Sent Events writer for an outgoing response sink."""

from __future__ import annotations

from typing import MutableMapping, Protocol

from ssewire.utils.exceptions import Canceled, CapabilityError
from ssewire.utils.logging import get_logger

logger = get_logger(__name__)

CONTENT_EVENT_STREAM = "text/event-stream"

_DATA_PREFIX = b"data: "
_KEEP_ALIVE = b": keep-alive\n\n"


class ResponseSink(Protocol):
    """Outgoing stream the writer serializes events into."""

    headers: MutableMapping[str, str]

    def write(self, data: bytes) -> object: ...

    def flush(self) -> object: ...


class CancelSignal(Protocol):
    """Cooperative cancellation flag; ``threading.Event`` satisfies it."""

    def is_set(self) -> bool: ...


class EventWriter:
    """Writes SSE events to a single response sink.

    The writer does not own the sink: it never closes it, and callers must
    serialize access when several producers share one writer.
    """

    def __init__(self, sink: ResponseSink) -> None:
        if not callable(getattr(sink, "flush", None)):
            raise CapabilityError(f"{type(sink).__name__} does not support flushing")
        self._sink = sink

    def write_headers(self) -> None:
        """Set the event-stream content type and disable intermediary buffering.

        Must be called exactly once, before the first event.
        """
        headers = self._sink.headers
        headers["Content-Type"] = CONTENT_EVENT_STREAM
        headers["Cache-Control"] = "no-cache"
        headers["Connection"] = "keep-alive"
        headers["X-Accel-Buffering"] = "no"
        logger.debug("sse_headers_written", sink=type(self._sink).__name__)

    def write_data(self, cancel: CancelSignal | None, payload: bytes | bytearray | memoryview | str) -> None:
        """Write one event carrying ``payload``, then flush.

        Every line of the payload becomes its own ``data:`` line so embedded
        newlines survive the round trip. Raises ``Canceled`` without writing
        anything if ``cancel`` is already set.
        """
        _check_cancel(cancel)
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        frame = bytearray()
        for line in bytes(payload).split(b"\n"):
            frame += _DATA_PREFIX
            frame += line
            frame += b"\n"
        frame += b"\n"
        self._emit(bytes(frame))

    def write_keep_alive(self, cancel: CancelSignal | None) -> None:
        """Write a comment-only frame that carries no payload, then flush."""
        _check_cancel(cancel)
        self._emit(_KEEP_ALIVE)

    def _emit(self, frame: bytes) -> None:
        self._sink.write(frame)
        self._sink.flush()


def _check_cancel(cancel: CancelSignal | None) -> None:
    if cancel is not None and cancel.is_set():
        raise Canceled("write canceled before any bytes were sent")
