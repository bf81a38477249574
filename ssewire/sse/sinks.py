"""Response sinks binding ``EventWriter`` to concrete transports."""

from __future__ import annotations

from collections.abc import Iterator
from http.server import BaseHTTPRequestHandler
from queue import Queue

from ssewire.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_QUEUE_SIZE = 16


class HandlerSink:
    """Sink over a stdlib ``http.server`` request handler.

    Headers are collected in ``headers`` and sent together with the status
    line on the first write, or by ``send_headers`` for a stream that ends
    before any event. The body is delimited by connection close, so
    the handler should not advertise a content length.
    """

    def __init__(self, handler: BaseHTTPRequestHandler, status: int = 200) -> None:
        self.headers: dict[str, str] = {}
        self._handler = handler
        self._status = status
        self._started = False

    def write(self, data: bytes) -> int:
        self.send_headers()
        return self._handler.wfile.write(data)

    def flush(self) -> None:
        self._handler.wfile.flush()

    def send_headers(self) -> None:
        """Send the status line and headers unless they already went out."""
        if self._started:
            return
        self._handler.send_response(self._status)
        for name, value in self.headers.items():
            self._handler.send_header(name, value)
        self._handler.end_headers()
        # send_header("Connection", "keep-alive") clears this, but the body ends at close.
        self._handler.close_connection = True
        self._started = True


class QueueSink:
    """Sink that hands each flushed frame to a consumer thread.

    A producer thread writes through an ``EventWriter``; the response side
    iterates the sink, which yields one chunk per flush until ``close`` is
    called. Suitable as the body of a Starlette ``StreamingResponse``.

    At most ``maxsize`` frames are queued; a producer ahead of its consumer
    blocks in ``flush``.
    """

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE) -> None:
        self.headers: dict[str, str] = {}
        self._pending = bytearray()
        self._queue: Queue[object] = Queue(maxsize=maxsize)
        self._sentinel = object()
        self._finished = False

    def write(self, data: bytes) -> int:
        self._pending += data
        return len(data)

    def flush(self) -> None:
        if self._pending:
            self._queue.put(bytes(self._pending))
            self._pending.clear()

    def close(self) -> None:
        """Flush anything pending and end the stream for the consumer."""
        self.flush()
        self._queue.put(self._sentinel)

    def drain(self) -> None:
        """Discard queued frames until the producer closes the sink.

        Wakes a producer blocked on a full queue. Returns at once if the
        consumer already reached the end of the stream.
        """
        discarded = 0
        while not self._finished:
            if self._queue.get() is self._sentinel:
                self._finished = True
            else:
                discarded += 1
        if discarded:
            logger.debug("sse_queue_sink_discarded", frames=discarded)

    def __iter__(self) -> Iterator[bytes]:
        while not self._finished:
            item = self._queue.get()
            if item is self._sentinel:
                self._finished = True
                logger.debug("sse_queue_sink_drained")
                return
            yield item  # type: ignore[misc]
