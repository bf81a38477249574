"""Demo event stream served through ``EventWriter``."""

from __future__ import annotations

import threading
from collections.abc import Iterator

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse

from ssewire.config import get_settings
from ssewire.sse.sinks import QueueSink
from ssewire.sse.writer import CONTENT_EVENT_STREAM, EventWriter
from ssewire.utils.exceptions import Canceled
from ssewire.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/stream", tags=["stream"])


def _produce(
    writer: EventWriter,
    sink: QueueSink,
    cancel: threading.Event,
    count: int,
    keepalive_every: int,
) -> None:
    """Write ``hello <i>`` events, with a keep-alive after every ``keepalive_every``-th one."""
    try:
        for i in range(count):
            writer.write_data(cancel, f"hello {i}")
            if keepalive_every and i % keepalive_every == 0:
                writer.write_keep_alive(cancel)
        logger.info("sse_demo_completed", events=count)
    except Canceled:
        logger.info("sse_demo_canceled")
    except Exception:
        # Nothing above this thread can observe the failure; the stream just ends early.
        logger.exception("sse_demo_failed")
    finally:
        sink.close()


def _body(sink: QueueSink, cancel: threading.Event) -> Iterator[bytes]:
    try:
        yield from sink
    finally:
        # Reached when the response finishes or the client goes away.
        cancel.set()
        sink.drain()


@router.get("/demo")
def stream_demo(
    count: int = Query(default=10, ge=0),
    keepalive_every: int = Query(default=3, ge=0, description="0 disables keep-alives"),
) -> StreamingResponse:
    """SSE endpoint emitting ``count`` numbered events with interleaved keep-alives."""
    settings = get_settings()
    if count > settings.SSE_DEMO_MAX_EVENTS:
        raise HTTPException(
            status_code=400,
            detail=f"count must not exceed {settings.SSE_DEMO_MAX_EVENTS}",
        )

    sink = QueueSink(maxsize=settings.SSE_QUEUE_SIZE)
    writer = EventWriter(sink)
    writer.write_headers()
    cancel = threading.Event()
    threading.Thread(
        target=_produce,
        args=(writer, sink, cancel, count, keepalive_every),
        name="sse-demo-producer",
        daemon=True,
    ).start()
    logger.info("sse_demo_started", count=count, keepalive_every=keepalive_every)

    return StreamingResponse(
        _body(sink, cancel),
        media_type=CONTENT_EVENT_STREAM,
        headers=sink.headers,
    )
