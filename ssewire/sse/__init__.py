"""SSE wire framing: event writer, stream parser, and transport sinks."""

from __future__ import annotations

from ssewire.sse.parser import DEFAULT_CHUNK_SIZE, iter_lines, parse_data_stream
from ssewire.sse.sinks import HandlerSink, QueueSink
from ssewire.sse.writer import CONTENT_EVENT_STREAM, EventWriter

__all__ = [
    "CONTENT_EVENT_STREAM",
    "DEFAULT_CHUNK_SIZE",
    "EventWriter",
    "HandlerSink",
    "QueueSink",
    "iter_lines",
    "parse_data_stream",
]
