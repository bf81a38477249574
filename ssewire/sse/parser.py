"""Incremental parser for ``text/event-stream`` bodies."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol

from ssewire.utils.exceptions import LineTooLongError
from ssewire.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

_DATA_FIELD = b"data:"
_COMMENT = b":"


class Readable(Protocol):
    def read(self, size: int = -1) -> bytes: ...


ByteSource = Readable | Iterable[bytes]


def _read_chunks(source: ByteSource, chunk_size: int) -> Iterator[bytes]:
    # read1 returns whatever is already buffered instead of waiting for a full chunk.
    read = getattr(source, "read1", None) or getattr(source, "read", None)
    if read is None:
        yield from source  # type: ignore[misc]
        return
    while True:
        chunk = read(chunk_size)
        if not chunk:
            return
        yield chunk


def _strip_cr(line: bytes) -> bytes:
    return line[:-1] if line.endswith(b"\r") else line


def iter_lines(
    source: ByteSource,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_line_size: int | None = None,
) -> Iterator[bytes]:
    """Yield newline-terminated lines from ``source`` without their terminator.

    The buffer grows as needed. With ``max_line_size`` set, a line longer than
    the limit raises ``LineTooLongError`` as soon as it is detected, even
    before its newline arrives. A final line without a newline is still
    yielded at end of stream.
    """
    buf = bytearray()
    for chunk in _read_chunks(source, chunk_size):
        searched = len(buf)
        buf += chunk
        start = 0
        end = buf.find(b"\n", searched)
        while end != -1:
            if max_line_size is not None and end - start > max_line_size:
                raise LineTooLongError(max_line_size, end - start)
            yield _strip_cr(bytes(buf[start:end]))
            start = end + 1
            end = buf.find(b"\n", start)
        del buf[:start]
        if max_line_size is not None and len(buf) > max_line_size:
            raise LineTooLongError(max_line_size, len(buf))
    if buf:
        yield _strip_cr(bytes(buf))


def parse_data_stream(
    source: ByteSource,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_line_size: int | None = None,
) -> Iterator[bytes]:
    """Lazily yield the payload of every ``data:`` event in ``source``.

    Multi-line events are joined with ``\\n``. Comment lines such as
    keep-alives and fields other than ``data`` are skipped. An event left
    unterminated at end of stream is yielded as-is. Read failures propagate
    out of the iterator and end it; the caller still owns ``source`` and is
    responsible for closing it.
    """
    segments: list[bytes] = []
    events = 0
    for line in iter_lines(source, chunk_size=chunk_size, max_line_size=max_line_size):
        if not line:
            if segments:
                events += 1
                yield b"\n".join(segments)
                segments = []
            continue
        if line.startswith(_DATA_FIELD):
            value = line[len(_DATA_FIELD):]
            if value.startswith(b" "):
                value = value[1:]
            segments.append(value)
        elif line.startswith(_COMMENT):
            continue

    if segments:
        events += 1
        logger.debug("sse_unterminated_event", segments=len(segments))
        yield b"\n".join(segments)
    logger.debug("sse_stream_ended", events=events)
