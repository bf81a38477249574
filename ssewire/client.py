"""Blocking SSE client built on requests."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import requests

from ssewire.config import get_settings
from ssewire.sse.parser import parse_data_stream
from ssewire.sse.writer import CONTENT_EVENT_STREAM
from ssewire.utils.logging import get_logger

logger = get_logger(__name__)


def open_stream(
    url: str,
    *,
    method: str = "GET",
    timeout: float | None = None,
    session: requests.Session | None = None,
    headers: dict[str, str] | None = None,
    **kwargs: Any,
) -> requests.Response:
    """Send a streaming request that accepts ``text/event-stream``.

    Returns the open response; raises ``requests.HTTPError`` for non-2xx.
    """
    if timeout is None:
        timeout = get_settings().SSE_CLIENT_TIMEOUT
    http = session or requests
    request_headers = {"Accept": CONTENT_EVENT_STREAM, **(headers or {})}
    r = http.request(method, url, headers=request_headers, stream=True, timeout=timeout, **kwargs)
    r.raise_for_status()
    return r


def stream_events(
    url: str,
    *,
    chunk_size: int | None = None,
    max_line_size: int | None = None,
    **kwargs: Any,
) -> Iterator[bytes]:
    """Yield event payloads from ``url`` as they arrive.

    The response is closed when the stream ends, on error, or when the
    caller stops iterating and the generator is closed.
    """
    settings = get_settings()
    if chunk_size is None:
        chunk_size = settings.SSE_READ_CHUNK_SIZE
    if max_line_size is None:
        max_line_size = settings.SSE_MAX_LINE_BYTES

    response = open_stream(url, **kwargs)
    logger.debug("sse_stream_opened", url=url, status=response.status_code)
    try:
        response.raw.decode_content = True
        yield from parse_data_stream(response.raw, chunk_size=chunk_size, max_line_size=max_line_size)
    finally:
        response.close()
        logger.debug("sse_stream_closed", url=url)
