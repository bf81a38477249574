"""Exception hierarchy for SSE framing errors.

Transport failures are not wrapped: ``OSError`` from a sink or source and
``requests.RequestException`` from the client reach the caller unchanged.
"""

from __future__ import annotations


class SSEError(Exception):
    """Base exception for all SSE framing errors."""


class CapabilityError(SSEError):
    """The response sink cannot flush, so events would never reach the peer."""


class Canceled(SSEError):
    """The cancellation signal was already set when a write was requested."""


class LineTooLongError(SSEError):
    """A single line exceeded the configured maximum line size."""

    def __init__(self, limit: int, size: int) -> None:
        super().__init__(f"SSE line of at least {size} bytes exceeds limit of {limit} bytes")
        self.limit = limit
        self.size = size
