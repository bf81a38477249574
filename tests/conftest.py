"""Shared test fixtures."""

from __future__ import annotations

import pytest


class RecordingSink:
    """In-memory response sink that records every write and flush."""

    def __init__(self) -> None:
        self.headers: dict[str, str] = {}
        self.body = bytearray()
        self.flushes = 0

    def write(self, data: bytes) -> int:
        self.body += data
        return len(data)

    def flush(self) -> None:
        self.flushes += 1


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Pin settings that tests rely on regardless of the host environment."""
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FORMAT", "console")
    monkeypatch.delenv("SSE_MAX_LINE_BYTES", raising=False)
    monkeypatch.delenv("SSE_READ_CHUNK_SIZE", raising=False)
    monkeypatch.delenv("SSE_DEMO_MAX_EVENTS", raising=False)
    monkeypatch.delenv("SSE_QUEUE_SIZE", raising=False)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def writer(sink):
    from ssewire.sse.writer import EventWriter

    return EventWriter(sink)
