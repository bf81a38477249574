"""End-to-end tests over a live http.server with the requests client."""

from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

from ssewire.client import stream_events
from ssewire.sse.sinks import HandlerSink
from ssewire.sse.writer import EventWriter

_LARGE_PAYLOAD = "x" * (100 * 1024)


def _make_event(i: int) -> str:
    return f"hello {i}"


class _EventHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        if self.path not in ("/events", "/large", "/quiet", "/held"):
            self.send_error(404)
            return
        sink = HandlerSink(self)
        writer = EventWriter(sink)
        writer.write_headers()
        cancel = threading.Event()
        if self.path == "/events":
            for i in range(10):
                writer.write_data(cancel, _make_event(i))
                if i % 3 == 0:
                    writer.write_keep_alive(cancel)
        elif self.path == "/held":
            writer.write_data(cancel, "first")
            self.server.release.wait(timeout=5)
            self.server.resumed.set()
            writer.write_data(cancel, "second")
        elif self.path == "/large":
            writer.write_data(cancel, _LARGE_PAYLOAD)
        else:
            for _ in range(3):
                writer.write_keep_alive(cancel)

    do_POST = do_GET

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _EventHandler)
    server.release = threading.Event()
    server.resumed = threading.Event()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.release.set()
    server.shutdown()
    server.server_close()


@pytest.fixture
def server_url(server):
    host, port = server.server_address[:2]
    return f"http://{host}:{port}"


@pytest.mark.parametrize("method", ["GET", "POST"])
def test_events_arrive_in_order(server_url, method):
    events = list(stream_events(f"{server_url}/events", method=method, timeout=10))
    assert events == [_make_event(i).encode() for i in range(10)]


def test_large_payload(server_url):
    events = list(stream_events(f"{server_url}/large", timeout=10))
    assert len(events) == 1
    assert len(events[0]) == len(_LARGE_PAYLOAD)
    assert events[0] == _LARGE_PAYLOAD.encode()


def test_keep_alive_only_stream(server_url):
    assert list(stream_events(f"{server_url}/quiet", timeout=10)) == []


def test_response_headers(server_url):
    resp = requests.get(f"{server_url}/quiet", stream=True, timeout=10)
    try:
        assert resp.headers["Content-Type"] == "text/event-stream"
        assert resp.headers["Cache-Control"] == "no-cache"
    finally:
        resp.close()


def test_line_limit_from_settings(server_url, monkeypatch):
    monkeypatch.setenv("SSE_MAX_LINE_BYTES", "1024")
    from ssewire.utils.exceptions import LineTooLongError

    with pytest.raises(LineTooLongError):
        list(stream_events(f"{server_url}/large", timeout=10))


def test_http_error_raises(server_url):
    with pytest.raises(requests.HTTPError):
        list(stream_events(f"{server_url}/missing", timeout=10))


def test_event_delivered_while_connection_stays_open(server, server_url):
    events = stream_events(f"{server_url}/held", timeout=10)

    assert next(events) == b"first"
    assert not server.resumed.is_set()

    server.release.set()
    assert list(events) == [b"second"]
    assert server.resumed.is_set()
