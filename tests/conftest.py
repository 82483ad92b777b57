"""Shared pytest fixtures for the influxtcp test suite."""

from __future__ import annotations

import threading
import time

import pytest

from influxtcp.config import ServerConfig
from influxtcp.errors import TransportWriteError
from influxtcp.server import LineProtocolServer


class RecordingTransport:
    """In-memory transport that records every write.

    Writes whose zero-based index is in *fail_on* raise TransportWriteError;
    the failed chunk is still recorded in ``attempts`` but not in ``writes``.
    """

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.attempts: list[bytes] = []
        self.writes: list[bytes] = []
        self.closed = False

    def write(self, data: bytes):
        index = len(self.attempts)
        self.attempts.append(data)
        if index in self.fail_on:
            raise TransportWriteError(f"write #{index} failed")
        self.writes.append(data)

    def close(self):
        self.closed = True


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def failing_transport():
    """Factory fixture: ``failing_transport(0, 2)`` fails writes #0 and #2."""
    def _make(*fail_on):
        return RecordingTransport(fail_on)
    return _make


@pytest.fixture()
def sink_server():
    """Start a LineProtocolServer on an ephemeral loopback port."""
    config = ServerConfig(host="127.0.0.1", port=0, buffer_size=4096)
    shutdown_event = threading.Event()
    server = LineProtocolServer(config, shutdown_event)

    thread = threading.Thread(target=server.start, daemon=True)
    thread.start()

    for _ in range(50):
        if server.server_address is not None:
            break
        time.sleep(0.05)
    else:
        raise RuntimeError("Server failed to bind")

    yield server

    server.stop()
    thread.join(timeout=5)


def _wait_for_lines(server: LineProtocolServer, count: int, timeout: float = 5.0) -> list[bytes]:
    """Poll *server* until it holds at least *count* lines."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if server.line_count >= count:
            break
        time.sleep(0.02)
    return server.lines


@pytest.fixture()
def wait_for_lines():
    return _wait_for_lines
