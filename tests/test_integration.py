"""Integration tests: a real client writing to a real sink over loopback TCP."""

import pytest

from influxtcp.batch import BatchPoints
from influxtcp.client import new_tcp_client
from influxtcp.config import TCPConfig
from influxtcp.errors import ConnectError, UnsupportedOperationError
from influxtcp.metrics import WriteMetrics
from influxtcp.point import Point


def _addr(server) -> str:
    host, port = server.server_address
    return f"{host}:{port}"


class TestEndToEnd:
    def test_points_arrive_in_order(self, sink_server, wait_for_lines):
        client = new_tcp_client(TCPConfig(addr=_addr(sink_server), payload_size=64))
        bp = BatchPoints(precision="s")
        for i in range(100):
            bp.add_point(Point("cpu", tags={"host": f"h{i % 3}"}, fields={"v": i}, time=i * 1_000_000_000))
        expected = [p.to_bytes() for p in bp.points]

        try:
            client.write(bp)
            lines = wait_for_lines(sink_server, len(expected))
        finally:
            client.close()

        assert lines == expected
        assert client.metrics.snapshot()["max_flush_bytes"] <= 64

    def test_oversized_point_arrives_split(self, sink_server, wait_for_lines):
        client = new_tcp_client(TCPConfig(addr=_addr(sink_server), payload_size=32))
        fields = {f"f{i}": i for i in range(10)}
        bp = BatchPoints()
        bp.add_point(Point("wide", fields=fields, time=42))

        try:
            client.write(bp)
            lines = wait_for_lines(sink_server, 2)
        finally:
            client.close()

        assert len(lines) > 1
        assert all(len(line) + 1 <= 32 for line in lines)
        assert all(line.startswith(b"wide ") and line.endswith(b" 42") for line in lines)

    def test_several_writes_share_connection(self, sink_server, wait_for_lines):
        metrics = WriteMetrics()
        client = new_tcp_client(TCPConfig(addr=_addr(sink_server)), metrics=metrics)
        try:
            for i in range(3):
                bp = BatchPoints()
                bp.add_point(Point("m", fields={"f": i}))
                client.write(bp)
            lines = wait_for_lines(sink_server, 3)
        finally:
            client.close()

        assert lines == [b"m f=0i", b"m f=1i", b"m f=2i"]
        assert sink_server.connection_count == 1
        assert metrics.snapshot()["points"] == 3

    def test_query_and_ping_need_no_server_round_trip(self, sink_server):
        client = new_tcp_client(TCPConfig(addr=_addr(sink_server)))
        try:
            with pytest.raises(UnsupportedOperationError):
                client.query("SHOW DATABASES")
            assert client.ping() == (0.0, "")
        finally:
            client.close()
        assert sink_server.line_count == 0


def test_new_tcp_client_connect_failure(sink_server):
    host, port = sink_server.server_address
    sink_server.stop()
    with pytest.raises(ConnectError):
        new_tcp_client(TCPConfig(addr=f"{host}:{port}", connect_timeout=1.0))
