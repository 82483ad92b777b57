"""Tests for the configuration module."""

import pytest

from influxtcp.config import (
    DEFAULT_PAYLOAD_SIZE,
    ClientConfig,
    ServerConfig,
    TCPConfig,
    load_client_config,
    load_server_config,
    resolve_payload_size,
)


def test_tcp_config_defaults():
    cfg = TCPConfig()
    assert cfg.addr == "localhost:8089"
    assert cfg.payload_size == DEFAULT_PAYLOAD_SIZE == 512
    assert cfg.connect_timeout == 5.0


@pytest.mark.parametrize(
    "value, expected",
    [(None, 512), (0, 512), (-1, 512), (1, 1), (1400, 1400)],
)
def test_resolve_payload_size(value, expected):
    assert resolve_payload_size(value) == expected


def test_server_config_defaults():
    cfg = ServerConfig()
    assert cfg.host == "0.0.0.0"
    assert cfg.port == 8089
    assert cfg.buffer_size == 65536


def test_server_config_from_env(monkeypatch):
    monkeypatch.setenv("SERVER_HOST", "127.0.0.1")
    monkeypatch.setenv("SERVER_PORT", "9090")
    monkeypatch.setenv("BUFFER_SIZE", "4096")

    cfg = load_server_config()
    assert cfg.host == "127.0.0.1"
    assert cfg.port == 9090
    assert cfg.buffer_size == 4096


def test_client_config_defaults():
    cfg = ClientConfig()
    assert cfg.addr == "localhost:8089"
    assert cfg.payload_size == 512
    assert cfg.precision == "s"
    assert cfg.measurement == "demo"
    assert cfg.points_per_second == 5
    assert cfg.run_time == 30


def test_client_config_from_env(monkeypatch):
    monkeypatch.setenv("INFLUX_ADDR", "10.0.0.5:8094")
    monkeypatch.setenv("PAYLOAD_SIZE", "1400")
    monkeypatch.setenv("CONNECT_TIMEOUT", "2.5")
    monkeypatch.setenv("PRECISION", "ms")
    monkeypatch.setenv("MEASUREMENT", "cpu")
    monkeypatch.setenv("POINTS_PER_SECOND", "50")
    monkeypatch.setenv("RUN_TIME", "10")

    cfg = load_client_config([])
    assert cfg.addr == "10.0.0.5:8094"
    assert cfg.payload_size == 1400
    assert cfg.connect_timeout == 2.5
    assert cfg.precision == "ms"
    assert cfg.measurement == "cpu"
    assert cfg.points_per_second == 50
    assert cfg.run_time == 10


def test_client_config_cli_args():
    cfg = load_client_config(["--addr", "[::1]:8089", "--payload-size", "256", "--precision", "us"])
    assert cfg.addr == "[::1]:8089"
    assert cfg.payload_size == 256
    assert cfg.precision == "us"


def test_client_config_cli_overrides_env(monkeypatch):
    monkeypatch.setenv("PAYLOAD_SIZE", "1400")
    cfg = load_client_config(["--payload-size", "256"])
    assert cfg.payload_size == 256


def test_to_tcp_config():
    cfg = ClientConfig(addr="db:8089", payload_size=1024, connect_timeout=1.0)
    assert cfg.to_tcp_config() == TCPConfig(addr="db:8089", payload_size=1024, connect_timeout=1.0)


def test_config_frozen():
    cfg = TCPConfig()
    with pytest.raises(AttributeError):
        cfg.payload_size = 1024
