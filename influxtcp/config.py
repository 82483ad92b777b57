"""Configuration module: frozen dataclasses loaded from env vars and CLI args."""

import argparse
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# A payload that comfortably fits a single segment on most internet paths.
DEFAULT_PAYLOAD_SIZE = 512
DEFAULT_CONNECT_TIMEOUT = 5.0


def resolve_payload_size(value: int | None) -> int:
    """Return *value*, or the default payload size when it is unset or not positive."""
    if value is None or value == 0:
        return DEFAULT_PAYLOAD_SIZE
    if value < 0:
        logger.warning(
            "Ignoring non-positive payload size %d, using default %d",
            value,
            DEFAULT_PAYLOAD_SIZE,
        )
        return DEFAULT_PAYLOAD_SIZE
    return value


@dataclass(frozen=True)
class TCPConfig:
    # "host:port" or "[ipv6-host%zone]:port"
    addr: str = "localhost:8089"
    payload_size: int = DEFAULT_PAYLOAD_SIZE
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8089
    buffer_size: int = 65536


def load_server_config() -> ServerConfig:
    """Build ServerConfig from environment variables with sensible defaults."""
    return ServerConfig(
        host=os.environ.get("SERVER_HOST", ServerConfig.host),
        port=int(os.environ.get("SERVER_PORT", ServerConfig.port)),
        buffer_size=int(os.environ.get("BUFFER_SIZE", ServerConfig.buffer_size)),
    )


@dataclass(frozen=True)
class ClientConfig:
    addr: str = "localhost:8089"
    payload_size: int = DEFAULT_PAYLOAD_SIZE
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    precision: str = "s"
    measurement: str = "demo"
    points_per_second: int = 5
    run_time: int = 30

    def to_tcp_config(self) -> TCPConfig:
        return TCPConfig(
            addr=self.addr,
            payload_size=self.payload_size,
            connect_timeout=self.connect_timeout,
        )


def load_client_config(argv=None) -> ClientConfig:
    """Build ClientConfig from environment variables, then override with CLI args.

    Pass argv for testability; when None, argparse reads sys.argv.
    """
    env_addr = os.environ.get("INFLUX_ADDR", ClientConfig.addr)
    env_payload_size = int(os.environ.get("PAYLOAD_SIZE", ClientConfig.payload_size))
    env_connect_timeout = float(
        os.environ.get("CONNECT_TIMEOUT", ClientConfig.connect_timeout)
    )
    env_precision = os.environ.get("PRECISION", ClientConfig.precision)
    env_measurement = os.environ.get("MEASUREMENT", ClientConfig.measurement)
    env_points_per_second = int(
        os.environ.get("POINTS_PER_SECOND", ClientConfig.points_per_second)
    )
    env_run_time = int(os.environ.get("RUN_TIME", ClientConfig.run_time))

    parser = argparse.ArgumentParser(description="InfluxDB TCP point writer demo client")
    parser.add_argument("--addr", type=str, default=None)
    parser.add_argument("--payload-size", type=int, default=None)
    parser.add_argument("--connect-timeout", type=float, default=None)
    parser.add_argument("--precision", type=str, default=None)
    parser.add_argument("--measurement", type=str, default=None)
    parser.add_argument("--points-per-second", type=int, default=None)
    parser.add_argument("--run-time", type=int, default=None)

    args = parser.parse_args(argv)

    return ClientConfig(
        addr=args.addr if args.addr is not None else env_addr,
        payload_size=args.payload_size if args.payload_size is not None else env_payload_size,
        connect_timeout=args.connect_timeout if args.connect_timeout is not None else env_connect_timeout,
        precision=args.precision if args.precision is not None else env_precision,
        measurement=args.measurement if args.measurement is not None else env_measurement,
        points_per_second=args.points_per_second if args.points_per_second is not None else env_points_per_second,
        run_time=args.run_time if args.run_time is not None else env_run_time,
    )
