"""Size-bounded batching writer for InfluxDB line protocol over TCP."""

from influxtcp.batch import BatchPoints
from influxtcp.client import TCPClient, new_tcp_client
from influxtcp.config import DEFAULT_PAYLOAD_SIZE, TCPConfig
from influxtcp.errors import (
    AddressResolutionError,
    ConnectError,
    InfluxTCPError,
    PointError,
    PrecisionError,
    TransportError,
    TransportWriteError,
    UnsupportedOperationError,
)
from influxtcp.point import Point

__all__ = [
    "AddressResolutionError",
    "BatchPoints",
    "ConnectError",
    "DEFAULT_PAYLOAD_SIZE",
    "InfluxTCPError",
    "Point",
    "PointError",
    "PrecisionError",
    "TCPClient",
    "TCPConfig",
    "TransportError",
    "TransportWriteError",
    "UnsupportedOperationError",
    "new_tcp_client",
]
