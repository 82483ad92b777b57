"""Batching writer: packs line-protocol points into size-bounded TCP writes."""

import logging

from influxtcp.config import TCPConfig, resolve_payload_size
from influxtcp.errors import (
    PrecisionError,
    TransportWriteError,
    UnsupportedOperationError,
)
from influxtcp.metrics import WriteMetrics
from influxtcp.precision import parse_precision
from influxtcp.record import Batch
from influxtcp.transport import dial

logger = logging.getLogger(__name__)

NEWLINE = b"\n"


class TCPClient:
    """Writes batches of points to an InfluxDB TCP listener.

    Serialized points are packed into a buffer of at most ``payload_size``
    bytes and each full buffer goes out as one transport write. A point is
    never spread over two writes unless it is too large on its own, in
    which case it is split into sub-points along field boundaries.

    Points without a timestamp are never split, so one of them larger
    than ``payload_size`` produces a write above the cap.

    Only one caller may use a client at a time: the connection is a single
    ordered stream, and interleaved ``write`` calls would corrupt the line
    framing. Serialize calls externally or give each publisher its own
    client and connection.
    """

    def __init__(self, conn, payload_size: int | None = None, metrics: WriteMetrics | None = None):
        self._conn = conn
        self._payload_size = resolve_payload_size(payload_size)
        self._metrics = metrics if metrics is not None else WriteMetrics()

    @property
    def payload_size(self) -> int:
        return self._payload_size

    @property
    def metrics(self) -> WriteMetrics:
        return self._metrics

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def write(self, bp: Batch):
        """Serialize every point of *bp* and send it over the connection.

        A failed write of a full buffer is remembered and the remaining
        points are still sent. A failure of the last write is raised at
        once; otherwise the last remembered failure is raised after
        everything was attempted.

        Raises:
            TransportWriteError: If any transport write failed.
        """
        unit = self._precision_unit(bp.precision)
        payload_size = self._payload_size
        buf = bytearray()
        delayed_error = None

        def check_buffer(n: int):
            nonlocal delayed_error
            if buf and len(buf) + n > payload_size:
                try:
                    self._flush(buf)
                except (TransportWriteError, OSError) as exc:
                    logger.warning(
                        "Write of %d bytes failed, continuing with remaining points: %s",
                        len(buf),
                        exc,
                    )
                    delayed_error = exc
                buf.clear()

        points = bp.points
        self._metrics.record_points(len(points))

        for point in points:
            point.round(unit)
            point_size = point.string_size() + 1  # trailing newline

            check_buffer(point_size)

            if point.time is None or point_size <= payload_size:
                if point_size > payload_size:
                    logger.warning(
                        "Point without timestamp is %d bytes, over the %d byte payload size; "
                        "sending it unsplit",
                        point_size,
                        payload_size,
                    )
                point.append_string(buf)
                buf += NEWLINE
                continue

            sub_points = point.split(payload_size - 1)  # leave room for the newline
            self._metrics.record_split(len(sub_points))
            for sub in sub_points:
                sub_size = sub.string_size() + 1
                if sub_size > payload_size:
                    logger.warning(
                        "Sub-point is %d bytes after split, over the %d byte payload size",
                        sub_size,
                        payload_size,
                    )
                check_buffer(sub_size)
                sub.append_string(buf)
                buf += NEWLINE

        if buf:
            self._flush(buf)

        if delayed_error is not None:
            raise delayed_error

    def _flush(self, buf: bytearray):
        """Hand the buffered bytes to the transport as one write."""
        data = bytes(buf)
        try:
            self._conn.write(data)
        except (TransportWriteError, OSError):
            self._metrics.record_flush(len(data), ok=False)
            raise
        self._metrics.record_flush(len(data))
        logger.debug("Flushed %d bytes", len(data))

    @staticmethod
    def _precision_unit(precision: str) -> int:
        try:
            return parse_precision(precision)
        except PrecisionError:
            logger.warning("Unknown precision %r, timestamps are sent unrounded", precision)
            return 0

    # ------------------------------------------------------------------
    # Operations other transports provide
    # ------------------------------------------------------------------

    def query(self, q):
        raise UnsupportedOperationError("Querying via TCP is not supported")

    def query_as_chunk(self, q):
        raise UnsupportedOperationError("Querying via TCP is not supported")

    def ping(self, timeout: float | None = None) -> tuple[float, str]:
        """Return (latency_seconds, server_version); always (0.0, "") over TCP."""
        return 0.0, ""

    def close(self):
        """Release the underlying connection."""
        self._conn.close()


def new_tcp_client(config: TCPConfig, metrics: WriteMetrics | None = None) -> TCPClient:
    """Dial ``config.addr`` and return a client writing to it.

    Raises:
        AddressResolutionError: If the address cannot be resolved.
        ConnectError: If the connection cannot be established.
    """
    conn = dial(config.addr, config.connect_timeout)
    return TCPClient(conn, payload_size=config.payload_size, metrics=metrics)
