"""Line-protocol sink: a TCP accept loop that records newline-terminated lines."""

import logging
import socket
import threading

from influxtcp.config import ServerConfig

logger = logging.getLogger(__name__)


class LineProtocolServer:
    """Multi-threaded TCP server that collects every line it receives.

    Lines are stored as raw bytes in arrival order; nothing is parsed and
    nothing is sent back to the writer.
    """

    def __init__(self, config: ServerConfig, shutdown_event: threading.Event):
        self._config = config
        self._shutdown_event = shutdown_event
        self._sock = None
        self._server_address = None
        self._lines: list[bytes] = []
        self._connection_count = 0
        self._lock = threading.Lock()

    @property
    def server_address(self) -> tuple:
        """Return (host, port) the server is bound to. Useful when port=0."""
        return self._server_address

    def start(self):
        """Bind, listen, and accept connections until shutdown."""
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.settimeout(1.0)
        self._sock.bind((self._config.host, self._config.port))
        self._sock.listen(5)

        self._server_address = self._sock.getsockname()
        logger.info("Line protocol sink listening on %s:%d", *self._server_address)

        while not self._shutdown_event.is_set():
            try:
                conn, addr = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break

            with self._lock:
                self._connection_count += 1

            t = threading.Thread(
                target=self._handle_client,
                args=(conn, addr),
                daemon=True,
            )
            t.start()

    def _handle_client(self, conn: socket.socket, addr: tuple):
        """Read one connection until EOF, splitting the stream on newlines."""
        logger.info("Writer connected: %s:%d", addr[0], addr[1])
        conn.settimeout(1.0)

        buffer = b""
        try:
            while not self._shutdown_event.is_set():
                try:
                    data = conn.recv(self._config.buffer_size)
                except socket.timeout:
                    continue
                except OSError:
                    break

                if not data:
                    break

                buffer += data
                if b"\n" not in buffer:
                    continue

                *lines, buffer = buffer.split(b"\n")
                with self._lock:
                    self._lines.extend(lines)
                logger.debug("Received %d line(s) from %s:%d", len(lines), addr[0], addr[1])
        finally:
            conn.close()
            if buffer:
                logger.warning(
                    "Dropping %d bytes of unterminated data from %s:%d",
                    len(buffer),
                    addr[0],
                    addr[1],
                )
            logger.info("Writer disconnected: %s:%d", addr[0], addr[1])

    def stop(self):
        """Signal shutdown and close the listen socket."""
        logger.info("Sink shutting down, %d line(s) received", self.line_count)
        self._shutdown_event.set()
        if self._sock:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None

    @property
    def lines(self) -> list[bytes]:
        with self._lock:
            return list(self._lines)

    @property
    def line_count(self) -> int:
        with self._lock:
            return len(self._lines)

    @property
    def connection_count(self) -> int:
        with self._lock:
            return self._connection_count
