"""TCP transport handle: address resolution, dial, raw writes and close."""

import logging
import socket

from influxtcp.config import DEFAULT_CONNECT_TIMEOUT
from influxtcp.errors import (
    AddressResolutionError,
    ConnectError,
    TransportError,
    TransportWriteError,
)

logger = logging.getLogger(__name__)


def parse_address(addr: str) -> tuple[str, str]:
    """Split "host:port" or "[ipv6-host%zone]:port" into (host, port).

    An empty host (":8089") means the local system.
    """
    if not addr:
        raise AddressResolutionError("missing address")

    if addr.startswith("["):
        end = addr.find("]")
        if end < 0:
            raise AddressResolutionError(f"address {addr}: missing ']' in address")
        host = addr[1:end]
        rest = addr[end + 1:]
        if not rest.startswith(":"):
            raise AddressResolutionError(f"address {addr}: missing port in address")
        port = rest[1:]
    else:
        host, sep, port = addr.rpartition(":")
        if not sep:
            raise AddressResolutionError(f"address {addr}: missing port in address")
        if ":" in host:
            raise AddressResolutionError(f"address {addr}: too many colons in address")
        if "[" in host or "]" in host:
            raise AddressResolutionError(f"address {addr}: unexpected bracket in address")

    if not port:
        raise AddressResolutionError(f"address {addr}: missing port in address")
    # getaddrinfo wraps numeric ports above 65535 instead of failing
    if port.lstrip("+-").isdigit() and not (port.isdigit() and int(port) <= 65535):
        raise AddressResolutionError(f"address {addr}: invalid port")
    return host, port


def resolve_address(addr: str) -> tuple:
    """Resolve *addr* to the first stream endpoint getaddrinfo reports.

    Returns a (family, type, proto, sockaddr) tuple.
    """
    host, port = parse_address(addr)
    try:
        infos = socket.getaddrinfo(host or None, port, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise AddressResolutionError(f"cannot resolve {addr}: {exc}") from exc
    if not infos:
        raise AddressResolutionError(f"cannot resolve {addr}: no addresses")
    family, socktype, proto, _canonname, sockaddr = infos[0]
    return family, socktype, proto, sockaddr


class TCPTransport:
    """One open TCP connection. Raw I/O only, no framing or buffering."""

    def __init__(self, sock: socket.socket, addr: str = ""):
        self._sock: socket.socket | None = sock
        self._addr = addr

    @property
    def addr(self) -> str:
        return self._addr

    @property
    def closed(self) -> bool:
        return self._sock is None

    def write(self, data: bytes):
        """Send all of *data*, blocking until the OS accepts it."""
        if self._sock is None:
            raise TransportWriteError(f"write to {self._addr}: connection is closed")
        try:
            self._sock.sendall(data)
        except OSError as exc:
            raise TransportWriteError(f"write to {self._addr}: {exc}") from exc

    def close(self):
        """Close the connection. Safe to call more than once."""
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError as exc:
            raise TransportError(f"close {self._addr}: {exc}") from exc
        logger.debug("Closed connection to %s", self._addr)


def dial(addr: str, connect_timeout: float = DEFAULT_CONNECT_TIMEOUT) -> TCPTransport:
    """Resolve *addr* and open a TCP connection to it.

    Raises:
        AddressResolutionError: If *addr* is malformed or unresolvable.
        ConnectError: If the connection attempt fails.
    """
    family, socktype, proto, sockaddr = resolve_address(addr)

    sock = socket.socket(family, socktype, proto)
    try:
        sock.settimeout(connect_timeout)
        sock.connect(sockaddr)
        # writes block until the kernel takes the bytes
        sock.settimeout(None)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    except OSError as exc:
        sock.close()
        raise ConnectError(f"dial tcp {addr}: {exc}") from exc

    logger.info("Connected to %s", addr)
    return TCPTransport(sock, addr)
