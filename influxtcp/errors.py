"""Exception hierarchy for the TCP point writer."""


class InfluxTCPError(Exception):
    """Base class for every error raised by this package."""


class AddressResolutionError(InfluxTCPError):
    """Raised when a target address is malformed or cannot be resolved."""


class ConnectError(InfluxTCPError):
    """Raised when the TCP dial to a resolved address fails."""


class TransportError(InfluxTCPError):
    """Raised when the underlying connection misbehaves."""


class TransportWriteError(TransportError):
    """Raised when bytes could not be written to the connection."""


class UnsupportedOperationError(InfluxTCPError):
    """Raised by operations this transport does not implement."""


class PointError(InfluxTCPError, ValueError):
    """Raised when a point cannot be encoded as line protocol."""


class PrecisionError(InfluxTCPError, ValueError):
    """Raised for an unknown timestamp precision tag."""
