"""Line-protocol point: encoding, size accounting, rounding and splitting."""

import math
from datetime import datetime, timezone

from influxtcp.errors import PointError
from influxtcp.precision import MICROSECOND, SECOND, round_time

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_MEASUREMENT_ESCAPES = str.maketrans({",": "\\,", " ": "\\ "})
_KEY_ESCAPES = str.maketrans({",": "\\,", "=": "\\=", " ": "\\ "})
_STRING_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"'})


def _to_nanoseconds(value) -> int | None:
    """Normalize a point timestamp to epoch nanoseconds."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - EPOCH
        return (delta.days * 86400 + delta.seconds) * SECOND + delta.microseconds * MICROSECOND
    if isinstance(value, bool) or not isinstance(value, int):
        raise PointError(
            f"time must be None, int nanoseconds or datetime, got {type(value).__name__}"
        )
    return value


def encode_field_value(value) -> str:
    """Render one field value in line-protocol syntax."""
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise PointError(f"integer field value {value} overflows int64")
        return f"{value}i"
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise PointError(f"{value} is an unsupported field value")
        return repr(value)
    if isinstance(value, str):
        if "\n" in value:
            raise PointError("string field value must not contain a newline")
        return '"' + value.translate(_STRING_ESCAPES) + '"'
    raise PointError(f"unsupported field value type {type(value).__name__}")


def _check_no_newline(kind: str, value: str):
    # a newline terminates the record on the wire
    if "\n" in value:
        raise PointError(f"{kind} {value!r} must not contain a newline")


def _encode_key(name: str, tags: dict[str, str]) -> bytes:
    parts = [name.translate(_MEASUREMENT_ESCAPES)]
    for key in sorted(tags):
        parts.append(f"{key.translate(_KEY_ESCAPES)}={tags[key].translate(_KEY_ESCAPES)}")
    return ",".join(parts).encode("utf-8")


class Point:
    """A single measurement rendered as an InfluxDB line-protocol record.

    Tags and fields are sorted by key. Tags with empty values are dropped.
    ``time`` is epoch nanoseconds; None leaves the timestamp off the line
    so the server assigns one on receipt.
    """

    def __init__(
        self,
        name: str,
        tags: dict | None = None,
        fields: dict | None = None,
        time=None,
    ):
        if not name:
            raise PointError("point measurement name must not be empty")
        _check_no_newline("measurement", name)
        if not fields:
            raise PointError(f"point {name!r} must have at least one field")

        clean_tags: dict[str, str] = {}
        for key, value in (tags or {}).items():
            if not key:
                raise PointError(f"point {name!r} has an empty tag key")
            value = str(value)
            _check_no_newline("tag key", key)
            _check_no_newline("tag value", value)
            if value:
                clean_tags[key] = value

        encoded = []
        for key in sorted(fields):
            if not key:
                raise PointError(f"point {name!r} has an empty field key")
            _check_no_newline("field key", key)
            value = fields[key]
            piece = f"{key.translate(_KEY_ESCAPES)}={encode_field_value(value)}"
            encoded.append((key, value, piece.encode("utf-8")))

        self._name = name
        self._tags = clean_tags
        self._key = _encode_key(name, clean_tags)
        self._fields = encoded
        self._time = _to_nanoseconds(time)

    @classmethod
    def _derive(cls, parent: "Point", fields: list) -> "Point":
        """Build a sub-point sharing *parent*'s key and timestamp."""
        point = cls.__new__(cls)
        point._name = parent._name
        point._tags = parent._tags
        point._key = parent._key
        point._fields = fields
        point._time = parent._time
        return point

    @property
    def name(self) -> str:
        return self._name

    @property
    def tags(self) -> dict[str, str]:
        return dict(self._tags)

    @property
    def fields(self) -> dict:
        return {key: value for key, value, _ in self._fields}

    @property
    def time(self) -> int | None:
        return self._time

    def round(self, unit: int) -> None:
        """Round the timestamp in place to the nearest multiple of *unit* ns."""
        if self._time is not None:
            self._time = round_time(self._time, unit)

    def string_size(self) -> int:
        """Byte length of the encoded line, without a trailing newline."""
        size = len(self._key) + 1
        size += sum(len(piece) for _, _, piece in self._fields)
        size += len(self._fields) - 1
        if self._time is not None:
            size += 1 + len(str(self._time))
        return size

    def append_string(self, buf: bytearray) -> bytearray:
        """Append the encoded line (no newline) to *buf* and return it."""
        buf += self._key
        buf += b" "
        buf += b",".join(piece for _, _, piece in self._fields)
        if self._time is not None:
            buf += b" "
            buf += str(self._time).encode("ascii")
        return buf

    def split(self, max_size: int) -> list["Point"]:
        """Partition the fields into sub-points of at most *max_size* bytes.

        Points without a timestamp, or that already fit, come back as
        ``[self]``. Fields are never cut, so a single field wider than the
        budget still produces an oversized sub-point.
        """
        if self._time is None or self.string_size() <= max_size:
            return [self]

        # key, timestamp and the two separating spaces are repeated per sub-point
        budget = max_size - (len(self._key) + len(str(self._time)) + 2)

        groups = []
        current: list = []
        current_len = 0
        for field in self._fields:
            piece_len = len(field[2])
            length = current_len + 1 + piece_len if current else piece_len
            if current and length > budget:
                groups.append(current)
                current = [field]
                current_len = piece_len
            else:
                current.append(field)
                current_len = length
        groups.append(current)

        return [Point._derive(self, group) for group in groups]

    def to_bytes(self) -> bytes:
        return bytes(self.append_string(bytearray()))

    def __str__(self) -> str:
        return self.to_bytes().decode("utf-8")

    def __repr__(self) -> str:
        return f"Point({str(self)!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()
