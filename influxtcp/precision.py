"""Timestamp precision tags and rounding."""

from influxtcp.errors import PrecisionError

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

PRECISION_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}


def parse_precision(tag: str) -> int:
    """Return the length of one *tag* unit in nanoseconds.

    Raises:
        PrecisionError: If *tag* is not a known duration unit.
    """
    try:
        return PRECISION_UNITS[tag]
    except (KeyError, TypeError):
        raise PrecisionError(f"unknown precision {tag!r}") from None


def round_time(time_ns: int, unit: int) -> int:
    """Round *time_ns* to the nearest multiple of *unit*.

    Halfway values round away from zero. A non-positive *unit* leaves the
    value unchanged.
    """
    if unit <= 0:
        return time_ns
    remainder = time_ns % unit
    if remainder + remainder < unit:
        return time_ns - remainder
    if remainder + remainder == unit and time_ns < 0:
        return time_ns - remainder
    return time_ns + unit - remainder
