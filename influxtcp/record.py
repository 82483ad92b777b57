"""Capabilities the batching writer needs from points and batches."""

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class Record(Protocol):
    """A single serializable time-series point.

    ``time`` is epoch nanoseconds, or None when the server should assign it.
    """

    time: int | None

    def round(self, unit: int) -> None: ...

    def string_size(self) -> int: ...

    def append_string(self, buf: bytearray) -> bytearray: ...

    def split(self, max_size: int) -> Sequence["Record"]: ...


@runtime_checkable
class Batch(Protocol):
    """An ordered collection of records sharing one precision tag."""

    @property
    def precision(self) -> str: ...

    @property
    def points(self) -> Sequence[Record]: ...
