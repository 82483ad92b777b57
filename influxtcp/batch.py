"""Ordered batch of points sharing one timestamp precision."""

from typing import Iterable

from influxtcp.point import Point
from influxtcp.precision import parse_precision


class BatchPoints:
    """Points collected for a single write, in insertion order."""

    def __init__(self, precision: str = "ns"):
        if not precision:
            precision = "ns"
        # fail early on a tag the writer could not use for rounding
        parse_precision(precision)
        self._precision = precision
        self._points: list[Point] = []

    @property
    def precision(self) -> str:
        return self._precision

    @property
    def points(self) -> list[Point]:
        return list(self._points)

    def add_point(self, point: Point):
        self._points.append(point)

    def add_points(self, points: Iterable[Point]):
        self._points.extend(points)

    def __len__(self) -> int:
        return len(self._points)
