"""Geometric value objects passed to Canvas.fill / Canvas.stroke.

The shapes are flat, mutually exclusive dataclasses; none derives from
another, so dispatch never depends on check order. Only :class:`Polygon`
is mutable (it accumulates vertices after construction).

Angles are degrees, 0 at three o'clock, increasing clockwise, matching the
raster engine.
"""

from __future__ import annotations

from collections.abc import Sequence as _SequenceABC
from numbers import Real
from dataclasses import dataclass
from typing import Any, List, Tuple, Union

from .errors import PositionFormatError


@dataclass(frozen=True, slots=True)
class Point:
    x: int
    y: int

    def translated(self, delta: "Delta") -> "Point":
        """Return a new point shifted by *delta*."""
        return Point(self.x + delta.delta_x, self.y + delta.delta_y)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass(frozen=True, slots=True)
class Delta:
    """Relative displacement.

    With ``Canvas.move`` it shifts the pen. With ``fill``/``stroke`` the pair
    is taken as the second rectangle corner, the pen being the first.
    """

    delta_x: int
    delta_y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.delta_x, self.delta_y)


@dataclass(frozen=True, slots=True)
class Circle:
    center: Point
    radius: int

    def bbox(self) -> Tuple[int, int, int, int]:
        return _bbox(self.center, self.radius, self.radius)


@dataclass(frozen=True, slots=True)
class Ellipse:
    center: Point
    radius_x: int
    radius_y: int

    def bbox(self) -> Tuple[int, int, int, int]:
        return _bbox(self.center, self.radius_x, self.radius_y)


@dataclass(frozen=True, slots=True)
class Rectangle:
    point1: Point
    point2: Point

    def bbox(self) -> Tuple[int, int, int, int]:
        return corners_box(self.point1.as_tuple(), self.point2.as_tuple())


@dataclass(frozen=True, slots=True)
class Arc:
    """Elliptical arc segment; fill closes it with a chord."""

    center: Point
    radius_x: int
    radius_y: int
    start: float
    end: float

    def bbox(self) -> Tuple[int, int, int, int]:
        return _bbox(self.center, self.radius_x, self.radius_y)


@dataclass(frozen=True, slots=True)
class ArcPie:
    """Elliptical arc closed through the centre (pie slice)."""

    center: Point
    radius_x: int
    radius_y: int
    start: float
    end: float

    def bbox(self) -> Tuple[int, int, int, int]:
        return _bbox(self.center, self.radius_x, self.radius_y)


class Polygon:
    """Vertex list seeded with a start vertex.

    Vertices are given as Points or ``(x, y)`` pairs; named positions are
    not resolved here since a polygon is not bound to a canvas.
    """

    __slots__ = ("_vertices",)

    def __init__(self, start: Any) -> None:
        self._vertices: List[Point] = [coerce_point(start)]

    def __repr__(self) -> str:
        return f"Polygon({self._vertices!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return self._vertices == other._vertices

    def add_vertex(self, vertex: Any) -> "Polygon":
        self._vertices.append(coerce_point(vertex))
        return self

    @property
    def vertices(self) -> List[Point]:
        return list(self._vertices)

    def vertex_num(self) -> int:
        return len(self._vertices)

    def as_raw_array(self) -> List[int]:
        """Flattened ``[x0, y0, x1, y1, ...]`` coordinate list."""
        raw: List[int] = []
        for v in self._vertices:
            raw.extend((v.x, v.y))
        return raw


Shape = Union[Delta, Circle, Ellipse, Polygon, Rectangle, Arc, ArcPie]


def is_pair(value: Any) -> bool:
    """True for a two-element ordered sequence that is not a string."""
    return (
        isinstance(value, _SequenceABC)
        and not isinstance(value, (str, bytes))
        and len(value) == 2
    )


def _coordinate(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise PositionFormatError(f"Coordinate must be a number: {value!r}")
    return int(value)


def coerce_point(value: Any) -> Point:
    """Resolve a Point or an ``(x, y)`` pair of numbers, truncated to int."""
    if isinstance(value, Point):
        return value
    if is_pair(value):
        x, y = value
        return Point(_coordinate(x), _coordinate(y))
    raise PositionFormatError(f"Position format not recognized: {value!r}")


def corners_box(
    p1: Tuple[int, int], p2: Tuple[int, int]
) -> Tuple[int, int, int, int]:
    """Normalize two arbitrary corners into ``(x0, y0, x1, y1)`` with x0<=x1."""
    x0, x1 = sorted((p1[0], p2[0]))
    y0, y1 = sorted((p1[1], p2[1]))
    return (x0, y0, x1, y1)


def _bbox(center: Point, rx: int, ry: int) -> Tuple[int, int, int, int]:
    rx = max(0, rx)
    ry = max(0, ry)
    return (center.x - rx, center.y - ry, center.x + rx, center.y + ry)
