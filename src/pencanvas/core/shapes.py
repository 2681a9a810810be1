"""Shape kinds and their constructors.

Each kind has one constructor with an exact parameter list; ``build_shape``
routes a :class:`ShapeKind` to it. Position arguments must already be
resolved to :class:`Point` (``Canvas.factory`` does that) except for the
polygon start, which accepts a Point or an ``(x, y)`` pair.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict

from .errors import UnknownShapeKindError
from .geometry import Arc, ArcPie, Circle, Ellipse, Point, Polygon, Rectangle


class ShapeKind(str, Enum):
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    POLYGON = "polygon"
    RECTANGLE = "rectangle"
    ARC = "arc"
    ARC_PIE = "arc_pie"

    @classmethod
    def coerce(cls, kind: Any) -> "ShapeKind":
        if isinstance(kind, cls):
            return kind
        try:
            return cls(kind)
        except ValueError:
            raise UnknownShapeKindError(f"Unknown shape kind: {kind!r}") from None


def make_circle(center: Point, radius: int) -> Circle:
    return Circle(center, radius)


def make_ellipse(center: Point, radius_x: int, radius_y: int) -> Ellipse:
    return Ellipse(center, radius_x, radius_y)


def make_polygon(start: Any) -> Polygon:
    return Polygon(start)


def make_rectangle(point1: Point, point2: Point) -> Rectangle:
    return Rectangle(point1, point2)


def make_arc(
    center: Point, radius_x: int, radius_y: int, start: float, end: float
) -> Arc:
    return Arc(center, radius_x, radius_y, start, end)


def make_arc_pie(
    center: Point, radius_x: int, radius_y: int, start: float, end: float
) -> ArcPie:
    return ArcPie(center, radius_x, radius_y, start, end)


SHAPE_BUILDERS: Dict[ShapeKind, Callable[..., Any]] = {
    ShapeKind.CIRCLE: make_circle,
    ShapeKind.ELLIPSE: make_ellipse,
    ShapeKind.POLYGON: make_polygon,
    ShapeKind.RECTANGLE: make_rectangle,
    ShapeKind.ARC: make_arc,
    ShapeKind.ARC_PIE: make_arc_pie,
}


def build_shape(kind: ShapeKind | str, position: Any, *args: Any) -> Any:
    """Construct a shape of *kind* at *position* with kind-specific *args*.

    Raises UnknownShapeKindError for kinds outside :class:`ShapeKind` and
    TypeError when *args* does not match the constructor.
    """
    builder = SHAPE_BUILDERS[ShapeKind.coerce(kind)]
    return builder(position, *args)
