from __future__ import annotations

from typing import Callable

import hypothesis.strategies as st
import pytest
from hypothesis import given

from pencanvas import (
    Canvas,
    CanvasClosedError,
    Circle,
    Color,
    Delta,
    PositionFormatError,
    Rectangle,
    UnknownShapeKindError,
    UnregisteredNameError,
)
from pencanvas.core.geometry import Arc, ArcPie, Ellipse, Point, Polygon
from pencanvas.settings.schema import Settings

coord = st.integers(min_value=-500, max_value=500)
name = st.text(min_size=1, max_size=12).filter(lambda s: s not in ("origin", "last"))


def _fresh() -> Canvas:
    return Canvas(10, 10, settings=Settings(font_dirs=[], font_aliases={}))


def test_new_canvas_pen_at_origin(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas(20, 30)
    assert c.size == (20, 30)
    assert c.is_true_color()
    assert c.pen.position == Point(0, 0)
    assert c.get_position("origin") == Point(0, 0)
    assert c.pen.color is None
    assert c.pen.thickness == 1


@given(n=name)
def test_unregistered_names_fail(n: str) -> None:
    c = _fresh()
    try:
        with pytest.raises(UnregisteredNameError):
            c.set_color(n)
        with pytest.raises(UnregisteredNameError):
            c.get_position(n)
    finally:
        c.close()


def test_unregistered_name_is_a_key_error(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    with pytest.raises(KeyError) as ei:
        c.set_color("nope")
    assert "nope" in str(ei.value)


def test_create_then_select_color(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    c.create_color("accent", Color.from_hex("#123456"))
    c.set_color("accent")
    assert c.pen.color == c.get_color("accent") == (0x12, 0x34, 0x56, 255)


def test_create_color_with_alpha_and_overwrite(
    make_canvas: Callable[..., Canvas]
) -> None:
    c = make_canvas()
    c.create_color("x", "fff", alpha=127)
    assert c.get_color("x") == (255, 255, 255, 0)
    c.create_color("x", "000")
    assert c.get_color("x") == (0, 0, 0, 255)
    with pytest.raises(ValueError):
        c.create_color("y", "000", alpha=200)


def test_create_colors_applies_alpha_to_all(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    c.create_colors({"a": "f00", "b": "0f0"}, alpha=127)
    assert c.get_color("a")[3] == 0
    assert c.get_color("b")[3] == 0


def test_build_palette_empty_registers_defaults(
    make_canvas: Callable[..., Canvas]
) -> None:
    c = make_canvas()
    c.build_palette({})
    assert c.get_color("black") == (0, 0, 0, 255)
    assert c.get_color("white") == (255, 255, 255, 255)
    assert c.get_color("transparent") == (255, 255, 255, 0)


def test_build_palette_keeps_caller_black(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    c.build_palette({"black": "111", "sky": "0af"})
    assert c.get_color("black") == (0x11, 0x11, 0x11, 255)
    assert c.get_color("sky") == (0, 0xAA, 0xFF, 255)
    assert c.get_color("white") == (255, 255, 255, 255)


@given(x=coord, y=coord)
def test_to_point_pair_and_identity(x: int, y: int) -> None:
    c = _fresh()
    try:
        p = Point(x, y)
        assert c.to_point(p) is p
        assert c.to_point([x, y]) == Point(x, y)
        assert c.to_point((x, y)) == Point(x, y)
    finally:
        c.close()


def test_to_point_origin_follows_set_origin(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    c.set_origin(Point(7, 9))
    assert c.to_point("origin") == Point(7, 9)
    assert c.pen.position == Point(7, 9)


@pytest.mark.parametrize(
    "bad", [(1, 2, 3), [1], 12, None, {"x": 1, "y": 2}, ["a", "b"], (1, None)]
)
def test_to_point_rejects(make_canvas: Callable[..., Canvas], bad: object) -> None:
    c = make_canvas()
    with pytest.raises(PositionFormatError):
        c.to_point(bad)
    with pytest.raises(PositionFormatError):
        c.move_to(bad)


def test_to_point_truncates_to_int(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    p = c.to_point((1.9, 2.2))
    assert p == Point(1, 2)
    assert isinstance(p.x, int) and isinstance(p.y, int)
    with pytest.raises(PositionFormatError):
        c.move(["1", "2"])


@given(sx=coord, sy=coord, dx=coord, dy=coord)
def test_move_records_last(sx: int, sy: int, dx: int, dy: int) -> None:
    c = _fresh()
    try:
        c.move_to([sx, sy]).move(Delta(dx, dy))
        assert c.get_position("last") == Point(sx + dx, sy + dy)
        assert c.pen.position == Point(sx + dx, sy + dy)
        # the origin is not dragged along with the pen
        assert c.get_position("origin") == Point(0, 0)
    finally:
        c.close()


def test_move_to_named_position(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    c.create_position("corner", Point(90, 90))
    c.move_to("corner")
    assert c.pen.position == Point(90, 90)
    assert c.get_position("last") == Point(90, 90)
    with pytest.raises(UnregisteredNameError):
        c.move_to("missing")


def test_thickness(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    assert c.thickness(4) is c
    assert c.pen.thickness == 4
    with pytest.raises(ValueError):
        c.thickness(-1)


def test_factory_circle(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    circle = c.factory("circle", [5, 5], 3)
    assert circle == Circle(Point(5, 5), 3)


def test_factory_rectangle(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    rect = c.factory("rectangle", [0, 0], [10, 20])
    assert isinstance(rect, Rectangle)
    assert rect.point1 == Point(0, 0)
    assert rect.point2 == Point(10, 20)


def test_factory_resolves_named_positions(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    c.create_position("a", Point(1, 2)).create_position("b", Point(3, 4))
    assert c.factory("rectangle", "a", "b") == Rectangle(Point(1, 2), Point(3, 4))
    assert c.factory("ellipse", "a", 5, 6) == Ellipse(Point(1, 2), 5, 6)
    assert c.factory("arc_pie", "b", 5, 6, 10, 20) == ArcPie(Point(3, 4), 5, 6, 10, 20)
    assert c.factory("arc", "b", 5, 6, 10, 20) == Arc(Point(3, 4), 5, 6, 10, 20)


def test_factory_polygon_takes_raw_start(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    poly = c.factory("polygon", (3, 3))
    assert isinstance(poly, Polygon)
    assert poly.vertices == [Point(3, 3)]
    # names are not resolved for polygons
    with pytest.raises(PositionFormatError):
        c.factory("polygon", "origin")


def test_factory_unknown_kind(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas()
    with pytest.raises(UnknownShapeKindError):
        c.factory("star", [0, 0], 3)


def test_palette_canvas(make_canvas: Callable[..., Canvas]) -> None:
    c = make_canvas(8, 8, true_color=False)
    assert not c.is_true_color()
    c.build_palette({"red": "f00"})
    handle = c.get_color("red")
    assert isinstance(handle, int)
    c.set_color("red").fill()
    assert c.image.convert("RGBA").getpixel((4, 4)) == (255, 0, 0, 255)


def test_close_is_idempotent_and_guards_use(settings: Settings) -> None:
    c = Canvas(5, 5, settings=settings)
    c.close()
    c.close()
    assert c.closed
    with pytest.raises(CanvasClosedError):
        c.image
    with pytest.raises(CanvasClosedError):
        c.create_color("x", "fff")


def test_context_manager_releases(settings: Settings) -> None:
    with Canvas(5, 5, settings=settings) as c:
        assert not c.closed
    assert c.closed


def test_invalid_size_is_allocation_error(settings: Settings) -> None:
    from pencanvas import ResourceAllocationError

    with pytest.raises(ResourceAllocationError):
        Canvas(-1, 10, settings=settings)


def test_create_alias(settings: Settings) -> None:
    with Canvas.create(4, 3, False, settings=settings) as c:
        assert c.size == (4, 3)
        assert not c.is_true_color()
