"""Canvas session: a Pillow image plus named colours, positions and a pen.

All pixel work is delegated to Pillow (``Image``/``ImageDraw``/``ImageFont``);
this module keeps the convenience state and translates arguments.

Example::

    from pencanvas import Canvas, Point, Rectangle

    with Canvas(100, 100) as c:
        c.build_palette({}).set_color("black").move_to([10, 10])
        c.fill(Rectangle(Point(10, 10), Point(50, 50)))
        c.save_as_png("/tmp/out.png")

Colour handles are RGBA tuples on true-colour canvases and palette indexes
on palette canvases. Alpha values use the GD scale (0 opaque..127
transparent).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from pencanvas.core.color import Color, gd_alpha_to_pillow
from pencanvas.core.errors import (
    CanvasClosedError,
    PenStateError,
    PositionFormatError,
    ResourceAllocationError,
    UnrecognizedShapeError,
    UnregisteredNameError,
)
from pencanvas.core.geometry import (
    Arc,
    ArcPie,
    Circle,
    Delta,
    Ellipse,
    Point,
    Polygon,
    Rectangle,
    Shape,
    coerce_point,
    corners_box,
    is_pair,
)
from pencanvas.core.shapes import ShapeKind, build_shape
from pencanvas.settings.schema import Settings
from pencanvas.settings.store import SettingsStore
from pencanvas.text.fonts import FontRepository, is_font_file
from pencanvas.text.layout import Shadow, TextTools, render_text_mask

logger = logging.getLogger(__name__)

ORIGIN = "origin"
LAST_POS = "last"
TRANSPARENT = "transparent"

ColorHandle = Union[Tuple[int, int, int, int], int]


@dataclass(slots=True)
class Pen:
    """Current drawing state read by every draw call."""

    position: Point = field(default_factory=lambda: Point(0, 0))
    color: Optional[ColorHandle] = None
    thickness: int = 1
    font: Optional[str] = None


# --- Shape handlers ------------------------------------------------------
# Each handler receives the draw target, the pen, the shape and the ink.
_Handler = Callable[[ImageDraw.ImageDraw, Pen, Any, ColorHandle], None]


def _fill_delta(
    draw: ImageDraw.ImageDraw, pen: Pen, d: Delta, ink: ColorHandle
) -> None:
    draw.rectangle(corners_box(pen.position.as_tuple(), d.as_tuple()), fill=ink)


def _fill_polygon(
    draw: ImageDraw.ImageDraw, pen: Pen, p: Polygon, ink: ColorHandle
) -> None:
    if p.vertex_num() < 3:
        raise ValueError("a polygon needs at least 3 vertices")
    draw.polygon([v.as_tuple() for v in p.vertices], fill=ink)


def _fill_box(
    draw: ImageDraw.ImageDraw, pen: Pen, s: Rectangle, ink: ColorHandle
) -> None:
    draw.rectangle(s.bbox(), fill=ink)


def _fill_ellipse(
    draw: ImageDraw.ImageDraw, pen: Pen, s: Union[Circle, Ellipse], ink: ColorHandle
) -> None:
    draw.ellipse(s.bbox(), fill=ink)


def _fill_arc_pie(
    draw: ImageDraw.ImageDraw, pen: Pen, a: ArcPie, ink: ColorHandle
) -> None:
    draw.pieslice(a.bbox(), a.start, a.end, fill=ink)


def _fill_arc(draw: ImageDraw.ImageDraw, pen: Pen, a: Arc, ink: ColorHandle) -> None:
    draw.chord(a.bbox(), a.start, a.end, fill=ink)


def _stroke_arc(
    draw: ImageDraw.ImageDraw, pen: Pen, a: Union[Arc, ArcPie], ink: ColorHandle
) -> None:
    draw.arc(a.bbox(), a.start, a.end, fill=ink, width=max(1, pen.thickness))


def _stroke_circle(
    draw: ImageDraw.ImageDraw, pen: Pen, c: Circle, ink: ColorHandle
) -> None:
    # Full pie slice: renders a filled disc
    draw.pieslice(c.bbox(), 0, 360, fill=ink)


def _stroke_ellipse(
    draw: ImageDraw.ImageDraw, pen: Pen, e: Ellipse, ink: ColorHandle
) -> None:
    # Outer then inner ellipse in the same colour; no subtraction
    draw.ellipse(e.bbox(), fill=ink)
    inner = Ellipse(e.center, e.radius_x - pen.thickness, e.radius_y - pen.thickness)
    draw.ellipse(inner.bbox(), fill=ink)


def _stroke_unsupported(
    draw: ImageDraw.ImageDraw, pen: Pen, s: Shape, ink: ColorHandle
) -> None:
    logger.debug(
        "stroke has no outline primitive for %s; nothing drawn", type(s).__name__
    )


_FILLERS: Dict[type, _Handler] = {
    Delta: _fill_delta,
    Polygon: _fill_polygon,
    Rectangle: _fill_box,
    Ellipse: _fill_ellipse,
    Circle: _fill_ellipse,
    ArcPie: _fill_arc_pie,
    Arc: _fill_arc,
}

_STROKERS: Dict[type, _Handler] = {
    Delta: _fill_delta,
    ArcPie: _stroke_arc,
    Arc: _stroke_arc,
    Circle: _stroke_circle,
    Ellipse: _stroke_ellipse,
    Rectangle: _stroke_unsupported,
    Polygon: _stroke_unsupported,
}


class Canvas:
    """A drawing session over one Pillow image.

    Parameters
    ----------
    width, height: Surface size in pixels.
    true_color: RGBA surface with alpha saving when true, palette ("P")
        surface otherwise. Both start opaque black.
    font_repository: Resolves short font names for :meth:`set_font`.
    text_tools: Text fitting collaborator used by :meth:`write_text`.
    settings: Defaults; loaded from :class:`SettingsStore` when omitted.

    Mutators return the canvas so calls can be chained. The image is
    released by :meth:`close` or on leaving a ``with`` block.
    """

    def __init__(
        self,
        width: int,
        height: int,
        true_color: bool = True,
        *,
        font_repository: FontRepository | None = None,
        text_tools: TextTools | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings if settings is not None else SettingsStore.load()
        self.width = int(width)
        self.height = int(height)
        self._colors: Dict[str, ColorHandle] = {}
        self._positions: Dict[str, Point] = {}
        # palette index -> opacity, for translucent palette entries
        self._palette_alpha: Dict[int, int] = {}
        self._font_repository = (
            font_repository
            if font_repository is not None
            else FontRepository.from_settings(self._settings)
        )
        self._text_tools = (
            text_tools if text_tools is not None else TextTools(self._settings)
        )
        self.pen = Pen()
        self.set_origin(Point(0, 0))
        # Resolved before allocation so a bad font cannot leak the image
        if self._settings.default_font:
            self.set_font(self._settings.default_font)

        try:
            if true_color:
                img = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 255))
            else:
                img = Image.new("P", (self.width, self.height), (0, 0, 0))
        except (ValueError, MemoryError) as e:
            raise ResourceAllocationError(
                f"cannot allocate {width}x{height} surface: {e}"
            ) from e
        self._image: Image.Image | None = img
        self._save_alpha = bool(true_color and self._settings.save_alpha)
        self._blending = bool(true_color and self._settings.alpha_blending)
        logger.debug(
            "canvas %dx%d mode=%s created", self.width, self.height, img.mode
        )

    @classmethod
    def create(
        cls, width: int, height: int, true_color: bool = True, **kwargs: Any
    ) -> "Canvas":
        return cls(width, height, true_color, **kwargs)

    # --- lifecycle -------------------------------------------------------
    @property
    def image(self) -> Image.Image:
        """The live Pillow image; raises once the canvas is closed."""
        if self._image is None:
            raise CanvasClosedError("canvas image was already released")
        return self._image

    def _require_open(self) -> None:
        if self._image is None:
            raise CanvasClosedError("canvas image was already released")

    @property
    def closed(self) -> bool:
        return self._image is None

    def close(self) -> None:
        if self._image is None:
            return
        self._image.close()
        self._image = None
        logger.debug("canvas %dx%d released", self.width, self.height)

    def __enter__(self) -> "Canvas":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:  # pragma: no cover
        state = "closed" if self.closed else self.image.mode
        return f"Canvas({self.width}x{self.height}, {state})"

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def is_true_color(self) -> bool:
        return self.image.mode == "RGBA"

    # --- fonts -----------------------------------------------------------
    @property
    def font_repository(self) -> FontRepository:
        return self._font_repository

    @font_repository.setter
    def font_repository(self, repository: FontRepository) -> None:
        self._font_repository = repository

    def set_font(self, font: str | Path) -> "Canvas":
        """Select a font by ``.ttf`` path or by repository name."""
        if is_font_file(str(font)):
            self.pen.font = str(font)
        else:
            self.pen.font = self._font_repository.get_font_file(str(font))
        return self

    # --- positions -------------------------------------------------------
    def set_origin(self, origin: Point) -> "Canvas":
        self.pen.position = origin
        self.create_position(ORIGIN, origin)
        return self

    def move(self, delta: Delta) -> "Canvas":
        """Translate the pen by *delta* and record the result as ``last``."""
        if not isinstance(delta, Delta):
            if not is_pair(delta):
                raise PositionFormatError(f"Delta format not recognized: {delta!r}")
            delta = Delta(*coerce_point(delta).as_tuple())
        self.pen.position = self.pen.position.translated(delta)
        self.create_position(LAST_POS, self.pen.position)
        return self

    def move_to(self, position: Any) -> "Canvas":
        self.pen.position = self.to_point(position)
        self.create_position(LAST_POS, self.pen.position)
        return self

    def to_point(self, whatever: Any) -> Point:
        """Resolve a Point, a registered position name or an ``(x, y)`` pair."""
        if isinstance(whatever, Point):
            return whatever
        if isinstance(whatever, str):
            return self.get_position(whatever)
        return coerce_point(whatever)

    def create_position(self, name: str, point: Point) -> "Canvas":
        self._positions[name] = point
        return self

    def get_position(self, name: str) -> Point:
        try:
            return self._positions[name]
        except KeyError:
            raise UnregisteredNameError("Position", name) from None

    # --- colours ---------------------------------------------------------
    def create_color(
        self, name: str, color: Color | str, alpha: int | None = None
    ) -> "Canvas":
        """Allocate *color* under *name*; *alpha* is 0 (opaque)..127."""
        c = Color.parse(color)
        image = self.image
        if image.mode == "P":
            opacity = 255 if alpha is None else gd_alpha_to_pillow(alpha)
            try:
                handle: ColorHandle = self._allocate_index(image, c.rgb(), opacity)
            except ValueError as e:
                raise ResourceAllocationError(
                    f"cannot allocate colour {name!r}: {e}"
                ) from e
        else:
            handle = c.rgba(alpha)
        self._colors[name] = handle
        logger.debug("colour %s -> %s", name, handle)
        return self

    def _allocate_index(
        self, image: Image.Image, rgb: Tuple[int, int, int], opacity: int
    ) -> int:
        """Return a palette index for *rgb* at *opacity* (0..255).

        Opaque colours may share an existing opaque entry. A translucent
        colour always gets its own entry, and its opacity is written to the
        per-index ``transparency`` table that PNG output stores as tRNS.
        """
        if opacity == 255:
            index = image.palette.getcolor(rgb, image)
            if self._palette_alpha.get(index, 255) == 255:
                return index
        entries = image.getpalette() or []
        index = len(entries) // 3
        if index >= 256:
            raise ValueError("cannot allocate more than 256 colors")
        image.putpalette(entries + list(rgb))
        if opacity != 255:
            self._palette_alpha[index] = opacity
            image.info["transparency"] = bytes(
                self._palette_alpha.get(i, 255) for i in range(index + 1)
            )
        logger.debug("palette entry %d allocated for %s", index, rgb)
        return index

    def create_colors(
        self, colors: Mapping[str, Color | str], alpha: int | None = None
    ) -> "Canvas":
        for name, color in colors.items():
            self.create_color(name, color, alpha)
        return self

    def get_color(self, name: str) -> ColorHandle:
        try:
            return self._colors[name]
        except KeyError:
            raise UnregisteredNameError("Color", name) from None

    def set_color(self, name: str) -> "Canvas":
        self.pen.color = self.get_color(name)
        return self

    def build_palette(
        self, colors: Mapping[str, Color | str] | None = None, alpha: int | None = None
    ) -> "Canvas":
        """Register *colors* plus the default black/white and ``transparent``."""
        palette: Dict[str, Color | str] = dict(colors or {})
        for name, value in self._settings.palette_defaults.items():
            palette.setdefault(name, value)
        self.create_color(
            TRANSPARENT, Color.from_hex("fff"), self._settings.transparent_alpha
        )
        return self.create_colors(palette, alpha)

    def thickness(self, thickness: int) -> "Canvas":
        t = int(thickness)
        if t < 0:
            raise ValueError("thickness must be >= 0")
        self.pen.thickness = t
        return self

    # --- alpha flags -----------------------------------------------------
    def save_alpha_blending(self, status: bool) -> "Canvas":
        """Keep (True) or drop (False) the alpha channel in saved PNGs."""
        self._require_open()
        self._save_alpha = bool(status)
        return self

    def alpha_blending(self, status: bool) -> "Canvas":
        """Composite translucent ink over pixels (True) or replace them."""
        self._require_open()
        self._blending = bool(status)
        return self

    # --- drawing ---------------------------------------------------------
    def _ink(self) -> ColorHandle:
        if self.pen.color is None:
            raise PenStateError("no colour selected; call set_color first")
        return self.pen.color

    @contextmanager
    def _drawing(self, ink: ColorHandle) -> Iterator[ImageDraw.ImageDraw]:
        image = self.image
        if self._blending and isinstance(ink, tuple) and ink[3] < 255:
            layer = Image.new("RGBA", image.size, (0, 0, 0, 0))
            yield ImageDraw.Draw(layer)
            image.alpha_composite(layer)
        else:
            yield ImageDraw.Draw(image)

    def fill(self, shape: Shape | None = None) -> "Canvas":
        """Fill *shape* with the pen colour; flood-fill at the pen when None."""
        ink = self._ink()
        if shape is None:
            ImageDraw.floodfill(self.image, self.pen.position.as_tuple(), ink)
            return self
        handler = _FILLERS.get(type(shape))
        if handler is None:
            raise UnrecognizedShapeError(
                f'Object not recognized "{type(shape).__name__}" in Canvas.fill'
            )
        with self._drawing(ink) as draw:
            handler(draw, self.pen, shape, ink)
        return self

    def stroke(self, shape: Shape) -> "Canvas":
        ink = self._ink()
        handler = _STROKERS.get(type(shape))
        if handler is None:
            raise UnrecognizedShapeError(
                f'Object not recognized "{type(shape).__name__}" in Canvas.stroke'
            )
        with self._drawing(ink) as draw:
            handler(draw, self.pen, shape, ink)
        return self

    def factory(self, kind: ShapeKind | str, position: Any, *args: Any) -> Shape:
        """Build a shape, resolving positions through :meth:`to_point`.

        circle: radius; ellipse: radius_x, radius_y; rectangle: second
        position; arc / arc_pie: radius_x, radius_y, start, end. A polygon
        takes only its start vertex, passed through unresolved.
        """
        k = ShapeKind.coerce(kind)
        if k is not ShapeKind.POLYGON:
            position = self.to_point(position)
        if k is ShapeKind.RECTANGLE and args:
            args = (self.to_point(args[0]),) + tuple(args[1:])
        return build_shape(k, position, *args)

    # --- text ------------------------------------------------------------
    def write_text(
        self,
        w: int,
        h: int,
        text: str,
        shadow: Shadow | None = None,
        padding: Tuple[int, ...] | list[int] = (),
        angle: float = 0,
    ) -> "Canvas":
        """Fit *text* into a ``w``x``h`` box at the pen and draw it centred.

        With a *shadow*, the text is first drawn in the shadow colour shifted
        diagonally by ``int(font_size * shadow.offset)`` pixels; the pen
        colour is restored afterwards.
        """
        font = self.pen.font
        if font is None:
            raise PenStateError("no font selected; call set_font first")
        self._ink()
        info = self._text_tools.enclose_text(text, w, h, font, padding, angle)
        top, right, bottom, left = info.paddings
        pos = self.pen.position
        start_x = int(pos.x + right + (w - right - left - info.text_width) / 2)
        start_y = int(pos.y + top + (h - top - bottom + info.text_height) / 2)
        face = self._text_tools.load(font, info.font_size)

        if shadow is not None:
            prev = self.pen.color
            self.set_color(shadow.color)
            offset = int(info.font_size * shadow.offset)
            try:
                self._draw_text(start_x + offset, start_y + offset, text, face, angle)
            finally:
                self.pen.color = prev

        self._draw_text(start_x, start_y, text, face, angle)
        return self

    def _draw_text(
        self, x: int, y: int, text: str, face: ImageFont.FreeTypeFont, angle: float
    ) -> None:
        ink = self._ink()
        if angle % 360 == 0:
            with self._drawing(ink) as draw:
                draw.text((x, y), text, fill=ink, font=face, anchor="ls")
            return

        mask, (ox, oy) = render_text_mask(text, face, angle)
        box = (x - ox, y - oy)
        image = self.image
        if image.mode == "P":
            # Palette indexes cannot be interpolated
            image.paste(ink, box, mask.point(lambda v: 255 if v >= 128 else 0))
        elif self._blending:
            layer = Image.new("RGBA", image.size, (0, 0, 0, 0))
            layer.paste(ink, box, mask)
            image.alpha_composite(layer)
        else:
            image.paste(ink, box, mask)

    # --- output ----------------------------------------------------------
    def save_as_png(self, path: str | Path) -> bool:
        """Encode the image to *path*; False when writing fails."""
        image = self.image
        out = image
        if image.mode == "RGBA" and not self._save_alpha:
            out = image.convert("RGB")
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            out.save(
                path, format="PNG", compress_level=self._settings.png_compress_level
            )
        except (OSError, ValueError) as e:
            logger.warning("failed to write PNG %s: %s", path, e)
            return False
        logger.debug("saved %s", path)
        return True
