"""Text measurement and box fitting.

``TextTools.enclose_text`` picks the largest font size whose (optionally
rotated) ink box fits a target box after padding, and reports the padding
actually applied together with the measured text extent. Canvas.write_text
uses the result to centre the glyph run; glyph rendering itself stays with
Pillow.

Padding follows CSS shorthand: ``[all]``, ``[vertical, horizontal]``,
``[top, horizontal, bottom]`` or ``[top, right, bottom, left]``, in pixels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from math import ceil, cos, floor, radians, sin
from typing import Callable, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from pencanvas.core.errors import TextLayoutError, UnknownFontError
from pencanvas.settings.schema import Settings
from pencanvas.settings.store import SettingsStore

logger = logging.getLogger(__name__)

Paddings = Tuple[int, int, int, int]


@dataclass(frozen=True, slots=True)
class Shadow:
    # name of a colour registered on the canvas
    color: str
    # fraction of the font size used as diagonal offset
    offset: float = 0.05


@dataclass(frozen=True, slots=True)
class TextBox:
    font_size: int
    # top, right, bottom, left
    paddings: Paddings
    text_width: int
    text_height: int


def normalize_padding(padding: Sequence[int]) -> Paddings:
    p = [int(v) for v in padding]
    if any(v < 0 for v in p):
        raise TextLayoutError("padding values must be >= 0")
    if len(p) == 0:
        return (0, 0, 0, 0)
    if len(p) == 1:
        return (p[0], p[0], p[0], p[0])
    if len(p) == 2:
        return (p[0], p[1], p[0], p[1])
    if len(p) == 3:
        return (p[0], p[1], p[2], p[1])
    if len(p) == 4:
        return (p[0], p[1], p[2], p[3])
    raise TextLayoutError("padding takes at most 4 values")


@lru_cache(maxsize=128)
def load_font(path: str, size_px: int) -> ImageFont.FreeTypeFont:
    """Return a cached TrueType face at *size_px*."""
    try:
        return ImageFont.truetype(path, size_px)
    except OSError as e:
        raise UnknownFontError(f"Cannot read font file {path!r}: {e}") from e


def _rotated_extent(
    bbox: Tuple[float, float, float, float], angle: float
) -> Tuple[float, float, float, float]:
    """Rotate a bbox counter-clockwise about the origin; return its bounds."""
    l, t, r, b = bbox
    if angle % 360 == 0:
        return (l, t, r, b)
    th = radians(angle)
    c, s = cos(th), sin(th)
    xs = []
    ys = []
    for x, y in ((l, t), (r, t), (l, b), (r, b)):
        xs.append(x * c + y * s)
        ys.append(-x * s + y * c)
    return (min(xs), min(ys), max(xs), max(ys))


def measure_text(
    text: str, font: ImageFont.FreeTypeFont, angle: float = 0
) -> Tuple[int, int]:
    """Width and height of the ink box of *text* rotated by *angle* degrees."""
    bbox = font.getbbox(text, anchor="ls")
    x0, y0, x1, y1 = _rotated_extent(bbox, angle)
    return (int(ceil(x1 - x0)), int(ceil(y1 - y0)))


def render_text_mask(
    text: str, font: ImageFont.FreeTypeFont, angle: float = 0
) -> Tuple[Image.Image, Tuple[int, int]]:
    """Render *text* into an ``L`` mask, rotated about its baseline origin.

    Returns the mask and the origin's pixel position inside it, so callers
    paste at ``(x - ox, y - oy)`` to put the baseline start on ``(x, y)``.
    """
    l, t, r, b = font.getbbox(text, anchor="ls")
    l, t = floor(l), floor(t)
    w = max(1, int(ceil(r)) - l)
    h = max(1, int(ceil(b)) - t)
    mask = Image.new("L", (w, h), 0)
    ox, oy = -l, -t
    ImageDraw.Draw(mask).text((ox, oy), text, fill=255, font=font, anchor="ls")
    if angle % 360 == 0:
        return mask, (ox, oy)

    rotated = mask.rotate(angle, resample=Image.Resampling.BICUBIC, expand=True)
    th = radians(angle)
    dx, dy = ox - w / 2, oy - h / 2
    nx = rotated.width / 2 + dx * cos(th) + dy * sin(th)
    ny = rotated.height / 2 - dx * sin(th) + dy * cos(th)
    return rotated, (int(round(nx)), int(round(ny)))


class TextTools:
    """Fit text into a box by searching the font size.

    Parameters
    ----------
    settings: supplies the font size search range and default padding;
        loaded from :class:`SettingsStore` when omitted.
    font_loader: ``(path, size_px) -> font``; defaults to :func:`load_font`.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        font_loader: Callable[[str, int], ImageFont.FreeTypeFont] | None = None,
    ) -> None:
        s = settings if settings is not None else SettingsStore.load()
        self.min_font_px = s.text_min_font_px
        self.max_font_px = s.text_max_font_px
        self.default_padding: Tuple[int, ...] = tuple(s.text_default_padding)
        self._font_loader = font_loader

    def load(self, font: str, size_px: int) -> ImageFont.FreeTypeFont:
        # Resolved per call so tests can monkeypatch layout.load_font
        loader = self._font_loader or load_font
        return loader(font, size_px)

    def measure(
        self, text: str, font: str, size_px: int, angle: float = 0
    ) -> Tuple[int, int]:
        return measure_text(text, self.load(font, size_px), angle)

    def enclose_text(
        self,
        text: str,
        width: int,
        height: int,
        font: str,
        padding: Sequence[int] = (),
        angle: float = 0,
    ) -> TextBox:
        pads = normalize_padding(padding if len(padding) else self.default_padding)
        top, right, bottom, left = pads
        inner_w = width - right - left
        inner_h = height - top - bottom
        if inner_w <= 0 or inner_h <= 0:
            raise TextLayoutError(
                f"no room for text in {width}x{height} box with padding {pads}"
            )

        def fits(size_px: int) -> Tuple[bool, Tuple[int, int]]:
            tw, th = self.measure(text, font, size_px, angle)
            return (tw <= inner_w and th <= inner_h), (tw, th)

        lo, hi = self.min_font_px, self.max_font_px
        ok, best_dims = fits(lo)
        best = lo
        if not ok:
            logger.debug(
                "text %r does not fit %dx%d even at %d px", text, inner_w, inner_h, lo
            )
        else:
            lo += 1
            while lo <= hi:
                mid = (lo + hi) // 2
                ok, dims = fits(mid)
                if ok:
                    best, best_dims = mid, dims
                    lo = mid + 1
                else:
                    hi = mid - 1

        return TextBox(
            font_size=best,
            paddings=pads,
            text_width=best_dims[0],
            text_height=best_dims[1],
        )
