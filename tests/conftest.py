from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import pytest
from PIL import ImageFont

from pencanvas import Canvas
from pencanvas.settings.schema import Settings
from pencanvas.text import layout


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings store at an empty temporary home."""
    monkeypatch.setenv("PENCANVAS_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


@pytest.fixture
def settings() -> Settings:
    # No font dirs/aliases so lookups never depend on the host
    return Settings(font_dirs=[], font_aliases={}, text_max_font_px=64)


@pytest.fixture
def make_canvas(settings: Settings) -> Iterator[Callable[..., Canvas]]:
    made: list[Canvas] = []

    def _make(width: int = 100, height: int = 100, true_color: bool = True) -> Canvas:
        c = Canvas(width, height, true_color, settings=settings)
        made.append(c)
        return c

    yield _make
    for c in made:
        c.close()


@pytest.fixture
def canvas(make_canvas: Callable[..., Canvas]) -> Canvas:
    c = make_canvas()
    c.build_palette({"red": "f00"})
    return c


@pytest.fixture
def default_font(monkeypatch: pytest.MonkeyPatch) -> None:
    """Serve Pillow's bundled FreeType face for any font path."""

    def _load(path: str, size_px: int) -> ImageFont.FreeTypeFont:
        return ImageFont.load_default(size=size_px)

    monkeypatch.setattr(layout, "load_font", _load)
