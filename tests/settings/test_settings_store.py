from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from pencanvas.settings import values
from pencanvas.settings.schema import Settings
from pencanvas.settings.store import SettingsStore


def test_packaged_defaults_loaded() -> None:
    assert values.FONT_ALIASES["mono"] == "DejaVuSansMono.ttf"
    assert values.PALETTE_CONFIG["defaults"] == {"black": "000", "white": "fff"}
    s = Settings()
    assert s.png_compress_level == 6
    assert s.transparent_alpha == 127
    assert s.alpha_blending and s.save_alpha


def test_load_defaults(home: Path) -> None:
    s = SettingsStore.load()
    assert isinstance(s, Settings)
    assert s.text_min_font_px == values.TEXT_LAYOUT["min_font_px"]


def test_roundtrip(home: Path) -> None:
    s = Settings(font_dirs=["/opt/fonts"], png_compress_level=9)
    SettingsStore.save(s)
    assert SettingsStore.settings_path() == home / "settings.json"
    s2 = SettingsStore.load()
    assert s2.font_dirs == ["/opt/fonts"]
    assert s2.png_compress_level == 9


def test_corrupt_returns_default(home: Path) -> None:
    p = SettingsStore.settings_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("{broken")
    assert SettingsStore.load() == Settings()


def test_invalid_values_return_default(home: Path) -> None:
    p = SettingsStore.settings_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text('{"png_compress_level": 42}')
    assert SettingsStore.load().png_compress_level == 6


@pytest.mark.parametrize(
    "kwargs",
    [
        {"png_compress_level": -1},
        {"text_min_font_px": 0},
        {"text_min_font_px": 50, "text_max_font_px": 10},
        {"text_default_padding": [1, 2, 3, 4, 5]},
        {"text_default_padding": [-2]},
        {"transparent_alpha": 128},
    ],
)
def test_validators(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        Settings(**kwargs)
