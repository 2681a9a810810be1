"""Centralized default values loaded from YAML.

The master source is ``values.yml`` in this package. On import we attempt
to load and parse it; failures fall back to hard-coded defaults so a canvas
can still be created if the YAML is missing or corrupt.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

logger = logging.getLogger(__name__)

_PKG_DIR = Path(__file__).parent
_YAML_PATH = _PKG_DIR / "values.yml"

# --- Fallback literals ---------------------------------------------------
_FALLBACK_FONT_DIRS = [
    "/usr/share/fonts/truetype/dejavu",
    "/usr/share/fonts/truetype/liberation",
    "/usr/share/fonts/truetype/freefont",
    "/Library/Fonts",
]
_FALLBACK_FONT_ALIASES = {
    "mono": "DejaVuSansMono.ttf",
    "sans": "DejaVuSans.ttf",
}
_FALLBACK_TEXT = {"min_font_px": 6, "max_font_px": 200, "default_padding": [0]}
_FALLBACK_PNG = {"compress_level": 6}
_FALLBACK_ALPHA = {"blending": True, "save": True}
_FALLBACK_PALETTE = {
    "defaults": {"black": "000", "white": "fff"},
    "transparent_alpha": 127,
}

# --- Load YAML -----------------------------------------------------------
_font_dirs: List[str] = list(_FALLBACK_FONT_DIRS)
_font_aliases: Dict[str, str] = dict(_FALLBACK_FONT_ALIASES)
_default_font: str | None = None
_text_cfg: Dict[str, Any] = dict(_FALLBACK_TEXT)
_png_cfg: Dict[str, Any] = dict(_FALLBACK_PNG)
_alpha_cfg: Dict[str, bool] = dict(_FALLBACK_ALPHA)
_palette_cfg: Dict[str, Any] = dict(_FALLBACK_PALETTE)

if _YAML_PATH.exists():  # pragma: no branch - simple path
    try:
        with _YAML_PATH.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        fonts = raw.get("fonts", {})
        if isinstance(fonts, dict):
            dirs = fonts.get("search_dirs")
            if isinstance(dirs, list) and all(isinstance(x, str) for x in dirs):
                _font_dirs = list(dirs)
            aliases = fonts.get("aliases")
            if isinstance(aliases, dict):
                _font_aliases = {str(k): str(v) for k, v in aliases.items()}
            default = fonts.get("default")
            if isinstance(default, str):
                _default_font = default
        text = raw.get("text")
        if isinstance(text, dict):
            for k in ("min_font_px", "max_font_px"):
                v = text.get(k)
                if isinstance(v, int):
                    _text_cfg[k] = v
            pad = text.get("default_padding")
            if isinstance(pad, list) and all(isinstance(x, int) for x in pad):
                _text_cfg["default_padding"] = list(pad)
        png = raw.get("png")
        if isinstance(png, dict) and isinstance(png.get("compress_level"), int):
            _png_cfg["compress_level"] = png["compress_level"]
        alpha = raw.get("alpha")
        if isinstance(alpha, dict):
            _alpha_cfg.update(
                {k: v for k, v in alpha.items() if isinstance(v, bool)}
            )
        palette = raw.get("palette")
        if isinstance(palette, dict):
            defaults = palette.get("defaults")
            if isinstance(defaults, dict):
                _palette_cfg["defaults"] = {
                    str(k): str(v) for k, v in defaults.items()
                }
            ta = palette.get("transparent_alpha")
            if isinstance(ta, int):
                _palette_cfg["transparent_alpha"] = ta
    except (OSError, yaml.YAMLError) as e:  # pragma: no cover - corrupt file
        logger.warning("failed to load %s: %s", _YAML_PATH, e)

# --- Public accessors ----------------------------------------------------
FONT_SEARCH_DIRS: Sequence[str] = tuple(_font_dirs)
FONT_ALIASES: Dict[str, str] = dict(_font_aliases)
DEFAULT_FONT: str | None = _default_font
TEXT_LAYOUT: Dict[str, Any] = dict(_text_cfg)
PNG_CONFIG: Dict[str, Any] = dict(_png_cfg)
ALPHA_CONFIG: Dict[str, bool] = dict(_alpha_cfg)
PALETTE_CONFIG: Dict[str, Any] = dict(_palette_cfg)

__all__ = [
    "FONT_SEARCH_DIRS",
    "FONT_ALIASES",
    "DEFAULT_FONT",
    "TEXT_LAYOUT",
    "PNG_CONFIG",
    "ALPHA_CONFIG",
    "PALETTE_CONFIG",
]
