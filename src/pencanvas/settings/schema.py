"""Pydantic model for canvas settings."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator

from .values import (
    ALPHA_CONFIG,
    DEFAULT_FONT,
    FONT_ALIASES,
    FONT_SEARCH_DIRS,
    PALETTE_CONFIG,
    PNG_CONFIG,
    TEXT_LAYOUT,
)


class Settings(BaseModel):
    """Canvas defaults persisted to disk.

    Parameters
    ----------
    font_dirs: Directories scanned for ``<name>.ttf`` by the font repository.
    font_aliases: Short font names mapped to a file name or absolute path.
    default_font: Font selected on new canvases, if any.
    text_min_font_px / text_max_font_px: Search range when fitting text.
    text_default_padding: CSS-shorthand padding used when a caller passes none.
    png_compress_level: zlib level (0..9) used by ``save_as_png``.
    alpha_blending / save_alpha: Initial alpha flags of true-colour canvases.
    palette_defaults: Colours ``build_palette`` adds when not supplied.
    transparent_alpha: GD alpha (0..127) of the ``transparent`` colour.
    """

    font_dirs: List[str] = Field(default_factory=lambda: list(FONT_SEARCH_DIRS))
    font_aliases: Dict[str, str] = Field(default_factory=lambda: dict(FONT_ALIASES))
    default_font: str | None = Field(default=DEFAULT_FONT)
    text_min_font_px: int = Field(default=int(TEXT_LAYOUT.get("min_font_px", 6)))
    text_max_font_px: int = Field(default=int(TEXT_LAYOUT.get("max_font_px", 200)))
    text_default_padding: List[int] = Field(
        default_factory=lambda: list(TEXT_LAYOUT.get("default_padding", [0]))
    )
    png_compress_level: int = Field(default=int(PNG_CONFIG.get("compress_level", 6)))
    alpha_blending: bool = Field(default=bool(ALPHA_CONFIG.get("blending", True)))
    save_alpha: bool = Field(default=bool(ALPHA_CONFIG.get("save", True)))
    palette_defaults: Dict[str, str] = Field(
        default_factory=lambda: dict(PALETTE_CONFIG.get("defaults", {}))
    )
    transparent_alpha: int = Field(
        default=int(PALETTE_CONFIG.get("transparent_alpha", 127))
    )

    @field_validator("png_compress_level")
    @classmethod
    def _chk_compress(cls, v: int) -> int:
        if not 0 <= v <= 9:
            raise ValueError("png_compress_level must be between 0 and 9")
        return v

    @field_validator("text_min_font_px", "text_max_font_px")
    @classmethod
    def _chk_font_px(cls, v: int) -> int:
        if v < 1:
            raise ValueError("font sizes must be >= 1 px")
        return v

    @field_validator("text_default_padding")
    @classmethod
    def _chk_padding(cls, v: List[int]) -> List[int]:
        if len(v) > 4:
            raise ValueError("padding takes at most 4 values")
        if any(p < 0 for p in v):
            raise ValueError("padding values must be >= 0")
        return v

    @field_validator("transparent_alpha")
    @classmethod
    def _chk_alpha(cls, v: int) -> int:
        if not 0 <= v <= 127:
            raise ValueError("transparent_alpha must be between 0 and 127")
        return v

    @model_validator(mode="after")
    def _chk_font_range(self) -> "Settings":
        if self.text_min_font_px > self.text_max_font_px:
            raise ValueError("text_min_font_px must be <= text_max_font_px")
        return self
