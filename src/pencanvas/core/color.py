"""RGB colour value and GD-style alpha helpers."""

from __future__ import annotations

from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field

# GD alpha scale: 0 opaque .. 127 fully transparent
ALPHA_OPAQUE = 0
ALPHA_TRANSPARENT = 127


class Color(BaseModel):
    """Immutable RGB triplet.

    Build from a hex string with :meth:`parse` (``"#rgb"``, ``"rgb"``,
    ``"#rrggbb"`` or ``"rrggbb"``) or pass channels directly.
    """

    model_config = ConfigDict(frozen=True)

    red: int = Field(..., ge=0, le=255)
    green: int = Field(..., ge=0, le=255)
    blue: int = Field(..., ge=0, le=255)

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        s = value.strip().lstrip("#")
        if len(s) == 3:
            s = "".join(ch * 2 for ch in s)
        if len(s) != 6:
            raise ValueError(f"invalid hex colour: {value!r}")
        try:
            r, g, b = (int(s[i : i + 2], 16) for i in (0, 2, 4))
        except ValueError:
            raise ValueError(f"invalid hex colour: {value!r}") from None
        return cls(red=r, green=g, blue=b)

    @classmethod
    def parse(cls, value: Any) -> "Color":
        """Coerce a Color, hex string or ``(r, g, b)`` sequence."""
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        if isinstance(value, (tuple, list)) and len(value) == 3:
            r, g, b = value
            return cls(red=r, green=g, blue=b)
        raise ValueError(f"unsupported colour value: {value!r}")

    def rgb(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def rgba(self, alpha: int | None = None) -> Tuple[int, int, int, int]:
        """Return an RGBA tuple; *alpha* is on the GD 0..127 scale."""
        a = 255 if alpha is None else gd_alpha_to_pillow(alpha)
        return (self.red, self.green, self.blue, a)

    def to_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    def __repr__(self) -> str:  # pragma: no cover
        return f"Color({self.to_hex()})"


def gd_alpha_to_pillow(alpha: int) -> int:
    """Map GD alpha (0 opaque..127 transparent) onto Pillow opacity 255..0."""
    a = int(alpha)
    if a < ALPHA_OPAQUE or a > ALPHA_TRANSPARENT:
        raise ValueError("alpha must be between 0 and 127")
    return int(round((ALPHA_TRANSPARENT - a) * 255 / ALPHA_TRANSPARENT))
