"""Font resolution and text fitting helpers."""

from .fonts import FontRepository, is_font_file
from .layout import Shadow, TextBox, TextTools, normalize_padding

__all__ = [
    "FontRepository",
    "Shadow",
    "TextBox",
    "TextTools",
    "is_font_file",
    "normalize_padding",
]
