"""pencanvas package root.

Exposes the canvas session and the shape/colour value types. The project
version is defined here as the single source of truth; pyproject.toml reads
it via ``version = { attr = "pencanvas.__version__" }``.
"""

from .core.color import Color
from .core.errors import (
    CanvasClosedError,
    CanvasError,
    PenStateError,
    PositionFormatError,
    ResourceAllocationError,
    TextLayoutError,
    UnknownFontError,
    UnknownShapeKindError,
    UnrecognizedShapeError,
    UnregisteredNameError,
)
from .core.geometry import (
    Arc,
    ArcPie,
    Circle,
    Delta,
    Ellipse,
    Point,
    Polygon,
    Rectangle,
)
from .core.shapes import ShapeKind
from .render.canvas import Canvas, Pen
from .text.fonts import FontRepository
from .text.layout import Shadow, TextBox, TextTools

__all__ = [
    "__version__",
    "Arc",
    "ArcPie",
    "Canvas",
    "CanvasClosedError",
    "CanvasError",
    "Circle",
    "Color",
    "Delta",
    "Ellipse",
    "FontRepository",
    "Pen",
    "PenStateError",
    "Point",
    "Polygon",
    "PositionFormatError",
    "Rectangle",
    "ResourceAllocationError",
    "Shadow",
    "ShapeKind",
    "TextBox",
    "TextLayoutError",
    "TextTools",
    "UnknownFontError",
    "UnknownShapeKindError",
    "UnrecognizedShapeError",
    "UnregisteredNameError",
]

# Keep in sync with release tags until setuptools-scm or similar is adopted.
__version__ = "0.1.0"
