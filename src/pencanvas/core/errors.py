"""Exception taxonomy for canvas sessions.

Every error raised on purpose by this package derives from
:class:`CanvasError`. Most also derive from the closest builtin so callers
that already catch ``KeyError``/``ValueError``/``TypeError`` keep working.
"""

from __future__ import annotations


class CanvasError(Exception):
    """Base class for all canvas failures."""


class UnregisteredNameError(CanvasError, KeyError):
    """A colour or position was selected by a name never registered."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind} with {name!r} name is not declared yet")
        self.kind = kind
        self.name = name

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class PositionFormatError(CanvasError, ValueError):
    """A value could not be resolved to a Point."""


class UnrecognizedShapeError(CanvasError, TypeError):
    """fill/stroke received a value that is not a known shape."""


class UnknownShapeKindError(CanvasError, ValueError):
    """The shape factory was asked for a kind outside the closed set."""


class ResourceAllocationError(CanvasError):
    """The raster engine could not allocate a surface or colour."""


class UnknownFontError(CanvasError, LookupError):
    """A font name could not be resolved to a readable font file."""


class PenStateError(CanvasError):
    """A draw call needs pen state (colour, font) that was never selected."""


class TextLayoutError(CanvasError, ValueError):
    """The text box leaves no room once padding is applied."""


class CanvasClosedError(CanvasError):
    """The canvas image was already released."""
