"""Exception types raised by drawme."""
from __future__ import annotations


class DrawmeError(Exception):
    """Base class for every error raised while building or rendering a drawing."""


class DrawingError(DrawmeError):
    """A drawing could not be produced, e.g. because its text could not be measured."""


class MeasurementError(DrawmeError):
    """The text measurement collaborator could not measure a string/font combination."""


class RenderError(DrawmeError):
    """A canvas was used in a way that would produce an incomplete document."""


class UnsupportedOperationError(DrawmeError, NotImplementedError):
    """Raised by a canvas for an operation it declares but cannot render."""

    def __init__(self, operation: str, backend: str) -> None:
        super().__init__(f"{backend} canvas does not support {operation}")
        self.operation = operation
        self.backend = backend


class SceneError(ValueError):
    """Structured scene file error with stable code for CLI mapping."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message


__all__ = [
    "DrawmeError",
    "DrawingError",
    "MeasurementError",
    "RenderError",
    "UnsupportedOperationError",
    "SceneError",
]
