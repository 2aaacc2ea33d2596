"""The canvas capability every rendering backend implements."""
from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from .geometry import Circle, Isometry, Path, Point, PointLike, Rectangle, RoundedRectangle
from .style import DrawStyle

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="Canvas")


@dataclass(frozen=True)
class ImageSource:
    url: str


class Canvas(abc.ABC):
    """Sink for draw calls. The style argument is only borrowed for the call."""

    @abc.abstractmethod
    def path(self, style: Any, path: Path) -> None:
        ...

    @abc.abstractmethod
    def circle(self, style: Any, point: PointLike, radius: float) -> None:
        ...

    @abc.abstractmethod
    def text(self, style: Any, text: str, font: Any, isometry: Isometry) -> None:
        ...

    @abc.abstractmethod
    def image(self, source: ImageSource) -> None:
        ...

    def rectangle(self, style: Any, rectangle: Rectangle) -> None:
        self.path(style, rectangle.to_path())


@dataclass
class CanvasCall:
    method: str
    style: Optional[DrawStyle]
    args: Tuple[Any, ...] = ()


@dataclass
class RecordingCanvas(Canvas):
    """Records and logs every call, then forwards it to ``inner`` when one is given."""

    inner: Optional[Canvas] = None
    calls: List[CanvasCall] = field(default_factory=list)

    def _record(self, method: str, style: Any, *args: Any) -> None:
        snapshot = None if style is None else DrawStyle.from_style(style).to_owned()
        call = CanvasCall(method, snapshot, args)
        self.calls.append(call)
        logger.debug("canvas call %d: %s style=%r args=%r", len(self.calls), method, snapshot, args)

    def path(self, style: Any, path: Path) -> None:
        self._record("path", style, Path(path.commands))
        if self.inner is not None:
            self.inner.path(style, path)

    def circle(self, style: Any, point: PointLike, radius: float) -> None:
        self._record("circle", style, Point.of(point), radius)
        if self.inner is not None:
            self.inner.circle(style, point, radius)

    def text(self, style: Any, text: str, font: Any, isometry: Isometry) -> None:
        self._record("text", style, text, font, isometry)
        if self.inner is not None:
            self.inner.text(style, text, font, isometry)

    def image(self, source: ImageSource) -> None:
        self._record("image", None, source)
        if self.inner is not None:
            self.inner.image(source)

    def rectangle(self, style: Any, rectangle: Rectangle) -> None:
        self._record("rectangle", style, rectangle)
        if self.inner is not None:
            self.inner.rectangle(style, rectangle)
        else:
            super().rectangle(style, rectangle)

    def methods(self) -> List[str]:
        return [call.method for call in self.calls]


def draw_primitive(shape: Any, style: Any, canvas: Canvas) -> None:
    """Issue the canvas call matching ``shape`` with ``style``."""
    if isinstance(shape, Path):
        canvas.path(style, shape)
    elif isinstance(shape, Circle):
        canvas.circle(style, shape.position, shape.radius)
    elif isinstance(shape, Rectangle):
        canvas.rectangle(style, shape)
    elif isinstance(shape, RoundedRectangle):
        canvas.path(style, shape.to_path())
    elif hasattr(shape, "dispatch"):
        shape.dispatch(canvas, DrawStyle.from_style(style))
    else:
        raise TypeError(f"cannot draw {type(shape).__name__} onto a canvas")


@dataclass
class Styled:
    """A single shape paired with the style it is drawn with."""

    shape: Any
    style: Any

    def draw(self, canvas: Canvas) -> None:
        draw_primitive(self.shape, DrawStyle.from_style(self.style), canvas)

    def draw_onto(self, canvas_factory: Callable[[], C]) -> C:
        canvas = canvas_factory()
        self.draw(canvas)
        return canvas


__all__ = ["Canvas", "CanvasCall", "ImageSource", "RecordingCanvas", "Styled", "draw_primitive"]
