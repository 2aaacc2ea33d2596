"""The styled scene graph and the depth-first style cascade over it."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple

from .canvas import Canvas, ImageSource, Styled
from .color import PaintLike
from .geometry import (
    Circle,
    Isometry,
    Path,
    Point,
    PointRef,
    Rectangle,
    Rotation,
    RoundedRectangle,
    Vector,
)
from .style import DrawStyle


class DrawCommand:
    """Something a drawing node asks a canvas to draw."""

    def point_refs(self) -> List[PointRef]:
        raise NotImplementedError

    def locations(self) -> List[Point]:
        return [ref.get() for ref in self.point_refs()]

    def dispatch(self, canvas: Canvas, style: DrawStyle) -> None:
        raise NotImplementedError


@dataclass
class DrawPath(DrawCommand):
    path: Path

    def point_refs(self) -> List[PointRef]:
        return self.path.point_refs()

    def dispatch(self, canvas: Canvas, style: DrawStyle) -> None:
        canvas.path(style, self.path)


@dataclass
class DrawCircle(DrawCommand):
    position: Point
    radius: float

    def __post_init__(self) -> None:
        self.position = Point.of(self.position)

    def point_refs(self) -> List[PointRef]:
        return [PointRef(self, "position")]

    def dispatch(self, canvas: Canvas, style: DrawStyle) -> None:
        canvas.circle(style, self.position, self.radius)


@dataclass
class DrawText(DrawCommand):
    """A measured run of text; ``start`` is the baseline origin, ``end`` the opposite corner."""

    text: str
    start: Point
    end: Point
    font: Any
    rotation: Optional[Rotation] = None

    def __post_init__(self) -> None:
        self.start = Point.of(self.start)
        self.end = Point.of(self.end)

    def point_refs(self) -> List[PointRef]:
        return [PointRef(self, "start"), PointRef(self, "end")]

    def isometry(self) -> Isometry:
        return Isometry.at(self.start, self.rotation)

    def dispatch(self, canvas: Canvas, style: DrawStyle) -> None:
        canvas.text(style, self.text, self.font, self.isometry())


@dataclass
class DrawImage(DrawCommand):
    source: ImageSource
    offset: Point = field(default_factory=Point.origin)

    def __post_init__(self) -> None:
        self.offset = Point.of(self.offset)

    def point_refs(self) -> List[PointRef]:
        return [PointRef(self, "offset")]

    def dispatch(self, canvas: Canvas, style: DrawStyle) -> None:
        canvas.image(self.source)


def as_command(value: Any) -> DrawCommand:
    if isinstance(value, DrawCommand):
        return value
    if isinstance(value, Path):
        return DrawPath(value)
    if isinstance(value, Circle):
        return DrawCircle(value.position, value.radius)
    if isinstance(value, (Rectangle, RoundedRectangle)):
        return DrawPath(value.to_path())
    if isinstance(value, ImageSource):
        return DrawImage(value)
    raise TypeError(f"{type(value).__name__} cannot be used as a draw command")


@dataclass(frozen=True)
class DrawingInstruction:
    """A command paired with the style resolved for it, ready to hand to a canvas."""

    command: DrawCommand
    style: DrawStyle

    def fill_paint(self):
        return self.style.fill_paint()

    def stroke_paint(self):
        return self.style.stroke_paint()

    def stroke_width(self) -> Optional[float]:
        return self.style.width()

    def to_owned(self) -> DrawingInstruction:
        return DrawingInstruction(self.command, self.style.to_owned())

    def dispatch(self, canvas: Canvas) -> None:
        self.command.dispatch(canvas, self.style)


class Drawing:
    """A node of the scene graph: an optional command, a style override, and owned children.

    A node without a command only groups its children; it is skipped by the
    instruction stream but its style still cascades into its descendants.
    """

    def __init__(
        self,
        command: Any = None,
        style: Any = None,
        children: Iterable[Any] = (),
    ) -> None:
        self._command: Optional[DrawCommand] = None if command is None else as_command(command)
        self._style = _own_style(style)
        self._children: List[Drawing] = []
        self._parent: Optional[Drawing] = None
        self.extend_children(children)

    @classmethod
    def new(cls, command: Any, style: Any = None) -> Drawing:
        return cls(command, style)

    @classmethod
    def from_style(cls, style: Any) -> Drawing:
        return cls(None, style)

    @classmethod
    def from_styled(cls, styled: Styled) -> Drawing:
        return cls(styled.shape, styled.style)

    def __repr__(self) -> str:
        return f"Drawing(command={self._command!r}, style={self._style!r}, children={len(self._children)})"

    # -- tree building -------------------------------------------------

    def add_child(self, child: Any) -> Drawing:
        node = _as_drawing(child)
        if node._parent is not None:
            raise ValueError("drawing already belongs to another tree")
        ancestor: Optional[Drawing] = self
        while ancestor is not None:
            if ancestor is node:
                raise ValueError("a drawing cannot be added beneath itself")
            ancestor = ancestor._parent
        node._parent = self
        self._children.append(node)
        return self

    def extend_children(self, children: Iterable[Any]) -> Drawing:
        for child in children:
            self.add_child(child)
        return self

    def children(self) -> Tuple[Drawing, ...]:
        return tuple(self._children)

    # -- command -------------------------------------------------------

    def command(self) -> Optional[DrawCommand]:
        return self._command

    def command_mut(self) -> Optional[DrawCommand]:
        """The stored command itself; edits to it are visible to later traversals."""
        return self._command

    def with_command(self, command: Any) -> Drawing:
        self._command = as_command(command)
        return self

    def set_command(self, command: Any) -> Drawing:
        return self.with_command(command)

    # -- style ---------------------------------------------------------

    def style(self) -> DrawStyle:
        return self._style.clone_shallow()

    def with_style(self, style: Any) -> Drawing:
        self._style = _own_style(style)
        return self

    def set_style(self, style: Any) -> Drawing:
        return self.with_style(style)

    def adjust_style(self, fn: Callable[[DrawStyle], Any]) -> Drawing:
        fn(self._style)
        return self

    def set_fill(self, paint: Optional[PaintLike]) -> Drawing:
        self._style.set_fill(paint)
        return self

    def set_stroke(self, paint: Optional[PaintLike]) -> Drawing:
        self._style.set_stroke(paint)
        return self

    def set_stroke_width(self, width: Optional[float]) -> Drawing:
        self._style.set_stroke_width(width)
        return self

    # -- queries -------------------------------------------------------

    def num_drawings(self) -> int:
        return 1 + sum(child.num_drawings() for child in self._children)

    def point_refs(self) -> List[PointRef]:
        refs = self._command.point_refs() if self._command is not None else []
        for child in self._children:
            refs.extend(child.point_refs())
        return refs

    def locations(self) -> List[Point]:
        """Every point of every command in document order. Walks the whole subtree."""
        return [ref.get() for ref in self.point_refs()]

    def locations_mut(self) -> List[PointRef]:
        """Writable handles to every point in document order. Walks the whole subtree."""
        return self.point_refs()

    def translate(self, by: Vector) -> Drawing:
        for ref in self.locations_mut():
            ref.set(ref.get() + by)
        return self

    def bounding_box(self) -> Optional[Rectangle]:
        locations = self.locations()
        if not locations:
            return None
        closest = farthest = locations[0]
        for point in locations[1:]:
            closest = closest.min(point)
            farthest = farthest.max(point)
        return Rectangle(closest, farthest)

    # -- traversal -----------------------------------------------------

    def instructions(self) -> DrawingIter:
        return DrawingIter(self)

    def iter(self) -> DrawingIter:
        return DrawingIter(self)

    def draw(self, canvas: Canvas) -> None:
        for instruction in self.instructions():
            instruction.dispatch(canvas)

    def draw_onto(self, canvas_factory: Callable[[], Canvas]) -> Canvas:
        canvas = canvas_factory()
        self.draw(canvas)
        return canvas


class DrawingIter(Iterator[DrawingInstruction]):
    """Single-pass pre-order walk that resolves each node's style against its parent's.

    Nodes are visited with an explicit stack; children are pushed in reverse so
    they come back out left to right. Only nodes carrying a command yield.
    """

    def __init__(self, root: Drawing) -> None:
        self._stack: List[Tuple[Drawing, DrawStyle]] = [(root, root.style())]

    def __iter__(self) -> DrawingIter:
        return self

    def __next__(self) -> DrawingInstruction:
        while self._stack:
            node, parent_style = self._stack.pop()
            node_style = node._style.clone_shallow().combine(parent_style)
            for child in reversed(node._children):
                self._stack.append((child, node_style))
            if node._command is not None:
                return DrawingInstruction(node._command, dataclasses.replace(node_style))
        raise StopIteration


def _own_style(style: Any) -> DrawStyle:
    # Nodes never share an override record.
    if style is None:
        return DrawStyle()
    return DrawStyle.from_style(style).to_owned()


def _as_drawing(value: Any) -> Drawing:
    if isinstance(value, Drawing):
        return value
    if isinstance(value, Styled):
        return Drawing.from_styled(value)
    return Drawing(value)


__all__ = [
    "DrawCircle",
    "DrawCommand",
    "DrawImage",
    "DrawPath",
    "DrawText",
    "Drawing",
    "DrawingInstruction",
    "DrawingIter",
    "as_command",
]
