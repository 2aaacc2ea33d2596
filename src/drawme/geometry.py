"""Points, rotations, rectangles and path outlines."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Iterator, List, Optional, Tuple, Union


def fmt(value: float) -> str:
    if math.isclose(value, round(value), abs_tol=1e-9):
        return str(int(round(value)))
    return f"{value:.3f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class Vector:
    x: float
    y: float

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y)

    def scale(self, factor: float) -> Vector:
        return Vector(self.x * factor, self.y * factor)

    def rotate(self, rotation: Rotation) -> Vector:
        cos, sin = rotation.cos, rotation.sin
        return Vector(self.x * cos - self.y * sin, self.x * sin + self.y * cos)

    @classmethod
    def of(cls, value: VectorLike) -> Vector:
        if isinstance(value, Vector):
            return value
        x, y = value
        return cls(float(x), float(y))


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @classmethod
    def origin(cls) -> Point:
        return cls(0.0, 0.0)

    @classmethod
    def of(cls, value: PointLike) -> Point:
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(float(x), float(y))

    @property
    def coords(self) -> Vector:
        return Vector(self.x, self.y)

    def __add__(self, other: Vector) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Union[Point, Vector]):
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        return Point(self.x - other.x, self.y - other.y)

    def translate(self, by: Vector) -> Point:
        return self + by

    def scale(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    def rotate(self, rotation: Rotation) -> Point:
        rotated = self.coords.rotate(rotation)
        return Point(rotated.x, rotated.y)

    def rotate_around(self, rotation: Rotation, pivot: Point) -> Point:
        translated = self - pivot
        rotated = translated.rotate(rotation)
        return pivot + rotated

    def midpoint(self, other: Point) -> Point:
        return Point((self.x + other.x) / 2, (self.y + other.y) / 2)

    def min(self, other: Point) -> Point:
        return Point(min(self.x, other.x), min(self.y, other.y))

    def max(self, other: Point) -> Point:
        return Point(max(self.x, other.x), max(self.y, other.y))


PointLike = Union[Point, Tuple[float, float]]
VectorLike = Union[Vector, Tuple[float, float]]


@dataclass(frozen=True)
class Rotation:
    radians: float = 0.0

    @classmethod
    def identity(cls) -> Rotation:
        return cls(0.0)

    @classmethod
    def from_degrees(cls, degrees: float) -> Rotation:
        return cls(math.radians(degrees))

    @property
    def degrees(self) -> float:
        return math.degrees(self.radians)

    @property
    def cos(self) -> float:
        return math.cos(self.radians)

    @property
    def sin(self) -> float:
        return math.sin(self.radians)

    def is_identity(self) -> bool:
        return math.isclose(math.remainder(self.radians, math.tau), 0.0, abs_tol=1e-12)

    def __add__(self, other: Rotation) -> Rotation:
        return Rotation(self.radians + other.radians)

    def __neg__(self) -> Rotation:
        return Rotation(-self.radians)


@dataclass(frozen=True)
class Isometry:
    """A rotation about the origin followed by a translation."""

    translation: Vector = Vector(0.0, 0.0)
    rotation: Rotation = Rotation()

    @classmethod
    def at(cls, point: PointLike, rotation: Optional[Rotation] = None) -> Isometry:
        return cls(Point.of(point).coords, rotation or Rotation.identity())

    def apply(self, point: PointLike) -> Point:
        return Point.of(point).rotate(self.rotation) + self.translation


class Primitive:
    """A shape that can be paired with a style and drawn on its own."""

    def with_style(self, style):
        from .canvas import Styled

        return Styled(self, style)


class PointRef:
    """Writable handle to a point stored on a command or shape."""

    __slots__ = ("_owner", "_attribute")

    def __init__(self, owner: object, attribute: str) -> None:
        self._owner = owner
        self._attribute = attribute

    def get(self) -> Point:
        return getattr(self._owner, self._attribute)

    def set(self, point: PointLike) -> None:
        setattr(self._owner, self._attribute, Point.of(point))

    def __repr__(self) -> str:
        return f"PointRef({self.get()!r})"


class PathCommand:
    """One segment of a path outline; subclasses name the points they carry."""

    letter: ClassVar[str] = ""
    point_fields: ClassVar[Tuple[str, ...]] = ()

    def __post_init__(self) -> None:
        for name in self.point_fields:
            setattr(self, name, Point.of(getattr(self, name)))

    def points(self) -> Tuple[Point, ...]:
        return tuple(getattr(self, name) for name in self.point_fields)

    def point_refs(self) -> List[PointRef]:
        return [PointRef(self, name) for name in self.point_fields]

    def closest(self) -> Point:
        points = self.points()
        result = points[0]
        for point in points[1:]:
            result = result.min(point)
        return result

    def farthest(self) -> Point:
        """Componentwise max of the defining points; curve bends past them are not counted."""
        points = self.points()
        result = points[0]
        for point in points[1:]:
            result = result.max(point)
        return result

    def to_svg(self) -> str:
        coords = " ".join(f"{fmt(p.x)} {fmt(p.y)}" for p in self.points())
        return f"{self.letter} {coords}"


@dataclass
class MoveTo(PathCommand):
    point: Point

    letter: ClassVar[str] = "M"
    point_fields: ClassVar[Tuple[str, ...]] = ("point",)


@dataclass
class LineTo(PathCommand):
    point: Point

    letter: ClassVar[str] = "L"
    point_fields: ClassVar[Tuple[str, ...]] = ("point",)


@dataclass
class QuadTo(PathCommand):
    control: Point
    end: Point

    letter: ClassVar[str] = "Q"
    point_fields: ClassVar[Tuple[str, ...]] = ("control", "end")


@dataclass
class CurveTo(PathCommand):
    control_one: Point
    control_two: Point
    end: Point

    letter: ClassVar[str] = "C"
    point_fields: ClassVar[Tuple[str, ...]] = ("control_one", "control_two", "end")


class Path(Primitive):
    """An ordered sequence of path commands, built by appending."""

    def __init__(self, commands: Iterable[PathCommand] = ()) -> None:
        self._commands: List[PathCommand] = list(commands)

    def move_to(self, point: PointLike) -> Path:
        self._commands.append(MoveTo(Point.of(point)))
        return self

    def line_to(self, point: PointLike) -> Path:
        self._commands.append(LineTo(Point.of(point)))
        return self

    def quad_to(self, control: PointLike, end: PointLike) -> Path:
        self._commands.append(QuadTo(Point.of(control), Point.of(end)))
        return self

    def curve_to(self, control_one: PointLike, control_two: PointLike, end: PointLike) -> Path:
        self._commands.append(CurveTo(Point.of(control_one), Point.of(control_two), Point.of(end)))
        return self

    def push(self, command: PathCommand) -> Path:
        self._commands.append(command)
        return self

    def extend(self, commands: Iterable[PathCommand]) -> Path:
        self._commands.extend(commands)
        return self

    @property
    def commands(self) -> Tuple[PathCommand, ...]:
        return tuple(self._commands)

    def is_empty(self) -> bool:
        return not self._commands

    def __iter__(self) -> Iterator[PathCommand]:
        return iter(tuple(self._commands))

    def __len__(self) -> int:
        return len(self._commands)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._commands == other._commands

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Path({self._commands!r})"

    def locations(self) -> List[Point]:
        return [point for command in self._commands for point in command.points()]

    def point_refs(self) -> List[PointRef]:
        return [ref for command in self._commands for ref in command.point_refs()]

    def bounding_box(self) -> Optional[Rectangle]:
        if not self._commands:
            return None
        closest = self._commands[0].closest()
        farthest = self._commands[0].farthest()
        for command in self._commands[1:]:
            closest = closest.min(command.closest())
            farthest = farthest.max(command.farthest())
        return Rectangle(closest, farthest)

    def to_svg_data(self) -> str:
        return " ".join(command.to_svg() for command in self._commands)


@dataclass
class Rectangle(Primitive):
    """Axis-aligned corners plus a rotation applied lazily around the center."""

    closest: Point
    farthest: Point
    rotation: Rotation = field(default_factory=Rotation.identity)

    def __post_init__(self) -> None:
        self.closest = Point.of(self.closest)
        self.farthest = Point.of(self.farthest)

    @classmethod
    def zero(cls) -> Rectangle:
        return cls(Point.origin(), Point.origin())

    @classmethod
    def from_dimensions_and_center(cls, dimensions: VectorLike, center: PointLike) -> Rectangle:
        half = Vector.of(dimensions).scale(0.5)
        center = Point.of(center)
        return cls(center - half, center + half)

    @classmethod
    def from_dimensions_and_offset(cls, offset: PointLike, dimensions: VectorLike) -> Rectangle:
        offset = Point.of(offset)
        return cls(offset, offset + Vector.of(dimensions))

    @property
    def width(self) -> float:
        return self.farthest.x - self.closest.x

    @property
    def height(self) -> float:
        return self.farthest.y - self.closest.y

    @property
    def dimensions(self) -> Vector:
        return self.farthest - self.closest

    @property
    def center(self) -> Point:
        return self.closest.midpoint(self.farthest)

    def with_rotation(self, rotation: Rotation) -> Rectangle:
        self.rotation = rotation
        return self

    def translate(self, by: VectorLike) -> Rectangle:
        by = Vector.of(by)
        self.closest = self.closest + by
        self.farthest = self.farthest + by
        return self

    def top_left_raw(self) -> Point:
        return self.closest

    def top_right_raw(self) -> Point:
        return Point(self.farthest.x, self.closest.y)

    def bottom_right_raw(self) -> Point:
        return self.farthest

    def bottom_left_raw(self) -> Point:
        return Point(self.closest.x, self.farthest.y)

    def _rotated(self, point: Point) -> Point:
        if self.rotation.is_identity():
            return point
        return point.rotate_around(self.rotation, self.center)

    def top_left(self) -> Point:
        return self._rotated(self.top_left_raw())

    def top_right(self) -> Point:
        return self._rotated(self.top_right_raw())

    def bottom_right(self) -> Point:
        return self._rotated(self.bottom_right_raw())

    def bottom_left(self) -> Point:
        return self._rotated(self.bottom_left_raw())

    def point_refs(self) -> List[PointRef]:
        return [PointRef(self, "closest"), PointRef(self, "farthest")]

    def to_path(self) -> Path:
        top_left = self.top_left()
        return (
            Path()
            .move_to(top_left)
            .line_to(self.top_right())
            .line_to(self.bottom_right())
            .line_to(self.bottom_left())
            .line_to(top_left)
        )


@dataclass
class RoundedRectangle(Primitive):
    rectangle: Rectangle
    top_left_radius: float = 0.0
    top_right_radius: float = 0.0
    bottom_right_radius: float = 0.0
    bottom_left_radius: float = 0.0

    @classmethod
    def uniform(cls, closest: PointLike, farthest: PointLike, radius: float) -> RoundedRectangle:
        return cls(Rectangle(Point.of(closest), Point.of(farthest)), radius, radius, radius, radius)

    def set_all_corners(self, radius: float) -> RoundedRectangle:
        self.top_left_radius = radius
        self.top_right_radius = radius
        self.bottom_right_radius = radius
        self.bottom_left_radius = radius
        return self

    def corners_are_zero(self) -> bool:
        return not any(
            (self.top_left_radius, self.top_right_radius, self.bottom_right_radius, self.bottom_left_radius)
        )

    def point_refs(self) -> List[PointRef]:
        return self.rectangle.point_refs()

    def _corner(self, control: Point, start: Vector, end: Vector) -> Tuple[Point, Point, Point]:
        rotate = self.rectangle._rotated
        return rotate(control + start), rotate(control), rotate(control + end)

    def to_path(self) -> Path:
        if self.corners_are_zero():
            return self.rectangle.to_path()
        rect = self.rectangle
        tl, tr, br, bl = (
            self.top_left_radius,
            self.top_right_radius,
            self.bottom_right_radius,
            self.bottom_left_radius,
        )
        corners = [
            self._corner(rect.top_left_raw(), Vector(0, tl), Vector(tl, 0)),
            self._corner(rect.top_right_raw(), Vector(-tr, 0), Vector(0, tr)),
            self._corner(rect.bottom_right_raw(), Vector(0, -br), Vector(-br, 0)),
            self._corner(rect.bottom_left_raw(), Vector(bl, 0), Vector(0, -bl)),
        ]
        first_start, first_control, first_end = corners[0]
        path = Path().move_to(first_start).quad_to(first_control, first_end)
        for start, control, end in corners[1:]:
            path.line_to(start).quad_to(control, end)
        return path.line_to(first_start)


@dataclass
class Circle(Primitive):
    position: Point
    radius: float

    def __post_init__(self) -> None:
        self.position = Point.of(self.position)

    def bounding_box(self) -> Rectangle:
        offset = Vector(self.radius, self.radius)
        return Rectangle(self.position - offset, self.position + offset)

    def point_refs(self) -> List[PointRef]:
        return [PointRef(self, "position")]


@dataclass
class BoundingBox:
    """Running extent from the origin; grows componentwise and never shrinks."""

    width: float = 0.0
    height: float = 0.0

    def extend_to(self, point: PointLike) -> bool:
        point = Point.of(point)
        grew = False
        if point.x > self.width:
            self.width = point.x
            grew = True
        if point.y > self.height:
            self.height = point.y
            grew = True
        return grew

    def contains(self, point: PointLike) -> bool:
        point = Point.of(point)
        return point.x <= self.width and point.y <= self.height

    def view_box(self) -> str:
        return f"0 0 {fmt(self.width)} {fmt(self.height)}"


__all__ = [
    "BoundingBox",
    "Circle",
    "CurveTo",
    "Isometry",
    "LineTo",
    "MoveTo",
    "Path",
    "PathCommand",
    "Point",
    "PointLike",
    "PointRef",
    "Primitive",
    "QuadTo",
    "Rectangle",
    "Rotation",
    "RoundedRectangle",
    "Vector",
    "fmt",
]
