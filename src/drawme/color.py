"""Solid colors, gradients and the paints that reference them."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple, Union

from PIL import ImageColor

from .geometry import Point, PointLike, Rotation


def _check_channel(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 255:
        raise ValueError(f"{name} channel must be an integer in 0..255, got {value!r}")
    return value


@dataclass(frozen=True)
class Rgb:
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        _check_channel("red", self.r)
        _check_channel("green", self.g)
        _check_channel("blue", self.b)

    def css(self) -> str:
        return f"rgb({self.r}, {self.g}, {self.b})"

    def opaque(self) -> Rgb:
        return self

    @property
    def alpha(self) -> Optional[float]:
        return None


@dataclass(frozen=True)
class Rgba:
    r: int
    g: int
    b: int
    a: float

    def __post_init__(self) -> None:
        _check_channel("red", self.r)
        _check_channel("green", self.g)
        _check_channel("blue", self.b)
        if not 0.0 <= float(self.a) <= 1.0:
            raise ValueError(f"alpha must be in 0..1, got {self.a!r}")

    def css(self) -> str:
        return f"rgba({self.r}, {self.g}, {self.b}, {self.a})"

    def opaque(self) -> Rgb:
        return Rgb(self.r, self.g, self.b)

    @property
    def alpha(self) -> Optional[float]:
        return self.a


SolidColor = Union[Rgb, Rgba]

BLACK = Rgb(0, 0, 0)
WHITE = Rgb(255, 255, 255)
PURPLE = Rgb(128, 0, 128)
RED = Rgb(255, 0, 0)
GREEN = Rgb(0, 255, 0)
BLUE = Rgb(0, 0, 255)
YELLOW = Rgb(255, 255, 0)
CYAN = Rgb(0, 255, 255)
MAGENTA = Rgb(255, 0, 255)
BROWN = Rgb(75, 66, 3)
TRANSPARENT = Rgba(0, 0, 0, 0.0)


def parse_color(text: str) -> SolidColor:
    """Parse any CSS color string Pillow understands (names, #hex, rgb(), hsl())."""
    try:
        channels = ImageColor.getrgb(text.strip())
    except ValueError as exc:
        raise ValueError(f"unrecognized color: {text!r}") from exc
    if len(channels) == 4:
        r, g, b, a = channels
        if a == 255:
            return Rgb(r, g, b)
        return Rgba(r, g, b, round(a / 255, 3))
    r, g, b = channels
    return Rgb(r, g, b)


Stop = Tuple[SolidColor, float]


def _normalize_stops(stops: Iterable[Tuple[SolidColor, float]]) -> Tuple[Stop, ...]:
    normalized = []
    for color, offset in stops:
        if not isinstance(color, (Rgb, Rgba)):
            raise ValueError(f"gradient stop color must be Rgb or Rgba, got {color!r}")
        offset = float(offset)
        if not 0.0 <= offset <= 1.0:
            raise ValueError(f"gradient stop offset must be in 0..1, got {offset!r}")
        normalized.append((color, offset))
    if not normalized:
        raise ValueError("a gradient needs at least one stop")
    return tuple(normalized)


@dataclass(frozen=True)
class LinearGradient:
    """Gradient along the direction given by ``rotation`` (0 runs left to right)."""

    rotation: Rotation
    stops: Tuple[Stop, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", _normalize_stops(self.stops))

    def copy(self) -> LinearGradient:
        return replace(self)


@dataclass(frozen=True)
class RadialGradient:
    """Gradient radiating from ``center``, given as a fraction of the shape's box."""

    center: Point
    stops: Tuple[Stop, ...]
    radius: float = 0.5

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", Point.of(self.center))
        object.__setattr__(self, "stops", _normalize_stops(self.stops))
        if self.radius <= 0:
            raise ValueError(f"radial gradient radius must be positive, got {self.radius!r}")

    def copy(self) -> RadialGradient:
        return replace(self)


Gradient = Union[LinearGradient, RadialGradient]


def linear_gradient(rotation: Union[Rotation, float], stops: Iterable[Tuple[SolidColor, float]]) -> LinearGradient:
    if not isinstance(rotation, Rotation):
        rotation = Rotation.from_degrees(rotation)
    return LinearGradient(rotation, tuple(stops))


def radial_gradient(
    center: PointLike, stops: Iterable[Tuple[SolidColor, float]], radius: float = 0.5
) -> RadialGradient:
    return RadialGradient(Point.of(center), tuple(stops), radius)


class Ownership(enum.Enum):
    OWNED = "owned"
    BORROWED = "borrowed"


@dataclass(frozen=True)
class Paint:
    """A fill or stroke source: a solid color or a gradient.

    A gradient paint either owns its gradient or borrows one owned elsewhere for
    the duration of a call. ``shallow()`` hands out a borrowing paint; anything
    that keeps a paint past the call that produced it must ``to_owned()`` it
    first. Ownership never takes part in equality.
    """

    value: Union[SolidColor, Gradient]
    ownership: Ownership = field(default=Ownership.OWNED, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.value, (Rgb, Rgba, LinearGradient, RadialGradient)):
            raise ValueError(f"paint must wrap a color or gradient, got {self.value!r}")

    @classmethod
    def solid(cls, color: SolidColor) -> Paint:
        return cls(color)

    @classmethod
    def gradient(cls, gradient: Gradient) -> Paint:
        return cls(gradient)

    @classmethod
    def of(cls, value: PaintLike) -> Paint:
        if isinstance(value, Paint):
            return value
        if isinstance(value, str):
            return cls(parse_color(value))
        return cls(value)

    @property
    def is_gradient(self) -> bool:
        return isinstance(self.value, (LinearGradient, RadialGradient))

    @property
    def is_borrowed(self) -> bool:
        return self.ownership is Ownership.BORROWED

    def shallow(self) -> Paint:
        if not self.is_gradient:
            return self
        return Paint(self.value, Ownership.BORROWED)

    def to_owned(self) -> Paint:
        if not self.is_borrowed:
            return self
        return Paint(self.value.copy(), Ownership.OWNED)

    def css(self) -> str:
        if self.is_gradient:
            raise ValueError("gradient paints have no inline css value")
        return self.value.css()


PaintLike = Union[Paint, SolidColor, Gradient, str]


__all__ = [
    "BLACK",
    "BLUE",
    "BROWN",
    "CYAN",
    "GREEN",
    "MAGENTA",
    "PURPLE",
    "RED",
    "TRANSPARENT",
    "WHITE",
    "YELLOW",
    "Gradient",
    "LinearGradient",
    "Ownership",
    "Paint",
    "PaintLike",
    "RadialGradient",
    "Rgb",
    "Rgba",
    "SolidColor",
    "linear_gradient",
    "parse_color",
    "radial_gradient",
]
