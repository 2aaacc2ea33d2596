"""Per-node style overrides and the field-wise cascade rule."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar

from .color import Paint, PaintLike

T = TypeVar("T")


class OverrideState(enum.Enum):
    INHERIT = "inherit"
    ABSENT = "absent"
    VALUE = "value"


@dataclass(frozen=True)
class Override(Generic[T]):
    """One style field: inherit from the parent, explicitly absent, or an explicit value.

    ``ABSENT`` suppresses whatever an ancestor set; ``INHERIT`` defers to it.
    """

    state: OverrideState = OverrideState.INHERIT
    value: Optional[T] = None

    @classmethod
    def inherit(cls) -> Override[Any]:
        return _INHERIT

    @classmethod
    def absent(cls) -> Override[Any]:
        return _ABSENT

    @classmethod
    def of(cls, value: T) -> Override[T]:
        if value is None:
            return _ABSENT
        return cls(OverrideState.VALUE, value)

    @property
    def is_inherit(self) -> bool:
        return self.state is OverrideState.INHERIT

    @property
    def is_absent(self) -> bool:
        return self.state is OverrideState.ABSENT

    @property
    def is_set(self) -> bool:
        return self.state is not OverrideState.INHERIT

    def get(self) -> Optional[T]:
        return self.value if self.state is OverrideState.VALUE else None

    def resolve(self, parent: Override[T]) -> Override[T]:
        if self.state is OverrideState.INHERIT:
            return parent
        return self

    def map(self, fn: Callable[[T], T]) -> Override[T]:
        if self.state is OverrideState.VALUE:
            return Override(OverrideState.VALUE, fn(self.value))
        return self

    def __repr__(self) -> str:
        if self.state is OverrideState.VALUE:
            return f"Override.of({self.value!r})"
        return f"Override.{self.state.value}()"


_INHERIT: Override[Any] = Override(OverrideState.INHERIT)
_ABSENT: Override[Any] = Override(OverrideState.ABSENT)


def _paint_override(value: Any) -> Override[Paint]:
    if isinstance(value, Override):
        return value.map(Paint.of)
    return Override.of(None if value is None else Paint.of(value))


def _width_override(value: Any) -> Override[float]:
    if isinstance(value, Override):
        return value.map(float)
    return Override.of(None if value is None else float(value))


@dataclass
class DrawStyle:
    fill: Override[Paint] = field(default_factory=Override.inherit)
    stroke: Override[Paint] = field(default_factory=Override.inherit)
    stroke_width: Override[float] = field(default_factory=Override.inherit)

    @classmethod
    def new(
        cls,
        fill: Any = Override.inherit(),
        stroke: Any = Override.inherit(),
        stroke_width: Any = Override.inherit(),
    ) -> DrawStyle:
        """Build a style; plain values are explicit, ``None`` is explicitly absent."""
        return cls(_paint_override(fill), _paint_override(stroke), _width_override(stroke_width))

    @classmethod
    def fill_only(cls, paint: PaintLike) -> DrawStyle:
        return cls(fill=Override.of(Paint.of(paint)))

    @classmethod
    def stroke_only(cls, paint: PaintLike, width: Optional[float] = None) -> DrawStyle:
        style = cls(stroke=Override.of(Paint.of(paint)))
        if width is not None:
            style.stroke_width = Override.of(float(width))
        return style

    @classmethod
    def width_only(cls, width: float) -> DrawStyle:
        return cls(stroke_width=Override.of(float(width)))

    @classmethod
    def from_style(cls, style: Any) -> DrawStyle:
        """Snapshot any style-bearing value by reading its three accessors independently."""
        if style is None:
            return cls()
        if isinstance(style, DrawStyle):
            return style.clone_shallow()
        return cls(
            _paint_override(_read(style, "fill")),
            _paint_override(_read(style, "stroke")),
            _width_override(_read(style, "stroke_width")),
        )

    from_style_ref = from_style

    # Accessors shared with Fill/Stroke/StrokeWidth so a DrawStyle is itself style-bearing.
    def fill_override(self) -> Override[Paint]:
        return self.fill

    def stroke_override(self) -> Override[Paint]:
        return self.stroke

    def stroke_width_override(self) -> Override[float]:
        return self.stroke_width

    def fill_paint(self) -> Optional[Paint]:
        return self.fill.get()

    def stroke_paint(self) -> Optional[Paint]:
        return self.stroke.get()

    def width(self) -> Optional[float]:
        return self.stroke_width.get()

    def set_fill(self, paint: Optional[PaintLike]) -> DrawStyle:
        self.fill = _paint_override(paint)
        return self

    def set_stroke(self, paint: Optional[PaintLike]) -> DrawStyle:
        self.stroke = _paint_override(paint)
        return self

    def set_stroke_width(self, width: Optional[float]) -> DrawStyle:
        self.stroke_width = _width_override(width)
        return self

    def clear_fill(self) -> DrawStyle:
        self.fill = Override.inherit()
        return self

    def clear_stroke(self) -> DrawStyle:
        self.stroke = Override.inherit()
        return self

    def clear_stroke_width(self) -> DrawStyle:
        self.stroke_width = Override.inherit()
        return self

    def is_empty(self) -> bool:
        return self.fill.is_inherit and self.stroke.is_inherit and self.stroke_width.is_inherit

    def combine(self, parent: DrawStyle) -> DrawStyle:
        """Resolve this override against the parent's already-resolved style."""
        return DrawStyle(
            self.fill.resolve(parent.fill),
            self.stroke.resolve(parent.stroke),
            self.stroke_width.resolve(parent.stroke_width),
        )

    def clone_shallow(self) -> DrawStyle:
        return DrawStyle(
            self.fill.map(Paint.shallow),
            self.stroke.map(Paint.shallow),
            self.stroke_width,
        )

    def to_owned(self) -> DrawStyle:
        return DrawStyle(
            self.fill.map(Paint.to_owned),
            self.stroke.map(Paint.to_owned),
            self.stroke_width,
        )

    def __or__(self, other: Any) -> DrawStyle:
        """Layer ``other`` on top: its set fields win, its inherited fields fall through."""
        return DrawStyle.from_style(other).combine(self)


def _read(style: Any, name: str) -> Any:
    accessor = getattr(style, f"{name}_override", None)
    if callable(accessor):
        return accessor()
    return Override.inherit()


class _StyleFragment:
    def fill_override(self) -> Override[Paint]:
        return Override.inherit()

    def stroke_override(self) -> Override[Paint]:
        return Override.inherit()

    def stroke_width_override(self) -> Override[float]:
        return Override.inherit()

    def __or__(self, other: Any) -> DrawStyle:
        return DrawStyle.from_style(self) | other


class Fill(_StyleFragment):
    def __init__(self, paint: Optional[PaintLike]) -> None:
        self.paint = None if paint is None else Paint.of(paint)

    def fill_override(self) -> Override[Paint]:
        return Override.of(None if self.paint is None else self.paint.shallow())

    def __repr__(self) -> str:
        return f"Fill({self.paint!r})"


class Stroke(_StyleFragment):
    def __init__(self, paint: Optional[PaintLike], width: Optional[float] = None) -> None:
        self.paint = None if paint is None else Paint.of(paint)
        self.width = width

    def stroke_override(self) -> Override[Paint]:
        return Override.of(None if self.paint is None else self.paint.shallow())

    def stroke_width_override(self) -> Override[float]:
        if self.width is None:
            return Override.inherit()
        return Override.of(float(self.width))

    def __repr__(self) -> str:
        return f"Stroke({self.paint!r}, width={self.width!r})"


class StrokeWidth(_StyleFragment):
    def __init__(self, width: Optional[float]) -> None:
        self.width = width

    def stroke_width_override(self) -> Override[float]:
        return Override.of(None if self.width is None else float(self.width))

    def __repr__(self) -> str:
        return f"StrokeWidth({self.width!r})"


__all__ = ["DrawStyle", "Fill", "Override", "OverrideState", "Stroke", "StrokeWidth"]
