"""Font descriptors, Pillow-backed text measurement, and text placement in a box."""
from __future__ import annotations

import enum
import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple, Union

from PIL import ImageFont

from .color import BLACK, PaintLike
from .drawing import DrawText, Drawing
from .errors import DrawingError, MeasurementError
from .geometry import Point, Rectangle, Rotation
from .style import DrawStyle

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "sans-serif"
GENERIC_FONT_FALLBACKS = {
    "sans-serif": ["Roboto", "Helvetica", "Arial", "Liberation Sans", "DejaVu Sans"],
    "serif": ["Times New Roman", "Times", "Liberation Serif", "DejaVu Serif"],
    "monospace": ["Courier New", "Courier", "Liberation Mono", "DejaVu Sans Mono"],
}


@dataclass(frozen=True)
class LineHeight:
    """Line height as an absolute length or as a multiple of the font size."""

    value: float
    relative: bool = True

    @classmethod
    def absolute(cls, value: float) -> LineHeight:
        return cls(float(value), relative=False)

    @classmethod
    def of_size(cls, factor: float) -> LineHeight:
        return cls(float(factor), relative=True)

    def resolve(self, font_size: float) -> float:
        if self.relative:
            return font_size * self.value
        return self.value


@dataclass(frozen=True)
class FontStyle:
    family: str = DEFAULT_FONT_FAMILY
    size: float = 15.0
    weight: str = "normal"
    style: str = "normal"
    line_height: LineHeight = LineHeight.of_size(1.0)
    path: Optional[str] = None

    def with_size(self, size: float) -> FontStyle:
        return FontStyle(self.family, size, self.weight, self.style, self.line_height, self.path)

    def text_height(self) -> float:
        return self.line_height.resolve(self.size)


class TextMetrics(Protocol):
    """Measures the advance width of a string; failures raise MeasurementError."""

    def measure_text_width(self, text: str, font: FontStyle) -> float:
        ...


class PillowTextMeasurer:
    """Caches Pillow fonts and measures advance widths with them."""

    FONT_DIRS = [
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/Library/Fonts"),
        Path("~/Library/Fonts").expanduser(),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        Path("C:/Windows/Fonts"),
    ]

    def __init__(self, font_dirs: Optional[List[Path]] = None) -> None:
        self._font_dirs = list(font_dirs) if font_dirs is not None else list(self.FONT_DIRS)
        self._font_cache: Dict[Tuple[str, int], ImageFont.ImageFont] = {}
        self._font_paths: Dict[str, Optional[str]] = {}

    def font(self, font: FontStyle) -> Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]:
        size = _checked_size(font.size)
        key_size = max(1, int(round(size)))
        family = font.family or DEFAULT_FONT_FAMILY
        cache_key = ((font.path or family).lower(), key_size)
        cached = self._font_cache.get(cache_key)
        if cached is not None:
            return cached

        candidates: List[str] = []
        if font.path:
            candidates.append(str(Path(font.path).expanduser()))
        for name in GENERIC_FONT_FALLBACKS.get(family.lower(), [family]):
            located = self._locate_font(name)
            if located:
                candidates.append(located)
        candidates.append("DejaVuSans.ttf")

        loaded = None
        for candidate in candidates:
            path, index = _split_collection_index(candidate)
            try:
                loaded = ImageFont.truetype(path, key_size, index=index)
            except OSError:
                continue
            logger.debug("resolved font %r size %d to %s", family, key_size, candidate)
            break
        if loaded is None:
            logger.debug("no truetype font for %r; using Pillow's default font", family)
            loaded = ImageFont.load_default(size=key_size)

        self._font_cache[cache_key] = loaded
        return loaded

    def measure_text_width(self, text: str, font: FontStyle) -> float:
        loaded = self.font(font)
        try:
            width = float(loaded.getlength(text))
        except (ValueError, OSError, UnicodeError) as exc:
            raise MeasurementError(f"cannot measure {text!r} with font {font.family!r}: {exc}") from exc
        if not math.isfinite(width):
            raise MeasurementError(f"measured width of {text!r} is not finite")
        return width

    def line_height(self, font: FontStyle) -> float:
        return font.text_height()

    def metrics(self, font: FontStyle) -> Tuple[float, float]:
        """Return (ascent, descent), estimated from the size when the font reports none."""
        loaded = self.font(font)
        if not isinstance(loaded, ImageFont.FreeTypeFont):
            return 0.8 * font.size, 0.2 * font.size
        ascent, descent = loaded.getmetrics()
        return float(ascent), float(descent)

    def _locate_font(self, family: str) -> Optional[str]:
        key = family.lower()
        if key in self._font_paths:
            return self._font_paths[key]
        normalized = _normalize_name(family)
        aliases = {normalized, normalized + "mt", normalized + "psmt"}
        best: Optional[Tuple[int, str]] = None
        for directory in self._font_dirs:
            if not normalized or not directory.exists():
                continue
            for pattern in ("*.ttf", "*.ttc"):
                for path in directory.rglob(pattern):
                    stem = _normalize_name(path.stem)
                    if stem in aliases:
                        score = 0
                    elif stem.startswith(normalized):
                        score = 1
                    elif normalized in stem:
                        score = 2
                    else:
                        continue
                    candidate = str(path) if pattern == "*.ttf" else f"{path};0"
                    if best is None or score < best[0]:
                        best = (score, candidate)
        resolved = best[1] if best else None
        self._font_paths[key] = resolved
        return resolved


def _checked_size(size: float) -> float:
    try:
        value = float(size)
    except (TypeError, ValueError) as exc:
        raise MeasurementError(f"font size {size!r} is not a number") from exc
    if not math.isfinite(value) or value <= 0:
        raise MeasurementError(f"font size must be a finite positive number, got {size!r}")
    return value


def _normalize_name(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", name, flags=re.IGNORECASE).lower()


def _split_collection_index(candidate: str) -> Tuple[str, int]:
    if ";" in candidate:
        path, idx = candidate.split(";", 1)
        if idx.isdigit():
            return path, int(idx)
        return path, 0
    return candidate, 0


class XOrigin(enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class YOrigin(enum.Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class Offset:
    """Shift applied after alignment: a length, or a fraction of the box dimension."""

    amount: float
    percent: bool = False

    @classmethod
    def scalar(cls, amount: float) -> Offset:
        return cls(float(amount))

    @classmethod
    def fraction(cls, amount: float) -> Offset:
        return cls(float(amount), percent=True)

    def resolve(self, dimension: float) -> float:
        return dimension * self.amount if self.percent else self.amount


@dataclass(frozen=True)
class TextPosition:
    """Where text sits inside its box.

    The default is left and bottom: the baseline rests on the box's bottom edge,
    which is also the default ``valign`` of the scene format.
    """

    x: XOrigin = XOrigin.LEFT
    y: YOrigin = YOrigin.BOTTOM
    offset_x: Optional[Offset] = None
    offset_y: Optional[Offset] = None

    @classmethod
    def center(cls) -> TextPosition:
        return cls(XOrigin.CENTER, YOrigin.CENTER)


@dataclass
class TextBox:
    """A string's font, color and alignment inside a bounding box."""

    bounding_box: Rectangle
    color: PaintLike = BLACK
    font: FontStyle = field(default_factory=FontStyle)
    position: TextPosition = field(default_factory=TextPosition)
    rotation: Optional[Rotation] = None

    def baseline_start(self, width: float, height: float) -> Point:
        box = self.bounding_box
        center = box.center
        if self.position.x is XOrigin.LEFT:
            x = box.closest.x
        elif self.position.x is XOrigin.RIGHT:
            x = box.farthest.x - width
        else:
            x = center.x - width / 2
        # Baseline in y-down coordinates.
        if self.position.y is YOrigin.TOP:
            y = box.closest.y + height
        elif self.position.y is YOrigin.BOTTOM:
            y = box.farthest.y
        else:
            y = center.y + height / 2
        if self.position.offset_x is not None:
            x += self.position.offset_x.resolve(box.width)
        if self.position.offset_y is not None:
            y += self.position.offset_y.resolve(box.height)
        return Point(x, y)

    def to_drawing(self, text: str, measurer: TextMetrics) -> Drawing:
        try:
            width = measurer.measure_text_width(text, self.font)
        except MeasurementError as exc:
            raise DrawingError(f"cannot place text {text!r}: {exc}") from exc
        height = self.font.text_height()
        start = self.baseline_start(width, height)
        end = Point(start.x + width, start.y - height)
        command = DrawText(text, start, end, self.font, self.rotation)
        # Text only takes its fill; stroke settings from ancestors are suppressed.
        return Drawing.new(command, DrawStyle.new(fill=self.color, stroke=None, stroke_width=None))


__all__ = [
    "FontStyle",
    "LineHeight",
    "Offset",
    "PillowTextMeasurer",
    "TextBox",
    "TextMetrics",
    "TextPosition",
    "XOrigin",
    "YOrigin",
]
