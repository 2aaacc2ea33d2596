"""Public API for drawme."""
from .canvas import Canvas, ImageSource, RecordingCanvas, Styled
from .color import (
    BLACK,
    BLUE,
    BROWN,
    CYAN,
    GREEN,
    MAGENTA,
    PURPLE,
    RED,
    TRANSPARENT,
    WHITE,
    YELLOW,
    LinearGradient,
    Paint,
    RadialGradient,
    Rgb,
    Rgba,
    linear_gradient,
    parse_color,
    radial_gradient,
)
from .drawing import DrawCircle, DrawImage, DrawPath, DrawText, Drawing, DrawingInstruction
from .errors import (
    DrawingError,
    DrawmeError,
    MeasurementError,
    RenderError,
    SceneError,
    UnsupportedOperationError,
)
from .geometry import BoundingBox, Circle, Isometry, Path, Point, Rectangle, Rotation, RoundedRectangle, Vector
from .scene import load_scene, loads_scene, render_scene
from .style import DrawStyle, Fill, Override, Stroke, StrokeWidth
from .svg import Svg, render_svg
from .text import FontStyle, LineHeight, Offset, PillowTextMeasurer, TextBox, TextPosition, XOrigin, YOrigin

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
    "BoundingBox",
    "Canvas",
    "Circle",
    "DrawCircle",
    "DrawImage",
    "DrawPath",
    "DrawStyle",
    "DrawText",
    "Drawing",
    "DrawingError",
    "DrawingInstruction",
    "DrawmeError",
    "Fill",
    "FontStyle",
    "ImageSource",
    "Isometry",
    "LineHeight",
    "LinearGradient",
    "MeasurementError",
    "Offset",
    "Override",
    "Paint",
    "Path",
    "PillowTextMeasurer",
    "Point",
    "RadialGradient",
    "RecordingCanvas",
    "Rectangle",
    "RenderError",
    "Rgb",
    "Rgba",
    "Rotation",
    "RoundedRectangle",
    "SceneError",
    "Stroke",
    "StrokeWidth",
    "Styled",
    "Svg",
    "TextBox",
    "TextPosition",
    "UnsupportedOperationError",
    "Vector",
    "XOrigin",
    "YOrigin",
    "linear_gradient",
    "load_scene",
    "loads_scene",
    "parse_color",
    "radial_gradient",
    "render_scene",
    "render_svg",
]
