"""SVG canvas: accumulates elements, gradient definitions and the document extent."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from .canvas import Canvas, ImageSource
from .color import Gradient, LinearGradient, Paint, RadialGradient
from .errors import DrawingError, MeasurementError, RenderError, UnsupportedOperationError
from .geometry import BoundingBox, Isometry, Path, Point, PointLike, Vector, fmt
from .style import DrawStyle
from .text import FontStyle, TextMetrics
from .xmlnode import XmlNode

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


class Svg(Canvas):
    """Canvas that renders to a single SVG document.

    Gradient paints are collected into ``<defs>`` once per distinct gradient and
    referenced as ``url(#fill{i})`` / ``url(#stroke{i})``. The viewBox covers the
    farthest extent of everything drawn, starting from the origin.
    """

    def __init__(self, measurer: Optional[TextMetrics] = None) -> None:
        self.root = XmlNode("svg", {"xmlns": SVG_NS})
        self.stroke_gradients: List[Gradient] = []
        self.fill_gradients: List[Gradient] = []
        self.bounding_box = BoundingBox()
        self._measurer = measurer
        self._built: Optional[str] = None
        self._failure: Optional[BaseException] = None

    # -- canvas calls --------------------------------------------------

    def path(self, style: Any, path: Path) -> None:
        self._guarded(self._draw_path, style, path)

    def circle(self, style: Any, point: PointLike, radius: float) -> None:
        self._guarded(self._draw_circle, style, point, radius)

    def text(self, style: Any, text: str, font: Any, isometry: Isometry) -> None:
        self._guarded(self._draw_text, style, text, font, isometry)

    def image(self, source: ImageSource) -> None:
        self._guarded(self._draw_image, source)

    def _guarded(self, draw: Callable[..., None], *args: Any) -> None:
        # A failed draw call aborts the pass.
        self._check_open()
        try:
            draw(*args)
        except BaseException as exc:
            if self._failure is None:
                self._failure = exc
            raise

    def _draw_path(self, style: Any, path: Path) -> None:
        node = XmlNode("path", {"d": path.to_svg_data()})
        self._apply_style(node, style)
        box = path.bounding_box()
        if box is not None:
            self._extend(box.farthest)
        self.root.append_child(node)

    def _draw_circle(self, style: Any, point: PointLike, radius: float) -> None:
        center = Point.of(point)
        node = XmlNode("circle", {"cx": fmt(center.x), "cy": fmt(center.y), "r": fmt(radius)})
        self._apply_style(node, style)
        self._extend(center + Vector(radius, radius))
        self.root.append_child(node)

    def _draw_text(self, style: Any, text: str, font: Any, isometry: Isometry) -> None:
        font = font if isinstance(font, FontStyle) else FontStyle(family=str(font))
        origin = Point(isometry.translation.x, isometry.translation.y)
        node = XmlNode(
            "text",
            {
                "x": fmt(origin.x),
                "y": fmt(origin.y),
                "font-family": font.family,
                "font-size": fmt(font.size),
            },
        )
        if font.weight != "normal":
            node.set_attribute("font-weight", font.weight)
        if font.style != "normal":
            node.set_attribute("font-style", font.style)
        if not isometry.rotation.is_identity():
            node.set_attribute(
                "transform", f"rotate({fmt(isometry.rotation.degrees)} {fmt(origin.x)} {fmt(origin.y)})"
            )
        self._apply_style(node, style)
        node.append_text(text)

        self._extend(origin)
        if self._measurer is not None:
            try:
                width = self._measurer.measure_text_width(text, font)
            except MeasurementError as exc:
                raise DrawingError(f"cannot size text {text!r}: {exc}") from exc
            end = origin + Vector(width, 0.0).rotate(isometry.rotation)
            self._extend(end)
        self.root.append_child(node)

    def _draw_image(self, source: ImageSource) -> None:
        raise UnsupportedOperationError("image", "svg")

    # -- output --------------------------------------------------------

    def build(self) -> str:
        """Finish the document and return it; later calls return the same text."""
        if self._failure is not None:
            raise RenderError("render pass was aborted; refusing to emit a partial document") from self._failure
        if self._built is not None:
            return self._built
        if self.stroke_gradients or self.fill_gradients:
            defs = XmlNode("defs")
            for index, gradient in enumerate(self.stroke_gradients):
                defs.append_child(_gradient_node(gradient, f"stroke{index}"))
            for index, gradient in enumerate(self.fill_gradients):
                defs.append_child(_gradient_node(gradient, f"fill{index}"))
            self.root.prepend_child(defs)
        self.root.set_attribute("viewBox", self.bounding_box.view_box())
        self._built = self.root.serialize()
        return self._built

    # -- helpers -------------------------------------------------------

    def _check_open(self) -> None:
        if self._built is not None:
            raise RenderError("document was already built; draw onto a new Svg")

    def _extend(self, point: Point) -> None:
        self.bounding_box.extend_to(point)

    def _apply_style(self, node: XmlNode, style: Any) -> None:
        style = DrawStyle.from_style(style)
        fill = style.fill_paint()
        if fill is not None:
            node.set_attribute("fill", self._paint_value(fill, self.fill_gradients, "fill"))
        stroke = style.stroke_paint()
        if stroke is not None:
            node.set_attribute("stroke", self._paint_value(stroke, self.stroke_gradients, "stroke"))
        width = style.width()
        if width is not None:
            node.set_attribute("stroke-width", fmt(width))

    def _paint_value(self, paint: Paint, registry: List[Gradient], prefix: str) -> str:
        if not paint.is_gradient:
            return paint.css()
        for index, known in enumerate(registry):
            if known == paint.value:
                return f"url(#{prefix}{index})"
        registry.append(paint.to_owned().value)
        logger.debug("registered %s gradient %d: %r", prefix, len(registry) - 1, paint.value)
        return f"url(#{prefix}{len(registry) - 1})"


def _percent(fraction: float) -> str:
    return f"{fmt(fraction * 100)}%"


def _direction_percent(component: float) -> str:
    # Maps a unit direction component in [-1, 1] onto [0%, 100%].
    return _percent((component + 1) / 2)


def _gradient_node(gradient: Gradient, gradient_id: str) -> XmlNode:
    if isinstance(gradient, LinearGradient):
        cos, sin = gradient.rotation.cos, gradient.rotation.sin
        node = XmlNode(
            "linearGradient",
            {
                "id": gradient_id,
                "x1": _direction_percent(-cos),
                "y1": _direction_percent(-sin),
                "x2": _direction_percent(cos),
                "y2": _direction_percent(sin),
            },
        )
    elif isinstance(gradient, RadialGradient):
        node = XmlNode(
            "radialGradient",
            {
                "id": gradient_id,
                "cx": _percent(gradient.center.x),
                "cy": _percent(gradient.center.y),
                "r": _percent(gradient.radius),
            },
        )
    else:
        raise TypeError(f"unknown gradient type {type(gradient).__name__}")
    for color, offset in gradient.stops:
        stop = XmlNode("stop", {"offset": _percent(offset), "stop-color": color.opaque().css()})
        # rgba() stop colors are not honoured everywhere.
        if color.alpha is not None:
            stop.set_attribute("stop-opacity", fmt(color.alpha))
        node.append_child(stop)
    return node


def render_svg(drawable: Any, measurer: Optional[TextMetrics] = None) -> str:
    """Draw a Drawing or Styled shape onto a fresh Svg and return the document."""
    canvas = Svg(measurer)
    drawable.draw(canvas)
    return canvas.build()


__all__ = ["SVG_NS", "Svg", "render_svg"]
