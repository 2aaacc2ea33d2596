"""Build drawings from JSON scene descriptions."""
from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from .canvas import ImageSource
from .color import Paint, linear_gradient, parse_color, radial_gradient
from .drawing import DrawImage, Drawing
from .errors import SceneError
from .geometry import Circle, Path, Point, Rectangle, Rotation, RoundedRectangle, Vector
from .style import DrawStyle, Override
from .svg import render_svg
from .text import FontStyle, LineHeight, Offset, TextBox, TextMetrics, TextPosition, XOrigin, YOrigin

logger = logging.getLogger(__name__)

NODE_KEYS = {"style", "command", "children", "translate"}
STYLE_KEYS = {"fill", "stroke", "stroke-width"}
COMMAND_KINDS = ("path", "circle", "rect", "text", "image")


def loads_scene(text: str, measurer: Optional[TextMetrics] = None) -> Drawing:
    """Parse a JSON scene. Malformed JSON raises json.JSONDecodeError unchanged."""
    return load_scene(json.loads(text), measurer)


def load_scene(data: Any, measurer: Optional[TextMetrics] = None) -> Drawing:
    """Build a Drawing from decoded scene data: one node object, or a list of them under a bare root."""
    if isinstance(data, list):
        root = Drawing()
        for index, child in enumerate(data):
            root.add_child(_build_node(child, measurer, f"$[{index}]"))
        return root
    return _build_node(data, measurer, "$")


def render_scene(text: str, measurer: Optional[TextMetrics] = None) -> str:
    return render_svg(loads_scene(text, measurer), measurer)


def _build_node(data: Any, measurer: Optional[TextMetrics], where: str) -> Drawing:
    if not isinstance(data, dict):
        raise SceneError("E_SCENE_NODE", f"{where}: a scene node must be an object")
    unknown = sorted(set(data) - NODE_KEYS)
    if unknown:
        raise SceneError(
            "E_SCENE_NODE",
            f"{where}: unsupported key(s) {', '.join(unknown)}; expected style, command, children, translate",
        )

    style = _parse_style(data.get("style", {}), f"{where}.style")
    command = data.get("command")
    if command is None:
        node = Drawing(None, style)
    else:
        node = _build_command(command, style, measurer, f"{where}.command")

    children = data.get("children", [])
    if not isinstance(children, list):
        raise SceneError("E_SCENE_NODE", f"{where}.children must be a list")
    for index, child in enumerate(children):
        node.add_child(_build_node(child, measurer, f"{where}.children[{index}]"))

    if "translate" in data:
        offset = _point(data["translate"], f"{where}.translate")
        node.translate(Vector(offset.x, offset.y))
    return node


def _parse_style(data: Any, where: str) -> DrawStyle:
    if not isinstance(data, dict):
        raise SceneError("E_SCENE_STYLE", f"{where} must be an object")
    unknown = sorted(set(data) - STYLE_KEYS)
    if unknown:
        raise SceneError("E_SCENE_STYLE", f"{where}: unsupported key(s) {', '.join(unknown)}")
    # Missing keys inherit, null is explicitly absent.
    style = DrawStyle()
    if "fill" in data:
        style.fill = Override.of(_paint(data["fill"], f"{where}.fill"))
    if "stroke" in data:
        style.stroke = Override.of(_paint(data["stroke"], f"{where}.stroke"))
    if "stroke-width" in data:
        width = data["stroke-width"]
        if width is None:
            style.stroke_width = Override.absent()
        else:
            style.stroke_width = Override.of(_number(width, f"{where}.stroke-width", minimum=0.0))
    return style


def _paint(value: Any, where: str) -> Optional[Paint]:
    if value is None:
        return None
    if isinstance(value, str):
        return Paint(_color(value, where))
    if isinstance(value, dict) and len(value) == 1 and next(iter(value)) in ("linear", "radial"):
        kind, spec = next(iter(value.items()))
        if not isinstance(spec, dict):
            raise SceneError("E_SCENE_PAINT", f"{where}.{kind} must be an object")
        stops = _stops(spec.get("stops"), f"{where}.{kind}.stops")
        if kind == "linear":
            rotation = _number(spec.get("rotation", 0), f"{where}.linear.rotation")
        else:
            center = _point(spec.get("center", [0.5, 0.5]), f"{where}.radial.center")
            radius = _number(spec.get("radius", 0.5), f"{where}.radial.radius", minimum=0.0)
        try:
            if kind == "linear":
                return Paint(linear_gradient(Rotation.from_degrees(rotation), stops))
            return Paint(radial_gradient(center, stops, radius))
        except ValueError as exc:
            raise SceneError("E_SCENE_PAINT", f"{where}: {exc}") from exc
    raise SceneError(
        "E_SCENE_PAINT",
        f'{where}: paint must be a color string, {{"linear": ...}}, {{"radial": ...}} or null',
    )


def _stops(value: Any, where: str) -> List:
    if not isinstance(value, list) or not value:
        raise SceneError("E_SCENE_PAINT", f"{where} must be a non-empty list of [color, offset] pairs")
    stops = []
    for index, stop in enumerate(value):
        if not isinstance(stop, list) or len(stop) != 2 or not isinstance(stop[0], str):
            raise SceneError("E_SCENE_PAINT", f"{where}[{index}] must be [color, offset]")
        offset = _number(stop[1], f"{where}[{index}]", minimum=0.0)
        if offset > 1.0:
            raise SceneError("E_SCENE_PAINT", f"{where}[{index}]: offset {offset:g} is outside 0..1")
        stops.append((_color(stop[0], f"{where}[{index}]"), offset))
    return stops


def _color(text: str, where: str):
    try:
        return parse_color(text)
    except ValueError as exc:
        raise SceneError("E_SCENE_PAINT", f"{where}: {exc}") from exc


def _build_command(command: Any, style: DrawStyle, measurer: Optional[TextMetrics], where: str) -> Drawing:
    if not isinstance(command, dict) or len(command) != 1:
        raise SceneError(
            "E_SCENE_COMMAND",
            f"{where} must be an object with exactly one of: {', '.join(COMMAND_KINDS)}",
        )
    kind, spec = next(iter(command.items()))
    where = f"{where}.{kind}"
    if kind == "path":
        return Drawing(_path(spec, where), style)
    if kind == "circle":
        spec = _object(spec, where)
        center = _point(_required(spec, "center", where), f"{where}.center")
        radius = _number(_required(spec, "radius", where), f"{where}.radius", minimum=0.0)
        return Drawing(Circle(center, radius), style)
    if kind == "rect":
        return Drawing(_rect(spec, where), style)
    if kind == "image":
        spec = _object(spec, where)
        url = _required(spec, "url", where)
        if not isinstance(url, str):
            raise SceneError("E_SCENE_COMMAND", f"{where}.url must be a string")
        offset = _point(spec.get("offset", [0, 0]), f"{where}.offset")
        return Drawing(DrawImage(ImageSource(url), offset), style)
    if kind == "text":
        return _text(spec, style, measurer, where)
    raise SceneError(
        "E_SCENE_COMMAND",
        f"{where}: unknown command {kind!r}; expected one of {', '.join(COMMAND_KINDS)}",
    )


def _path(spec: Any, where: str) -> Path:
    if not isinstance(spec, list):
        raise SceneError("E_SCENE_COMMAND", f"{where} must be a list of segments")
    path = Path()
    arity = {"M": 2, "L": 2, "Q": 4, "C": 6}
    for index, segment in enumerate(spec):
        at = f"{where}[{index}]"
        if not isinstance(segment, list) or not segment or not isinstance(segment[0], str) or segment[0] not in arity:
            raise SceneError("E_SCENE_COMMAND", f"{at} must start with one of M, L, Q, C")
        letter, coords = segment[0], segment[1:]
        if len(coords) != arity[letter]:
            raise SceneError("E_SCENE_COMMAND", f"{at}: {letter} takes {arity[letter]} numbers")
        values = [_number(value, at) for value in coords]
        points = [(values[i], values[i + 1]) for i in range(0, len(values), 2)]
        if letter == "M":
            path.move_to(points[0])
        elif letter == "L":
            path.line_to(points[0])
        elif letter == "Q":
            path.quad_to(points[0], points[1])
        else:
            path.curve_to(points[0], points[1], points[2])
    return path


def _rect(spec: Any, where: str):
    spec = _object(spec, where)
    closest = _point(_required(spec, "from", where), f"{where}.from")
    farthest = _point(_required(spec, "to", where), f"{where}.to")
    rect = Rectangle(closest, farthest)
    if "rotation" in spec:
        rect.with_rotation(Rotation.from_degrees(_number(spec["rotation"], f"{where}.rotation")))
    if "radius" in spec:
        radius = _number(spec["radius"], f"{where}.radius", minimum=0.0)
        return RoundedRectangle(rect).set_all_corners(radius)
    return rect


def _text(spec: Any, style: DrawStyle, measurer: Optional[TextMetrics], where: str) -> Drawing:
    if measurer is None:
        raise SceneError("E_SCENE_TEXT", f"{where}: text needs a measurer to be placed")
    spec = _object(spec, where)
    text = _required(spec, "text", where)
    if not isinstance(text, str):
        raise SceneError("E_SCENE_TEXT", f"{where}.text must be a string")
    box = _required(spec, "box", where)
    if not isinstance(box, list) or len(box) != 2:
        raise SceneError("E_SCENE_TEXT", f"{where}.box must be [[x, y], [x, y]]")
    rect = Rectangle(_point(box[0], f"{where}.box[0]"), _point(box[1], f"{where}.box[1]"))

    font = _font(spec.get("font", {}), f"{where}.font")
    position = TextPosition(
        _enum(XOrigin, spec.get("align", "left"), f"{where}.align"),
        _enum(YOrigin, spec.get("valign", "bottom"), f"{where}.valign"),
        _offset(spec.get("dx"), f"{where}.dx"),
        _offset(spec.get("dy"), f"{where}.dy"),
    )
    color = _paint(spec.get("color", "black"), f"{where}.color")
    if color is None:
        raise SceneError("E_SCENE_TEXT", f"{where}.color cannot be null")
    rotation = None
    if "rotation" in spec:
        rotation = Rotation.from_degrees(_number(spec["rotation"], f"{where}.rotation"))

    node = TextBox(rect, color, font, position, rotation).to_drawing(text, measurer)
    if not style.is_empty():
        node.set_style((node.style() | style).to_owned())
    logger.debug("placed text %r at %s", text, where)
    return node


def _font(spec: Any, where: str) -> FontStyle:
    spec = _object(spec, where)
    defaults = FontStyle()
    line_height = defaults.line_height
    if "line-height" in spec:
        line_height = LineHeight.of_size(_number(spec["line-height"], f"{where}.line-height", minimum=0.0))
    return FontStyle(
        family=str(spec.get("family", defaults.family)),
        size=_number(spec.get("size", defaults.size), f"{where}.size", minimum=0.0),
        weight=str(spec.get("weight", defaults.weight)),
        style=str(spec.get("style", defaults.style)),
        line_height=line_height,
        path=spec.get("path"),
    )


def _offset(value: Any, where: str) -> Optional[Offset]:
    if value is None:
        return None
    if isinstance(value, str) and value.endswith("%"):
        try:
            return Offset.fraction(float(value[:-1]) / 100)
        except ValueError:
            raise SceneError("E_SCENE_TEXT", f"{where}: invalid percentage {value!r}") from None
    return Offset.scalar(_number(value, where))


def _enum(kind, value: Any, where: str):
    try:
        return kind(value)
    except ValueError:
        options = ", ".join(member.value for member in kind)
        raise SceneError("E_SCENE_TEXT", f"{where}: {value!r} is not one of {options}") from None


def _object(spec: Any, where: str) -> Dict[str, Any]:
    if not isinstance(spec, dict):
        raise SceneError("E_SCENE_COMMAND", f"{where} must be an object")
    return spec


def _required(spec: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in spec:
        raise SceneError("E_SCENE_COMMAND", f"{where} is missing required key {key!r}")
    return spec[key]


def _number(value: Any, where: str, minimum: Optional[float] = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneError("E_SCENE_VALUE", f"{where} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise SceneError("E_SCENE_VALUE", f"{where} must be finite")
    if minimum is not None and number < minimum:
        raise SceneError("E_SCENE_VALUE", f"{where} must be >= {minimum:g}, got {number:g}")
    return number


def _point(value: Any, where: str) -> Point:
    if not isinstance(value, list) or len(value) != 2:
        raise SceneError("E_SCENE_VALUE", f"{where} must be [x, y]")
    return Point(_number(value[0], f"{where}[0]"), _number(value[1], f"{where}[1]"))


__all__ = ["load_scene", "loads_scene", "render_scene"]
