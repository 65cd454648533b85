"""JSON round trip for drawings (lists of shapes)."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence, Union

from .errors import InvalidArgument
from .geometry import Point
from .shapes import (
    Arc,
    BezierCurve,
    Circle,
    Ellipse,
    Line,
    LineString,
    Polygon,
    PolygonWithHoles,
    Rectangle,
    Shape,
    Triangle,
)
from .units import Angle, Measurement


def _point(data: Dict[str, Any]) -> Point:
    try:
        return Point.from_mm(float(data["x"]), float(data["y"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidArgument(f"Malformed point: {data!r}") from exc


def _mm(value: Any) -> Measurement:
    return Measurement.from_mm(value)


def _polygon(data: Dict[str, Any]) -> Polygon:
    return Polygon(tuple(_point(p) for p in data["points"]))


_DECODERS: Dict[str, Callable[[Dict[str, Any]], Shape]] = {
    "Line": lambda d: Line(_point(d["start"]), _point(d["end"])),
    "LineString": lambda d: LineString(tuple(_point(p) for p in d["points"])),
    "Polygon": _polygon,
    "PolygonWithHoles": lambda d: PolygonWithHoles(
        _polygon(d["outer"]), tuple(_polygon(h) for h in d.get("holes", []))
    ),
    "Triangle": lambda d: Triangle(_point(d["a"]), _point(d["b"]), _point(d["c"])),
    "Rectangle": lambda d: Rectangle(_point(d["topLeft"]), _mm(d["width"]), _mm(d["height"])),
    "Circle": lambda d: Circle(_point(d["center"]), _mm(d["radius"])),
    "Ellipse": lambda d: Ellipse(_point(d["center"]), _mm(d["radiusX"]), _mm(d["radiusY"])),
    "Arc": lambda d: Arc(
        _point(d["center"]),
        _mm(d["radius"]),
        Angle.from_radians(d["start"]),
        Angle.from_radians(d["end"]),
        bool(d.get("clockwise", False)),
    ),
    "BezierCurve": lambda d: BezierCurve(_point(d["p0"]), _point(d["p1"]), _point(d["p2"]), _point(d["p3"])),
}


def shape_from_json(data: Dict[str, Any]) -> Shape:
    """Rebuild a shape from the dict produced by ``Shape.to_json()``."""
    if not isinstance(data, dict):
        raise InvalidArgument(f"Shape record must be an object, got {type(data).__name__}")
    kind = data.get("type")
    decoder = _DECODERS.get(kind) if isinstance(kind, str) else None
    if decoder is None:
        raise InvalidArgument(f"Unknown shape type: {kind!r}")
    try:
        return decoder(data)
    except KeyError as exc:
        raise InvalidArgument(f"{kind} record is missing field {exc.args[0]!r}") from exc
    except InvalidArgument:
        raise
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidArgument(f"Malformed {kind} record: {exc}") from exc


def shapes_to_json(shapes: Sequence[Shape]) -> List[Dict[str, Any]]:
    return [s.to_json() for s in shapes]


def shapes_from_json(items: Sequence[Dict[str, Any]]) -> List[Shape]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise InvalidArgument(f"Shape list must be an array, got {type(items).__name__}")
    return [shape_from_json(it) for it in items]


def save_drawing(path: Union[str, Path], shapes: Sequence[Shape]) -> None:
    payload = {"version": 1, "shapes": shapes_to_json(shapes)}
    Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")


def load_drawing(path: Union[str, Path]) -> List[Shape]:
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidArgument(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(payload, list):
        return shapes_from_json(payload)
    if not isinstance(payload, dict):
        raise InvalidArgument(f"{path} must hold a shape list or a drawing object")
    return shapes_from_json(payload.get("shapes", []))
