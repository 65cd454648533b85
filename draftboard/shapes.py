"""Immutable shape family drawn on the canvas.

Every shape stores its coordinates as :class:`~draftboard.geometry.Point`
instances (millimetres) and exposes the same capability set through the
:class:`Shape` base class. Transforms return new instances; nothing here
mutates in place, so the canvas can swap old shapes for new ones and remap
its selection by identity afterwards.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Iterable, List, Sequence, Tuple

import numpy as np

from .errors import InvalidArgument
from .geometry import (
    Bounds,
    Point,
    bounds_of,
    bounds_overlap,
    point_in_polygon,
    point_to_polyline_distance,
    points_to_array,
    polygon_area,
    polyline_length,
    ring_length,
    rotate_point,
    sample_arc,
    sample_cubic_bezier,
    scale_point,
)
from .render import EllipsePrimitive, PathPrimitive
from .units import MM_PER_INCH, Angle, Measurement, get_dpi

ON_PATH_TOLERANCE_MM = 1e-6
TRIANGLE_AREA_EPSILON = 1e-12
ARC_BBOX_STEPS = 32
CURVE_LENGTH_STEPS = 64
CURVE_BBOX_STEPS = 32
CURVE_RENDER_STEPS = 64

TWO_PI = 2.0 * math.pi


def _px_factor() -> float:
    return get_dpi() / MM_PER_INCH


def _to_px(arr: np.ndarray) -> np.ndarray:
    return arr * _px_factor()


def _require_measurement(value, what: str) -> Measurement:
    if not isinstance(value, Measurement):
        raise InvalidArgument(f"{what} must be a Measurement, got {value!r}")
    return value


def _require_point(value, what: str) -> Point:
    if not isinstance(value, Point):
        raise InvalidArgument(f"{what} must be a Point, got {value!r}")
    return value


def _require_positive(value: Measurement, what: str) -> Measurement:
    _require_measurement(value, what)
    if value.value_mm <= 0.0:
        raise InvalidArgument(f"{what} must be positive, got {value}")
    return value


def _points_tuple(points: Iterable[Point], what: str) -> Tuple[Point, ...]:
    pts = tuple(points)
    for p in pts:
        _require_point(p, what)
    return pts


def _points_equal(a: Sequence[Point], b: Sequence[Point]) -> bool:
    return len(a) == len(b) and all(p.equals(q) for p, q in zip(a, b))


@dataclass(frozen=True, eq=False)
class BoundingBox:
    """Axis-aligned box in world millimetres.

    Unlike :class:`Rectangle` the box may be degenerate (a horizontal line has
    zero height), so it is a plain value rather than a drawable shape.
    """

    x0: float
    y0: float
    x1: float
    y1: float

    def __post_init__(self) -> None:
        if self.x1 < self.x0 or self.y1 < self.y0:
            raise InvalidArgument(f"Bounding box extent is inverted: {self.extent_mm()}")

    @classmethod
    def from_extent(cls, bounds: Bounds) -> "BoundingBox":
        return cls(*(float(v) for v in bounds))

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> "BoundingBox":
        if not points:
            raise InvalidArgument("Cannot bound an empty point list")
        return cls.from_extent(bounds_of(points_to_array(points)))

    @property
    def top_left(self) -> Point:
        return Point.from_mm(self.x0, self.y0)

    @property
    def width(self) -> Measurement:
        return Measurement.from_mm(self.x1 - self.x0)

    @property
    def height(self) -> Measurement:
        return Measurement.from_mm(self.y1 - self.y0)

    def center(self) -> Point:
        return Point.from_mm((self.x0 + self.x1) / 2.0, (self.y0 + self.y1) / 2.0)

    def extent_mm(self) -> Bounds:
        return (self.x0, self.y0, self.x1, self.y1)

    def extent_px(self) -> Bounds:
        k = _px_factor()
        return (self.x0 * k, self.y0 * k, self.x1 * k, self.y1 * k)

    def contains(self, point: Point) -> bool:
        x, y = point.to_mm()
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1

    def intersects(self, other: "BoundingBox") -> bool:
        return bounds_overlap(self.extent_mm(), other.extent_mm())

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.x0, other.x0),
            min(self.y0, other.y0),
            max(self.x1, other.x1),
            max(self.y1, other.y1),
        )

    def to_rectangle(self) -> "Rectangle":
        return Rectangle(self.top_left, self.width, self.height)

    def equals(self, other: "BoundingBox") -> bool:
        return all(abs(a - b) < 1e-9 for a, b in zip(self.extent_mm(), other.extent_mm()))

    def __repr__(self) -> str:
        return f"BoundingBox({self.x0:g}, {self.y0:g}, {self.x1:g}, {self.y1:g})"


class Shape(ABC):
    """Capability set shared by every drawable shape."""

    kind: ClassVar[str] = "Shape"

    @abstractmethod
    def area(self) -> float:
        """Enclosed area in mm²."""

    @abstractmethod
    def perimeter(self) -> Measurement:
        ...

    @abstractmethod
    def translate(self, dx: Measurement, dy: Measurement) -> "Shape":
        ...

    @abstractmethod
    def rotate(self, angle: Angle, origin: Point) -> "Shape":
        ...

    @abstractmethod
    def scale(self, factor: float, origin: Point) -> "Shape":
        ...

    @abstractmethod
    def bounding_box(self) -> BoundingBox:
        ...

    @abstractmethod
    def contains(self, point: Point) -> bool:
        ...

    @abstractmethod
    def to_json(self) -> dict:
        ...

    @abstractmethod
    def to_renderable(self) -> List[object]:
        """Primitives in world pixels, ready for a :class:`~draftboard.render.Painter`."""

    @abstractmethod
    def equals(self, other: "Shape") -> bool:
        ...

    def intersects(self, other: "Shape") -> bool:
        return self.bounding_box().intersects(other.bounding_box())

    def bounds_px(self) -> Bounds:
        return self.bounding_box().extent_px()


# ---------------------------------------------------------------------------
# Open paths

@dataclass(frozen=True, eq=False)
class Line(Shape):
    start: Point
    end: Point

    kind: ClassVar[str] = "Line"

    def __post_init__(self) -> None:
        _require_point(self.start, "Line start")
        _require_point(self.end, "Line end")
        if self.start.equals(self.end):
            raise InvalidArgument("Line start and end must be different points")

    def length(self) -> Measurement:
        return self.start.distance_to(self.end)

    def area(self) -> float:
        return 0.0

    def perimeter(self) -> Measurement:
        return self.length()

    def translate(self, dx: Measurement, dy: Measurement) -> "Line":
        return Line(self.start.translate(dx, dy), self.end.translate(dx, dy))

    def rotate(self, angle: Angle, origin: Point) -> "Line":
        return Line(rotate_point(self.start, angle, origin), rotate_point(self.end, angle, origin))

    def scale(self, factor: float, origin: Point) -> "Line":
        return Line(scale_point(self.start, factor, origin), scale_point(self.end, factor, origin))

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points([self.start, self.end])

    def contains(self, point: Point) -> bool:
        arr = points_to_array([self.start, self.end])
        return point_to_polyline_distance(point.to_mm(), arr) <= ON_PATH_TOLERANCE_MM

    def to_json(self) -> dict:
        return {"type": self.kind, "start": self.start.to_json(), "end": self.end.to_json()}

    def to_renderable(self) -> List[object]:
        return [PathPrimitive(_to_px(points_to_array([self.start, self.end])))]

    def equals(self, other: Shape) -> bool:
        return isinstance(other, Line) and self.start.equals(other.start) and self.end.equals(other.end)


@dataclass(frozen=True, eq=False)
class LineString(Shape):
    points: Tuple[Point, ...]

    kind: ClassVar[str] = "LineString"

    def __post_init__(self) -> None:
        pts = _points_tuple(self.points, "LineString vertex")
        if len(pts) < 2:
            raise InvalidArgument("LineString requires at least two points")
        object.__setattr__(self, "points", pts)

    def _array(self) -> np.ndarray:
        return points_to_array(self.points)

    def area(self) -> float:
        return 0.0

    def perimeter(self) -> Measurement:
        return Measurement.from_mm(polyline_length(self._array()))

    def translate(self, dx: Measurement, dy: Measurement) -> "LineString":
        return LineString(tuple(p.translate(dx, dy) for p in self.points))

    def rotate(self, angle: Angle, origin: Point) -> "LineString":
        return LineString(tuple(rotate_point(p, angle, origin) for p in self.points))

    def scale(self, factor: float, origin: Point) -> "LineString":
        return LineString(tuple(scale_point(p, factor, origin) for p in self.points))

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(self.points)

    def contains(self, point: Point) -> bool:
        return point_to_polyline_distance(point.to_mm(), self._array()) <= ON_PATH_TOLERANCE_MM

    def to_json(self) -> dict:
        return {"type": self.kind, "points": [p.to_json() for p in self.points]}

    def to_renderable(self) -> List[object]:
        return [PathPrimitive(_to_px(self._array()))]

    def equals(self, other: Shape) -> bool:
        return isinstance(other, LineString) and _points_equal(self.points, other.points)


# ---------------------------------------------------------------------------
# Rings

@dataclass(frozen=True, eq=False)
class Polygon(Shape):
    points: Tuple[Point, ...]

    kind: ClassVar[str] = "Polygon"

    def __post_init__(self) -> None:
        pts = _points_tuple(self.points, "Polygon vertex")
        if len(pts) < 3:
            raise InvalidArgument("Polygon requires at least three points")
        object.__setattr__(self, "points", pts)

    def _array(self) -> np.ndarray:
        return points_to_array(self.points)

    def area(self) -> float:
        return polygon_area(self._array())

    def perimeter(self) -> Measurement:
        return Measurement.from_mm(ring_length(self._array()))

    def translate(self, dx: Measurement, dy: Measurement) -> "Polygon":
        return Polygon(tuple(p.translate(dx, dy) for p in self.points))

    def rotate(self, angle: Angle, origin: Point) -> "Polygon":
        return Polygon(tuple(rotate_point(p, angle, origin) for p in self.points))

    def scale(self, factor: float, origin: Point) -> "Polygon":
        return Polygon(tuple(scale_point(p, factor, origin) for p in self.points))

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(self.points)

    def contains(self, point: Point) -> bool:
        x, y = point.to_mm()
        return point_in_polygon(x, y, self._array())

    def to_json(self) -> dict:
        return {"type": self.kind, "points": [p.to_json() for p in self.points]}

    def to_renderable(self) -> List[object]:
        return [PathPrimitive(_to_px(self._array()), closed=True)]

    def equals(self, other: Shape) -> bool:
        return isinstance(other, Polygon) and _points_equal(self.points, other.points)


@dataclass(frozen=True, eq=False)
class PolygonWithHoles(Shape):
    outer: Polygon
    holes: Tuple[Polygon, ...] = ()

    kind: ClassVar[str] = "PolygonWithHoles"

    def __post_init__(self) -> None:
        if not isinstance(self.outer, Polygon):
            raise InvalidArgument(f"Outer ring must be a Polygon, got {self.outer!r}")
        holes = tuple(self.holes)
        for hole in holes:
            if not isinstance(hole, Polygon):
                raise InvalidArgument(f"Holes must be Polygons, got {hole!r}")
        object.__setattr__(self, "holes", holes)

    def area(self) -> float:
        return self.outer.area() - sum(h.area() for h in self.holes)

    def perimeter(self) -> Measurement:
        total = self.outer.perimeter()
        for hole in self.holes:
            total = total.add(hole.perimeter())
        return total

    def translate(self, dx: Measurement, dy: Measurement) -> "PolygonWithHoles":
        return PolygonWithHoles(self.outer.translate(dx, dy), tuple(h.translate(dx, dy) for h in self.holes))

    def rotate(self, angle: Angle, origin: Point) -> "PolygonWithHoles":
        return PolygonWithHoles(self.outer.rotate(angle, origin), tuple(h.rotate(angle, origin) for h in self.holes))

    def scale(self, factor: float, origin: Point) -> "PolygonWithHoles":
        return PolygonWithHoles(self.outer.scale(factor, origin), tuple(h.scale(factor, origin) for h in self.holes))

    def bounding_box(self) -> BoundingBox:
        return self.outer.bounding_box()

    def contains(self, point: Point) -> bool:
        if not self.outer.contains(point):
            return False
        return not any(h.contains(point) for h in self.holes)

    def to_json(self) -> dict:
        return {"type": self.kind, "outer": self.outer.to_json(), "holes": [h.to_json() for h in self.holes]}

    def to_renderable(self) -> List[object]:
        primitives = self.outer.to_renderable()
        for hole in self.holes:
            primitives.extend(hole.to_renderable())
        return primitives

    def equals(self, other: Shape) -> bool:
        if not isinstance(other, PolygonWithHoles) or len(self.holes) != len(other.holes):
            return False
        return self.outer.equals(other.outer) and all(a.equals(b) for a, b in zip(self.holes, other.holes))


@dataclass(frozen=True, eq=False)
class Triangle(Shape):
    a: Point
    b: Point
    c: Point

    kind: ClassVar[str] = "Triangle"

    def __post_init__(self) -> None:
        for name in ("a", "b", "c"):
            _require_point(getattr(self, name), f"Triangle vertex {name}")
        if self.area() <= TRIANGLE_AREA_EPSILON:
            raise InvalidArgument("Triangle vertices must not be collinear")

    def _array(self) -> np.ndarray:
        return points_to_array([self.a, self.b, self.c])

    def area(self) -> float:
        return polygon_area(self._array())

    def perimeter(self) -> Measurement:
        return Measurement.from_mm(ring_length(self._array()))

    def translate(self, dx: Measurement, dy: Measurement) -> "Triangle":
        return Triangle(self.a.translate(dx, dy), self.b.translate(dx, dy), self.c.translate(dx, dy))

    def rotate(self, angle: Angle, origin: Point) -> "Triangle":
        return Triangle(*(rotate_point(p, angle, origin) for p in (self.a, self.b, self.c)))

    def scale(self, factor: float, origin: Point) -> "Triangle":
        return Triangle(*(scale_point(p, factor, origin) for p in (self.a, self.b, self.c)))

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points([self.a, self.b, self.c])

    def contains(self, point: Point) -> bool:
        x, y = point.to_mm()
        return point_in_polygon(x, y, self._array())

    def to_json(self) -> dict:
        return {"type": self.kind, "a": self.a.to_json(), "b": self.b.to_json(), "c": self.c.to_json()}

    def to_renderable(self) -> List[object]:
        return [PathPrimitive(_to_px(self._array()), closed=True)]

    def equals(self, other: Shape) -> bool:
        return isinstance(other, Triangle) and _points_equal((self.a, self.b, self.c), (other.a, other.b, other.c))


@dataclass(frozen=True, eq=False)
class Rectangle(Shape):
    top_left: Point
    width: Measurement
    height: Measurement

    kind: ClassVar[str] = "Rectangle"

    def __post_init__(self) -> None:
        _require_point(self.top_left, "Rectangle top-left")
        _require_positive(self.width, "Rectangle width")
        _require_positive(self.height, "Rectangle height")

    @classmethod
    def from_mm(cls, x: float, y: float, width: float, height: float) -> "Rectangle":
        return cls(Point.from_mm(x, y), Measurement.from_mm(width), Measurement.from_mm(height))

    def corners(self) -> List[Point]:
        x0, y0 = self.top_left.to_mm()
        x1 = x0 + self.width.value_mm
        y1 = y0 + self.height.value_mm
        return [Point.from_mm(x0, y0), Point.from_mm(x1, y0), Point.from_mm(x1, y1), Point.from_mm(x0, y1)]

    def area(self) -> float:
        return self.width.value_mm * self.height.value_mm

    def perimeter(self) -> Measurement:
        return self.width.add(self.height).multiply(2)

    def translate(self, dx: Measurement, dy: Measurement) -> "Rectangle":
        return Rectangle(self.top_left.translate(dx, dy), self.width, self.height)

    def rotate(self, angle: Angle, origin: Point) -> "Rectangle":
        """Axis-aligned rectangle bounding the rotated corners."""
        rotated = [rotate_point(p, angle, origin) for p in self.corners()]
        return BoundingBox.from_points(rotated).to_rectangle()

    def scale(self, factor: float, origin: Point) -> "Rectangle":
        return Rectangle(scale_point(self.top_left, factor, origin), self.width.multiply(factor), self.height.multiply(factor))

    def bounding_box(self) -> BoundingBox:
        x0, y0 = self.top_left.to_mm()
        return BoundingBox(x0, y0, x0 + self.width.value_mm, y0 + self.height.value_mm)

    def contains(self, point: Point) -> bool:
        return self.bounding_box().contains(point)

    def to_json(self) -> dict:
        return {
            "type": self.kind,
            "topLeft": self.top_left.to_json(),
            "width": self.width.value_mm,
            "height": self.height.value_mm,
        }

    def to_renderable(self) -> List[object]:
        return [PathPrimitive(_to_px(points_to_array(self.corners())), closed=True)]

    def equals(self, other: Shape) -> bool:
        return (
            isinstance(other, Rectangle)
            and self.top_left.equals(other.top_left)
            and self.width.equals(other.width)
            and self.height.equals(other.height)
        )


# ---------------------------------------------------------------------------
# Conics and curves

@dataclass(frozen=True, eq=False)
class Circle(Shape):
    center: Point
    radius: Measurement

    kind: ClassVar[str] = "Circle"

    def __post_init__(self) -> None:
        _require_point(self.center, "Circle center")
        _require_positive(self.radius, "Circle radius")

    def area(self) -> float:
        r = self.radius.value_mm
        return math.pi * r * r

    def perimeter(self) -> Measurement:
        return self.radius.multiply(TWO_PI)

    def translate(self, dx: Measurement, dy: Measurement) -> "Circle":
        return Circle(self.center.translate(dx, dy), self.radius)

    def rotate(self, angle: Angle, origin: Point) -> "Circle":
        return Circle(rotate_point(self.center, angle, origin), self.radius)

    def scale(self, factor: float, origin: Point) -> "Circle":
        return Circle(scale_point(self.center, factor, origin), self.radius.multiply(factor))

    def bounding_box(self) -> BoundingBox:
        cx, cy = self.center.to_mm()
        r = self.radius.value_mm
        return BoundingBox(cx - r, cy - r, cx + r, cy + r)

    def contains(self, point: Point) -> bool:
        return self.center.distance_to(point).value_mm <= self.radius.value_mm

    def to_json(self) -> dict:
        return {"type": self.kind, "center": self.center.to_json(), "radius": self.radius.value_mm}

    def to_renderable(self) -> List[object]:
        k = _px_factor()
        cx, cy = self.center.to_mm()
        r = self.radius.value_mm * k
        return [EllipsePrimitive(cx * k, cy * k, r, r)]

    def equals(self, other: Shape) -> bool:
        return isinstance(other, Circle) and self.center.equals(other.center) and self.radius.equals(other.radius)


@dataclass(frozen=True, eq=False)
class Ellipse(Shape):
    """Axis-aligned ellipse; rotation moves the centre only."""

    center: Point
    radius_x: Measurement
    radius_y: Measurement

    kind: ClassVar[str] = "Ellipse"

    def __post_init__(self) -> None:
        _require_point(self.center, "Ellipse center")
        _require_positive(self.radius_x, "Ellipse radius_x")
        _require_positive(self.radius_y, "Ellipse radius_y")

    def area(self) -> float:
        return math.pi * self.radius_x.value_mm * self.radius_y.value_mm

    def perimeter(self) -> Measurement:
        # Ramanujan's second approximation
        a = self.radius_x.value_mm
        b = self.radius_y.value_mm
        h = (a - b) ** 2 / (a + b) ** 2
        return Measurement.from_mm(math.pi * (a + b) * (1.0 + 3.0 * h / (10.0 + math.sqrt(4.0 - 3.0 * h))))

    def translate(self, dx: Measurement, dy: Measurement) -> "Ellipse":
        return Ellipse(self.center.translate(dx, dy), self.radius_x, self.radius_y)

    def rotate(self, angle: Angle, origin: Point) -> "Ellipse":
        return Ellipse(rotate_point(self.center, angle, origin), self.radius_x, self.radius_y)

    def scale(self, factor: float, origin: Point) -> "Ellipse":
        return Ellipse(
            scale_point(self.center, factor, origin),
            self.radius_x.multiply(factor),
            self.radius_y.multiply(factor),
        )

    def bounding_box(self) -> BoundingBox:
        cx, cy = self.center.to_mm()
        rx = self.radius_x.value_mm
        ry = self.radius_y.value_mm
        return BoundingBox(cx - rx, cy - ry, cx + rx, cy + ry)

    def contains(self, point: Point) -> bool:
        cx, cy = self.center.to_mm()
        x, y = point.to_mm()
        nx = (x - cx) / self.radius_x.value_mm
        ny = (y - cy) / self.radius_y.value_mm
        return nx * nx + ny * ny <= 1.0

    def to_json(self) -> dict:
        return {
            "type": self.kind,
            "center": self.center.to_json(),
            "radiusX": self.radius_x.value_mm,
            "radiusY": self.radius_y.value_mm,
        }

    def to_renderable(self) -> List[object]:
        k = _px_factor()
        cx, cy = self.center.to_mm()
        return [EllipsePrimitive(cx * k, cy * k, self.radius_x.value_mm * k, self.radius_y.value_mm * k)]

    def equals(self, other: Shape) -> bool:
        return (
            isinstance(other, Ellipse)
            and self.center.equals(other.center)
            and self.radius_x.equals(other.radius_x)
            and self.radius_y.equals(other.radius_y)
        )


def _angle_in_sweep(angle: float, start: float, end: float) -> bool:
    lo, hi = min(start, end), max(start, end)
    span = hi - lo
    if span >= TWO_PI:
        return True
    rel = (angle - lo) % TWO_PI
    return rel <= span + 1e-12


@dataclass(frozen=True, eq=False)
class Arc(Shape):
    """Circular arc swept from ``start`` to ``end``.

    ``clockwise`` is kept for round-tripping and equality only; drawing,
    containment and bounds all use the interval between ``start`` and ``end``.
    """

    center: Point
    radius: Measurement
    start: Angle
    end: Angle
    clockwise: bool = False

    kind: ClassVar[str] = "Arc"

    def __post_init__(self) -> None:
        _require_point(self.center, "Arc center")
        _require_positive(self.radius, "Arc radius")
        if not isinstance(self.start, Angle) or not isinstance(self.end, Angle):
            raise InvalidArgument("Arc start and end must be Angles")
        object.__setattr__(self, "clockwise", bool(self.clockwise))

    def sweep(self) -> float:
        theta = abs(self.end.to_radians() - self.start.to_radians())
        if theta > TWO_PI:
            theta = theta % TWO_PI
        return theta

    def _samples(self, steps: int) -> np.ndarray:
        cx, cy = self.center.to_mm()
        return sample_arc(cx, cy, self.radius.value_mm, self.start.to_radians(), self.end.to_radians(), steps)

    def area(self) -> float:
        r = self.radius.value_mm
        return 0.5 * r * r * self.sweep()

    def perimeter(self) -> Measurement:
        return Measurement.from_mm(self.radius.value_mm * self.sweep())

    def translate(self, dx: Measurement, dy: Measurement) -> "Arc":
        return Arc(self.center.translate(dx, dy), self.radius, self.start, self.end, self.clockwise)

    def rotate(self, angle: Angle, origin: Point) -> "Arc":
        return Arc(
            rotate_point(self.center, angle, origin),
            self.radius,
            self.start.add(angle),
            self.end.add(angle),
            self.clockwise,
        )

    def scale(self, factor: float, origin: Point) -> "Arc":
        return Arc(scale_point(self.center, factor, origin), self.radius.multiply(factor), self.start, self.end, self.clockwise)

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_extent(bounds_of(self._samples(ARC_BBOX_STEPS)))

    def contains(self, point: Point) -> bool:
        distance = self.center.distance_to(point).value_mm
        if abs(distance - self.radius.value_mm) > ON_PATH_TOLERANCE_MM:
            return False
        cx, cy = self.center.to_mm()
        x, y = point.to_mm()
        return _angle_in_sweep(math.atan2(y - cy, x - cx), self.start.to_radians(), self.end.to_radians())

    def to_json(self) -> dict:
        return {
            "type": self.kind,
            "center": self.center.to_json(),
            "radius": self.radius.value_mm,
            "start": self.start.to_radians(),
            "end": self.end.to_radians(),
            "clockwise": self.clockwise,
        }

    def to_renderable(self) -> List[object]:
        return [PathPrimitive(_to_px(self._samples(CURVE_RENDER_STEPS)))]

    def equals(self, other: Shape) -> bool:
        return (
            isinstance(other, Arc)
            and self.center.equals(other.center)
            and self.radius.equals(other.radius)
            and self.start.equals(other.start)
            and self.end.equals(other.end)
            and self.clockwise == other.clockwise
        )


@dataclass(frozen=True, eq=False)
class BezierCurve(Shape):
    """Cubic Bezier through ``p0`` and ``p3`` with handles ``p1``/``p2``."""

    p0: Point
    p1: Point
    p2: Point
    p3: Point

    kind: ClassVar[str] = "BezierCurve"

    def __post_init__(self) -> None:
        for name in ("p0", "p1", "p2", "p3"):
            _require_point(getattr(self, name), f"Bezier control point {name}")

    def control_points(self) -> Tuple[Point, Point, Point, Point]:
        return (self.p0, self.p1, self.p2, self.p3)

    def _samples(self, steps: int) -> np.ndarray:
        return sample_cubic_bezier(points_to_array(self.control_points()), steps)

    def area(self) -> float:
        return 0.0

    def perimeter(self) -> Measurement:
        return Measurement.from_mm(polyline_length(self._samples(CURVE_LENGTH_STEPS)))

    def translate(self, dx: Measurement, dy: Measurement) -> "BezierCurve":
        return BezierCurve(*(p.translate(dx, dy) for p in self.control_points()))

    def rotate(self, angle: Angle, origin: Point) -> "BezierCurve":
        return BezierCurve(*(rotate_point(p, angle, origin) for p in self.control_points()))

    def scale(self, factor: float, origin: Point) -> "BezierCurve":
        return BezierCurve(*(scale_point(p, factor, origin) for p in self.control_points()))

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_extent(bounds_of(self._samples(CURVE_BBOX_STEPS)))

    def contains(self, point: Point) -> bool:
        samples = self._samples(CURVE_LENGTH_STEPS)
        x, y = point.to_mm()
        distances = np.hypot(samples[:, 0] - x, samples[:, 1] - y)
        return bool(np.min(distances) <= ON_PATH_TOLERANCE_MM)

    def to_json(self) -> dict:
        return {
            "type": self.kind,
            "p0": self.p0.to_json(),
            "p1": self.p1.to_json(),
            "p2": self.p2.to_json(),
            "p3": self.p3.to_json(),
        }

    def to_renderable(self) -> List[object]:
        return [PathPrimitive(_to_px(self._samples(CURVE_RENDER_STEPS)))]

    def equals(self, other: Shape) -> bool:
        return isinstance(other, BezierCurve) and _points_equal(self.control_points(), other.control_points())


SHAPE_TYPES = (
    Line,
    LineString,
    Polygon,
    PolygonWithHoles,
    Triangle,
    Rectangle,
    Circle,
    Ellipse,
    Arc,
    BezierCurve,
)
