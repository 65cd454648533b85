"""Point value type and the numeric helpers shared by the shape family.

Shape code keeps its public API in :class:`~draftboard.units.Measurement`
terms; the heavy lifting (sampling, areas, containment) happens on ``(N, 2)``
numpy arrays of millimetre coordinates built with :func:`points_to_array`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

from .errors import InvalidArgument
from .units import Angle, Measurement

Bounds = Tuple[float, float, float, float]  # x0, y0, x1, y1


@dataclass(frozen=True, eq=False)
class Point:
    """Immutable 2D coordinate made of two Measurements."""

    x: Measurement
    y: Measurement

    def __post_init__(self) -> None:
        if not isinstance(self.x, Measurement) or not isinstance(self.y, Measurement):
            raise InvalidArgument(f"Point coordinates must be Measurements, got x={self.x!r}, y={self.y!r}")

    @classmethod
    def from_mm(cls, x: float, y: float) -> "Point":
        return cls(Measurement.from_mm(x), Measurement.from_mm(y))

    @classmethod
    def from_px(cls, x: float, y: float) -> "Point":
        return cls(Measurement.from_px(x), Measurement.from_px(y))

    def translate(self, dx: Measurement, dy: Measurement) -> "Point":
        if not isinstance(dx, Measurement) or not isinstance(dy, Measurement):
            raise InvalidArgument(f"dx and dy must be Measurements, got dx={dx!r}, dy={dy!r}")
        return Point(self.x.add(dx), self.y.add(dy))

    def distance_to(self, other: "Point") -> Measurement:
        dx = self.x.value_mm - other.x.value_mm
        dy = self.y.value_mm - other.y.value_mm
        return Measurement.from_mm(math.hypot(dx, dy))

    def equals(self, other: "Point") -> bool:
        return self.x.equals(other.x) and self.y.equals(other.y)

    def to_mm(self) -> Tuple[float, float]:
        return (self.x.value_mm, self.y.value_mm)

    def to_px(self) -> Tuple[float, float]:
        return (self.x.to_pixels(), self.y.to_pixels())

    def to_json(self) -> dict:
        return {"x": self.x.value_mm, "y": self.y.value_mm}

    def __repr__(self) -> str:
        return f"Point({self.x.value_mm:g}mm, {self.y.value_mm:g}mm)"


# ---------------------------------------------------------------------------
# Point transforms

def rotate_point(p: Point, angle: Angle, origin: Point) -> Point:
    theta = angle.to_radians()
    ox, oy = origin.to_mm()
    px, py = p.to_mm()
    c, s = math.cos(theta), math.sin(theta)
    x = c * (px - ox) - s * (py - oy) + ox
    y = s * (px - ox) + c * (py - oy) + oy
    return Point.from_mm(x, y)


def scale_point(p: Point, factor: float, origin: Point) -> Point:
    ox, oy = origin.to_mm()
    px, py = p.to_mm()
    return Point.from_mm(ox + (px - ox) * factor, oy + (py - oy) * factor)


# ---------------------------------------------------------------------------
# Array helpers (millimetres)

def points_to_array(points: Iterable[Point]) -> np.ndarray:
    coords = [p.to_mm() for p in points]
    if not coords:
        return np.zeros((0, 2), dtype=float)
    return np.asarray(coords, dtype=float)


def array_to_points(arr: np.ndarray) -> list:
    return [Point.from_mm(float(x), float(y)) for x, y in arr]


def bounds_of(arr: np.ndarray) -> Bounds:
    """Return ``(x0, y0, x1, y1)`` of a non-empty point array."""
    mins = arr.min(axis=0)
    maxs = arr.max(axis=0)
    return (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def union_bounds(boxes: Iterable[Bounds]) -> Bounds | None:
    boxes = list(boxes)
    if not boxes:
        return None
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )


def bounds_overlap(a: Bounds, b: Bounds) -> bool:
    """Closed-interval AABB overlap; touching edges count as overlapping."""
    return not (b[0] > a[2] or b[2] < a[0] or b[1] > a[3] or b[3] < a[1])


def normalize_rect(x0: float, y0: float, x1: float, y1: float) -> Bounds:
    return (min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))


def polyline_length(points: np.ndarray) -> float:
    """Return the cumulative length of a polyline."""
    if points.shape[0] < 2:
        return 0.0
    delta = np.diff(points, axis=0)
    return float(np.sum(np.hypot(delta[:, 0], delta[:, 1])))


def ring_length(points: np.ndarray) -> float:
    """Length of a closed ring (last vertex joins the first)."""
    if points.shape[0] < 2:
        return 0.0
    return polyline_length(np.vstack([points, points[:1]]))


def polygon_area(points: np.ndarray) -> float:
    """Return the absolute area spanned by a closed polygon."""
    if points.size == 0:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    return float(0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))


def point_in_polygon(x: float, y: float, ring: np.ndarray) -> bool:
    """Even-odd ray casting test."""
    inside = False
    n = ring.shape[0]
    j = n - 1
    for i in range(n):
        xi, yi = ring[i]
        xj, yj = ring[j]
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def point_to_polyline_distance(point: Sequence[float], polyline: np.ndarray) -> float:
    """Compute the minimum distance from ``point`` to the given ``polyline``."""
    if polyline.shape[0] == 0:
        return float("inf")
    if polyline.shape[0] == 1:
        return float(np.hypot(point[0] - polyline[0, 0], point[1] - polyline[0, 1]))
    seg_vec = polyline[1:] - polyline[:-1]
    seg_len_sq = np.sum(seg_vec ** 2, axis=1)
    to_point = np.asarray(point, dtype=float) - polyline[:-1]
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.sum(to_point * seg_vec, axis=1) / seg_len_sq
    t = np.nan_to_num(np.clip(t, 0.0, 1.0))
    projection = polyline[:-1] + seg_vec * t[:, None]
    dist = np.hypot(point[0] - projection[:, 0], point[1] - projection[:, 1])
    return float(np.min(dist))


def sample_cubic_bezier(control_points: np.ndarray, steps: int = 16) -> np.ndarray:
    """Evaluate a cubic Bezier at ``steps + 1`` evenly spaced parameters."""
    t = np.linspace(0.0, 1.0, steps + 1)[:, None]
    p0, p1, p2, p3 = control_points
    mt = 1.0 - t
    return mt ** 3 * p0 + 3.0 * mt ** 2 * t * p1 + 3.0 * mt * t ** 2 * p2 + t ** 3 * p3


def sample_arc(cx: float, cy: float, radius: float, start: float, end: float, steps: int = 32) -> np.ndarray:
    theta = np.linspace(start, end, steps + 1)
    return np.column_stack((cx + radius * np.cos(theta), cy + radius * np.sin(theta)))
