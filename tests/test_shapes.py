import json
import math

import pytest

from draftboard.errors import InvalidArgument
from draftboard.geometry import Point
from draftboard.render import EllipsePrimitive, PathPrimitive
from draftboard.serialize import load_drawing, save_drawing, shape_from_json
from draftboard.shapes import (
    Arc,
    BezierCurve,
    BoundingBox,
    Circle,
    Ellipse,
    Line,
    LineString,
    Polygon,
    PolygonWithHoles,
    Rectangle,
    Triangle,
)
from draftboard.units import Angle, Measurement

mm = Measurement.from_mm
P = Point.from_mm


def square(x, y, size):
    return Polygon((P(x, y), P(x + size, y), P(x + size, y + size), P(x, y + size)))


ALL_SHAPES = [
    Line(P(0, 0), P(10, 5)),
    LineString((P(0, 0), P(10, 0), P(10, 10))),
    square(0, 0, 10),
    PolygonWithHoles(square(0, 0, 10), (square(2, 2, 2),)),
    Triangle(P(0, 0), P(4, 0), P(0, 3)),
    Rectangle.from_mm(0, 0, 4, 3),
    Circle(P(5, 5), mm(2)),
    Ellipse(P(5, 5), mm(4), mm(2)),
    Arc(P(0, 0), mm(5), Angle.from_degrees(0), Angle.from_degrees(90)),
    BezierCurve(P(0, 0), P(1, 2), P(3, 2), P(4, 0)),
]


@pytest.mark.parametrize("shape", ALL_SHAPES, ids=lambda s: type(s).__name__)
class TestCapabilities:
    def test_transforms_do_not_mutate(self, shape):
        snapshot = shape_from_json(shape.to_json())
        shape.translate(mm(3), mm(-2))
        shape.rotate(Angle.from_degrees(37), P(1, 1))
        shape.scale(1.5, P(2, 2))
        assert shape.equals(snapshot)

    def test_translate_moves_bounding_box(self, shape):
        before = shape.bounding_box()
        after = shape.translate(mm(3), mm(-2)).bounding_box()
        assert after.x0 == pytest.approx(before.x0 + 3)
        assert after.y1 == pytest.approx(before.y1 - 2)

    def test_json_round_trip(self, shape):
        assert shape_from_json(shape.to_json()).equals(shape)

    def test_renderable_is_non_empty(self, shape):
        primitives = shape.to_renderable()
        assert primitives
        assert all(isinstance(p, (PathPrimitive, EllipsePrimitive)) for p in primitives)

    def test_equals_rejects_other_types(self, shape):
        other = Circle(P(100, 100), mm(1)) if not isinstance(shape, Circle) else square(0, 0, 1)
        assert not shape.equals(other)


class TestConstruction:
    @pytest.mark.parametrize(
        "factory",
        [
            lambda: Circle(P(0, 0), mm(0)),
            lambda: Arc(P(0, 0), mm(-1), Angle(0), Angle(1)),
            lambda: Ellipse(P(0, 0), mm(1), mm(0)),
            lambda: Rectangle.from_mm(0, 0, 0, 1),
            lambda: Rectangle.from_mm(0, 0, 1, -1),
            lambda: Polygon((P(0, 0), P(1, 1))),
            lambda: LineString((P(0, 0),)),
            lambda: Line(P(1, 1), P(1, 1)),
            lambda: Triangle(P(0, 0), P(1, 1), P(2, 2)),
            lambda: PolygonWithHoles(square(0, 0, 1), ("hole",)),
            lambda: Polygon((P(0, 0), (1, 1), P(2, 0))),
        ],
    )
    def test_invalid_geometry_rejected(self, factory):
        with pytest.raises(InvalidArgument):
            factory()


class TestRectangle:
    def test_area_and_perimeter(self):
        r = Rectangle(P(0, 0), mm(4), mm(3))
        assert r.area() == pytest.approx(12.0)
        assert r.perimeter().value_mm == pytest.approx(14.0)

    def test_contains_is_edge_inclusive(self):
        r = Rectangle.from_mm(0, 0, 4, 3)
        assert r.contains(P(4, 3))
        assert r.contains(P(0, 1.5))
        assert not r.contains(P(4.01, 1))

    def test_rotate_returns_axis_aligned_bounds(self):
        r = Rectangle.from_mm(0, 0, 4, 2)
        turned = r.rotate(Angle.from_degrees(90), P(0, 0))
        assert turned.top_left.to_mm() == pytest.approx((-2, 0))
        assert turned.width.value_mm == pytest.approx(2)
        assert turned.height.value_mm == pytest.approx(4)

    def test_scale_about_origin(self):
        r = Rectangle.from_mm(2, 2, 4, 2).scale(2, P(0, 0))
        assert r.top_left.to_mm() == pytest.approx((4, 4))
        assert r.width.value_mm == pytest.approx(8)


class TestCurves:
    def test_circle_metrics(self):
        c = Circle(P(0, 0), mm(2))
        assert c.area() == pytest.approx(math.pi * 4)
        assert c.perimeter().value_mm == pytest.approx(4 * math.pi)
        assert c.contains(P(2, 0))
        assert not c.contains(P(2, 0.1))

    def test_ellipse_perimeter_matches_circle_when_round(self):
        e = Ellipse(P(0, 0), mm(3), mm(3))
        assert e.perimeter().value_mm == pytest.approx(6 * math.pi)
        assert e.contains(P(0, 3))

    def test_arc_area_length_and_containment(self):
        a = Arc(P(0, 0), mm(2), Angle.from_degrees(0), Angle.from_degrees(90))
        assert a.area() == pytest.approx(0.5 * 4 * math.pi / 2)
        assert a.perimeter().value_mm == pytest.approx(math.pi)
        assert a.contains(P(0, 2))
        assert not a.contains(P(0, -2))
        assert not a.contains(P(1, 1))

    def test_arc_rotation_shifts_angles(self):
        a = Arc(P(0, 0), mm(1), Angle(0), Angle(1)).rotate(Angle(0.5), P(0, 0))
        assert a.start.to_radians() == pytest.approx(0.5)
        assert a.end.to_radians() == pytest.approx(1.5)

    def test_bezier_endpoints_on_curve(self):
        b = BezierCurve(P(0, 0), P(1, 2), P(3, 2), P(4, 0))
        assert b.contains(P(0, 0))
        assert b.contains(P(4, 0))
        assert b.area() == 0.0
        assert b.perimeter().value_mm > 4.0
        box = b.bounding_box()
        assert box.x0 == pytest.approx(0)
        assert box.x1 == pytest.approx(4)
        assert box.y1 == pytest.approx(1.5)


class TestPolygons:
    def test_polygon_area_and_containment(self):
        s = square(0, 0, 10)
        assert s.area() == pytest.approx(100)
        assert s.perimeter().value_mm == pytest.approx(40)
        assert s.contains(P(5, 5))
        assert not s.contains(P(15, 5))

    def test_polygon_with_holes(self):
        pwh = PolygonWithHoles(square(0, 0, 10), (square(2, 2, 2),))
        assert pwh.area() == pytest.approx(96)
        assert pwh.perimeter().value_mm == pytest.approx(48)
        assert pwh.contains(P(8, 8))
        assert not pwh.contains(P(3, 3))
        assert pwh.bounding_box().equals(BoundingBox(0, 0, 10, 10))

    def test_triangle(self):
        t = Triangle(P(0, 0), P(4, 0), P(0, 3))
        assert t.area() == pytest.approx(6)
        assert t.perimeter().value_mm == pytest.approx(12)
        assert t.contains(P(1, 1))

    def test_line_string_contains_points_on_segments(self):
        ls = LineString((P(0, 0), P(10, 0), P(10, 10)))
        assert ls.perimeter().value_mm == pytest.approx(20)
        assert ls.contains(P(10, 5))
        assert not ls.contains(P(5, 5))

    def test_degenerate_bounding_box_allowed_for_open_paths(self):
        box = Line(P(0, 5), P(10, 5)).bounding_box()
        assert box.height.value_mm == 0
        assert box.width.value_mm == pytest.approx(10)


class TestBoundingBoxIntersection:
    def test_touching_boxes_intersect(self):
        a = Rectangle.from_mm(0, 0, 10, 10)
        b = Rectangle.from_mm(10, 0, 5, 5)
        assert a.intersects(b)

    def test_separate_boxes(self):
        assert not Rectangle.from_mm(0, 0, 1, 1).intersects(Rectangle.from_mm(5, 5, 1, 1))


class TestDrawingFiles:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / "drawing.json"
        save_drawing(path, ALL_SHAPES)
        loaded = load_drawing(path)
        assert len(loaded) == len(ALL_SHAPES)
        assert all(a.equals(b) for a, b in zip(loaded, ALL_SHAPES))

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidArgument):
            shape_from_json({"type": "Hexagon"})

    def test_missing_field_rejected(self):
        with pytest.raises(InvalidArgument):
            shape_from_json({"type": "Circle", "center": {"x": 0, "y": 0}})

    @pytest.mark.parametrize(
        "payload",
        [
            3,
            "x",
            {"shapes": 5},
            {"shapes": [{"type": "Polygon", "points": None}]},
            {"shapes": [{"type": "Circle", "center": [0, 0], "radius": 1}]},
            {"shapes": [{"type": "Rectangle", "topLeft": {"x": 0, "y": 0}, "width": "wide", "height": 1}]},
            {"shapes": [{"type": ["Circle"]}]},
        ],
    )
    def test_malformed_drawing_rejected(self, tmp_path, payload):
        path = tmp_path / "drawing.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        with pytest.raises(InvalidArgument):
            load_drawing(path)

    def test_undecodable_bytes_rejected(self, tmp_path):
        path = tmp_path / "drawing.json"
        path.write_bytes(b"\xff\xfe{")
        with pytest.raises(InvalidArgument):
            load_drawing(path)

    def test_arc_direction_round_trips_without_changing_geometry(self):
        ccw = Arc(P(0, 0), mm(5), Angle.from_degrees(0), Angle.from_degrees(90))
        cw = Arc(P(0, 0), mm(5), Angle.from_degrees(0), Angle.from_degrees(90), clockwise=True)
        assert shape_from_json(cw.to_json()).clockwise is True
        assert not cw.equals(ccw)
        assert cw.bounding_box().equals(ccw.bounding_box())
        assert cw.area() == pytest.approx(ccw.area())
