"""draftboard: interactive 2D vector-drawing canvas core."""
from __future__ import annotations

from .errors import ConfigError, DraftboardError, InvalidArgument
from .geometry import Point
from .hit_test import hit_test_intersecting_rect, hit_test_intersecting_rect_indices, hit_test_topmost
from .interaction import DraggingSelect, DraggingShape, Idle, InteractionStateMachine, Panning
from .marquee import MarqueeController
from .orchestrator import CanvasOrchestrator, KeyEvent, PointerEvent, WheelEvent
from .render import Painter, Pen, render_scene
from .selection import SelectionModel, SelectionOp, SelectionOperation
from .shapes import (
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
    Shape,
    Triangle,
)
from .transform import TransformController
from .units import Angle, Measurement, Unit, get_dpi, reset_dpi_provider, set_dpi_provider, use_dpi
from .viewport import Viewport

__all__ = [
    "Angle",
    "Arc",
    "BezierCurve",
    "BoundingBox",
    "CanvasOrchestrator",
    "Circle",
    "ConfigError",
    "DraftboardError",
    "DraggingSelect",
    "DraggingShape",
    "Ellipse",
    "Idle",
    "InteractionStateMachine",
    "InvalidArgument",
    "KeyEvent",
    "Line",
    "LineString",
    "MarqueeController",
    "Measurement",
    "Painter",
    "Panning",
    "Pen",
    "Point",
    "PointerEvent",
    "Polygon",
    "PolygonWithHoles",
    "Rectangle",
    "SelectionModel",
    "SelectionOp",
    "SelectionOperation",
    "Shape",
    "TransformController",
    "Triangle",
    "Unit",
    "Viewport",
    "WheelEvent",
    "get_dpi",
    "hit_test_intersecting_rect",
    "hit_test_intersecting_rect_indices",
    "hit_test_topmost",
    "render_scene",
    "reset_dpi_provider",
    "set_dpi_provider",
    "use_dpi",
]
