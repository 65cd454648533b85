"""Host-agnostic render contract for the canvas.

Like the dimension drawing helpers this keeps the core free of any toolkit:
drawing goes through a small :class:`Painter` shim that the Qt widget (or a
test double) implements. Shapes describe themselves as a list of primitives
in world pixels via ``Shape.to_renderable()``; :func:`render_scene` paints
them under the viewport transform and isolates per-shape failures.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Protocol, Sequence, Tuple

import numpy as np

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .shapes import Shape
    from .viewport import Viewport

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class Pen:
    color: str = "#000000"
    width: float = 1.0
    dash: Optional[Tuple[float, ...]] = None
    fill: Optional[str] = None


DEFAULT_SHAPE_PEN = Pen(color="#000000", width=1.0)


class Painter(Protocol):
    """Drawing shim implemented by the host surface."""

    def clear(self, background: Optional[str]) -> None: ...

    def push_view(self, scale: float, offset_x: float, offset_y: float) -> None: ...

    def pop_view(self) -> None: ...

    def polyline(self, points: Sequence[Point], pen: Pen, closed: bool = False) -> None: ...

    def ellipse(self, cx: float, cy: float, rx: float, ry: float, pen: Pen) -> None: ...

    def rect(self, x: float, y: float, w: float, h: float, pen: Pen) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, pen: Pen) -> None: ...

    def circle(self, cx: float, cy: float, r: float, pen: Pen) -> None: ...


# ---------------------------------------------------------------------------
# Primitives

@dataclass(frozen=True, eq=False)
class PathPrimitive:
    """Polyline through ``points`` (``(N, 2)`` world pixels)."""

    points: np.ndarray
    closed: bool = False

    def paint(self, painter: Painter, pen: Pen) -> None:
        painter.polyline([(float(x), float(y)) for x, y in self.points], pen, closed=self.closed)


@dataclass(frozen=True)
class EllipsePrimitive:
    cx: float
    cy: float
    rx: float
    ry: float

    def paint(self, painter: Painter, pen: Pen) -> None:
        painter.ellipse(self.cx, self.cy, self.rx, self.ry, pen)


def paint_shape(painter: Painter, shape: "Shape", pen: Pen = DEFAULT_SHAPE_PEN) -> None:
    for primitive in shape.to_renderable():
        primitive.paint(painter, pen)


def render_scene(
    painter: Painter,
    shapes: Sequence["Shape"],
    viewport: Optional["Viewport"] = None,
    background: Optional[str] = None,
    overlays: Optional[Callable[[Painter], None]] = None,
    pen: Pen = DEFAULT_SHAPE_PEN,
) -> int:
    """Paint ``shapes`` and then ``overlays`` under the viewport transform.

    A shape that fails to paint is logged and skipped so the rest of the
    scene still renders. Returns the number of shapes painted successfully.
    """
    painter.clear(background)
    if viewport is not None:
        painter.push_view(viewport.scale, viewport.offset_x, viewport.offset_y)
    painted = 0
    try:
        for shape in shapes or ():
            try:
                paint_shape(painter, shape, pen)
            except Exception:
                logger.debug("Skipping shape %r after a paint failure", shape, exc_info=True)
                continue
            painted += 1
        if overlays is not None:
            overlays(painter)
    finally:
        if viewport is not None:
            painter.pop_view()
    return painted
