"""Editor overlays drawn on top of the shapes.

Everything here is drawn in world pixels while the viewport transform is
applied, so line widths and handle sizes are divided by the viewport scale to
stay constant on screen.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import OverlayTheme
from .geometry import Bounds, normalize_rect
from .render import Painter, Pen, paint_shape
from .shapes import BoundingBox, Shape
from .units import Measurement
from .viewport import Viewport

logger = logging.getLogger(__name__)

HANDLE_RADIUS_PX = 6.0
ROTATION_HANDLE_RADIUS_PX = 7.0
ROTATION_HANDLE_OFFSET_PX = 24.0
CROSSHAIR_EXTENT_PX = 10000.0
MAX_GRID_LINES = 2000


@dataclass
class OverlayState:
    viewport: Viewport
    shapes: Sequence[Shape] = ()
    selected_indices: Sequence[int] = ()
    hovered_shape: Optional[Shape] = None
    pointer_screen: Optional[Tuple[float, float]] = None
    drag_select_rect: Optional[Bounds] = None
    group_bounding_box: Optional[BoundingBox] = None
    show_grid: bool = True
    show_bounding_boxes: bool = False
    grid_spacing_mm: float = 1.0
    width: float = 0.0
    height: float = 0.0


def group_handles(box: Bounds) -> List[Tuple[float, float]]:
    """Eight resize handle centres clockwise from the top-left corner."""
    x0, y0, x1, y1 = box
    mx = (x0 + x1) / 2.0
    my = (y0 + y1) / 2.0
    return [(x0, y0), (mx, y0), (x1, y0), (x1, my), (x1, y1), (mx, y1), (x0, y1), (x0, my)]


def rotation_handle(box: Bounds, scale: float = 1.0) -> Tuple[float, float]:
    x0, y0, x1, _ = box
    return ((x0 + x1) / 2.0, y0 - ROTATION_HANDLE_OFFSET_PX / scale)


def grid_lines(visible: Bounds, spacing: float) -> Tuple[List[float], List[float]]:
    """Grid coordinates covering ``visible``; empty when the grid would be too dense."""
    x0, y0, x1, y1 = visible
    if spacing <= 0.0:
        return [], []
    start_x = math.floor(x0 / spacing)
    end_x = math.ceil(x1 / spacing)
    start_y = math.floor(y0 / spacing)
    end_y = math.ceil(y1 / spacing)
    if (end_x - start_x) + (end_y - start_y) > MAX_GRID_LINES:
        return [], []
    xs = [i * spacing for i in range(start_x, end_x + 1)]
    ys = [j * spacing for j in range(start_y, end_y + 1)]
    return xs, ys


class OverlayRenderer:
    def __init__(self, theme: Optional[OverlayTheme] = None):
        self.theme = theme or OverlayTheme()

    def draw(self, painter: Painter, state: OverlayState) -> None:
        scale = state.viewport.scale or 1.0
        visible = state.viewport.visible_world_rect(state.width, state.height)
        if state.show_grid:
            self._draw_grid(painter, visible, state.grid_spacing_mm, scale)
        if state.show_bounding_boxes:
            self._draw_bounding_boxes(painter, state.shapes, scale)
        if state.shapes:
            if state.group_bounding_box is not None:
                self._draw_group_box(painter, state.group_bounding_box, scale)
            self._draw_selected(painter, state, scale)
        self._draw_hover(painter, state, scale)
        if state.drag_select_rect is not None:
            x0, y0, x1, y1 = normalize_rect(*state.drag_select_rect)
            pen = Pen(self.theme.marquee, 1.5 / scale, dash=(4.0, 2.0))
            painter.rect(x0, y0, x1 - x0, y1 - y0, pen)
        if state.pointer_screen is not None:
            self._draw_crosshair(painter, state.viewport, state.pointer_screen, visible, scale)

    def _draw_grid(self, painter: Painter, visible: Bounds, spacing_mm: float, scale: float) -> None:
        spacing = Measurement.from_mm(spacing_mm).to_pixels()
        xs, ys = grid_lines(visible, spacing)
        if not xs and not ys:
            logger.debug("grid skipped at scale %.4f", scale)
            return
        pen = Pen(self.theme.grid, 1.0 / scale)
        x0, y0, x1, y1 = visible
        for x in xs:
            painter.line(x, y0 - spacing, x, y1 + spacing, pen)
        for y in ys:
            painter.line(x0 - spacing, y, x1 + spacing, y, pen)

    def _draw_bounding_boxes(self, painter: Painter, shapes: Sequence[Shape], scale: float) -> None:
        pen = Pen(self.theme.bounding_box, 1.0 / scale, dash=(4.0, 4.0))
        for shape in shapes:
            try:
                x0, y0, x1, y1 = shape.bounds_px()
            except Exception:
                logger.debug("no bounding box for %r", shape, exc_info=True)
                continue
            painter.rect(x0, y0, x1 - x0, y1 - y0, pen)

    def _draw_group_box(self, painter: Painter, box: BoundingBox, scale: float) -> None:
        extent = box.extent_px()
        x0, y0, x1, y1 = extent
        outline = Pen(self.theme.group_box, 2.0 / scale, dash=(6.0, 3.0))
        painter.rect(x0, y0, x1 - x0, y1 - y0, outline)
        handle = Pen(self.theme.group_box, 1.0 / scale, fill=self.theme.handle_fill)
        for hx, hy in group_handles(extent):
            painter.circle(hx, hy, HANDLE_RADIUS_PX / scale, handle)
        rx, ry = rotation_handle(extent, scale)
        rot = Pen(self.theme.rotation_handle, 1.0 / scale, fill=self.theme.rotation_handle_fill)
        painter.circle(rx, ry, ROTATION_HANDLE_RADIUS_PX / scale, rot)

    def _outline(self, painter: Painter, shape: Shape, pen: Pen) -> None:
        try:
            paint_shape(painter, shape, pen)
        except Exception:
            logger.debug("outline failed for %r", shape, exc_info=True)

    def _draw_selected(self, painter: Painter, state: OverlayState, scale: float) -> None:
        pen = Pen(self.theme.selected, 2.0 / scale)
        for i in state.selected_indices:
            if 0 <= i < len(state.shapes):
                self._outline(painter, state.shapes[i], pen)

    def _draw_hover(self, painter: Painter, state: OverlayState, scale: float) -> None:
        hovered = state.hovered_shape
        if hovered is None:
            return
        for i in state.selected_indices:
            if 0 <= i < len(state.shapes) and state.shapes[i] is hovered:
                return
        self._outline(painter, hovered, Pen(self.theme.hover, 1.0 / scale))

    def _draw_crosshair(
        self,
        painter: Painter,
        viewport: Viewport,
        pointer: Tuple[float, float],
        visible: Bounds,
        scale: float,
    ) -> None:
        wx, wy = viewport.screen_to_world(*pointer)
        x, y = float(wx), float(wy)
        x0, y0, x1, y1 = visible
        pen = Pen(self.theme.crosshair, 1.0 / scale)
        painter.line(x, y0 - CROSSHAIR_EXTENT_PX, x, y1 + CROSSHAIR_EXTENT_PX, pen)
        painter.line(x0 - CROSSHAIR_EXTENT_PX, y, x1 + CROSSHAIR_EXTENT_PX, y, pen)
