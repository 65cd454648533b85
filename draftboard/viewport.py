"""World <-> screen mapping for the canvas.

``screen = world * scale + offset`` where world coordinates are pixels at
zoom 1 (millimetres converted through the DPI provider).
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

from .errors import InvalidArgument
from .geometry import Bounds, normalize_rect

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def _finite(value: float, what: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise InvalidArgument(f"{what} must be finite, got {value!r}")
    return number


class Viewport:
    """Mutable pan/zoom state: scale plus screen offset."""

    def __init__(
        self,
        scale: float = 1.0,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
        min_scale: Optional[float] = None,
        max_scale: Optional[float] = None,
    ):
        if min_scale is not None and min_scale <= 0.0:
            raise InvalidArgument("min_scale must be positive")
        if min_scale is not None and max_scale is not None and min_scale > max_scale:
            raise InvalidArgument("min_scale must not exceed max_scale")
        self.min_scale = min_scale
        self.max_scale = max_scale
        self._scale = 1.0
        self.set_scale(scale)
        self._offset = [0.0, 0.0]
        self.set_offset(offset_x, offset_y)

    # -- state -------------------------------------------------------------
    @property
    def scale(self) -> float:
        return self._scale

    @property
    def offset_x(self) -> float:
        return self._offset[0]

    @property
    def offset_y(self) -> float:
        return self._offset[1]

    def set_scale(self, scale: float) -> None:
        value = _finite(scale, "Scale")
        if value <= 0.0:
            raise InvalidArgument(f"Scale must be positive, got {scale!r}")
        self._scale = value

    def set_offset(self, offset_x: float, offset_y: float) -> None:
        self._offset = [_finite(offset_x, "Offset"), _finite(offset_y, "Offset")]

    def reset(self) -> None:
        self._scale = 1.0
        self._offset = [0.0, 0.0]

    # -- mapping -----------------------------------------------------------
    def screen_to_world(self, sx: float, sy: float) -> Point:
        return ((sx - self._offset[0]) / self._scale, (sy - self._offset[1]) / self._scale)

    def world_to_screen(self, wx: float, wy: float) -> Point:
        return (wx * self._scale + self._offset[0], wy * self._scale + self._offset[1])

    def screen_rect_to_world_rect(self, x0: float, y0: float, x1: float, y1: float) -> Bounds:
        a = self.screen_to_world(x0, y0)
        b = self.screen_to_world(x1, y1)
        return normalize_rect(a[0], a[1], b[0], b[1])

    def visible_world_rect(self, width: float, height: float) -> Bounds:
        return self.screen_rect_to_world_rect(0.0, 0.0, float(width), float(height))

    # -- navigation --------------------------------------------------------
    def pan_by(self, dx: float, dy: float) -> None:
        self._offset[0] += _finite(dx, "Pan delta")
        self._offset[1] += _finite(dy, "Pan delta")

    def _clamp(self, scale: float) -> float:
        if self.min_scale is not None:
            scale = max(self.min_scale, scale)
        if self.max_scale is not None:
            scale = min(self.max_scale, scale)
        return scale

    def zoom_at(self, factor: float, sx: float, sy: float) -> None:
        """Multiply the scale by ``factor`` keeping screen point (sx, sy) fixed."""
        factor = _finite(factor, "Zoom factor")
        if factor <= 0.0:
            raise InvalidArgument(f"Zoom factor must be positive, got {factor!r}")
        target = self._clamp(self._scale * factor)
        effective = target / self._scale
        if abs(effective - 1.0) <= 1e-12:
            return
        self._offset[0] = self._offset[0] * effective + sx * (1.0 - effective)
        self._offset[1] = self._offset[1] * effective + sy * (1.0 - effective)
        self._scale = target
        logger.debug("zoom_at factor=%.4f anchor=(%.1f, %.1f) scale=%.4f", factor, sx, sy, self._scale)

    def __repr__(self) -> str:
        return f"Viewport(scale={self._scale!r}, offset=({self._offset[0]!r}, {self._offset[1]!r}))"
