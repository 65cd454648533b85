"""Qt widgets for the draftboard canvas."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from PySide6.QtCore import QPointF, QRectF, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QPainter, QPen, QPolygonF
from PySide6.QtWidgets import QWidget

from .config import EditorSettings
from .orchestrator import CanvasOrchestrator, KeyEvent, PointerEvent, WheelEvent
from .render import Pen
from .shapes import Shape

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

_BUTTONS = {
    Qt.LeftButton: 0,
    Qt.MiddleButton: 1,
    Qt.RightButton: 2,
}

_NAMED_KEYS = {
    Qt.Key_Escape: "Escape",
    Qt.Key_Delete: "Delete",
    Qt.Key_Backspace: "Backspace",
    Qt.Key_Plus: "+",
    Qt.Key_Equal: "=",
    Qt.Key_Minus: "-",
    Qt.Key_0: "0",
}


class QtPainter:
    """Adapter exposing the draftboard Painter hooks on top of a QPainter."""

    def __init__(self, painter: QPainter, width: float, height: float):
        self._painter = painter
        self._width = width
        self._height = height
        self._depth = 0

    def _color(self, value: Optional[str]) -> QColor:
        return QColor(value) if value else QColor(34, 34, 34)

    def _apply(self, pen: Pen) -> None:
        qpen = QPen(self._color(pen.color))
        qpen.setWidthF(float(pen.width))
        if pen.dash:
            # QPen dash lengths are in units of the pen width
            width = max(float(pen.width), 1e-9)
            qpen.setDashPattern([float(d) / width for d in pen.dash])
        self._painter.setPen(qpen)
        if pen.fill:
            self._painter.setBrush(self._color(pen.fill))
        else:
            self._painter.setBrush(Qt.NoBrush)

    def clear(self, background: Optional[str]) -> None:
        self._painter.save()
        self._painter.resetTransform()
        if background:
            self._painter.fillRect(QRectF(0.0, 0.0, self._width, self._height), self._color(background))
        else:
            self._painter.eraseRect(QRectF(0.0, 0.0, self._width, self._height))
        self._painter.restore()

    def push_view(self, scale: float, offset_x: float, offset_y: float) -> None:
        self._painter.save()
        self._depth += 1
        self._painter.translate(offset_x, offset_y)
        self._painter.scale(scale, scale)

    def pop_view(self) -> None:
        if self._depth:
            self._depth -= 1
            self._painter.restore()

    def polyline(self, points: Sequence[Point], pen: Pen, closed: bool = False) -> None:
        if not points:
            return
        self._painter.save()
        self._apply(pen)
        polygon = QPolygonF([QPointF(float(x), float(y)) for x, y in points])
        if closed:
            self._painter.drawPolygon(polygon)
        else:
            self._painter.drawPolyline(polygon)
        self._painter.restore()

    def ellipse(self, cx: float, cy: float, rx: float, ry: float, pen: Pen) -> None:
        self._painter.save()
        self._apply(pen)
        self._painter.drawEllipse(QPointF(float(cx), float(cy)), float(rx), float(ry))
        self._painter.restore()

    def circle(self, cx: float, cy: float, r: float, pen: Pen) -> None:
        self.ellipse(cx, cy, r, r, pen)

    def rect(self, x: float, y: float, w: float, h: float, pen: Pen) -> None:
        self._painter.save()
        self._apply(pen)
        self._painter.drawRect(QRectF(float(x), float(y), float(w), float(h)))
        self._painter.restore()

    def line(self, x1: float, y1: float, x2: float, y2: float, pen: Pen) -> None:
        self._painter.save()
        self._apply(pen)
        self._painter.drawLine(QPointF(float(x1), float(y1)), QPointF(float(x2), float(y2)))
        self._painter.restore()


class _MouseGrab:
    def __init__(self, widget: QWidget):
        self._widget = widget

    def capture(self, pointer_id: Optional[int]) -> None:
        self._widget.grabMouse()

    def release(self, pointer_id: Optional[int]) -> None:
        self._widget.releaseMouse()


class Canvas(QWidget):
    """Drawing surface that forwards Qt input to a CanvasOrchestrator."""

    selection_changed = Signal(int)

    def __init__(self, settings: Optional[EditorSettings] = None, shapes: Optional[List[Shape]] = None, parent=None):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.orchestrator = CanvasOrchestrator(
            shapes,
            settings=settings,
            capture=_MouseGrab(self),
            schedule=lambda flush: QTimer.singleShot(0, flush),
            on_render=self.update,
        )
        self._last_selected = 0

    # ------------------------------------------------------------------
    def _pointer(self, event) -> PointerEvent:
        pos = event.position()
        return PointerEvent(
            pos.x(),
            pos.y(),
            _BUTTONS.get(event.button(), -1),
            bool(event.modifiers() & Qt.ShiftModifier),
            None,
        )

    def _emit_selection(self) -> None:
        count = len(self.orchestrator.selection)
        if count != self._last_selected:
            self._last_selected = count
            self.selection_changed.emit(count)

    def set_shapes(self, shapes: List[Shape]) -> None:
        self.orchestrator.set_shapes(shapes)
        self._emit_selection()

    def shapes(self) -> List[Shape]:
        return list(self.orchestrator.shapes)

    # ------------------------------------------------------------------
    def paintEvent(self, event):  # pragma: no cover - GUI entry point
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        try:
            self.orchestrator.paint(QtPainter(painter, self.width(), self.height()), self.width(), self.height())
        finally:
            painter.end()

    def resizeEvent(self, event):  # pragma: no cover - GUI entry point
        self.orchestrator.resize(self.width(), self.height())
        super().resizeEvent(event)

    def mousePressEvent(self, event):  # pragma: no cover - GUI entry point
        self.orchestrator.on_pointer_down(self._pointer(event))
        self._emit_selection()
        event.accept()

    def mouseMoveEvent(self, event):  # pragma: no cover - GUI entry point
        self.orchestrator.on_pointer_move(self._pointer(event))

    def mouseReleaseEvent(self, event):  # pragma: no cover - GUI entry point
        pointer = self._pointer(event)
        self.orchestrator.on_pointer_up(pointer)
        if pointer.button == 0 and self.rect().contains(event.position().toPoint()):
            # Qt has no click event; a primary release over the canvas is one
            self.orchestrator.on_click(pointer)
        self._emit_selection()
        event.accept()

    def wheelEvent(self, event):  # pragma: no cover - GUI entry point
        delta = event.angleDelta().y()
        if delta == 0:
            super().wheelEvent(event)
            return
        pos = event.position()
        # Qt reports positive angle deltas when scrolling away from the user
        self.orchestrator.on_wheel(WheelEvent(pos.x(), pos.y(), -float(delta)))
        event.accept()

    def keyPressEvent(self, event):  # pragma: no cover - GUI entry point
        shift = bool(event.modifiers() & Qt.ShiftModifier)
        key = _NAMED_KEYS.get(event.key())
        if key is None and event.key() == Qt.Key_R:
            key = "R" if shift else "r"
        if key is None:
            super().keyPressEvent(event)
            return
        handled = self.orchestrator.on_key(KeyEvent(key, bool(event.modifiers() & Qt.ControlModifier), shift))
        self._emit_selection()
        if not handled:
            super().keyPressEvent(event)

    def focusOutEvent(self, event):  # pragma: no cover - GUI entry point
        self.orchestrator.cancel_gesture()
        super().focusOutEvent(event)
