"""Canvas orchestrator: owns the document state and routes input gestures.

The orchestrator is host neutral. A host (the Qt widget, or a test) converts
its native events into :class:`PointerEvent`, :class:`WheelEvent` and
:class:`KeyEvent` records, provides an optional pointer-capture hook and a
repaint callback, and calls :meth:`CanvasOrchestrator.paint` with a
:class:`~draftboard.render.Painter` when it is time to draw.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Protocol, Sequence

from .config import EditorSettings
from .errors import InvalidArgument
from .hit_test import hit_test_topmost
from .interaction import (
    MIDDLE_BUTTON,
    PRIMARY_BUTTON,
    DraggingSelect,
    DraggingShape,
    InteractionStateMachine,
)
from .marquee import MarqueeController
from .overlay import OverlayRenderer, OverlayState
from .render import Painter, render_scene
from .scheduler import FrameScheduler
from .selection import SelectionModel
from .shapes import Shape
from .transform import TransformController
from .units import Angle
from .viewport import Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointerEvent:
    sx: float
    sy: float
    button: int = PRIMARY_BUTTON
    shift: bool = False
    pointer_id: Optional[int] = None


@dataclass(frozen=True)
class WheelEvent:
    sx: float
    sy: float
    delta_y: float


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    shift: bool = False


class PointerCapture(Protocol):
    def capture(self, pointer_id: Optional[int]) -> None: ...

    def release(self, pointer_id: Optional[int]) -> None: ...


class _NoCapture:
    def capture(self, pointer_id: Optional[int]) -> None:
        pass

    def release(self, pointer_id: Optional[int]) -> None:
        pass


def _guarded(method):
    """Keep handler failures inside the canvas and return to Idle."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except Exception:
            logger.exception("%s failed; resetting the active gesture", method.__name__)
            self._recover()
            return False

    return wrapper


class CanvasOrchestrator:
    def __init__(
        self,
        shapes: Optional[Iterable[Shape]] = None,
        settings: Optional[EditorSettings] = None,
        capture: Optional[PointerCapture] = None,
        schedule: Optional[Callable[[Callable[[], None]], None]] = None,
        on_render: Optional[Callable[[], None]] = None,
    ):
        self.settings = settings or EditorSettings()
        self.shapes: List[Shape] = list(shapes or [])
        self.viewport = Viewport(min_scale=self.settings.min_scale, max_scale=self.settings.max_scale)
        self.selection = SelectionModel()
        self.interaction = InteractionStateMachine(self.settings.drag_threshold_px)
        self.transform = TransformController()
        self.marquee = MarqueeController(self.interaction)
        self.overlay_renderer = OverlayRenderer(self.settings.theme)
        self.capture: PointerCapture = capture or _NoCapture()
        self.on_render = on_render
        self.scheduler = FrameScheduler(self._repaint, schedule)

        self.hovered_shape: Optional[Shape] = None
        self.pointer_screen: Optional[tuple] = None
        self.preview_shapes: Optional[List[Shape]] = None
        self.width = 0.0
        self.height = 0.0
        self._capture_held = False
        self._capture_id: Optional[int] = None

    # ------------------------------------------------------------------
    # plumbing
    def _repaint(self) -> None:
        if self.on_render is not None:
            self.on_render()

    def request_render(self) -> None:
        self.scheduler.request()

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        self.request_render()

    def _acquire_capture(self, pointer_id: Optional[int]) -> None:
        self._release_capture()
        self.capture.capture(pointer_id)
        self._capture_held = True
        self._capture_id = pointer_id

    def _release_capture(self) -> None:
        if not self._capture_held:
            return
        self._capture_held = False
        pointer_id, self._capture_id = self._capture_id, None
        self.capture.release(pointer_id)

    def _clear_previews(self) -> None:
        self.preview_shapes = None
        self.marquee.clear_preview()
        self.transform.clear_delta()

    def _recover(self) -> None:
        self.interaction.cancel()
        self._clear_previews()
        try:
            self._release_capture()
        except Exception:
            logger.exception("Releasing pointer capture failed during recovery")

    def _world(self, sx: float, sy: float) -> tuple:
        return self.viewport.screen_to_world(sx, sy)

    def _hit(self, sx: float, sy: float) -> Optional[Shape]:
        wx, wy = self._world(sx, sy)
        return hit_test_topmost(self.shapes, wx, wy)

    def _refresh_hover(self) -> None:
        if self.pointer_screen is None:
            self.hovered_shape = None
            return
        self.hovered_shape = self._hit(*self.pointer_screen)

    # ------------------------------------------------------------------
    # pointer gestures
    @_guarded
    def on_pointer_down(self, event: PointerEvent) -> None:
        if event.button not in (PRIMARY_BUTTON, MIDDLE_BUTTON):
            return
        self._clear_previews()
        wx, wy = self._world(event.sx, event.sy)
        if event.button == PRIMARY_BUTTON:
            hit = hit_test_topmost(self.shapes, wx, wy)
            self.interaction.pointer_down(event.sx, event.sy, wx, wy, event.button, hit, event.shift, event.pointer_id)
            self._acquire_capture(event.pointer_id)
            if hit is not None:
                if event.shift:
                    self.selection.toggle([hit])
                    self.selection.sync_indices(self.shapes)
                    self.interaction.suppress_next_click()
                    if not self.selection.is_selected(hit):
                        self.interaction.cancel_drag()
                elif not self.selection.is_selected(hit):
                    self.selection.replace([hit])
                    self.selection.sync_indices(self.shapes)
                    self.interaction.suppress_next_click()
        else:
            self.interaction.pointer_down(event.sx, event.sy, wx, wy, event.button, pointer_id=event.pointer_id)
            self._acquire_capture(event.pointer_id)
        self.request_render()

    @_guarded
    def on_pointer_move(self, event: PointerEvent) -> None:
        self.pointer_screen = (event.sx, event.sy)
        update = self.interaction.pointer_move(event.sx, event.sy)
        if update.kind == "pan":
            self.viewport.pan_by(update.dx, update.dy)
        elif update.kind == "drag-select":
            if update.live:
                wx, wy = self._world(event.sx, event.sy)
                self.marquee.pointer_move(self.shapes, wx, wy)
        elif update.kind == "drag-shape":
            drag = self.interaction.drag_shape
            if update.live and drag is not None:
                wx, wy = self._world(event.sx, event.sy)
                dx, dy = self.transform.compute_drag_delta(drag.start_world_x, drag.start_world_y, wx, wy)
                targets = self.selection.drag_targets(drag.anchor)
                self.preview_shapes = self.transform.preview_translate(self.shapes, targets, dx, dy)
        else:
            self._refresh_hover()
        self.request_render()

    @_guarded
    def on_pointer_up(self, event: PointerEvent) -> None:
        if not self.interaction.owns(event.pointer_id):
            return
        self._release_capture()
        state = self.interaction.state
        if isinstance(state, DraggingSelect) and state.live:
            self.marquee.commit(self.shapes, self.selection)
        elif isinstance(state, DraggingShape) and state.live:
            targets = self.selection.drag_targets(state.anchor)
            self.shapes = self.transform.commit_translate(self.shapes, targets, selection=self.selection)
        self.selection.sync_indices(self.shapes)
        self._clear_previews()
        self.interaction.pointer_up(event.pointer_id)
        self._refresh_hover()
        self.request_render()

    @_guarded
    def on_click(self, event: PointerEvent) -> None:
        if event.button != PRIMARY_BUTTON:
            return
        if self.interaction.consume_click() or self.interaction.is_active:
            return
        found = self._hit(event.sx, event.sy)
        if found is None:
            if not event.shift:
                self.selection.replace([])
        elif event.shift:
            self.selection.toggle([found])
        else:
            self.selection.replace([found])
        self.selection.sync_indices(self.shapes)
        self.request_render()

    @_guarded
    def on_wheel(self, event: WheelEvent) -> None:
        if event.delta_y == 0:
            return
        factor = self.settings.wheel_zoom_out if event.delta_y > 0 else self.settings.wheel_zoom_in
        self.viewport.zoom_at(factor, event.sx, event.sy)
        self.request_render()

    @_guarded
    def on_key(self, event: KeyEvent) -> bool:
        """Handle editor shortcuts; returns False for keys left to the host."""
        key = event.key
        if key == "Escape":
            self.cancel_gesture()
            self.selection.clear()
            self.request_render()
            return True
        if self.interaction.is_active:
            return False
        if key in ("Delete", "Backspace"):
            self.delete_selection()
            return True
        if event.ctrl:
            step = self.settings.keyboard_zoom_step
            if key in ("+", "="):
                self.zoom_by(step)
            elif key == "-":
                self.zoom_by(1.0 / step)
            elif key == "0":
                self.viewport.reset()
                self.request_render()
            else:
                return False
            return True
        if key in ("r", "R"):
            degrees = self.settings.rotate_step_deg
            if key == "R" or event.shift:
                degrees = -degrees
            self.rotate_selection(degrees)
            return True
        return False

    def cancel_gesture(self) -> None:
        """Abort the gesture in progress (focus loss, lost capture)."""
        self._recover()
        self.request_render()

    # ------------------------------------------------------------------
    # document operations
    def set_shapes(self, shapes: Iterable[Shape]) -> None:
        if self.interaction.is_active:
            self.cancel_gesture()
        self.shapes = list(shapes)
        self.selection.remap_after_shape_replacement({}, self.shapes)
        self._refresh_hover()
        self.request_render()

    def add_shape(self, shape: Shape) -> None:
        if not isinstance(shape, Shape):
            raise InvalidArgument(f"Expected a Shape, got {shape!r}")
        self.shapes.append(shape)
        self.request_render()

    def delete_selection(self) -> int:
        doomed = {id(s) for s in self.selection.selected_shapes}
        if not doomed:
            return 0
        before = len(self.shapes)
        self.shapes = [s for s in self.shapes if id(s) not in doomed]
        self.selection.clear()
        self._refresh_hover()
        self.request_render()
        removed = before - len(self.shapes)
        logger.debug("deleted %d shape(s)", removed)
        return removed

    def rotate_selection(self, degrees: float) -> bool:
        box = self.selection.group_bounding_box()
        if box is None:
            return False
        angle = Angle.from_degrees(degrees)
        origin = box.center()
        self.shapes = self.transform.commit_transform(
            self.shapes, list(self.selection.selected_shapes), lambda s: s.rotate(angle, origin), self.selection
        )
        self.request_render()
        return True

    def scale_selection(self, factor: float) -> bool:
        if factor <= 0:
            raise InvalidArgument(f"Scale factor must be positive, got {factor!r}")
        box = self.selection.group_bounding_box()
        if box is None:
            return False
        origin = box.center()
        self.shapes = self.transform.commit_transform(
            self.shapes, list(self.selection.selected_shapes), lambda s: s.scale(factor, origin), self.selection
        )
        self.request_render()
        return True

    def zoom_by(self, factor: float) -> None:
        self.viewport.zoom_at(factor, self.width / 2.0, self.height / 2.0)
        self.request_render()

    # ------------------------------------------------------------------
    # painting
    @property
    def display_shapes(self) -> Sequence[Shape]:
        return self.preview_shapes if self.preview_shapes is not None else self.shapes

    def overlay_state(self) -> OverlayState:
        shapes = self.display_shapes
        indices = self.marquee.preview_indices
        if indices is None:
            indices = self.selection.selected_indices
        group = None
        if self.selection.selected_indices:
            group = SelectionModel.group_bounding_box_for(shapes, self.selection.selected_indices)
        return OverlayState(
            viewport=self.viewport,
            shapes=shapes,
            selected_indices=list(indices),
            hovered_shape=self.hovered_shape,
            pointer_screen=self.pointer_screen,
            drag_select_rect=self.marquee.drag_rect(),
            group_bounding_box=group,
            show_grid=self.settings.show_grid,
            show_bounding_boxes=self.settings.show_bounding_boxes,
            grid_spacing_mm=self.settings.grid_spacing_mm,
            width=self.width,
            height=self.height,
        )

    def paint(self, painter: Painter, width: Optional[float] = None, height: Optional[float] = None) -> int:
        if width is not None and height is not None:
            self.width = float(width)
            self.height = float(height)
        state = self.overlay_state()
        return render_scene(
            painter,
            state.shapes,
            self.viewport,
            background=self.settings.background,
            overlays=lambda p: self.overlay_renderer.draw(p, state),
        )
