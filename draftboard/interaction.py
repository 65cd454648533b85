"""Pointer gesture state machine.

A gesture is exactly one of :class:`Idle`, :class:`DraggingShape`,
:class:`DraggingSelect` or :class:`Panning`. The "did drag" and "suppress the
next click" flags live on those state values instead of on the controller, so
there is never a combination of flags that disagrees with the active gesture.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from .shapes import Shape

logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 0
MIDDLE_BUTTON = 1
DRAG_THRESHOLD_PX = 4.0


@dataclass(frozen=True)
class Idle:
    suppress_click: bool = False


@dataclass(frozen=True)
class DraggingShape:
    anchor: Shape
    start_world_x: float
    start_world_y: float
    down_sx: float
    down_sy: float
    pointer_id: Optional[int] = None
    live: bool = False
    suppress_click: bool = False


@dataclass(frozen=True)
class DraggingSelect:
    """Marquee gesture; the rectangle corners are world pixels."""

    x0: float
    y0: float
    x1: float
    y1: float
    additive: bool
    down_sx: float
    down_sy: float
    pointer_id: Optional[int] = None
    live: bool = False
    suppress_click: bool = False


@dataclass(frozen=True)
class Panning:
    last_sx: float
    last_sy: float
    pointer_id: Optional[int] = None


GestureState = Union[Idle, DraggingShape, DraggingSelect, Panning]


@dataclass(frozen=True)
class MoveUpdate:
    """Outcome of a pointer move: which gesture moved and whether it is live."""

    kind: str = "none"  # none | drag-shape | drag-select | pan
    live: bool = False
    dx: float = 0.0
    dy: float = 0.0


_NO_MOVE = MoveUpdate()


class InteractionStateMachine:
    def __init__(self, drag_threshold_px: float = DRAG_THRESHOLD_PX):
        self.drag_threshold_px = float(drag_threshold_px)
        self.state: GestureState = Idle()

    # -- queries -----------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return not isinstance(self.state, Idle)

    @property
    def did_drag(self) -> bool:
        return bool(getattr(self.state, "live", False))

    @property
    def drag_select(self) -> Optional[DraggingSelect]:
        return self.state if isinstance(self.state, DraggingSelect) else None

    @property
    def drag_shape(self) -> Optional[DraggingShape]:
        return self.state if isinstance(self.state, DraggingShape) else None

    def owns(self, pointer_id: Optional[int]) -> bool:
        """False only when both ids are known and differ."""
        owner = getattr(self.state, "pointer_id", None)
        return pointer_id is None or owner is None or pointer_id == owner

    def _past_threshold(self, down_sx: float, down_sy: float, sx: float, sy: float) -> bool:
        dx = sx - down_sx
        dy = sy - down_sy
        return dx * dx + dy * dy >= self.drag_threshold_px * self.drag_threshold_px

    # -- transitions -------------------------------------------------------
    def pointer_down(
        self,
        sx: float,
        sy: float,
        wx: float,
        wy: float,
        button: int,
        hit: Optional[Shape] = None,
        shift: bool = False,
        pointer_id: Optional[int] = None,
    ) -> GestureState:
        """Start a gesture; a new down replaces whatever gesture was active."""
        if button == PRIMARY_BUTTON:
            if hit is not None:
                self.state = DraggingShape(hit, wx, wy, sx, sy, pointer_id)
            else:
                self.state = DraggingSelect(wx, wy, wx, wy, bool(shift), sx, sy, pointer_id)
        elif button == MIDDLE_BUTTON:
            self.state = Panning(sx, sy, pointer_id)
        else:
            return self.state
        logger.debug("gesture start: %s", type(self.state).__name__)
        return self.state

    def pointer_move(self, sx: float, sy: float) -> MoveUpdate:
        state = self.state
        if isinstance(state, Panning):
            dx = sx - state.last_sx
            dy = sy - state.last_sy
            self.state = replace(state, last_sx=sx, last_sy=sy)
            return MoveUpdate("pan", True, dx, dy)
        if isinstance(state, (DraggingShape, DraggingSelect)):
            live = state.live or self._past_threshold(state.down_sx, state.down_sy, sx, sy)
            if live and not state.live:
                self.state = state = replace(state, live=True)
            kind = "drag-shape" if isinstance(state, DraggingShape) else "drag-select"
            return MoveUpdate(kind, live)
        return _NO_MOVE

    def update_marquee(self, wx: float, wy: float) -> Optional[DraggingSelect]:
        state = self.state
        if not isinstance(state, DraggingSelect):
            return None
        self.state = replace(state, x1=wx, y1=wy)
        return self.state

    def pointer_up(self, pointer_id: Optional[int] = None) -> Optional[GestureState]:
        """End the active gesture and return it, or ``None`` if nothing ended.

        An up event for a different pointer than the one that started the
        gesture is ignored; an up without an id always ends the gesture.
        """
        state = self.state
        if isinstance(state, Idle):
            return None
        if not self.owns(pointer_id):
            logger.debug("ignoring pointer up for %s (gesture owned by %s)", pointer_id, state.pointer_id)
            return None
        suppress = bool(getattr(state, "live", False) or getattr(state, "suppress_click", False))
        self.state = Idle(suppress_click=suppress)
        logger.debug("gesture end: %s (suppress_click=%s)", type(state).__name__, suppress)
        return state

    def suppress_next_click(self) -> None:
        if hasattr(self.state, "suppress_click"):
            self.state = replace(self.state, suppress_click=True)

    def cancel_drag(self) -> None:
        """Drop the active drag but keep any pending click suppression."""
        suppress = bool(getattr(self.state, "suppress_click", False))
        self.state = Idle(suppress_click=suppress)

    def consume_click(self) -> bool:
        """Return True (and clear the flag) if this click must be swallowed."""
        state = self.state
        if isinstance(state, Idle) and state.suppress_click:
            self.state = Idle()
            return True
        return False

    def cancel(self) -> None:
        if self.is_active:
            logger.debug("gesture cancelled: %s", type(self.state).__name__)
        self.state = Idle()
