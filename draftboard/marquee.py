"""Rubber-band (marquee) selection on top of the interaction state machine."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .geometry import Bounds, normalize_rect
from .hit_test import hit_test_intersecting_rect, hit_test_intersecting_rect_indices
from .interaction import InteractionStateMachine
from .selection import SelectionModel
from .shapes import Shape

logger = logging.getLogger(__name__)


class MarqueeController:
    def __init__(self, interaction: InteractionStateMachine):
        self.interaction = interaction
        self.preview_indices: Optional[List[int]] = None

    def drag_rect(self) -> Optional[Bounds]:
        """Normalised marquee rect in world pixels while a drag-select is active."""
        state = self.interaction.drag_select
        if state is None:
            return None
        return normalize_rect(state.x0, state.y0, state.x1, state.y1)

    def pointer_move(self, shapes: Sequence[Shape], wx: float, wy: float) -> bool:
        """Grow the rect and refresh preview indices; True when a repaint is needed."""
        state = self.interaction.drag_select
        if state is None or not state.live:
            return False
        self.interaction.update_marquee(wx, wy)
        self.preview_indices = hit_test_intersecting_rect_indices(shapes, *self.drag_rect())
        return True

    def compute_selected(self, shapes: Sequence[Shape]) -> Optional[List[Shape]]:
        rect = self.drag_rect()
        if rect is None:
            return None
        return hit_test_intersecting_rect(shapes, *rect)

    def commit(self, shapes: Sequence[Shape], selection: SelectionModel) -> bool:
        """Select the shapes under the marquee; must run before the gesture ends."""
        state = self.interaction.drag_select
        hits = self.compute_selected(shapes)
        self.clear_preview()
        if state is None or hits is None:
            return False
        if state.additive:
            selection.add(hits)
        else:
            selection.replace(hits)
        selection.sync_indices(shapes)
        logger.debug("marquee selected %d shape(s) (additive=%s)", len(hits), state.additive)
        return True

    def clear_preview(self) -> None:
        self.preview_indices = None
