"""Preview and commit of transforms applied to a subset of the shape list."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .selection import SelectionModel
from .shapes import Shape
from .units import Measurement

logger = logging.getLogger(__name__)

ShapeFn = Callable[[Shape], Shape]


class TransformController:
    def __init__(self) -> None:
        self.last_dx: Optional[Measurement] = None
        self.last_dy: Optional[Measurement] = None

    def compute_drag_delta(
        self, anchor_wx: float, anchor_wy: float, current_wx: float, current_wy: float
    ) -> Tuple[Measurement, Measurement]:
        """World-pixel drag delta as Measurements; remembered for the commit."""
        self.last_dx = Measurement.from_px(current_wx - anchor_wx)
        self.last_dy = Measurement.from_px(current_wy - anchor_wy)
        return self.last_dx, self.last_dy

    def clear_delta(self) -> None:
        self.last_dx = None
        self.last_dy = None

    # -- generic ------------------------------------------------------------
    @staticmethod
    def preview_transform(all_shapes: Sequence[Shape], targets: Sequence[Shape], fn: ShapeFn) -> List[Shape]:
        """New list with ``fn`` applied to ``targets``; others pass through by reference."""
        if not targets:
            return list(all_shapes)
        ids = {id(t) for t in targets}
        return [fn(s) if id(s) in ids else s for s in all_shapes]

    @staticmethod
    def commit_transform(
        all_shapes: Sequence[Shape],
        targets: Sequence[Shape],
        fn: ShapeFn,
        selection: Optional[SelectionModel] = None,
    ) -> List[Shape]:
        if not targets:
            return list(all_shapes)
        ids = {id(t) for t in targets}
        new_shapes: List[Shape] = []
        old_to_new: Dict[Shape, Shape] = {}
        for shape in all_shapes:
            if id(shape) in ids:
                moved = fn(shape)
                old_to_new[shape] = moved
                new_shapes.append(moved)
            else:
                new_shapes.append(shape)
        if selection is not None:
            selection.remap_after_shape_replacement(old_to_new, new_shapes)
        logger.debug("committed transform of %d shape(s)", len(old_to_new))
        return new_shapes

    # -- translation --------------------------------------------------------
    def preview_translate(
        self, all_shapes: Sequence[Shape], targets: Sequence[Shape], dx: Measurement, dy: Measurement
    ) -> List[Shape]:
        return self.preview_transform(all_shapes, targets, lambda s: s.translate(dx, dy))

    def commit_translate(
        self,
        all_shapes: Sequence[Shape],
        targets: Sequence[Shape],
        dx: Optional[Measurement] = None,
        dy: Optional[Measurement] = None,
        selection: Optional[SelectionModel] = None,
    ) -> List[Shape]:
        """Translate ``targets`` for good and remap ``selection`` onto the new instances.

        ``dx``/``dy`` default to the last computed drag delta; with neither
        available the list is returned unchanged.
        """
        dx = dx if dx is not None else self.last_dx
        dy = dy if dy is not None else self.last_dy
        if dx is None or dy is None:
            return list(all_shapes)
        return self.commit_transform(all_shapes, targets, lambda s: s.translate(dx, dy), selection)
