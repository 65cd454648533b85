"""Selection model keyed by shape identity.

Shapes are immutable values, so a committed transform replaces them with new
instances. Callers must hand the old -> new mapping to
:meth:`SelectionModel.remap_after_shape_replacement` after every commit or the
selection silently drops the moved shapes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .shapes import BoundingBox, Shape


class SelectionOp(str, Enum):
    REPLACE = "replace"
    ADD = "add"
    TOGGLE = "toggle"


@dataclass(frozen=True)
class SelectionOperation:
    kind: SelectionOp
    shapes: Tuple[Shape, ...] = ()

    @classmethod
    def of(cls, kind, shapes: Iterable[Shape]) -> "SelectionOperation":
        return cls(SelectionOp(kind), tuple(shapes))


def _index_of(items: Sequence[Shape], shape: Shape) -> int:
    for i, item in enumerate(items):
        if item is shape:
            return i
    return -1


def _union_boxes(shapes: Iterable[Shape]) -> Optional[BoundingBox]:
    box: Optional[BoundingBox] = None
    for shape in shapes:
        bb = shape.bounding_box()
        box = bb if box is None else box.union(bb)
    return box


class SelectionModel:
    def __init__(self) -> None:
        self.selected_shapes: List[Shape] = []
        self.selected_indices: List[int] = []

    def __len__(self) -> int:
        return len(self.selected_shapes)

    def __contains__(self, shape: Shape) -> bool:
        return self.is_selected(shape)

    def is_selected(self, shape: Optional[Shape]) -> bool:
        return shape is not None and _index_of(self.selected_shapes, shape) >= 0

    def apply(self, op: SelectionOperation) -> None:
        """Apply ``op`` to ``selected_shapes``; indices need :meth:`sync_indices`."""
        if op.kind is SelectionOp.REPLACE:
            result: List[Shape] = []
            for s in op.shapes:
                if _index_of(result, s) < 0:
                    result.append(s)
            self.selected_shapes = result
        elif op.kind is SelectionOp.ADD:
            for s in op.shapes:
                if _index_of(self.selected_shapes, s) < 0:
                    self.selected_shapes.append(s)
        elif op.kind is SelectionOp.TOGGLE:
            for s in op.shapes:
                idx = _index_of(self.selected_shapes, s)
                if idx >= 0:
                    del self.selected_shapes[idx]
                else:
                    self.selected_shapes.append(s)
        else:  # pragma: no cover - enum is closed
            raise ValueError(f"Unknown selection operation {op.kind!r}")

    def replace(self, shapes: Iterable[Shape]) -> None:
        self.apply(SelectionOperation.of(SelectionOp.REPLACE, shapes))

    def add(self, shapes: Iterable[Shape]) -> None:
        self.apply(SelectionOperation.of(SelectionOp.ADD, shapes))

    def toggle(self, shapes: Iterable[Shape]) -> None:
        self.apply(SelectionOperation.of(SelectionOp.TOGGLE, shapes))

    def clear(self) -> None:
        self.selected_shapes = []
        self.selected_indices = []

    def sync_indices(self, shapes: Sequence[Shape]) -> List[int]:
        positions = {id(s): i for i, s in enumerate(shapes)}
        self.selected_indices = [positions[id(s)] for s in self.selected_shapes if id(s) in positions]
        return self.selected_indices

    def remap_after_shape_replacement(self, old_to_new: Mapping[Shape, Shape], shapes: Sequence[Shape]) -> None:
        present = {id(s) for s in shapes}
        remapped = [old_to_new.get(s, s) for s in self.selected_shapes]
        self.selected_shapes = [s for s in remapped if id(s) in present]
        self.sync_indices(shapes)

    def group_bounding_box(self) -> Optional[BoundingBox]:
        return _union_boxes(self.selected_shapes)

    @staticmethod
    def group_bounding_box_for(shapes: Sequence[Shape], indices: Iterable[int]) -> Optional[BoundingBox]:
        """Union box of ``shapes[i]`` for the in-range ``indices``."""
        picked = [shapes[i] for i in indices if 0 <= i < len(shapes)]
        return _union_boxes(picked)

    def drag_targets(self, anchor: Shape) -> List[Shape]:
        """Group drag only when the anchor is part of a multi-shape selection."""
        if len(self.selected_shapes) > 1 and self.is_selected(anchor):
            return list(self.selected_shapes)
        return [anchor]
