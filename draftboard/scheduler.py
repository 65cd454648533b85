"""Dirty-flag frame scheduling: many state changes, one repaint."""
from __future__ import annotations

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def _run_now(callback: Callable[[], None]) -> None:
    callback()


class FrameScheduler:
    """Coalesce repaint requests into at most one pending flush.

    ``schedule`` receives a zero-argument callback and decides when to run it
    (the Qt widget posts it to the event loop); by default it runs at once.
    """

    def __init__(
        self,
        render: Callable[[], None],
        schedule: Optional[Callable[[Callable[[], None]], None]] = None,
    ):
        self._render = render
        self._schedule = schedule or _run_now
        self.dirty = False
        self.pending = False
        self.frames = 0

    def request(self) -> None:
        self.dirty = True
        if self.pending:
            return
        self.pending = True
        self._schedule(self.flush)

    def flush(self) -> bool:
        self.pending = False
        if not self.dirty:
            return False
        self.dirty = False
        self._render()
        self.frames += 1
        return True
