"""
Route walker: replays a path one cell at a time at a fixed cadence.
"""

from __future__ import annotations
from typing import List, Optional, Sequence

from .config import STEP_INTERVAL
from .grid import Cell


class RouteWalker:
    """
    Steps a shopper marker along a path.
    Attributes:
        current: Cell the walker stands on (None for an empty path).
        interval: Seconds between two steps.
        finished: True once the destination is reached.
    """

    def __init__(self, path: Sequence[Cell], interval: float = STEP_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError("Step interval must be positive")
        self._path: List[Cell] = list(path)
        self.interval = interval
        # Time accumulated towards the next step
        self.timer = 0.0

    @property
    def current(self) -> Optional[Cell]:
        return self._path[0] if self._path else None

    @property
    def remaining(self) -> List[Cell]:
        """Cells still ahead of the walker."""
        return self._path[1:]

    @property
    def finished(self) -> bool:
        return len(self._path) <= 1

    def update(self, dt: float) -> List[Cell]:
        """
        Advance the walker by dt seconds.
        Returns the cells stepped into during this update, in order.
        """
        if self.finished:
            return []
        self.timer += dt
        stepped = []
        while self.timer >= self.interval and not self.finished:
            self.timer -= self.interval
            self._path.pop(0)
            stepped.append(self._path[0])
        if self.finished:
            self.timer = 0.0
        return stepped
