"""Numpy-backed cell occupancy for a single layout pass."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from gridtech.core.geometry import in_bounds
from gridtech.core.models import GridPosition, GridRect


@dataclass(slots=True)
class OccupancyGrid:
    """Boolean cell map indexed ``[y, x]``; rebuilt per call, never persisted."""

    cols: int
    rows: int
    cells: np.ndarray = field(default_factory=lambda: np.zeros((0, 0), dtype=np.bool_))

    def __post_init__(self) -> None:
        if self.cells.shape != (self.rows, self.cols):
            self.cells = np.zeros((self.rows, self.cols), dtype=np.bool_)

    @classmethod
    def from_rects(cls, rects: Iterable[GridRect], cols: int, rows: int) -> OccupancyGrid:
        """Build a map with every given rectangle marked."""
        grid = cls(cols=cols, rows=rows)
        for rect in rects:
            grid.occupy(rect)
        return grid

    def occupy(self, rect: GridRect) -> None:
        """Mark the in-grid part of a rectangle as occupied."""
        x0, y0 = max(0, rect.x), max(0, rect.y)
        x1, y1 = min(self.cols, rect.x + rect.width), min(self.rows, rect.y + rect.height)
        if x0 < x1 and y0 < y1:
            self.cells[y0:y1, x0:x1] = True

    def is_free(self, rect: GridRect) -> bool:
        """Return whether the rectangle is in bounds and touches no occupied cell."""
        if not in_bounds(rect, self.cols, self.rows):
            return False
        return not self.cells[rect.y : rect.y + rect.height, rect.x : rect.x + rect.width].any()

    def occupied_count(self) -> int:
        return int(self.cells.sum())

    def first_fit(self, width: int, height: int) -> GridPosition | None:
        """Return the first free ``width x height`` slot in reading order.

        A summed-area table gives the occupied-cell count of every candidate
        window at once; the first zero in row-major order is the answer.
        """
        if width > self.cols or height > self.rows:
            return None
        table = np.zeros((self.rows + 1, self.cols + 1), dtype=np.int32)
        table[1:, 1:] = self.cells.astype(np.int32).cumsum(axis=0).cumsum(axis=1)
        windows = (
            table[height:, width:]
            - table[: self.rows + 1 - height, width:]
            - table[height:, : self.cols + 1 - width]
            + table[: self.rows + 1 - height, : self.cols + 1 - width]
        )
        free = np.flatnonzero(windows == 0)
        if free.size == 0:
            return None
        y, x = divmod(int(free[0]), windows.shape[1])
        return GridPosition(x=x, y=y)
