"""Free-space search over a grid."""

from __future__ import annotations

from collections.abc import Iterable

from gridtech.core.errors import LayoutContractError
from gridtech.core.models import GridPosition, GridRect
from gridtech.core.occupancy import OccupancyGrid


def find_free_space(
    occupied: Iterable[GridRect],
    cols: int,
    rows: int,
    width: int,
    height: int,
) -> GridPosition | None:
    """Return the first unoccupied ``width x height`` slot, scanning rows top-down.

    Within a row candidates are tried left to right. ``None`` means the grid
    has no room; callers decide whether that is fatal.

    Raises:
        LayoutContractError: the requested size is smaller than 1x1.
    """
    if width < 1 or height < 1:
        raise LayoutContractError(f"Widget size must be at least 1x1, got {width}x{height}.")
    return OccupancyGrid.from_rects(occupied, cols, rows).first_fit(width, height)
