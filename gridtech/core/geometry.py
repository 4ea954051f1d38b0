"""Rectangle overlap and grid clamping primitives."""

from __future__ import annotations

from collections.abc import Iterable

from gridtech.core.models import GridPosition, GridRect, SizeLimits


def overlaps(a: GridRect, b: GridRect) -> bool:
    """Return whether two rectangles share at least one cell.

    Rectangles that only touch along an edge do not overlap.
    """
    return (
        a.x < b.x + b.width
        and a.x + a.width > b.x
        and a.y < b.y + b.height
        and a.y + a.height > b.y
    )


def has_collision(rects: Iterable[GridRect], candidate: GridRect) -> bool:
    """Return whether any rectangle overlaps the candidate."""
    return any(overlaps(rect, candidate) for rect in rects)


def in_bounds(rect: GridRect, cols: int, rows: int) -> bool:
    """Return whether the rectangle lies fully inside the grid."""
    return rect.x >= 0 and rect.y >= 0 and rect.x + rect.width <= cols and rect.y + rect.height <= rows


def clamp_to_grid(
    size: tuple[int, int],
    requested: GridPosition | tuple[int, int],
    cols: int,
    rows: int,
) -> GridPosition:
    """Clamp a requested top-left cell so a ``(w, h)`` rectangle stays in the grid."""
    width, height = size
    if isinstance(requested, GridPosition):
        x, y = requested.x, requested.y
    else:
        x, y = requested
    # Oversized axes pin to 0.
    return GridPosition(x=max(0, min(x, cols - width)), y=max(0, min(y, rows - height)))


def clamp_rect(rect: GridRect, cols: int, rows: int) -> GridRect:
    """Return the rectangle moved inside the grid."""
    pos = clamp_to_grid((rect.width, rect.height), rect.position, cols, rows)
    return GridRect(pos.x, pos.y, rect.width, rect.height)


def clamp_size(
    width: int,
    height: int,
    limits: SizeLimits,
    *,
    cols: int,
    rows: int,
    x: int = 0,
    y: int = 0,
) -> tuple[int, int]:
    """Clamp a requested size to widget limits and the grid span left of/below ``(x, y)``."""
    width = _clamp_axis(width, limits.min_w, limits.max_w)
    height = _clamp_axis(height, limits.min_h, limits.max_h)
    return max(1, min(width, cols - x)), max(1, min(height, rows - y))


def _clamp_axis(value: int, minimum: int | None, maximum: int | None) -> int:
    if maximum is not None:
        value = min(value, maximum)
    if minimum is not None:
        value = max(value, minimum)
    return max(1, value)
