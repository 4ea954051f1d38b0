"""Position validation and layout input contract checks."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from gridtech.core.errors import (
    DuplicateWidgetIdError,
    InvalidGridError,
    LayoutContractError,
    WidgetTooLargeError,
)
from gridtech.core.geometry import clamp_to_grid, in_bounds, overlaps
from gridtech.core.models import GridPosition, ValidationResult, WidgetState
from gridtech.core.placement import find_free_space


def validate_position(
    widget: WidgetState,
    all_widgets: Sequence[WidgetState],
    cols: int,
    rows: int,
    prevent_overlap: bool = False,
) -> ValidationResult:
    """Check a widget's rectangle and suggest a corrected position when invalid."""
    rect = widget.rect
    if not in_bounds(rect, cols, rows):
        return ValidationResult(
            valid=False,
            suggested=clamp_to_grid((rect.width, rect.height), rect.position, cols, rows),
        )

    if prevent_overlap:
        collision = any(
            other.id != widget.id and overlaps(rect, other.rect) for other in all_widgets
        )
        if collision:
            free = find_free_space(
                [other.rect for other in all_widgets], cols, rows, rect.width, rect.height
            )
            # Permissive fallback; may itself overlap.
            return ValidationResult(valid=False, suggested=free or GridPosition(0, 0))
    return ValidationResult(valid=True)


def ensure_unique_ids(widgets: Sequence[WidgetState]) -> None:
    """Raise when any identifier appears more than once."""
    counts = Counter(widget.id for widget in widgets)
    duplicates = [widget_id for widget_id, count in counts.items() if count > 1]
    if duplicates:
        raise DuplicateWidgetIdError(duplicates)


def ensure_grid_dimensions(cols: int, rows: int) -> None:
    """Raise when the grid is not at least 1x1."""
    if cols < 1 or rows < 1:
        raise InvalidGridError(f"Grid dimensions must be positive, got {cols}x{rows}.")


def ensure_fits_grid(width: int, height: int, cols: int, rows: int) -> None:
    """Raise when a widget size cannot fit the grid at all."""
    if width < 1 or height < 1:
        raise LayoutContractError(f"Widget size must be at least 1x1, got {width}x{height}.")
    if width > cols or height > rows:
        raise WidgetTooLargeError(width, height, cols, rows)
