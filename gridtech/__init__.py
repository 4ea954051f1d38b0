"""Deterministic widget layout and reflow on a fixed cell grid."""

from gridtech.core.errors import (
    DuplicateWidgetIdError,
    InvalidGridError,
    LayoutContractError,
    WidgetTooLargeError,
)
from gridtech.core.geometry import clamp_size, clamp_to_grid, has_collision, in_bounds, overlaps
from gridtech.core.models import (
    GridPosition,
    GridRect,
    PreviewState,
    ReflowPreview,
    SizeLimits,
    ValidationResult,
    WidgetState,
)
from gridtech.core.placement import find_free_space
from gridtech.core.reflow import reflow, reflow_widgets
from gridtech.core.validation import validate_position

__all__ = [
    "DuplicateWidgetIdError",
    "GridPosition",
    "GridRect",
    "InvalidGridError",
    "LayoutContractError",
    "PreviewState",
    "ReflowPreview",
    "SizeLimits",
    "ValidationResult",
    "WidgetState",
    "WidgetTooLargeError",
    "clamp_size",
    "clamp_to_grid",
    "find_free_space",
    "has_collision",
    "in_bounds",
    "overlaps",
    "reflow",
    "reflow_widgets",
    "validate_position",
]
