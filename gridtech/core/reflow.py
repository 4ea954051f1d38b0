"""Single-pass conflict resolution for a widget set."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gridtech.core.geometry import clamp_rect
from gridtech.core.models import GridPosition, GridRect, WidgetState
from gridtech.core.occupancy import OccupancyGrid
from gridtech.core.validation import ensure_grid_dimensions, ensure_unique_ids

logger = logging.getLogger(__name__)

_FALLBACK = GridPosition(0, 0)


def reflow_widgets(
    widgets: Sequence[WidgetState],
    cols: int,
    rows: int,
    prevent_overlap: bool = False,
    active_id: str | None = None,
) -> list[WidgetState]:
    """Return a copy of ``widgets`` with every rectangle in bounds.

    With ``prevent_overlap`` widgets are placed one at a time: the active
    widget first, then the rest in reading order ``(y, x)``. A widget keeps
    its rectangle when it fits beside the widgets already placed in this pass,
    otherwise it takes the first free slot among them, or ``(0, 0)`` when the
    grid is full. Collisions are only checked against already-placed widgets,
    so the pass never iterates.

    The result keeps the input order; only coordinates change.

    Raises:
        DuplicateWidgetIdError: identifiers are not unique.
        InvalidGridError: the grid is smaller than 1x1.
    """
    ensure_grid_dimensions(cols, rows)
    ensure_unique_ids(widgets)

    if not prevent_overlap:
        return [_clamped(widget, cols, rows) for widget in widgets]

    order = sorted(
        range(len(widgets)),
        key=lambda idx: (
            0 if active_id is not None and widgets[idx].id == active_id else 1,
            widgets[idx].y,
            widgets[idx].x,
        ),
    )

    occupancy = OccupancyGrid(cols=cols, rows=rows)
    placed: dict[int, WidgetState] = {}
    displaced = 0
    fallbacks = 0
    for idx in order:
        widget = widgets[idx]
        rect = widget.rect
        if widget.id == active_id:
            rect = clamp_rect(rect, cols, rows)
        if not occupancy.is_free(rect):
            position = occupancy.first_fit(rect.width, rect.height)
            if position is None:
                fallbacks += 1
                position = _FALLBACK
            rect = GridRect(position.x, position.y, rect.width, rect.height)
        if (rect.x, rect.y) != (widget.x, widget.y):
            displaced += 1
        occupancy.occupy(rect)
        placed[idx] = widget.moved_to(rect.x, rect.y)

    if fallbacks:
        logger.debug(
            "reflow_grid_full widgets=%d fallbacks=%d cols=%d rows=%d",
            len(widgets),
            fallbacks,
            cols,
            rows,
        )
    logger.debug(
        "reflow widgets=%d displaced=%d active=%s", len(widgets), displaced, active_id
    )
    return [placed[idx] for idx in range(len(widgets))]


def _clamped(widget: WidgetState, cols: int, rows: int) -> WidgetState:
    rect = clamp_rect(widget.rect, cols, rows)
    return widget.moved_to(rect.x, rect.y)


reflow = reflow_widgets
