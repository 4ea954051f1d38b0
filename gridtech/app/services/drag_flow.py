"""Drag gesture flow with speculative reflow previews."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from gridtech.core.errors import LayoutContractError
from gridtech.core.geometry import clamp_to_grid, overlaps
from gridtech.core.models import GridPosition, PreviewState, ReflowPreview, WidgetState
from gridtech.core.reflow import reflow_widgets
from gridtech.core.validation import ensure_unique_ids

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DragState:
    """In-flight drag gesture; nothing here is committed."""

    widget_id: str | None = None
    preview: PreviewState | None = None
    has_moved: bool = False


@dataclass(frozen=True, slots=True)
class ReflowOutcome:
    """Result of reflowing a hypothetical widget set around a dragged widget."""

    valid: bool
    reflow_previews: tuple[ReflowPreview, ...] = ()


@dataclass(frozen=True, slots=True)
class DragEndOutcome:
    """What the driver should commit when a gesture ends."""

    commit: bool
    widget_id: str | None = None
    position: GridPosition | None = None


IDLE = DragState()


def cells_from_pixels(dx: float, dy: float, cell_width: float, cell_height: float) -> tuple[int, int]:
    """Convert a pointer delta in pixels to a whole-cell delta."""
    return _round_half_up(dx / cell_width), _round_half_up(dy / cell_height)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class DragFlowService:
    """Drag interactions as pure state transitions."""

    @staticmethod
    def on_drag_start(widget_id: str) -> DragState:
        return DragState(widget_id=widget_id, preview=None, has_moved=False)

    @staticmethod
    def on_drag_move(
        *,
        state: DragState,
        widgets: Sequence[WidgetState],
        cols: int,
        rows: int,
        delta_cols: int,
        delta_rows: int,
    ) -> DragState:
        """Recompute the preview when the pointer lands on a different cell."""
        if state.widget_id is None:
            return IDLE
        widget = next((w for w in widgets if w.id == state.widget_id), None)
        if widget is None:
            return DragState(widget_id=state.widget_id, preview=None, has_moved=True)

        target = clamp_to_grid(
            (widget.width, widget.height),
            (widget.x + delta_cols, widget.y + delta_rows),
            cols,
            rows,
        )
        previous = state.preview
        if previous is not None and previous.position == target:
            return state

        candidate = widget.moved_to(target.x, target.y)
        outcome = DragFlowService.compute_reflow_preview(candidate, widgets, cols, rows)
        preview = PreviewState(
            id=candidate.id,
            x=candidate.x,
            y=candidate.y,
            width=candidate.width,
            height=candidate.height,
            valid=outcome.valid,
            reflow_previews=outcome.reflow_previews,
        )
        return DragState(widget_id=state.widget_id, preview=preview, has_moved=True)

    @staticmethod
    def compute_reflow_preview(
        moved: WidgetState,
        widgets: Sequence[WidgetState],
        cols: int,
        rows: int,
    ) -> ReflowOutcome:
        """Reflow around ``moved`` and report which other widgets would shift.

        Duplicate ids anywhere in ``widgets`` make the preview invalid.
        """
        try:
            ensure_unique_ids(widgets)
            others = [w for w in widgets if w.id != moved.id]
            overlapping = [w for w in others if overlaps(moved.rect, w.rect)]
            if not overlapping:
                return ReflowOutcome(valid=True)
            overlapping_ids = {w.id for w in overlapping}
            hypothetical = [moved, *overlapping, *(w for w in others if w.id not in overlapping_ids)]
            reflowed = reflow_widgets(hypothetical, cols, rows, prevent_overlap=True, active_id=moved.id)
        except LayoutContractError:
            logger.warning("drag_preview_rejected widget=%s", moved.id, exc_info=True)
            return ReflowOutcome(valid=False)

        originals = {w.id: w for w in others}
        previews = tuple(
            ReflowPreview(id=w.id, x=w.x, y=w.y, width=w.width, height=w.height)
            for w in reflowed
            if w.id in originals and (originals[w.id].x, originals[w.id].y) != (w.x, w.y)
        )
        return ReflowOutcome(valid=True, reflow_previews=previews)

    @staticmethod
    def on_drag_end(state: DragState) -> DragEndOutcome:
        if state.widget_id is None or state.preview is None or not state.has_moved:
            return DragEndOutcome(commit=False)
        if not state.preview.valid:
            return DragEndOutcome(commit=False, widget_id=state.widget_id)
        return DragEndOutcome(
            commit=True, widget_id=state.widget_id, position=state.preview.position
        )

    @staticmethod
    def on_drag_cancel() -> DragState:
        return IDLE
