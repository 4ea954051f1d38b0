"""Add/move/resize/delete orchestration over immutable widget sets."""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from gridtech.core.errors import DuplicateWidgetIdError
from gridtech.core.geometry import clamp_size, overlaps
from gridtech.core.models import SizeLimits, WidgetState
from gridtech.core.placement import find_free_space
from gridtech.core.reflow import reflow_widgets
from gridtech.core.validation import ensure_fits_grid, ensure_unique_ids, validate_position

logger = logging.getLogger(__name__)

NO_SPACE_MESSAGE = "No more space available on the grid for new widgets!"
_GENERATED_ID = re.compile(r"widget-(\d+)")


@dataclass(frozen=True, slots=True)
class WidgetActionResult:
    """Outcome of a widget action; ``widgets`` is the full new set."""

    handled: bool
    widgets: tuple[WidgetState, ...]
    widget: WidgetState | None = None
    status: str | None = None


def generate_widget_id(widgets: Sequence[WidgetState], now_ms: int | None = None) -> str:
    """Return ``widget-<n>-<millis>`` with ``n`` above every generated id in use."""
    highest = 0
    for widget in widgets:
        match = _GENERATED_ID.search(widget.id)
        if match:
            highest = max(highest, int(match.group(1)))
    stamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    return f"widget-{highest + 1}-{stamp}"


class WidgetActionsService:
    """Pure helpers behind the interaction driver's widget actions."""

    @staticmethod
    def add_widget(
        *,
        widgets: Sequence[WidgetState],
        cols: int,
        rows: int,
        prevent_overlap: bool,
        size: tuple[int, int],
        widget_type: str = "default",
        props: Mapping[str, Any] | None = None,
        group_id: str | None = None,
        limits: SizeLimits = SizeLimits(),
        widget_id: str | None = None,
    ) -> WidgetActionResult:
        """Place a new widget at the first free slot in reading order."""
        width, height = size
        ensure_fits_grid(width, height, cols, rows)
        if widget_id is not None and any(w.id == widget_id for w in widgets):
            raise DuplicateWidgetIdError([widget_id])

        position = find_free_space([w.rect for w in widgets], cols, rows, width, height)
        if position is None:
            logger.warning(
                "widget_add_rejected reason=no_space size=%dx%d widgets=%d", width, height, len(widgets)
            )
            return WidgetActionResult(handled=True, widgets=tuple(widgets), status=NO_SPACE_MESSAGE)

        widget = WidgetState(
            id=widget_id or generate_widget_id(widgets),
            x=position.x,
            y=position.y,
            width=width,
            height=height,
            type=widget_type,
            props=dict(props or {}),
            group_id=group_id,
            limits=limits,
        )
        validation = validate_position(widget, widgets, cols, rows, prevent_overlap)
        if not validation.valid and validation.suggested is not None:
            widget = widget.moved_to(validation.suggested.x, validation.suggested.y)
        logger.debug("widget_added id=%s x=%d y=%d", widget.id, widget.x, widget.y)
        return WidgetActionResult(
            handled=True,
            widgets=(*widgets, widget),
            widget=widget,
            status=f"Added {widget.type} widget.",
        )

    @staticmethod
    def move_widget(
        *,
        widgets: Sequence[WidgetState],
        widget_id: str,
        x: int,
        y: int,
        cols: int,
        rows: int,
        prevent_overlap: bool,
    ) -> WidgetActionResult:
        """Move a widget, displacing others when overlap is prevented."""
        current = _find(widgets, widget_id)
        if current is None:
            return WidgetActionResult(handled=False, widgets=tuple(widgets))
        moved = current.moved_to(x, y)
        updated = [moved if w.id == widget_id else w for w in widgets]
        updated = reflow_widgets(updated, cols, rows, prevent_overlap, active_id=widget_id)
        final = _find(updated, widget_id)
        logger.debug("widget_moved id=%s x=%d y=%d", widget_id, x, y)
        return WidgetActionResult(handled=True, widgets=tuple(updated), widget=final)

    @staticmethod
    def resize_widget(
        *,
        widgets: Sequence[WidgetState],
        widget_id: str,
        width: int,
        height: int,
        cols: int,
        rows: int,
        prevent_overlap: bool,
        default_limits: SizeLimits = SizeLimits(),
    ) -> WidgetActionResult:
        """Resize a widget within its limits and the grid span it starts in.

        Bounds the widget leaves unset fall back to ``default_limits`` per axis.
        """
        current = _find(widgets, widget_id)
        if current is None:
            return WidgetActionResult(handled=False, widgets=tuple(widgets))
        limits = current.limits.with_defaults(default_limits)
        new_w, new_h = clamp_size(
            width, height, limits, cols=cols, rows=rows, x=current.x, y=current.y
        )
        resized = current.resized_to(new_w, new_h)
        others = [w for w in widgets if w.id != widget_id]

        if prevent_overlap and any(overlaps(resized.rect, w.rect) for w in others):
            reflowed = reflow_widgets([resized, *others], cols, rows, True, active_id=widget_id)
            by_id = {w.id: w for w in reflowed}
            updated = [by_id[w.id] for w in widgets]
        else:
            updated = [resized if w.id == widget_id else w for w in widgets]
        logger.debug("widget_resized id=%s width=%d height=%d", widget_id, new_w, new_h)
        return WidgetActionResult(
            handled=True, widgets=tuple(updated), widget=_find(updated, widget_id)
        )

    @staticmethod
    def delete_widget(*, widgets: Sequence[WidgetState], widget_id: str) -> WidgetActionResult:
        removed = _find(widgets, widget_id)
        if removed is None:
            return WidgetActionResult(handled=False, widgets=tuple(widgets))
        remaining = tuple(w for w in widgets if w.id != widget_id)
        logger.debug("widget_deleted id=%s", widget_id)
        return WidgetActionResult(handled=True, widgets=remaining, widget=removed)

    @staticmethod
    def load_widgets(
        *,
        widgets: Sequence[WidgetState],
        cols: int,
        rows: int,
        prevent_overlap: bool,
    ) -> WidgetActionResult:
        """Adopt an externally supplied widget set, normalized into the grid."""
        ensure_unique_ids(widgets)
        normalized = reflow_widgets(widgets, cols, rows, prevent_overlap)
        return WidgetActionResult(handled=True, widgets=tuple(normalized))

    @staticmethod
    def clear_widgets() -> WidgetActionResult:
        return WidgetActionResult(handled=True, widgets=(), status="Cleared all widgets.")


def _find(widgets: Sequence[WidgetState], widget_id: str) -> WidgetState | None:
    for widget in widgets:
        if widget.id == widget_id:
            return widget
    return None
