"""Interaction driver: owns the widget set and routes actions through the layout core."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from gridtech.app.layout_store import LayoutStore
from gridtech.app.services.drag_flow import IDLE, DragFlowService, DragState, cells_from_pixels
from gridtech.app.services.group_filter import (
    GroupFilter,
    set_group_visible,
    visible_group_ids,
    visible_widgets,
)
from gridtech.app.services.widget_actions import WidgetActionResult, WidgetActionsService
from gridtech.core.models import PreviewState, SizeLimits, WidgetState
from gridtech.infra.config import GridConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LayoutCallbacks:
    """Optional observers notified after a change is committed."""

    on_widget_add: Callable[[WidgetState], None] | None = None
    on_widget_move: Callable[[WidgetState], None] | None = None
    on_widget_resize: Callable[[WidgetState], None] | None = None
    on_widget_delete: Callable[[str], None] | None = None
    on_widgets_change: Callable[[tuple[WidgetState, ...]], None] | None = None
    on_edit_mode_change: Callable[[bool], None] | None = None
    on_group_filters_change: Callable[[tuple[GroupFilter, ...]], None] | None = None


class LayoutController:
    """Handles widget actions and drag gestures and owns the committed layout."""

    def __init__(
        self,
        config: GridConfig,
        initial_widgets: Iterable[WidgetState] = (),
        *,
        callbacks: LayoutCallbacks | None = None,
        group_filters: Iterable[GroupFilter] = (),
        edit_mode: bool = False,
    ) -> None:
        self._config = config
        self._callbacks = callbacks or LayoutCallbacks()
        self._store = LayoutStore()
        self._drag: DragState = IDLE
        self._edit_mode = edit_mode
        self._group_filters: tuple[GroupFilter, ...] = tuple(group_filters)
        self._hidden_groups: set[str] = set()
        self.status: str | None = None
        initial = tuple(initial_widgets)
        if initial:
            self.load_widgets(initial)

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def revision(self) -> int:
        return self._store.revision()

    @property
    def preview(self) -> PreviewState | None:
        return self._drag.preview

    @property
    def edit_mode(self) -> bool:
        return self._edit_mode

    def widgets(self) -> tuple[WidgetState, ...]:
        return self._store.widgets()

    def visible_widgets(self) -> list[WidgetState]:
        return visible_widgets(self._store.widgets(), self._group_filters, self._hidden_groups)

    # Widget actions

    def add_widget(
        self,
        widget_type: str = "default",
        props: Mapping[str, Any] | None = None,
        size: tuple[int, int] | None = None,
        *,
        group_id: str | None = None,
        limits: SizeLimits | None = None,
    ) -> WidgetActionResult:
        result = WidgetActionsService.add_widget(
            widgets=self._store.widgets(),
            cols=self._config.cols,
            rows=self._config.rows,
            prevent_overlap=self._config.prevent_overlap,
            size=size or self._config.default_widget_size,
            widget_type=widget_type,
            props=props,
            group_id=group_id,
            limits=limits if limits is not None else self._config.default_size_limits,
        )
        self._apply(result, self._callbacks.on_widget_add)
        return result

    def move_widget(self, widget_id: str, x: int, y: int) -> WidgetActionResult:
        result = WidgetActionsService.move_widget(
            widgets=self._store.widgets(),
            widget_id=widget_id,
            x=x,
            y=y,
            cols=self._config.cols,
            rows=self._config.rows,
            prevent_overlap=self._config.prevent_overlap,
        )
        self._apply(result, self._callbacks.on_widget_move)
        return result

    def resize_widget(self, widget_id: str, width: int, height: int) -> WidgetActionResult:
        result = WidgetActionsService.resize_widget(
            widgets=self._store.widgets(),
            widget_id=widget_id,
            width=width,
            height=height,
            cols=self._config.cols,
            rows=self._config.rows,
            prevent_overlap=self._config.prevent_overlap,
            default_limits=self._config.default_size_limits,
        )
        self._apply(result, self._callbacks.on_widget_resize)
        return result

    def delete_widget(self, widget_id: str) -> WidgetActionResult:
        result = WidgetActionsService.delete_widget(widgets=self._store.widgets(), widget_id=widget_id)
        self._apply(result, None)
        if result.handled and self._callbacks.on_widget_delete is not None:
            self._callbacks.on_widget_delete(widget_id)
        return result

    def load_widgets(self, widgets: Iterable[WidgetState]) -> WidgetActionResult:
        result = WidgetActionsService.load_widgets(
            widgets=tuple(widgets),
            cols=self._config.cols,
            rows=self._config.rows,
            prevent_overlap=self._config.prevent_overlap,
        )
        self._commit(result)
        return result

    def clear_widgets(self) -> WidgetActionResult:
        result = WidgetActionsService.clear_widgets()
        self._apply(result, None)
        return result

    # Drag gestures

    def begin_drag(self, widget_id: str) -> None:
        if not self._edit_mode:
            return
        self._drag = DragFlowService.on_drag_start(widget_id)

    def drag_move(self, delta_cols: int, delta_rows: int) -> PreviewState | None:
        """Update the live preview; nothing is committed."""
        if self._drag.widget_id is None:
            return None
        self._drag = DragFlowService.on_drag_move(
            state=self._drag,
            widgets=self.visible_widgets(),
            cols=self._config.cols,
            rows=self._config.rows,
            delta_cols=delta_cols,
            delta_rows=delta_rows,
        )
        return self._drag.preview

    def drag_move_pixels(
        self, dx: float, dy: float, cell_width: float, cell_height: float
    ) -> PreviewState | None:
        delta_cols, delta_rows = cells_from_pixels(dx, dy, cell_width, cell_height)
        return self.drag_move(delta_cols, delta_rows)

    def end_drag(self) -> WidgetActionResult | None:
        """Commit the last valid preview, if any."""
        outcome = DragFlowService.on_drag_end(self._drag)
        self._drag = IDLE
        if not outcome.commit or outcome.widget_id is None or outcome.position is None:
            return None
        return self.move_widget(outcome.widget_id, outcome.position.x, outcome.position.y)

    def cancel_drag(self) -> None:
        self._drag = DragFlowService.on_drag_cancel()

    # Edit mode and groups

    def set_edit_mode(self, enabled: bool) -> None:
        if enabled == self._edit_mode:
            return
        self._edit_mode = enabled
        if not enabled:
            self.cancel_drag()
        if self._callbacks.on_edit_mode_change is not None:
            self._callbacks.on_edit_mode_change(enabled)

    def toggle_edit_mode(self) -> bool:
        self.set_edit_mode(not self._edit_mode)
        return self._edit_mode

    def set_group_visible(self, group_id: str, visible: bool) -> None:
        if visible:
            self._hidden_groups.discard(group_id)
        else:
            self._hidden_groups.add(group_id)
        self._group_filters = set_group_visible(self._group_filters, group_id, visible)
        if self._callbacks.on_group_filters_change is not None:
            self._callbacks.on_group_filters_change(self._group_filters)

    def visible_groups(self) -> list[str]:
        return visible_group_ids(self._store.widgets(), self._group_filters, self._hidden_groups)

    def _apply(
        self,
        result: WidgetActionResult,
        callback: Callable[[WidgetState], None] | None,
    ) -> None:
        if result.status is not None:
            self.status = result.status
        if not result.handled or result.widgets == self._store.widgets():
            return
        self._commit(result)
        if callback is not None and result.widget is not None:
            callback(result.widget)

    def _commit(self, result: WidgetActionResult) -> None:
        snapshot = self._store.set(result.widgets)
        logger.debug("layout_committed revision=%d widgets=%d", snapshot.revision, len(snapshot.widgets))
        if self._callbacks.on_widgets_change is not None:
            self._callbacks.on_widgets_change(snapshot.widgets)
