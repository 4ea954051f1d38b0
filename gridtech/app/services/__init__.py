"""Application service-layer helpers."""

from gridtech.app.services.drag_flow import (
    DragEndOutcome,
    DragFlowService,
    DragState,
    ReflowOutcome,
    cells_from_pixels,
)
from gridtech.app.services.group_filter import (
    GroupFilter,
    is_visible,
    set_group_visible,
    visible_group_ids,
    visible_widgets,
)
from gridtech.app.services.widget_actions import (
    NO_SPACE_MESSAGE,
    WidgetActionResult,
    WidgetActionsService,
    generate_widget_id,
)

__all__ = [
    "DragEndOutcome",
    "DragFlowService",
    "DragState",
    "GroupFilter",
    "NO_SPACE_MESSAGE",
    "ReflowOutcome",
    "WidgetActionResult",
    "WidgetActionsService",
    "cells_from_pixels",
    "generate_widget_id",
    "is_visible",
    "set_group_visible",
    "visible_group_ids",
    "visible_widgets",
]
