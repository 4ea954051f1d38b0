"""Group visibility filtering."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass

from gridtech.core.models import WidgetState


@dataclass(frozen=True, slots=True)
class GroupFilter:
    """Explicit visibility for one widget group."""

    group_id: str
    visible: bool


def is_group_visible(
    group_id: str,
    group_filters: Sequence[GroupFilter],
    hidden_groups: Collection[str],
) -> bool:
    """Explicit filters win over the hidden set."""
    for group_filter in group_filters:
        if group_filter.group_id == group_id:
            return group_filter.visible
    return group_id not in hidden_groups


def is_visible(
    widget: WidgetState,
    group_filters: Sequence[GroupFilter],
    hidden_groups: Collection[str],
) -> bool:
    if widget.group_id is None:
        return True
    return is_group_visible(widget.group_id, group_filters, hidden_groups)


def visible_widgets(
    widgets: Sequence[WidgetState],
    group_filters: Sequence[GroupFilter] = (),
    hidden_groups: Collection[str] = frozenset(),
) -> list[WidgetState]:
    return [w for w in widgets if is_visible(w, group_filters, hidden_groups)]


def visible_group_ids(
    widgets: Sequence[WidgetState],
    group_filters: Sequence[GroupFilter] = (),
    hidden_groups: Collection[str] = frozenset(),
) -> list[str]:
    """Return visible group ids in first-seen order."""
    seen: list[str] = []
    for widget in widgets:
        if widget.group_id is not None and widget.group_id not in seen:
            seen.append(widget.group_id)
    return [gid for gid in seen if is_group_visible(gid, group_filters, hidden_groups)]


def set_group_visible(
    group_filters: Sequence[GroupFilter], group_id: str, visible: bool
) -> tuple[GroupFilter, ...]:
    """Return filters with ``group_id`` set, appending it when new."""
    updated = [
        GroupFilter(f.group_id, visible) if f.group_id == group_id else f for f in group_filters
    ]
    if not any(f.group_id == group_id for f in group_filters):
        updated.append(GroupFilter(group_id, visible))
    return tuple(updated)
