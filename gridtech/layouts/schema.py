"""Layout payload schema and validation helpers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from gridtech.core.models import SizeLimits, WidgetState
from gridtech.infra.config import DEFAULT_COLS, DEFAULT_ROWS, GridConfig

SCHEMA_VERSION = 1


@dataclass(slots=True)
class LayoutModel:
    """Serializable layout: grid policy plus the widget set."""

    cols: int = DEFAULT_COLS
    rows: int = DEFAULT_ROWS
    prevent_overlap: bool = False
    widgets: list[WidgetState] = field(default_factory=list)


def layout_to_payload(layout: LayoutModel) -> dict[str, object]:
    """Convert a layout to a JSON-serializable payload."""
    return {
        "version": SCHEMA_VERSION,
        "cols": layout.cols,
        "rows": layout.rows,
        "prevent_overlap": layout.prevent_overlap,
        "widgets": widgets_to_payload(layout.widgets),
    }


def widgets_to_payload(widgets: Sequence[WidgetState]) -> list[dict[str, object]]:
    return [
        {
            "id": widget.id,
            "x": widget.x,
            "y": widget.y,
            "width": widget.width,
            "height": widget.height,
            "type": widget.type,
            "props": dict(widget.props),
            "group_id": widget.group_id,
            "limits": {
                "min_w": widget.limits.min_w,
                "min_h": widget.limits.min_h,
                "max_w": widget.limits.max_w,
                "max_h": widget.limits.max_h,
            },
        }
        for widget in widgets
    ]


def payload_to_layout(
    payload: dict[str, object], defaults: GridConfig | None = None
) -> LayoutModel:
    """Convert a loaded payload into a layout model.

    Grid fields missing from the payload come from ``defaults``.
    """
    defaults = defaults or GridConfig()
    raw_version = payload.get("version", SCHEMA_VERSION)
    if not isinstance(raw_version, (int, str)):
        raise ValueError("Layout version must be int-compatible.")
    if int(raw_version) != SCHEMA_VERSION:
        raise ValueError("Unsupported layout version.")

    cols = _positive_int(payload.get("cols", defaults.cols), "cols")
    rows = _positive_int(payload.get("rows", defaults.rows), "rows")
    prevent_overlap = payload.get("prevent_overlap", defaults.prevent_overlap)
    if not isinstance(prevent_overlap, bool):
        raise ValueError("Layout prevent_overlap must be a boolean.")

    raw_widgets = payload.get("widgets", [])
    if not isinstance(raw_widgets, list):
        raise ValueError("Layout widgets must be a list.")
    widgets = [_widget_from_payload(item) for item in raw_widgets]
    return LayoutModel(cols=cols, rows=rows, prevent_overlap=prevent_overlap, widgets=widgets)


def _widget_from_payload(item: object) -> WidgetState:
    if not isinstance(item, dict):
        raise ValueError("Each layout widget must be an object.")
    try:
        widget_id = str(item["id"]).strip()
        if not widget_id:
            raise ValueError("Widget id is required.")
        width = int(item["width"])
        height = int(item["height"])
        if width < 1 or height < 1:
            raise ValueError("Widget size must be at least 1x1.")
        props = item.get("props") or {}
        if not isinstance(props, dict):
            raise ValueError("Widget props must be an object.")
        group_id = item.get("group_id")
        return WidgetState(
            id=widget_id,
            x=int(item["x"]),
            y=int(item["y"]),
            width=width,
            height=height,
            type=str(item.get("type", "default")),
            props=props,
            group_id=None if group_id is None else str(group_id),
            limits=_limits_from_payload(item.get("limits")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError("Malformed widget entry in layout payload.") from exc


def _limits_from_payload(raw: object) -> SizeLimits:
    if raw is None:
        return SizeLimits()
    if not isinstance(raw, dict):
        raise ValueError("Widget limits must be an object.")
    values = {}
    for key in ("min_w", "min_h", "max_w", "max_h"):
        value = raw.get(key)
        values[key] = None if value is None else int(value)
    return SizeLimits(**values)


def _positive_int(raw: object, name: str) -> int:
    if not isinstance(raw, (int, str)):
        raise ValueError(f"Layout {name} must be int-compatible.")
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"Layout {name} must be int-compatible.") from exc
    if value < 1:
        raise ValueError(f"Layout {name} must be positive.")
    return value
