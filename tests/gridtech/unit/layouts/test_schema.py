import pytest

from gridtech.core.models import SizeLimits, WidgetState
from gridtech.infra.config import GridConfig
from gridtech.layouts.schema import (
    SCHEMA_VERSION,
    LayoutModel,
    layout_to_payload,
    payload_to_layout,
)


def _widget_entry(**overrides) -> dict[str, object]:
    entry: dict[str, object] = {"id": "w1", "x": 0, "y": 0, "width": 2, "height": 1}
    entry.update(overrides)
    return entry


def test_layout_payload_keeps_widget_payload(dashboard) -> None:
    dashboard[0] = WidgetState("clock", 0, 0, 3, 2, type="clock", limits=SizeLimits(min_w=2, max_h=4))
    layout = LayoutModel(cols=12, rows=8, prevent_overlap=True, widgets=dashboard)
    payload = layout_to_payload(layout)
    assert payload["version"] == SCHEMA_VERSION
    restored = payload_to_layout(payload)
    assert restored == layout
    assert restored.widgets[1].props == {"series": [1, 2, 3]}
    assert restored.widgets[0].limits == SizeLimits(min_w=2, max_h=4)


def test_defaults_apply_to_missing_fields() -> None:
    layout = payload_to_layout({"widgets": [_widget_entry()]})
    assert (layout.cols, layout.rows, layout.prevent_overlap) == (24, 12, False)
    (widget,) = layout.widgets
    assert widget.type == "default"
    assert widget.group_id is None
    assert widget.limits == SizeLimits()


def test_out_of_grid_positions_are_accepted() -> None:
    layout = payload_to_layout({"cols": 4, "rows": 4, "widgets": [_widget_entry(x=-3, y=10)]})
    assert (layout.widgets[0].x, layout.widgets[0].y) == (-3, 10)


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"version": 2}, "Unsupported layout version."),
        ({"cols": 0}, "Layout cols must be positive."),
        ({"rows": "many"}, "Layout rows must be int-compatible."),
        ({"prevent_overlap": "yes"}, "Layout prevent_overlap must be a boolean."),
        ({"widgets": {}}, "Layout widgets must be a list."),
        ({"widgets": ["w1"]}, "Each layout widget must be an object."),
    ],
)
def test_invalid_layout_payloads(payload: dict[str, object], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        payload_to_layout(payload)


@pytest.mark.parametrize(
    "entry",
    [
        {"id": "w1", "x": 0, "y": 0, "width": 2},
        _widget_entry(id="  "),
        _widget_entry(width=0),
        _widget_entry(props=[1, 2]),
        _widget_entry(limits={"min_w": "wide"}),
    ],
)
def test_malformed_widget_entries(entry: dict[str, object]) -> None:
    with pytest.raises(ValueError, match="Malformed widget entry"):
        payload_to_layout({"widgets": [entry]})


def test_missing_grid_fields_use_supplied_defaults() -> None:
    defaults = GridConfig(cols=6, rows=3, prevent_overlap=True)
    layout = payload_to_layout({"rows": 5, "widgets": []}, defaults)
    assert (layout.cols, layout.rows, layout.prevent_overlap) == (6, 5, True)
