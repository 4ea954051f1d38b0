import logging
import random

import pytest

from gridtech.core.errors import DuplicateWidgetIdError, InvalidGridError
from gridtech.core.geometry import in_bounds, overlaps
from gridtech.core.models import WidgetState
from gridtech.core.reflow import reflow, reflow_widgets


def _positions(widgets: list[WidgetState]) -> dict[str, tuple[int, int]]:
    return {w.id: (w.x, w.y) for w in widgets}


def _random_layout(rng: random.Random, cols: int, rows: int) -> list[WidgetState]:
    count = rng.randint(0, 7)
    return [
        WidgetState(
            f"w{idx}",
            rng.randint(-2, cols + 1),
            rng.randint(-2, rows + 1),
            rng.randint(1, 2),
            rng.randint(1, 2),
        )
        for idx in range(count)
    ]


def test_forced_reflow_on_move_keeps_active_and_displaces_other() -> None:
    a = WidgetState("A", 1, 0, 2, 2)
    b = WidgetState("B", 2, 0, 2, 2)
    result = reflow_widgets([a, b], 4, 4, prevent_overlap=True, active_id="A")
    assert [w.id for w in result] == ["A", "B"]
    assert _positions(result) == {"A": (1, 0), "B": (0, 2)}


def test_active_widget_is_placed_first_regardless_of_reading_order() -> None:
    early = WidgetState("early", 0, 0, 2, 2)
    late = WidgetState("late", 1, 1, 2, 2)
    without_active = reflow_widgets([early, late], 5, 4, prevent_overlap=True)
    assert _positions(without_active) == {"early": (0, 0), "late": (2, 0)}
    with_active = reflow_widgets([early, late], 5, 4, prevent_overlap=True, active_id="late")
    assert _positions(with_active) == {"early": (3, 0), "late": (1, 1)}


def test_reading_order_tie_break() -> None:
    first = WidgetState("first", 0, 0, 2, 1)
    second = WidgetState("second", 0, 0, 2, 1)
    upper = WidgetState("upper", 2, 0, 1, 1)
    result = reflow_widgets([second, upper, first], 3, 2, prevent_overlap=True)
    # Same cell: input order decides.
    assert _positions(result) == {"second": (0, 0), "upper": (2, 0), "first": (0, 1)}


def test_without_prevent_overlap_only_clamps() -> None:
    a = WidgetState("a", 3, 3, 2, 2)
    b = WidgetState("b", 0, 0, 2, 2)
    c = WidgetState("c", 1, 1, 2, 2)
    result = reflow_widgets([a, b, c], 4, 4)
    assert _positions(result) == {"a": (2, 2), "b": (0, 0), "c": (1, 1)}
    assert result[1] is b


def test_out_of_bounds_active_is_clamped_not_dropped() -> None:
    active = WidgetState("active", 5, -1, 2, 2)
    other = WidgetState("other", 0, 0, 1, 1)
    result = reflow_widgets([other, active], 4, 4, prevent_overlap=True, active_id="active")
    assert _positions(result) == {"other": (0, 0), "active": (2, 0)}


def test_out_of_bounds_inactive_takes_first_free_slot() -> None:
    a = WidgetState("a", 0, 0, 2, 2)
    stray = WidgetState("stray", 3, 3, 2, 2)
    result = reflow_widgets([a, stray], 4, 4, prevent_overlap=True)
    assert _positions(result) == {"a": (0, 0), "stray": (2, 0)}


def test_grid_exhaustion_falls_back_to_origin(caplog) -> None:
    big = WidgetState("big", 0, 0, 2, 2)
    small = WidgetState("small", 1, 1, 1, 1)
    with caplog.at_level(logging.DEBUG, logger="gridtech.core.reflow"):
        result = reflow_widgets([big, small], 2, 2, prevent_overlap=True)
    assert _positions(result) == {"big": (0, 0), "small": (0, 0)}
    assert "reflow_grid_full" in caplog.text


def test_empty_set_and_single_cell_grid() -> None:
    assert reflow_widgets([], 3, 3, prevent_overlap=True) == []
    only = WidgetState("only", 4, 4, 1, 1)
    assert _positions(reflow_widgets([only], 1, 1, prevent_overlap=True)) == {"only": (0, 0)}


def test_payload_is_round_tripped() -> None:
    props = {"title": "CPU", "series": [1, 2]}
    widget = WidgetState("w", 9, 0, 2, 2, type="chart", props=props, group_id="ops")
    (result,) = reflow_widgets([widget], 4, 4, prevent_overlap=True)
    assert result.props is props
    assert (result.type, result.group_id, result.limits) == ("chart", "ops", widget.limits)


def test_input_is_not_mutated() -> None:
    widgets = [WidgetState("a", 0, 0, 2, 2), WidgetState("b", 0, 0, 2, 2)]
    snapshot = list(widgets)
    reflow_widgets(widgets, 4, 4, prevent_overlap=True)
    assert widgets == snapshot


def test_duplicate_ids_fail_fast() -> None:
    widgets = [WidgetState("a", 0, 0, 1, 1), WidgetState("a", 1, 0, 1, 1)]
    with pytest.raises(DuplicateWidgetIdError):
        reflow_widgets(widgets, 4, 4, prevent_overlap=True)
    with pytest.raises(DuplicateWidgetIdError):
        reflow_widgets(widgets, 4, 4, prevent_overlap=False)


def test_invalid_grid_fails_fast() -> None:
    with pytest.raises(InvalidGridError):
        reflow_widgets([], 0, 3)


def test_reflow_alias() -> None:
    assert reflow is reflow_widgets


def test_layout_invariants_on_random_layouts(seeded_rng: random.Random) -> None:
    cols, rows = 12, 12
    for _ in range(150):
        widgets = _random_layout(seeded_rng, cols, rows)
        active = seeded_rng.choice(widgets).id if widgets and seeded_rng.random() < 0.5 else None
        result = reflow_widgets(widgets, cols, rows, prevent_overlap=True, active_id=active)

        assert [w.id for w in result] == [w.id for w in widgets]
        assert all(in_bounds(w.rect, cols, rows) for w in result)
        for i, first in enumerate(result):
            for second in result[i + 1 :]:
                assert not overlaps(first.rect, second.rect)
        assert reflow_widgets(widgets, cols, rows, prevent_overlap=True, active_id=active) == result
        assert reflow_widgets(result, cols, rows, prevent_overlap=True, active_id=active) == result


def test_clamp_path_invariants_on_random_layouts(seeded_rng: random.Random) -> None:
    cols, rows = 6, 5
    for _ in range(100):
        widgets = _random_layout(seeded_rng, cols, rows)
        result = reflow_widgets(widgets, cols, rows)
        assert [w.id for w in result] == [w.id for w in widgets]
        assert all(in_bounds(w.rect, cols, rows) for w in result)
        assert [(w.width, w.height) for w in result] == [(w.width, w.height) for w in widgets]
