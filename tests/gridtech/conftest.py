from __future__ import annotations

import random

import pytest

from gridtech.core.models import WidgetState
from gridtech.infra.config import GridConfig


def make_dashboard() -> list[WidgetState]:
    return [
        WidgetState("clock", 0, 0, 3, 2, type="clock"),
        WidgetState("chart", 3, 0, 6, 4, type="chart", props={"series": [1, 2, 3]}),
        WidgetState("notes", 0, 2, 3, 2, type="notes", group_id="text"),
        WidgetState("todo", 9, 0, 3, 3, type="todo", group_id="text"),
    ]


@pytest.fixture
def dashboard() -> list[WidgetState]:
    return make_dashboard()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def grid_config() -> GridConfig:
    return GridConfig(cols=12, rows=8, prevent_overlap=True, default_widget_size=(3, 2))
