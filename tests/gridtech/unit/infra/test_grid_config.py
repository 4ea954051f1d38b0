import logging
import os

import pytest

from gridtech.core.models import SizeLimits
from gridtech.infra.config import (
    DEFAULT_SIZE_LIMITS,
    GridConfig,
    load_default_env_files,
    load_env_file,
    load_grid_config,
    read_env_file,
)

_ENV_KEYS = (
    "GRIDTECH_COLS",
    "GRIDTECH_ROWS",
    "GRIDTECH_PREVENT_OVERLAP",
    "GRIDTECH_DEFAULT_WIDGET_SIZE",
    "GRIDTECH_DEFAULT_SIZE_LIMITS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        # Registers the key so values written by env files are undone too.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_defaults_without_env() -> None:
    assert load_grid_config() == GridConfig()
    assert GridConfig().default_size_limits == DEFAULT_SIZE_LIMITS


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("GRIDTECH_COLS", "12")
    monkeypatch.setenv("GRIDTECH_ROWS", "0")
    monkeypatch.setenv("GRIDTECH_PREVENT_OVERLAP", "yes")
    monkeypatch.setenv("GRIDTECH_DEFAULT_WIDGET_SIZE", "4x3")
    monkeypatch.setenv("GRIDTECH_DEFAULT_SIZE_LIMITS", "1,,6,")
    config = load_grid_config()
    assert config.cols == 12
    assert config.rows == 1
    assert config.prevent_overlap
    assert config.default_widget_size == (4, 3)
    assert config.default_size_limits == SizeLimits(min_w=1, max_w=6)


def test_invalid_values_fall_back_with_warning(monkeypatch, caplog) -> None:
    monkeypatch.setenv("GRIDTECH_COLS", "wide")
    monkeypatch.setenv("GRIDTECH_DEFAULT_WIDGET_SIZE", "4by3")
    monkeypatch.setenv("GRIDTECH_DEFAULT_SIZE_LIMITS", "1,2,3")
    with caplog.at_level(logging.WARNING, logger="gridtech.infra.config"):
        config = load_grid_config()
    assert config == GridConfig()
    assert "config_invalid_int name=GRIDTECH_COLS" in caplog.text
    assert "config_invalid_size" in caplog.text
    assert "config_invalid_limits" in caplog.text


def test_load_env_file_parses_quotes_and_comments(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("GRIDTECH_ROWS", "3")
    env_file = tmp_path / ".env.gridtech"
    env_file.write_text(
        "# grid\n\nGRIDTECH_COLS='16'\nGRIDTECH_ROWS=9\nnot a pair\n=orphan\n",
        encoding="utf-8",
    )
    load_env_file(str(env_file), override_existing=False)
    assert os.environ["GRIDTECH_COLS"] == "16"
    assert os.environ["GRIDTECH_ROWS"] == "3"

    load_env_file(str(env_file))
    assert os.environ["GRIDTECH_ROWS"] == "9"


def test_later_env_files_win(tmp_path) -> None:
    base = tmp_path / "base.env"
    local = tmp_path / "local.env"
    base.write_text("GRIDTECH_COLS=10\nGRIDTECH_ROWS=5\n", encoding="utf-8")
    local.write_text("GRIDTECH_COLS=20\n", encoding="utf-8")
    load_default_env_files(paths=[str(base), str(local), str(tmp_path / "missing.env")])
    config = load_grid_config()
    assert (config.cols, config.rows) == (20, 5)


def test_read_env_file_returns_parsed_pairs(tmp_path) -> None:
    env_file = tmp_path / "grid.env"
    env_file.write_text(
        '# GRIDTECH_COLS=99\nGRIDTECH_DEFAULT_WIDGET_SIZE = "4x2"\nLOG_FORMAT=json=lines\nbare\n',
        encoding="utf-8",
    )
    assert read_env_file(env_file) == {
        "GRIDTECH_DEFAULT_WIDGET_SIZE": "4x2",
        "LOG_FORMAT": "json=lines",
    }
    assert read_env_file(tmp_path / "missing.env") == {}
