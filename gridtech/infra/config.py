"""Grid configuration and env loading."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from gridtech.core.models import SizeLimits

logger = logging.getLogger(__name__)

DEFAULT_COLS = 24
DEFAULT_ROWS = 12
DEFAULT_WIDGET_SIZE = (3, 2)
DEFAULT_SIZE_LIMITS = SizeLimits(min_w=2, min_h=2, max_w=12, max_h=8)


@dataclass(frozen=True, slots=True)
class GridConfig:
    """Immutable grid policy handed to the interaction driver."""

    cols: int = DEFAULT_COLS
    rows: int = DEFAULT_ROWS
    prevent_overlap: bool = False
    default_widget_size: tuple[int, int] = DEFAULT_WIDGET_SIZE
    default_size_limits: SizeLimits = field(default_factory=lambda: DEFAULT_SIZE_LIMITS)


def read_env_file(path: str | Path) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines; blank lines, ``#`` comments and keyless lines are skipped.

    A value wrapped in matching single or double quotes is unquoted. A missing
    file reads as empty.
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}
    values: dict[str, str] = {}
    for line in env_path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key or key.startswith("#"):
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def load_env_file(path: str | Path = ".env", *, override_existing: bool = True) -> None:
    """Copy an env file into ``os.environ``; existing keys are kept unless ``override_existing``."""
    for key, value in read_env_file(path).items():
        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load ``.env.gridtech`` then ``.env.gridtech.local``; later files win."""
    to_load = tuple(paths) if paths is not None else (".env.gridtech", ".env.gridtech.local")
    for path in to_load:
        load_env_file(path, override_existing=override_existing)


def load_grid_config() -> GridConfig:
    """Build a grid config from ``GRIDTECH_*`` env vars, falling back per field."""
    cols = max(1, _int("GRIDTECH_COLS", DEFAULT_COLS))
    rows = max(1, _int("GRIDTECH_ROWS", DEFAULT_ROWS))
    return GridConfig(
        cols=cols,
        rows=rows,
        prevent_overlap=_flag("GRIDTECH_PREVENT_OVERLAP", False),
        default_widget_size=_size("GRIDTECH_DEFAULT_WIDGET_SIZE", DEFAULT_WIDGET_SIZE),
        default_size_limits=_limits("GRIDTECH_DEFAULT_SIZE_LIMITS", DEFAULT_SIZE_LIMITS),
    )


def _flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("config_invalid_int name=%s value=%r", name, raw)
        return default


def _size(name: str, default: tuple[int, int]) -> tuple[int, int]:
    raw = os.getenv(name)
    if raw is None:
        return default
    parts = raw.lower().split("x")
    try:
        width, height = (int(part) for part in parts)
    except ValueError:
        logger.warning("config_invalid_size name=%s value=%r", name, raw)
        return default
    if width < 1 or height < 1:
        return default
    return width, height


def _limits(name: str, default: SizeLimits) -> SizeLimits:
    raw = os.getenv(name)
    if raw is None:
        return default
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != 4:
        logger.warning("config_invalid_limits name=%s value=%r", name, raw)
        return default
    try:
        values = [int(part) if part else None for part in parts]
    except ValueError:
        logger.warning("config_invalid_limits name=%s value=%r", name, raw)
        return default
    return SizeLimits(min_w=values[0], min_h=values[1], max_w=values[2], max_h=values[3])
