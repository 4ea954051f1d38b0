"""Core layout models shared by the placement and reflow logic."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class GridPosition:
    """Top-left cell of a rectangle."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class GridRect:
    """Axis-aligned rectangle in cell space."""

    x: int
    y: int
    width: int
    height: int

    @property
    def position(self) -> GridPosition:
        return GridPosition(self.x, self.y)


@dataclass(frozen=True, slots=True)
class SizeLimits:
    """Optional per-widget size constraints."""

    min_w: int | None = None
    min_h: int | None = None
    max_w: int | None = None
    max_h: int | None = None

    def with_defaults(self, defaults: SizeLimits) -> SizeLimits:
        """Fill each unset bound from ``defaults``."""
        return SizeLimits(
            min_w=defaults.min_w if self.min_w is None else self.min_w,
            min_h=defaults.min_h if self.min_h is None else self.min_h,
            max_w=defaults.max_w if self.max_w is None else self.max_w,
            max_h=defaults.max_h if self.max_h is None else self.max_h,
        )


@dataclass(frozen=True, slots=True)
class WidgetState:
    """Widget geometry plus caller-owned payload.

    Only ``id`` is interpreted; ``type``, ``props``, ``group_id`` and
    ``limits`` are carried through every operation unchanged.
    """

    id: str
    x: int
    y: int
    width: int
    height: int
    type: str = "default"
    props: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    group_id: str | None = None
    limits: SizeLimits = field(default_factory=SizeLimits)

    @property
    def rect(self) -> GridRect:
        return GridRect(self.x, self.y, self.width, self.height)

    def moved_to(self, x: int, y: int) -> WidgetState:
        """Return a copy placed at the given cell."""
        if x == self.x and y == self.y:
            return self
        return replace(self, x=x, y=y)

    def resized_to(self, width: int, height: int) -> WidgetState:
        """Return a copy with the given size."""
        return replace(self, width=width, height=height)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a position check."""

    valid: bool
    suggested: GridPosition | None = None


@dataclass(frozen=True, slots=True)
class ReflowPreview:
    """Where a displaced widget would land if the drag were committed."""

    id: str
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class PreviewState:
    """Non-committing drag preview for the dragged widget."""

    id: str
    x: int
    y: int
    width: int
    height: int
    valid: bool
    reflow_previews: tuple[ReflowPreview, ...] = ()

    @property
    def position(self) -> GridPosition:
        return GridPosition(self.x, self.y)
