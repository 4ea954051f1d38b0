"""Authoritative, revisioned widget-set holder for the interaction driver."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from gridtech.core.models import WidgetState


@dataclass(frozen=True, slots=True)
class LayoutSnapshot:
    """Immutable view of the widget set at one revision."""

    widgets: tuple[WidgetState, ...]
    revision: int


class LayoutStore:
    """Owns the committed widget set; the layout core never holds it."""

    def __init__(self, initial: Iterable[WidgetState] = ()) -> None:
        self._widgets: tuple[WidgetState, ...] = tuple(initial)
        self._revision = 0

    def snapshot(self) -> LayoutSnapshot:
        return LayoutSnapshot(widgets=self._widgets, revision=self._revision)

    def widgets(self) -> tuple[WidgetState, ...]:
        return self._widgets

    def set(self, widgets: Iterable[WidgetState]) -> LayoutSnapshot:
        """Replace the widget set and increment revision."""
        self._widgets = tuple(widgets)
        self._revision += 1
        return self.snapshot()

    def update(
        self, mutator: Callable[[tuple[WidgetState, ...]], Iterable[WidgetState]]
    ) -> LayoutSnapshot:
        """Apply a pure mutator over the current widget set."""
        return self.set(mutator(self._widgets))

    def revision(self) -> int:
        return self._revision
