"""Caller-contract violations raised by the layout core."""

from __future__ import annotations

from collections.abc import Iterable


class LayoutContractError(ValueError):
    """Input violates a precondition of the layout core."""


class DuplicateWidgetIdError(LayoutContractError):
    """Widget set contains repeated identifiers."""

    def __init__(self, duplicates: Iterable[str]) -> None:
        self.duplicates: tuple[str, ...] = tuple(duplicates)
        super().__init__(f"Duplicate widget ids: {', '.join(self.duplicates)}.")


class WidgetTooLargeError(LayoutContractError):
    """Widget size exceeds the grid."""

    def __init__(self, width: int, height: int, cols: int, rows: int) -> None:
        self.size = (width, height)
        self.grid = (cols, rows)
        super().__init__(f"Widget size {width}x{height} does not fit a {cols}x{rows} grid.")


class InvalidGridError(LayoutContractError):
    """Grid dimensions are not positive integers."""
