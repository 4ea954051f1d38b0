"""Command line entry point."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from gridtech.core.geometry import in_bounds
from gridtech.core.placement import find_free_space
from gridtech.core.reflow import reflow_widgets
from gridtech.core.validation import ensure_fits_grid, ensure_grid_dimensions, validate_position
from gridtech.infra.config import GridConfig, load_default_env_files, load_grid_config
from gridtech.infra.logging import setup_logging
from gridtech.layouts.schema import LayoutModel, layout_to_payload, payload_to_layout

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gridtech", description="Grid layout and reflow tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    reflow = subparsers.add_parser("reflow", help="Resolve a layout into in-bounds positions.")
    _add_layout_args(reflow)
    reflow.add_argument("--active", default=None, help="Widget id that keeps its position.")

    validate = subparsers.add_parser("validate", help="Check one widget's position.")
    _add_layout_args(validate)
    validate.add_argument("widget_id", help="Widget id to check.")

    place = subparsers.add_parser("place", help="Find the first free slot for a size.")
    _add_layout_args(place)
    place.add_argument(
        "--size",
        type=_parse_size,
        default=None,
        help="Slot size as WxH; defaults to GRIDTECH_DEFAULT_WIDGET_SIZE.",
    )
    return parser


def _add_layout_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("layout", help="Layout JSON file, or - for stdin.")
    parser.add_argument("--cols", type=int, default=None, help="Override grid columns.")
    parser.add_argument("--rows", type=int, default=None, help="Override grid rows.")
    parser.add_argument(
        "--prevent-overlap",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Override the layout's overlap policy.",
    )


def _parse_size(raw: str) -> tuple[int, int]:
    try:
        width, height = (int(part) for part in raw.lower().split("x"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid size {raw!r}, expected WxH") from exc
    return width, height


def main(argv: Sequence[str] | None = None) -> int:
    """Run the gridtech command line."""
    load_default_env_files(override_existing=False)
    setup_logging()
    args = build_parser().parse_args(argv)
    config = load_grid_config()
    try:
        layout = _load_layout(args, config)
        ensure_grid_dimensions(layout.cols, layout.rows)
        if args.command == "reflow":
            return _run_reflow(layout, args.active)
        if args.command == "validate":
            return _run_validate(layout, args.widget_id)
        return _run_place(layout, args.size or config.default_widget_size)
    except (OSError, ValueError) as exc:
        logger.debug("command_failed command=%s", args.command, exc_info=True)
        print(f"gridtech: {exc}", file=sys.stderr)
        return 2


def _load_layout(args: argparse.Namespace, config: GridConfig) -> LayoutModel:
    if args.layout == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(args.layout).read_text(encoding="utf-8")
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("Layout payload must be an object.")
    layout = payload_to_layout(payload, config)
    if args.cols is not None:
        layout.cols = args.cols
    if args.rows is not None:
        layout.rows = args.rows
    if args.prevent_overlap is not None:
        layout.prevent_overlap = args.prevent_overlap
    return layout


def _run_reflow(layout: LayoutModel, active_id: str | None) -> int:
    layout.widgets = reflow_widgets(
        layout.widgets, layout.cols, layout.rows, layout.prevent_overlap, active_id=active_id
    )
    _emit(layout_to_payload(layout))
    return 0


def _run_validate(layout: LayoutModel, widget_id: str) -> int:
    widget = next((w for w in layout.widgets if w.id == widget_id), None)
    if widget is None:
        raise ValueError(f"Unknown widget id: {widget_id}.")
    result = validate_position(
        widget, layout.widgets, layout.cols, layout.rows, layout.prevent_overlap
    )
    suggested = None if result.suggested is None else [result.suggested.x, result.suggested.y]
    _emit(
        {
            "id": widget.id,
            "valid": result.valid,
            "in_bounds": in_bounds(widget.rect, layout.cols, layout.rows),
            "suggested": suggested,
        }
    )
    return 0 if result.valid else 1


def _run_place(layout: LayoutModel, size: tuple[int, int]) -> int:
    width, height = size
    ensure_fits_grid(width, height, layout.cols, layout.rows)
    position = find_free_space(
        [w.rect for w in layout.widgets], layout.cols, layout.rows, width, height
    )
    _emit({"size": [width, height], "position": None if position is None else [position.x, position.y]})
    return 0 if position is not None else 1


def _emit(payload: dict[str, object]) -> None:
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    raise SystemExit(main())
