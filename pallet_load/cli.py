"""Command-line interface for the pallet loading calculator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from .calculator import build_input, calculate_load_plan, estimate_loose_boxes, serialise_plan
from .logging_config import setup_logging
from .models import LoadPlan, LooseEstimate
from .units import display_value

logger = logging.getLogger(__name__)

_HEIGHT_CLASS_LABELS = {
    "standard": "GP",
    "high_cube": "HQ",
}


def _load_input(path: str | Path) -> Dict[str, Any]:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def _print_plan(plan: LoadPlan, estimate: LooseEstimate) -> None:
    box, pallet, pallet_plan = plan.box, plan.pallet, plan.pallet_plan
    print(
        f"Box: {display_value(box.length_cm)} × {display_value(box.width_cm)}"
        f" × {display_value(box.height_cm)} cm"
    )
    print(
        f"Pallet: {display_value(pallet.length_cm)} × {display_value(pallet.width_cm)} cm,"
        f" base {display_value(pallet.base_height_cm)} cm\n"
    )

    print("Single pallet:")
    layer = pallet_plan.layer
    rotated = " (rotated)" if layer.rotated else ""
    print(f"  Boxes per layer (TI): {pallet_plan.layer_capacity} = {layer.cols} × {layer.rows}{rotated}")
    for height_class, stack in pallet_plan.stacks:
        label = _HEIGHT_CLASS_LABELS.get(height_class, height_class)
        print(
            f"  {label}: {stack.layers} layers (HI),"
            f" {pallet_plan.boxes_per_pallet(height_class)} boxes per pallet,"
            f" stack height {display_value(stack.stack_height_cm)} cm"
        )
    print()

    print("Containers:")
    for fit in plan.containers:
        print(
            f"- {fit.profile.name}: {fit.pallets_on_floor} pallets"
            f" ({fit.cols} × {fit.rows}, {fit.orientation})"
            f" × {fit.boxes_per_pallet} boxes = {fit.total_boxes} boxes"
        )
    print()

    print(f"Loose loading without pallets (box {estimate.box_cbm:.4f} CBM):")
    for name, count in estimate.boxes_by_container:
        print(f"- {name}: {count} boxes")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Calculate boxes per pallet and pallets per container."
    )
    parser.add_argument(
        "input",
        type=str,
        help="Path to a JSON file describing the box and pallet (use '-' for stdin).",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        calc_input = build_input(_load_input(args.input))
    except (OSError, ValueError) as exc:
        logger.debug("Rejected input %s", args.input, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    plan = calculate_load_plan(calc_input.box, calc_input.pallet)
    estimate = estimate_loose_boxes(calc_input.box)

    if args.format == "json":
        print(json.dumps(serialise_plan(plan, estimate), indent=2))
    else:
        _print_plan(plan, estimate)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
