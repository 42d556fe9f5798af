"""Pallet stacking and container loading calculations."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .fitting import fit_rectangle, stack_layers
from .models import (
    HIGH_CUBE,
    STANDARD,
    BoxDimensions,
    ContainerFit,
    ContainerProfile,
    LayerFit,
    LoadPlan,
    LooseEstimate,
    PalletDimensions,
    PalletPlan,
)
from .units import BoxUnit, normalize_box, resolve_unit

logger = logging.getLogger(__name__)

DEFAULT_BASE_HEIGHT_CM = 15.0

# Usable stacking heights, limited by the door opening rather than the roof.
HEIGHT_LIMITS_CM = {
    STANDARD: 228.0,
    HIGH_CUBE: 258.0,
}

_SHORT_LENGTH_CM = 589.0
_LONG_LENGTH_CM = 1203.0
_INNER_WIDTH_CM = 235.0

CONTAINER_PROFILES: Tuple[ContainerProfile, ...] = (
    ContainerProfile("20GP", _SHORT_LENGTH_CM, _INNER_WIDTH_CM, HEIGHT_LIMITS_CM[STANDARD], STANDARD),
    ContainerProfile("40GP", _LONG_LENGTH_CM, _INNER_WIDTH_CM, HEIGHT_LIMITS_CM[STANDARD], STANDARD),
    ContainerProfile("40HQ", _LONG_LENGTH_CM, _INNER_WIDTH_CM, HEIGHT_LIMITS_CM[HIGH_CUBE], HIGH_CUBE),
)

NOMINAL_CAPACITY_CBM = {
    "20GP": 28.0,
    "40GP": 58.0,
    "40HQ": 68.0,
}

PALLET_PRESETS = {
    "std": PalletDimensions(120.0, 100.0, DEFAULT_BASE_HEIGHT_CM),
    "euro": PalletDimensions(120.0, 80.0, DEFAULT_BASE_HEIGHT_CM),
    "us": PalletDimensions(122.0, 102.0, DEFAULT_BASE_HEIGHT_CM),
}
CUSTOM_PALLET = "custom"


@dataclass(frozen=True)
class CalculationInput:
    box: BoxDimensions
    pallet: PalletDimensions
    pallet_preset: str = CUSTOM_PALLET
    unit: BoxUnit = BoxUnit.CM


def _to_number(value: Any, field_name: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid value for {field_name}: {json.dumps(value)}")
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"Invalid value for {field_name}: {json.dumps(value, default=str)}") from exc


def _load_box(raw_box: Mapping[str, Any]) -> Tuple[BoxDimensions, BoxUnit]:
    if not isinstance(raw_box, Mapping):
        raise ValueError(f"Invalid box specification: {json.dumps(raw_box, default=str)}")
    unit = resolve_unit(raw_box.get("unit", BoxUnit.CM))
    box = normalize_box(
        _to_number(raw_box.get("length"), "box length"),
        _to_number(raw_box.get("width"), "box width"),
        _to_number(raw_box.get("height"), "box height"),
        unit,
    )
    return box, unit


def _resolve_pallet_preset(name: str) -> PalletDimensions:
    try:
        return PALLET_PRESETS[name.strip().lower()]
    except KeyError as exc:
        valid = ", ".join(sorted(PALLET_PRESETS) + [CUSTOM_PALLET])
        raise ValueError(f"Unsupported pallet preset '{name}'. Valid values: {valid}.") from exc


def _load_pallet(raw_pallet: Any) -> Tuple[PalletDimensions, str]:
    if raw_pallet is None:
        raw_pallet = "std"
    if isinstance(raw_pallet, str):
        raw_pallet = {"preset": raw_pallet}
    if not isinstance(raw_pallet, Mapping):
        raise ValueError(f"Invalid pallet specification: {json.dumps(raw_pallet, default=str)}")

    preset = str(raw_pallet.get("preset") or CUSTOM_PALLET).strip().lower()
    if preset != CUSTOM_PALLET:
        return _resolve_pallet_preset(preset), preset

    base_height = _to_number(raw_pallet.get("base_height"), "pallet base height")
    pallet = PalletDimensions(
        length_cm=_to_number(raw_pallet.get("length"), "pallet length") or 0.0,
        width_cm=_to_number(raw_pallet.get("width"), "pallet width") or 0.0,
        base_height_cm=DEFAULT_BASE_HEIGHT_CM if base_height is None else base_height,
    )
    return pallet, CUSTOM_PALLET


def build_input(raw: Mapping[str, Any]) -> CalculationInput:
    """Build a calculation snapshot from JSON-like data.

    Blank or missing dimensions are accepted and produce an empty plan.
    Structurally invalid data raises :class:`ValueError`.
    """

    if not isinstance(raw, Mapping):
        raise ValueError("Calculation input must be a JSON object.")
    box, unit = _load_box(raw.get("box") or {})
    pallet, preset = _load_pallet(raw.get("pallet"))
    return CalculationInput(box=box, pallet=pallet, pallet_preset=preset, unit=unit)


def solve_pallet(
    box: BoxDimensions,
    pallet: PalletDimensions,
    height_limits: Mapping[str, float] = HEIGHT_LIMITS_CM,
) -> PalletPlan:
    layer = fit_rectangle(pallet.length_cm, pallet.width_cm, box.length_cm, box.width_cm)
    stacks = tuple(
        (height_class, stack_layers(limit, pallet.base_height_cm, box.height_cm))
        for height_class, limit in height_limits.items()
    )
    return PalletPlan(layer=layer, stacks=stacks)


def solve_container_floor(
    pallet: PalletDimensions,
    inner_length_cm: float,
    inner_width_cm: float,
) -> LayerFit:
    return fit_rectangle(inner_length_cm, inner_width_cm, pallet.length_cm, pallet.width_cm)


def _height_limits(profiles: Iterable[ContainerProfile]) -> Dict[str, float]:
    limits: Dict[str, float] = {}
    for profile in profiles:
        known = limits.setdefault(profile.height_class, profile.height_limit_cm)
        if known != profile.height_limit_cm:
            raise ValueError(
                f"Height class '{profile.height_class}' has conflicting limits "
                f"{known} and {profile.height_limit_cm}."
            )
    return limits


def calculate_load_plan(
    box: BoxDimensions,
    pallet: PalletDimensions,
    profiles: Iterable[ContainerProfile] = CONTAINER_PROFILES,
) -> LoadPlan:
    """Compute the single-pallet plan and the loading of every container profile."""

    profiles = tuple(profiles)
    pallet_plan = solve_pallet(box, pallet, _height_limits(profiles))

    floors: Dict[Tuple[float, float], LayerFit] = {}
    containers: List[ContainerFit] = []
    for profile in profiles:
        footprint = (profile.inner_length_cm, profile.inner_width_cm)
        if footprint not in floors:
            floors[footprint] = solve_container_floor(pallet, *footprint)
        floor = floors[footprint]
        per_pallet = pallet_plan.boxes_per_pallet(profile.height_class)
        containers.append(
            ContainerFit(
                profile=profile,
                pallets_on_floor=floor.count,
                orientation=floor.orientation,
                cols=floor.cols,
                rows=floor.rows,
                boxes_per_pallet=per_pallet,
                total_boxes=floor.count * per_pallet,
            )
        )

    logger.debug(
        "Layer capacity %d, totals %s",
        pallet_plan.layer_capacity,
        {fit.profile.name: fit.total_boxes for fit in containers},
    )
    return LoadPlan(box=box, pallet=pallet, pallet_plan=pallet_plan, containers=tuple(containers))


def estimate_loose_boxes(
    box: BoxDimensions,
    capacities: Mapping[str, float] = NOMINAL_CAPACITY_CBM,
) -> LooseEstimate:
    """Estimate how many boxes fill each container by volume alone."""

    box_cbm = box.volume_cbm
    if not math.isfinite(box_cbm) or box_cbm <= 0:
        return LooseEstimate(box_cbm=0.0, boxes_by_container=tuple((name, 0) for name in capacities))

    counts = []
    for name, cbm in capacities.items():
        ratio = cbm / box_cbm
        counts.append((name, math.floor(ratio) if math.isfinite(ratio) else 0))
    return LooseEstimate(box_cbm=box_cbm, boxes_by_container=tuple(counts))


def serialise_plan(plan: LoadPlan, estimate: Optional[LooseEstimate] = None) -> Dict[str, Any]:
    """Convert a load plan into JSON-like dictionaries."""

    pallet_plan = plan.pallet_plan
    result: Dict[str, Any] = {
        "box_cm": {
            "length": plan.box.length_cm,
            "width": plan.box.width_cm,
            "height": plan.box.height_cm,
        },
        "pallet_cm": {
            "length": plan.pallet.length_cm,
            "width": plan.pallet.width_cm,
            "base_height": plan.pallet.base_height_cm,
        },
        "pallet": {
            "layer_capacity": pallet_plan.layer_capacity,
            "cols": pallet_plan.layer.cols,
            "rows": pallet_plan.layer.rows,
            "rotated": pallet_plan.layer.rotated,
            "stacks": {
                height_class: {
                    "stack_depth": stack.layers,
                    "boxes_per_pallet": pallet_plan.boxes_per_pallet(height_class),
                    "stack_height_cm": stack.stack_height_cm,
                }
                for height_class, stack in pallet_plan.stacks
            },
        },
        "containers": [
            {
                "type": fit.profile.name,
                "height_class": fit.profile.height_class,
                "height_limit_cm": fit.profile.height_limit_cm,
                "pallets_on_floor": fit.pallets_on_floor,
                "total_pallets": fit.total_pallets,
                "orientation": fit.orientation,
                "cols": fit.cols,
                "rows": fit.rows,
                "boxes_per_pallet": fit.boxes_per_pallet,
                "total_boxes": fit.total_boxes,
            }
            for fit in plan.containers
        ],
    }
    if estimate is not None:
        result["loose"] = {
            "box_cbm": estimate.box_cbm,
            "boxes_by_container": dict(estimate.boxes_by_container),
        }
    return result
