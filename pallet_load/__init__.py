"""Pallet stacking and container loading calculations."""

from .calculator import (
    CONTAINER_PROFILES,
    PALLET_PRESETS,
    CalculationInput,
    build_input,
    calculate_load_plan,
    estimate_loose_boxes,
    solve_container_floor,
    solve_pallet,
)
from .fitting import fit_rectangle, stack_layers
from .models import (
    BoxDimensions,
    ContainerFit,
    ContainerProfile,
    LayerFit,
    LoadPlan,
    PalletDimensions,
    PalletPlan,
    StackFit,
)
from .units import BoxUnit, normalize_box, normalize_dimension

__all__ = [
    "BoxDimensions",
    "BoxUnit",
    "CONTAINER_PROFILES",
    "CalculationInput",
    "ContainerFit",
    "ContainerProfile",
    "LayerFit",
    "LoadPlan",
    "PALLET_PRESETS",
    "PalletDimensions",
    "PalletPlan",
    "StackFit",
    "build_input",
    "calculate_load_plan",
    "estimate_loose_boxes",
    "fit_rectangle",
    "normalize_box",
    "normalize_dimension",
    "solve_container_floor",
    "solve_pallet",
    "stack_layers",
]
