"""Immutable value types shared by the fitting and loading calculations.

All lengths are centimetres.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

STANDARD = "standard"
HIGH_CUBE = "high_cube"

ORIENTATION_STANDARD = "standard"
ORIENTATION_ROTATED = "rotated"


@dataclass(frozen=True)
class BoxDimensions:
    length_cm: float
    width_cm: float
    height_cm: float

    @property
    def volume_cbm(self) -> float:
        return self.length_cm * self.width_cm * self.height_cm / 1_000_000.0


@dataclass(frozen=True)
class PalletDimensions:
    length_cm: float
    width_cm: float
    base_height_cm: float = 15.0


@dataclass(frozen=True)
class ContainerProfile:
    """A container type: its floor footprint and usable stacking height."""

    name: str
    inner_length_cm: float
    inner_width_cm: float
    height_limit_cm: float
    height_class: str = STANDARD


@dataclass(frozen=True)
class LayerFit:
    """Grid of items placed on a rectangular footprint."""

    cols: int
    rows: int
    count: int
    rotated: bool

    @property
    def orientation(self) -> str:
        return ORIENTATION_ROTATED if self.rotated else ORIENTATION_STANDARD


EMPTY_LAYER = LayerFit(cols=0, rows=0, count=0, rotated=False)


@dataclass(frozen=True)
class StackFit:
    layers: int
    stack_height_cm: float


@dataclass(frozen=True)
class PalletPlan:
    """Boxes on a single pallet, with one stack per container height class."""

    layer: LayerFit
    stacks: Tuple[Tuple[str, StackFit], ...] = ()

    @property
    def layer_capacity(self) -> int:
        return self.layer.count

    def stack(self, height_class: str) -> StackFit:
        for name, stack in self.stacks:
            if name == height_class:
                return stack
        raise KeyError(height_class)

    def stack_depth(self, height_class: str) -> int:
        return self.stack(height_class).layers

    def stack_height_cm(self, height_class: str) -> float:
        return self.stack(height_class).stack_height_cm

    def boxes_per_pallet(self, height_class: str) -> int:
        return self.layer.count * self.stack(height_class).layers


@dataclass(frozen=True)
class ContainerFit:
    profile: ContainerProfile
    pallets_on_floor: int
    orientation: str
    cols: int
    rows: int
    boxes_per_pallet: int
    total_boxes: int

    @property
    def total_pallets(self) -> int:
        # Pallets are loaded in a single tier.
        return self.pallets_on_floor


@dataclass(frozen=True)
class LoadPlan:
    box: BoxDimensions
    pallet: PalletDimensions
    pallet_plan: PalletPlan
    containers: Tuple[ContainerFit, ...]

    def container(self, name: str) -> ContainerFit:
        for fit in self.containers:
            if fit.profile.name == name:
                return fit
        raise KeyError(name)


@dataclass(frozen=True)
class LooseEstimate:
    """Volume-only estimate of boxes per container, ignoring pallets."""

    box_cbm: float
    boxes_by_container: Tuple[Tuple[str, int], ...] = ()

    def boxes_for(self, container_name: str) -> int:
        return dict(self.boxes_by_container)[container_name]
