"""Conversion of raw box dimensions into centimetres."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
import math
from typing import Optional, Union

from .models import BoxDimensions


class BoxUnit(str, Enum):
    MM = "mm"
    CM = "cm"
    INCH = "inch"


_FACTORS_TO_CM = {
    BoxUnit.MM: 0.1,
    BoxUnit.CM: 1.0,
    BoxUnit.INCH: 2.54,
}

_UNIT_ALIASES = {
    "in": BoxUnit.INCH,
    '"': BoxUnit.INCH,
}


def resolve_unit(unit: Union[str, BoxUnit]) -> BoxUnit:
    if isinstance(unit, BoxUnit):
        return unit
    key = str(unit).strip().lower()
    if key in _UNIT_ALIASES:
        return _UNIT_ALIASES[key]
    try:
        return BoxUnit(key)
    except ValueError as exc:
        valid = ", ".join(member.value for member in BoxUnit)
        raise ValueError(f"Unsupported unit '{unit}'. Valid values: {valid}.") from exc


def normalize_dimension(value: Optional[float], unit: Union[str, BoxUnit]) -> float:
    """Return ``value`` expressed in centimetres.

    Missing values become ``0.0``; ``nan`` and infinities are passed through
    untouched so the fitting functions can treat them as incomplete input.
    """

    if value is None:
        return 0.0
    return float(value) * _FACTORS_TO_CM[resolve_unit(unit)]


def normalize_box(
    length: Optional[float],
    width: Optional[float],
    height: Optional[float],
    unit: Union[str, BoxUnit] = BoxUnit.CM,
) -> BoxDimensions:
    return BoxDimensions(
        length_cm=normalize_dimension(length, unit),
        width_cm=normalize_dimension(width, unit),
        height_cm=normalize_dimension(height, unit),
    )


_ONE_DECIMAL = Decimal("0.1")


def display_value(value: float) -> float:
    """Round a centimetre value to one decimal for presentation only.

    Halves round away from zero, so 0.25 shows as 0.3.
    """

    if not math.isfinite(value):
        return 0.0
    return float(Decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))
