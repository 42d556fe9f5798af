"""Grid fitting of rectangles on a footprint and layers under a height limit."""

from __future__ import annotations

import logging
import math
from typing import Optional

from .models import EMPTY_LAYER, LayerFit, StackFit

logger = logging.getLogger(__name__)


def _usable(value: float) -> bool:
    return math.isfinite(value) and value > 0


def _whole(span: float, size: float) -> Optional[int]:
    """Whole items of ``size`` along ``span``, or None when the ratio overflows."""

    ratio = span / size
    if not math.isfinite(ratio):
        return None
    return max(0, math.floor(ratio))


def _grid(
    container_length: float,
    container_width: float,
    along_length: float,
    along_width: float,
) -> Optional[LayerFit]:
    cols = _whole(container_length, along_length)
    rows = _whole(container_width, along_width)
    if cols is None or rows is None:
        return None
    return LayerFit(cols=cols, rows=rows, count=cols * rows, rotated=False)


def fit_rectangle(
    container_length: float,
    container_width: float,
    item_length: float,
    item_width: float,
) -> LayerFit:
    """Return the better of the standard and the 90° rotated grid.

    The standard grid lays the item length along the container length, the
    rotated grid lays the item width along it. The rotated grid is chosen
    only when it holds strictly more items. Incomplete input (a missing,
    zero, negative or non-finite side, or an item so small the count
    overflows) yields an empty grid.
    """

    if not (_usable(item_length) and _usable(item_width)):
        logger.debug("Item footprint %sx%s is incomplete, nothing fits.", item_length, item_width)
        return EMPTY_LAYER
    if not (_usable(container_length) and _usable(container_width)):
        logger.debug(
            "Container footprint %sx%s is incomplete, nothing fits.",
            container_length,
            container_width,
        )
        return EMPTY_LAYER

    standard = _grid(container_length, container_width, item_length, item_width)
    rotated = _grid(container_length, container_width, item_width, item_length)
    if standard is None or rotated is None:
        logger.debug("Item footprint %sx%s overflows the grid count.", item_length, item_width)
        return EMPTY_LAYER
    if rotated.count > standard.count:
        logger.debug("Rotated grid wins: %d > %d.", rotated.count, standard.count)
        return LayerFit(cols=rotated.cols, rows=rotated.rows, count=rotated.count, rotated=True)
    return standard


def stack_layers(height_limit: float, base_height: float, item_height: float) -> StackFit:
    """Stack whole layers of ``item_height`` on a base below ``height_limit``."""

    available = height_limit - base_height
    layers = 0
    if _usable(available) and _usable(item_height):
        layers = _whole(available, item_height) or 0
    if layers == 0:
        return StackFit(layers=0, stack_height_cm=base_height)
    return StackFit(layers=layers, stack_height_cm=base_height + layers * item_height)
