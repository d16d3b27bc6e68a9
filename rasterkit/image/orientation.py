"""
EXIF orientation to transform plan mapping.
Follows Single Responsibility Principle - only decides how to orient.
"""
from typing import Optional
import logging

from ..core.exceptions import UnsupportedOrientation
from ..core.interfaces import TransformPlan

logger = logging.getLogger(__name__)

ORIENTATION_TAG = 0x0112

# Rotations are counter-clockwise; 270 is the EXIF "rotate 90 CW" case.
_PLANS = {
    0: TransformPlan(),
    1: TransformPlan(),
    2: TransformPlan(0, flip_horizontal=True),
    3: TransformPlan(180),
    4: TransformPlan(180, flip_horizontal=True),
    5: TransformPlan(270, flip_horizontal=True, swaps_dimensions=True),
    6: TransformPlan(270, swaps_dimensions=True),
    7: TransformPlan(90, flip_horizontal=True, swaps_dimensions=True),
    8: TransformPlan(90, swaps_dimensions=True),
}


def orientation_plan(orientation: Optional[int]) -> TransformPlan:
    """
    Map an EXIF orientation code to the rotation and flip that undo it.

    None and 0 (no metadata) behave like 1 (normal).

    Raises:
        UnsupportedOrientation: for codes outside 0-8
    """
    if orientation is None:
        return _PLANS[1]

    if isinstance(orientation, bool):
        raise UnsupportedOrientation("Unknown rotation given", {"orientation": orientation})
    try:
        code = int(orientation)
    except (TypeError, ValueError):
        raise UnsupportedOrientation("Unknown rotation given", {"orientation": orientation}) from None
    if code != orientation or code not in _PLANS:
        raise UnsupportedOrientation("Unknown rotation given", {"orientation": orientation})

    plan = _PLANS[code]
    logger.debug(f"Orientation {code}: rotate {plan.rotation_degrees}, flip={plan.flip_horizontal}")
    return plan

