"""
Geometry calculations for resize and crop.

Pure functions without I/O: given source and target sizes they decide which
region of the source, scaled how, lands on the destination canvas.
"""
import math
from typing import Tuple, Union

from ..core.exceptions import InvalidDimensions
from ..core.interfaces import CropRegion

Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (not banker's rounding)."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def _check_source(src_w: int, src_h: int) -> None:
    if src_w <= 0 or src_h <= 0:
        raise InvalidDimensions(
            "Source image must have positive dimensions",
            {"width": src_w, "height": src_h},
        )


def _check_target(width: int, height: int, operation: str) -> None:
    if width < 0 or height < 0:
        raise InvalidDimensions(
            f"Can not {operation} to negative dimensions",
            {"width": width, "height": height},
        )
    if width == 0 and height == 0:
        raise InvalidDimensions(f"Can not {operation} to 0x0")


def bounding_box_fit(src_w: int, src_h: int, box_w: int, box_h: int) -> Tuple[Number, Number]:
    """
    Calculate the size of an image fitted into a bounding box.

    If both box sides are given the image is scaled to fit entirely inside
    the box. If one side is 0 it is derived from the other one and the
    source aspect ratio.

    Single side results are rounded to whole pixels; the two sided result is
    returned unrounded and callers must round it (see fit_to_pixels).

    Args:
        src_w: Current image width
        src_h: Current image height
        box_w: Bounding box width, 0 to derive from box_h
        box_h: Bounding box height, 0 to derive from box_w

    Returns:
        (width, height) of the fitted image

    Raises:
        InvalidDimensions: for a 0x0 box, negative sizes or an empty source
    """
    _check_target(box_w, box_h, "resize")
    _check_source(src_w, src_h)

    if not box_h:
        return box_w, round_half_up((box_w * src_h) / src_w)
    if not box_w:
        return round_half_up((box_h * src_w) / src_h), box_h

    scale = min(box_w / src_w, box_h / src_h)
    return src_w * scale, src_h * scale


def fit_to_pixels(width: Number, height: Number) -> Tuple[int, int]:
    """
    Round a fitted size to whole pixels, never below 1x1.

    Rounds half up, where GD truncates the float it is given: a 333x777
    image fitted into 100x100 becomes 43x100 here and 42x100 with GD.
    """
    return max(1, round_half_up(width)), max(1, round_half_up(height))


def crop_target(width: int, height: int) -> Tuple[int, int]:
    """Normalize a crop request: a missing side makes the target square."""
    _check_target(width, height, "crop")
    return (width or height), (height or width)


def crop_region(src_w: int, src_h: int, req_w: int, req_h: int) -> CropRegion:
    """
    Calculate the centered source rectangle to cut for a crop.

    The returned rectangle has the aspect ratio of the requested size and is
    as large as the source allows. It is meant to be resampled to
    (req_w, req_h) afterwards.

    Raises:
        InvalidDimensions: for a 0x0 request, negative sizes or an empty source
    """
    req_w, req_h = crop_target(req_w, req_h)
    _check_source(src_w, src_h)

    old_ratio = src_w / src_h
    new_ratio = req_w / req_h

    if new_ratio >= 1:
        if new_ratio > old_ratio:
            crop_w, crop_h = src_w, int(src_w / new_ratio)
        else:
            crop_w, crop_h = int(src_h * new_ratio), src_h
    else:
        if new_ratio < old_ratio:
            crop_w, crop_h = int(src_h * new_ratio), src_h
        else:
            crop_w, crop_h = src_w, int(src_w / new_ratio)

    # extreme ratios may truncate a side to zero
    crop_w, crop_h = max(1, crop_w), max(1, crop_h)

    offset_x = (src_w - crop_w) // 2
    offset_y = (src_h - crop_h) // 2

    return CropRegion(crop_w, crop_h, offset_x, offset_y)
