"""
Image processing module for rasterkit.
"""
from .adapter import ImageAdapter
from .backend import PillowBackend
from .metadata import ExifMetadataReader
from .orientation import orientation_plan
from .geometry import bounding_box_fit, crop_region, crop_target, fit_to_pixels, round_half_up

__all__ = [
    'ImageAdapter',
    'PillowBackend',
    'ExifMetadataReader',
    'orientation_plan',
    'bounding_box_fit',
    'crop_region',
    'crop_target',
    'fit_to_pixels',
    'round_half_up',
]
