"""
RasterKit - predictable image resize, crop and orientation.

Given a raster image file, rasterkit computes and applies:
- Proportional resize into a bounding box
- Centered crop to an exact size and aspect ratio
- EXIF driven rotation and mirroring
then re-encodes the result.

Pixel work is delegated to a raster backend (Pillow by default), so the
geometry and orchestration can be tested without any codec.

Example usage:
    from rasterkit import ImageAdapter, transform_image

    # Chained operations on one image
    with ImageAdapter.open("photo.jpg") as image:
        image.autorotate().crop(200, 200)
        image.save("thumb.jpg")

    # One call
    dims = transform_image("photo.jpg", "large.png", width=1280, output_format="png")
    print(f"Wrote {dims.width}x{dims.height}")
"""

from .transformer import ImageTransformer, TransformRequest, transform_image
from .core.interfaces import (
    AdapterConfig,
    AdapterState,
    ImageDimensions,
    TransformPlan,
    CropRegion,
    Box,
    IRasterBackend,
    IMetadataReader,
)
from .core.formats import ImageFormat, Transparency, transparency_for
from .core.exceptions import (
    RasterKitError,
    InvalidDimensions,
    UnsupportedOrientation,
    UnsupportedFormat,
    UnsupportedSaveFormat,
    UnreadableFile,
    DecodeError,
    EncodeError,
    MetadataError,
    InvalidState,
    ConfigError,
)
from .image import (
    ImageAdapter,
    PillowBackend,
    ExifMetadataReader,
    orientation_plan,
    bounding_box_fit,
    crop_region,
)

__version__ = "1.0.0"

__all__ = [
    # Main facade
    "ImageTransformer",
    "TransformRequest",
    "transform_image",

    # Adapter and backends
    "ImageAdapter",
    "PillowBackend",
    "ExifMetadataReader",
    "IRasterBackend",
    "IMetadataReader",

    # Core types
    "AdapterConfig",
    "AdapterState",
    "ImageDimensions",
    "TransformPlan",
    "CropRegion",
    "Box",
    "ImageFormat",
    "Transparency",

    # Geometry and orientation
    "bounding_box_fit",
    "crop_region",
    "orientation_plan",

    # Formats
    "transparency_for",

    # Errors
    "RasterKitError",
    "InvalidDimensions",
    "UnsupportedOrientation",
    "UnsupportedFormat",
    "UnsupportedSaveFormat",
    "UnreadableFile",
    "DecodeError",
    "EncodeError",
    "MetadataError",
    "InvalidState",
    "ConfigError",
]
