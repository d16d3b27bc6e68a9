"""
Core module - Interfaces, protocols, errors and data types for rasterkit.
"""
from .interfaces import (
    # Enums
    AdapterState,

    # Data classes
    ImageDimensions,
    TransformPlan,
    Box,
    CropRegion,
    DecodedImage,
    AdapterConfig,

    # Abstract interfaces
    IRasterBackend,
    IMetadataReader,
    IImageAdapter,
)
from .formats import ImageFormat, Transparency, transparency_for
from .exceptions import (
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

__all__ = [
    # Enums
    "AdapterState",
    "ImageFormat",
    "Transparency",

    # Data classes
    "ImageDimensions",
    "TransformPlan",
    "Box",
    "CropRegion",
    "DecodedImage",
    "AdapterConfig",

    # Abstract interfaces
    "IRasterBackend",
    "IMetadataReader",
    "IImageAdapter",

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
