"""
Exception hierarchy for rasterkit.

All errors inherit from RasterKitError so callers can catch everything the
adapter raises with a single except clause. Each error may carry a context
dict (path, format, requested size...) rendered in its message.
"""
from typing import Any, Dict, Optional


class RasterKitError(Exception):
    """Base exception for all rasterkit errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} [{details}]"
        return base


class InvalidDimensions(RasterKitError, ValueError):
    """Raised for a 0x0 target, negative targets or non-positive source sizes."""


class UnsupportedOrientation(RasterKitError, ValueError):
    """Raised when an orientation code is outside the EXIF range."""


class UnsupportedFormat(RasterKitError):
    """Raised when no decoder exists for the detected image format."""


class UnsupportedSaveFormat(UnsupportedFormat):
    """Raised when no encoder exists for the requested output format."""


class UnreadableFile(RasterKitError, OSError):
    """Raised when the source file is missing or cannot be opened."""


class DecodeError(RasterKitError):
    """Raised when the image data cannot be decoded."""


class EncodeError(RasterKitError):
    """Raised when the image cannot be written to disk."""


class MetadataError(RasterKitError):
    """Raised when EXIF metadata cannot be read."""


class InvalidState(RasterKitError, RuntimeError):
    """Raised when an adapter operation is called out of sequence."""


class ConfigError(RasterKitError, ValueError):
    """Raised when adapter configuration is invalid."""
