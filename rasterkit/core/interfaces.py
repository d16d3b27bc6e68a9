"""
Abstract interfaces following Interface Segregation Principle (SOLID).
Defines contracts and data types shared by all rasterkit components.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, NamedTuple, Optional, Tuple, Union

from .exceptions import ConfigError
from .formats import ImageFormat, Transparency

PathLike = Union[str, Path]


class AdapterState(Enum):
    """Lifecycle states of an ImageAdapter."""
    UNLOADED = "unloaded"
    LOADED = "loaded"
    SAVED = "saved"
    CLOSED = "closed"


@dataclass(frozen=True)
class ImageDimensions:
    """Width and height of an image in pixels."""
    width: int
    height: int

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    def swapped(self) -> "ImageDimensions":
        return ImageDimensions(self.height, self.width)


@dataclass(frozen=True)
class TransformPlan:
    """
    Rotation and mirroring needed to display an image upright.

    rotation_degrees is counter-clockwise, applied before the optional
    horizontal flip.
    """
    rotation_degrees: int = 0
    flip_horizontal: bool = False
    swaps_dimensions: bool = False

    @property
    def is_identity(self) -> bool:
        return self.rotation_degrees == 0 and not self.flip_horizontal


class Box(NamedTuple):
    """Rectangle passed to resample operations."""
    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height


class CropRegion(NamedTuple):
    """Source rectangle to extract for a centered crop."""
    width: int
    height: int
    offset_x: int
    offset_y: int

    @property
    def box(self) -> Box:
        return Box(self.offset_x, self.offset_y, self.width, self.height)


class DecodedImage(NamedTuple):
    """Result of decoding a file with a raster backend."""
    buffer: Any
    width: int
    height: int
    format: ImageFormat


@dataclass
class AdapterConfig:
    """Configuration for image adapters."""
    quality: int = 92
    progressive: bool = True
    optimize: bool = True
    flatten_background: Tuple[int, int, int] = (255, 255, 255)

    def __post_init__(self):
        if isinstance(self.quality, bool) or not isinstance(self.quality, int):
            raise ConfigError("quality must be an integer", {"quality": self.quality})
        if not 0 <= self.quality <= 100:
            raise ConfigError("quality must be between 0 and 100", {"quality": self.quality})
        if len(self.flatten_background) != 3:
            raise ConfigError(
                "flatten_background must be an RGB triple",
                {"flatten_background": self.flatten_background},
            )
        self.flatten_background = tuple(int(c) for c in self.flatten_background)

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None) -> "AdapterConfig":
        """Build a config from a plain options dict, rejecting unknown keys."""
        options = dict(options or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigError(f"Unknown adapter options: {', '.join(unknown)}")
        return cls(**options)


class IRasterBackend(ABC):
    """
    Pixel-level raster engine.

    Buffers are opaque to the caller; the adapter only passes them back to
    the backend that created them.
    """

    @abstractmethod
    def decode(self, path: Path) -> DecodedImage:
        """Decode a file into a buffer with its real size and format."""
        pass

    @abstractmethod
    def allocate_canvas(self, width: int, height: int, transparency: Transparency, source: Any) -> Any:
        """Create a blank canvas with the transparency defaults of a format."""
        pass

    @abstractmethod
    def resample(self, dest: Any, src: Any, src_box: Box, dest_box: Box) -> bool:
        """High quality copy of src_box in src onto dest_box in dest. False if unavailable."""
        pass

    @abstractmethod
    def resize(self, dest: Any, src: Any, src_box: Box, dest_box: Box) -> None:
        """Low quality fallback for resample."""
        pass

    @abstractmethod
    def rotate(self, buffer: Any, degrees: int, fill_color: Any = None) -> Any:
        """Return a new buffer rotated counter-clockwise by degrees."""
        pass

    @abstractmethod
    def flip_horizontal(self, buffer: Any) -> Any:
        """Return the buffer mirrored left to right."""
        pass

    @abstractmethod
    def apply_transparency(self, buffer: Any, transparency: Transparency) -> Any:
        """Return the buffer prepared to keep the transparency of its format."""
        pass

    @abstractmethod
    def encode(
        self,
        buffer: Any,
        path: Path,
        fmt: ImageFormat,
        quality: Optional[int] = None,
        **options: Any,
    ) -> None:
        """Write the buffer to path in the given format."""
        pass

    @abstractmethod
    def release(self, buffer: Any) -> None:
        """Free the native resources held by a buffer."""
        pass


class IMetadataReader(ABC):
    """Interface for EXIF metadata extraction."""

    @abstractmethod
    def read_orientation(self, path: Path, fmt: ImageFormat) -> Optional[int]:
        """Return the EXIF orientation code of a file, or None if absent."""
        pass


class IImageAdapter(ABC):
    """Interface for the load, transform, save pipeline."""

    @abstractmethod
    def load(self, path: PathLike) -> "IImageAdapter":
        pass

    @abstractmethod
    def autorotate(self) -> "IImageAdapter":
        pass

    @abstractmethod
    def rotate(self, orientation: int) -> "IImageAdapter":
        pass

    @abstractmethod
    def resize(self, width: int, height: int) -> "IImageAdapter":
        """Fit the image inside a bounding box, keeping its aspect ratio."""
        pass

    @abstractmethod
    def crop(self, width: int, height: int) -> "IImageAdapter":
        """Crop the centered region matching the target ratio and scale it to size."""
        pass

    @abstractmethod
    def save(self, path: PathLike, fmt: Optional[Union[str, ImageFormat]] = None) -> None:
        pass
