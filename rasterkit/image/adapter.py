"""
Image adapter - sequences load, transforms and save on a single image.

The adapter owns exactly one decoded buffer at a time. Every transform
builds a new buffer, installs it and only then releases the previous one,
so a failed operation leaves the adapter as it was.
"""
from pathlib import Path
from typing import Any, Iterable, Optional, Union
import logging

from ..core.exceptions import (
    InvalidDimensions,
    InvalidState,
    MetadataError,
    UnsupportedOrientation,
    UnsupportedSaveFormat,
)
from ..core.formats import ImageFormat
from ..core.interfaces import (
    AdapterConfig,
    AdapterState,
    Box,
    IImageAdapter,
    IMetadataReader,
    IRasterBackend,
    ImageDimensions,
    PathLike,
)
from .backend import PillowBackend
from .geometry import bounding_box_fit, crop_region, crop_target, fit_to_pixels
from .metadata import ExifMetadataReader
from .orientation import orientation_plan

logger = logging.getLogger(__name__)

# fill for areas uncovered by rotation
TRANSPARENT_FILL = (0, 0, 0, 0)


class ImageAdapter(IImageAdapter):
    """
    Loads an image, applies resize/crop/rotate operations and saves it.

    Operations return the adapter so they can be chained:

        ImageAdapter().load("photo.jpg").autorotate().crop(200, 200).save("thumb.jpg")

    The adapter can not be reused after save().
    """

    def __init__(
        self,
        backend: Optional[IRasterBackend] = None,
        metadata_reader: Optional[IMetadataReader] = None,
        config: Optional[AdapterConfig] = None,
    ):
        self.backend = backend or PillowBackend()
        self.metadata_reader = metadata_reader or ExifMetadataReader()
        self.config = config or AdapterConfig()

        self._handle: Any = None
        self._width = 0
        self._height = 0
        self._format: Optional[ImageFormat] = None
        self._path: Optional[Path] = None
        self._state = AdapterState.UNLOADED

    @classmethod
    def open(
        cls,
        path: PathLike,
        backend: Optional[IRasterBackend] = None,
        metadata_reader: Optional[IMetadataReader] = None,
        config: Optional[AdapterConfig] = None,
    ) -> "ImageAdapter":
        """Create an adapter and load path into it."""
        return cls(backend, metadata_reader, config).load(path)

    def __enter__(self) -> "ImageAdapter":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        fmt = self._format.value if self._format else None
        return f"<ImageAdapter {self._state.value} {self._width}x{self._height} {fmt}>"

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def dimensions(self) -> ImageDimensions:
        return ImageDimensions(self._width, self._height)

    @property
    def format(self) -> Optional[ImageFormat]:
        return self._format

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def state(self) -> AdapterState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is AdapterState.LOADED

    def load(self, path: PathLike) -> "ImageAdapter":
        """
        Decode an image file.

        Size and format come from the decoded data, not from the file name.
        Loading again replaces the current image.

        Raises:
            UnreadableFile, DecodeError, UnsupportedFormat
        """
        if self._state in (AdapterState.SAVED, AdapterState.CLOSED):
            raise InvalidState(f"Can not load into an adapter that is {self._state.value}")

        path = Path(path)
        decoded = self.backend.decode(path)
        if not ImageDimensions(decoded.width, decoded.height).is_valid:
            self.backend.release(decoded.buffer)
            raise InvalidDimensions(
                "Decoded image has no pixels",
                {"path": path, "width": decoded.width, "height": decoded.height},
            )

        self._install(decoded.buffer, decoded.width, decoded.height)
        self._format = decoded.format
        self._path = path
        self._state = AdapterState.LOADED

        logger.debug(f"Loaded {path.name}: {self._width}x{self._height} {self._format.value}")
        return self

    def autorotate(self) -> "ImageAdapter":
        """
        Rotate the image upright according to its EXIF orientation.

        Does nothing for formats without EXIF support, when no orientation is
        recorded or when the metadata can not be read.
        """
        self._ensure_loaded("autorotate")

        if not self._format.carries_exif:
            return self

        try:
            orientation = self.metadata_reader.read_orientation(self._path, self._format)
        except MetadataError as e:
            logger.warning(f"Skipping autorotate for {self._path.name}: {e}")
            return self

        if not orientation:
            return self

        try:
            plan = orientation_plan(orientation)
        except UnsupportedOrientation as e:
            logger.warning(f"Skipping autorotate for {self._path.name}: {e}")
            return self

        if plan.is_identity:
            return self
        return self.rotate(orientation)

    def rotate(self, orientation: int) -> "ImageAdapter":
        """
        Rotate and/or mirror the image as described by an EXIF orientation code.

        Raises:
            UnsupportedOrientation: for codes outside 0-8
        """
        self._ensure_loaded("rotate")

        plan = orientation_plan(orientation)
        if plan.is_identity:
            return self

        created = []
        try:
            image = self._handle
            if plan.rotation_degrees:
                image = self.backend.rotate(image, plan.rotation_degrees, TRANSPARENT_FILL)
                created.append(image)
            if plan.flip_horizontal:
                image = self.backend.flip_horizontal(image)
                created.append(image)
            image = self.backend.apply_transparency(image, self._format.transparency)
            created.append(image)
        except Exception as e:
            logger.error(f"Error rotating {self._path.name}: {e}")
            self._release_all(created)
            raise

        self._release_all(created, keep=image)

        dims = self.dimensions.swapped() if plan.swaps_dimensions else self.dimensions
        self._install(image, dims.width, dims.height)

        logger.debug(f"Rotated by orientation {orientation}: now {dims.width}x{dims.height}")
        return self

    def resize(self, width: int, height: int) -> "ImageAdapter":
        """
        Resize to fit within a bounding box while keeping the aspect ratio.

        Pass 0 for one side to derive it from the other.

        Raises:
            InvalidDimensions: for a 0x0 or negative box
        """
        self._ensure_loaded("resize")

        fitted = bounding_box_fit(self._width, self._height, width, height)
        to_width, to_height = fit_to_pixels(*fitted)

        self._resample_into(to_width, to_height, Box(0, 0, self._width, self._height))
        return self

    def crop(self, width: int, height: int) -> "ImageAdapter":
        """
        Crop to exactly width x height, cutting the centered region with the
        target aspect ratio and scaling it down. Pass 0 for one side to get
        a square.

        Raises:
            InvalidDimensions: for a 0x0 or negative target
        """
        self._ensure_loaded("crop")

        to_width, to_height = crop_target(width, height)
        region = crop_region(self._width, self._height, to_width, to_height)
        logger.debug(
            f"Crop {region.width}x{region.height} at ({region.offset_x}, {region.offset_y})"
            f" to {to_width}x{to_height}"
        )

        self._resample_into(to_width, to_height, region.box)
        return self

    def save(self, path: PathLike, fmt: Optional[Union[str, ImageFormat]] = None) -> None:
        """
        Encode the image to path and release it.

        Args:
            path: Output file
            fmt: Output format, defaults to the format the image was loaded in

        Raises:
            UnsupportedSaveFormat, EncodeError
        """
        self._ensure_loaded("save")

        path = Path(path)
        out_format = self._format if not fmt else self._resolve_format(fmt)
        quality = self.config.quality if out_format.uses_quality else None

        self.backend.encode(
            self._handle,
            path,
            out_format,
            quality=quality,
            progressive=self.config.progressive,
            optimize=self.config.optimize,
            background=self.config.flatten_background,
        )

        self._release_handle()
        self._state = AdapterState.SAVED
        logger.debug(f"Saved {path.name} as {out_format.value} ({self._width}x{self._height})")

    def close(self) -> None:
        """Release the image. Safe to call more than once."""
        self._release_handle()
        if self._state is not AdapterState.SAVED:
            self._state = AdapterState.CLOSED

    def _ensure_loaded(self, operation: str) -> None:
        if self._state is not AdapterState.LOADED:
            raise InvalidState(
                f"Can not {operation} an image that is {self._state.value}",
                {"state": self._state.value},
            )

    def _resolve_format(self, fmt: Union[str, ImageFormat]) -> ImageFormat:
        try:
            return ImageFormat.from_name(fmt)
        except ValueError:
            raise UnsupportedSaveFormat(f"Can not save image format {fmt}") from None

    def _resample_into(self, to_width: int, to_height: int, src_box: Box) -> None:
        """Scale src_box of the current image onto a new canvas and install it."""
        canvas = self.backend.allocate_canvas(to_width, to_height, self._format.transparency, self._handle)
        dest_box = Box(0, 0, to_width, to_height)

        try:
            if not self.backend.resample(canvas, self._handle, src_box, dest_box):
                logger.debug("Resampling unavailable, falling back to plain resize")
                self.backend.resize(canvas, self._handle, src_box, dest_box)
        except Exception as e:
            logger.error(f"Error scaling {self._path.name}: {e}")
            self.backend.release(canvas)
            raise

        self._install(canvas, to_width, to_height)

    def _install(self, buffer: Any, width: int, height: int) -> None:
        """Make buffer the live image, then release the previous one."""
        previous = self._handle
        self._handle = buffer
        self._width = width
        self._height = height
        if previous is not None and previous is not buffer:
            self.backend.release(previous)

    def _release_handle(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            self.backend.release(handle)

    def _release_all(self, buffers: Iterable[Any], keep: Any = None) -> None:
        """Release intermediate buffers except keep and the live image."""
        released = set()
        for buffer in buffers:
            if buffer is keep or buffer is self._handle or id(buffer) in released:
                continue
            released.add(id(buffer))
            self.backend.release(buffer)
