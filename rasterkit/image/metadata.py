"""
EXIF metadata extraction.
"""
from pathlib import Path
from typing import Optional
from PIL import Image
import logging

from ..core.exceptions import MetadataError
from ..core.formats import ImageFormat
from ..core.interfaces import IMetadataReader
from .orientation import ORIENTATION_TAG

logger = logging.getLogger(__name__)


class ExifMetadataReader(IMetadataReader):
    """Reads the EXIF orientation tag with Pillow."""

    def read_orientation(self, path: Path, fmt: ImageFormat) -> Optional[int]:
        try:
            with Image.open(path) as img:
                orientation = img.getexif().get(ORIENTATION_TAG)
        except (OSError, SyntaxError, ValueError) as e:
            raise MetadataError(f"Could not read EXIF data: {e}", {"path": path}) from e

        if orientation is None:
            return None

        try:
            orientation = int(orientation)
        except (TypeError, ValueError):
            raise MetadataError(
                "Malformed EXIF orientation",
                {"path": path, "orientation": orientation},
            ) from None

        logger.debug(f"{Path(path).name}: EXIF orientation {orientation}")
        return orientation or None
