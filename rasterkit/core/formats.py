"""
Supported raster formats and their capabilities.

Formats are identified from decoded content, never from the file extension.
Extensions are only accepted as names of an explicit `save` override ("jpg").
"""
from enum import Enum
from typing import Tuple, Union


class Transparency(Enum):
    """How a format represents transparent pixels."""
    ALPHA_CHANNEL = "alpha"
    TRANSPARENT_INDEX = "index"
    OPAQUE = "opaque"


class ImageFormat(Enum):
    """Raster formats the adapter can load and save."""
    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    WEBP = "WEBP"
    BMP = "BMP"
    TIFF = "TIFF"

    @property
    def extensions(self) -> Tuple[str, ...]:
        return _EXTENSIONS[self]

    @property
    def transparency(self) -> Transparency:
        return transparency_for(self)

    @property
    def carries_exif(self) -> bool:
        """Whether autorotate should consult EXIF orientation for this format."""
        return self is ImageFormat.JPEG

    @property
    def uses_quality(self) -> bool:
        return self in (ImageFormat.JPEG, ImageFormat.WEBP)

    @classmethod
    def from_name(cls, name: Union[str, "ImageFormat"]) -> "ImageFormat":
        """
        Resolve a format from a Pillow format name or an extension.

        Accepts "JPEG", "jpeg", "jpg", ".jpg", "png" and so on.

        Raises:
            ValueError: if the name matches no supported format
        """
        if isinstance(name, ImageFormat):
            return name

        key = str(name).strip().lower().lstrip(".")
        for fmt in cls:
            if key == fmt.value.lower() or f".{key}" in fmt.extensions:
                return fmt
        raise ValueError(f"Unknown image format: {name}")


_EXTENSIONS = {
    ImageFormat.JPEG: ('.jpg', '.jpeg', '.jpe'),
    ImageFormat.PNG: ('.png',),
    ImageFormat.GIF: ('.gif',),
    ImageFormat.WEBP: ('.webp',),
    ImageFormat.BMP: ('.bmp',),
    ImageFormat.TIFF: ('.tif', '.tiff'),
}

_TRANSPARENCY = {
    ImageFormat.PNG: Transparency.ALPHA_CHANNEL,
    ImageFormat.WEBP: Transparency.ALPHA_CHANNEL,
    ImageFormat.GIF: Transparency.TRANSPARENT_INDEX,
}


def transparency_for(fmt: ImageFormat) -> Transparency:
    """Resolve the transparency convention used for canvases of a format."""
    return _TRANSPARENCY.get(fmt, Transparency.OPAQUE)

