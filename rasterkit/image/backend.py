"""
Pillow implementation of the raster backend.
Handles decode, canvas allocation, resampling, rotation and encode.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from PIL import Image, UnidentifiedImageError
import logging

from ..core.exceptions import (
    DecodeError,
    EncodeError,
    UnreadableFile,
    UnsupportedFormat,
    UnsupportedSaveFormat,
)
from ..core.formats import ImageFormat, Transparency
from ..core.interfaces import Box, DecodedImage, IRasterBackend

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)

# Pillow reports multi-picture JPEGs from phones as MPO
_FORMAT_ALIASES = {"MPO": "JPEG", "JPG": "JPEG"}


class PillowBackend(IRasterBackend):
    """Raster backend built on Pillow."""

    def __init__(
        self,
        resample_filter: Image.Resampling = Image.Resampling.LANCZOS,
        fallback_filter: Image.Resampling = Image.Resampling.NEAREST,
    ):
        self.resample_filter = resample_filter
        self.fallback_filter = fallback_filter

    def decode(self, path: Path) -> DecodedImage:
        path = Path(path)
        if not path.is_file():
            raise UnreadableFile("Image file does not exist", {"path": path})

        try:
            with Image.open(path) as img:
                pil_format = img.format or ""
                img.load()
                buffer = img.copy()
        except UnidentifiedImageError as e:
            raise UnsupportedFormat("Failed to read image information", {"path": path}) from e
        except PermissionError as e:
            raise UnreadableFile(f"Can not open image: {e}", {"path": path}) from e
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Failed to decode image: {e}", {"path": path}) from e

        try:
            fmt = ImageFormat.from_name(_FORMAT_ALIASES.get(pil_format, pil_format))
        except ValueError:
            buffer.close()
            raise UnsupportedFormat(
                f"Can not work with image format {pil_format or 'unknown'}",
                {"path": path},
            ) from None

        width, height = buffer.size
        return DecodedImage(buffer, width, height, fmt)

    def allocate_canvas(
        self,
        width: int,
        height: int,
        transparency: Transparency,
        source: Image.Image,
    ) -> Image.Image:
        size = (width, height)

        if transparency is Transparency.ALPHA_CHANNEL:
            return Image.new("RGBA", size, (0, 0, 0, 0))

        if transparency is Transparency.TRANSPARENT_INDEX:
            index = source.info.get("transparency") if source.mode == "P" else None
            if isinstance(index, int):
                canvas = Image.new("P", size, index)
                canvas.putpalette(source.getpalette())
                canvas.info["transparency"] = index
                return canvas
            return Image.new("RGB", size, WHITE)

        if source.mode == "L":
            return Image.new("L", size, 255)
        return Image.new("RGB", size, WHITE)

    def resample(self, dest: Image.Image, src: Image.Image, src_box: Box, dest_box: Box) -> bool:
        try:
            self._copy_scaled(dest, src, src_box, dest_box, self.resample_filter)
        except (ValueError, OSError) as e:
            logger.debug(f"Resampling failed for mode {src.mode}: {e}")
            return False
        return True

    def resize(self, dest: Image.Image, src: Image.Image, src_box: Box, dest_box: Box) -> None:
        self._copy_scaled(dest, src, src_box, dest_box, self.fallback_filter)

    def _copy_scaled(
        self,
        dest: Image.Image,
        src: Image.Image,
        src_box: Box,
        dest_box: Box,
        resample: Image.Resampling,
    ) -> None:
        region = src
        # palette canvases keep the source indices
        if dest.mode != "P" and src.mode != dest.mode:
            region = src.convert(dest.mode)

        try:
            scaled = region.resize(
                (dest_box.width, dest_box.height),
                resample,
                box=(src_box.left, src_box.top, src_box.right, src_box.bottom),
            )
            dest.paste(scaled, (dest_box.left, dest_box.top))
            scaled.close()
        finally:
            if region is not src:
                region.close()

    def rotate(self, buffer: Image.Image, degrees: int, fill_color: Any = None) -> Image.Image:
        if buffer.mode != "RGBA":
            fill_color = None
        return buffer.rotate(degrees, expand=True, fillcolor=fill_color)

    def flip_horizontal(self, buffer: Image.Image) -> Image.Image:
        return buffer.transpose(Image.Transpose.FLIP_LEFT_RIGHT)

    def apply_transparency(self, buffer: Image.Image, transparency: Transparency) -> Image.Image:
        if transparency is Transparency.ALPHA_CHANNEL and buffer.mode not in ("RGBA", "LA"):
            return buffer.convert("RGBA")
        return buffer

    def encode(
        self,
        buffer: Image.Image,
        path: Path,
        fmt: ImageFormat,
        quality: Optional[int] = None,
        **options: Any,
    ) -> None:
        Image.init()
        if fmt.value not in Image.SAVE:
            raise UnsupportedSaveFormat(f"Can not save image format {fmt.value}", {"path": path})

        img = buffer
        if fmt is ImageFormat.JPEG:
            img = self._prepare_for_jpeg(buffer, options.get("background", WHITE))

        try:
            img.save(path, format=fmt.value, **self._save_options(fmt, quality, options))
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Error saving {path}: {e}")
            raise EncodeError(f"Failed to save image: {e}", {"path": path, "format": fmt.value}) from e
        finally:
            if img is not buffer:
                img.close()

    def _save_options(self, fmt: ImageFormat, quality: Optional[int], options: Dict[str, Any]) -> Dict[str, Any]:
        """Encoder keyword arguments for a format."""
        save_options = {}
        if fmt.uses_quality and quality is not None:
            save_options["quality"] = quality
        if fmt in (ImageFormat.JPEG, ImageFormat.PNG):
            save_options["optimize"] = options.get("optimize", True)
        if fmt is ImageFormat.JPEG:
            save_options["progressive"] = options.get("progressive", True)
        return save_options

    def _prepare_for_jpeg(self, img: Image.Image, background: Tuple[int, int, int]) -> Image.Image:
        """Convert image to RGB mode for JPEG saving."""
        if img.mode in ("RGBA", "LA"):
            flattened = Image.new("RGB", img.size, background)
            alpha = img.split()[-1]
            flattened.paste(img.convert("RGB"), mask=alpha)
            return flattened
        if img.mode == "P" and "transparency" in img.info:
            rgba = img.convert("RGBA")
            flattened = self._prepare_for_jpeg(rgba, background)
            rgba.close()
            return flattened
        if img.mode not in ("RGB", "L"):
            return img.convert("RGB")
        return img

    def release(self, buffer: Image.Image) -> None:
        buffer.close()
