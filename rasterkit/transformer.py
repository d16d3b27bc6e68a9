"""
ImageTransformer - one-shot facade over ImageAdapter.
Runs load, autorotate, resize or crop and save on a single file.
Follows Facade Pattern for simplified API.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass
import logging

from .core.formats import ImageFormat
from .core.interfaces import (
    AdapterConfig,
    IMetadataReader,
    IRasterBackend,
    ImageDimensions,
    PathLike,
)
from .image.adapter import ImageAdapter

logger = logging.getLogger(__name__)


@dataclass
class TransformRequest:
    """
    What to do with one image.

    width/height of 0 derive that side from the other; both 0 skips
    resizing so only autorotate and re-encoding happen.
    """
    width: int = 0
    height: int = 0
    crop: bool = False
    autorotate: bool = True
    output_format: Optional[Union[str, ImageFormat]] = None

    @property
    def changes_size(self) -> bool:
        return bool(self.width or self.height)


class ImageTransformer:
    """
    Facade running one transform pipeline per call.

    Example:
        transformer = ImageTransformer(AdapterConfig(quality=85))

        # 200x200 centered thumbnail
        transformer.transform("photo.jpg", "thumb.jpg", TransformRequest(200, 200, crop=True))

        # Fit into 1280px width, convert to PNG
        transformer.transform("photo.jpg", "large.png", TransformRequest(1280, output_format="png"))
    """

    def __init__(
        self,
        config: Optional[AdapterConfig] = None,
        backend: Optional[IRasterBackend] = None,
        metadata_reader: Optional[IMetadataReader] = None,
    ):
        self.config = config or AdapterConfig()
        self.backend = backend
        self.metadata_reader = metadata_reader

    def transform(
        self,
        source: PathLike,
        destination: PathLike,
        request: Optional[TransformRequest] = None,
    ) -> ImageDimensions:
        """
        Transform source into destination.

        Args:
            source: Image to read
            destination: Output path
            request: Size and format options, defaults to autorotate only

        Returns:
            Dimensions of the written image
        """
        source = Path(source)
        destination = Path(destination)
        request = request or TransformRequest()

        with ImageAdapter(self.backend, self.metadata_reader, self.config) as adapter:
            adapter.load(source)

            if request.autorotate:
                adapter.autorotate()

            if request.changes_size:
                if request.crop:
                    adapter.crop(request.width, request.height)
                else:
                    adapter.resize(request.width, request.height)

            dimensions = adapter.dimensions
            adapter.save(destination, request.output_format)

        logger.info(f"{source.name} -> {destination.name} ({dimensions.width}x{dimensions.height})")
        return dimensions


def transform_image(
    source: PathLike,
    destination: PathLike,
    width: int = 0,
    height: int = 0,
    crop: bool = False,
    autorotate: bool = True,
    output_format: Optional[Union[str, ImageFormat]] = None,
    options: Optional[Dict[str, Any]] = None,
) -> ImageDimensions:
    """
    Transform a single image in one call.

    Args:
        source: Image to read
        destination: Output path
        width: Target width, 0 to derive it
        height: Target height, 0 to derive it
        crop: Crop to exactly width x height instead of fitting inside it
        autorotate: Apply EXIF orientation first
        output_format: Output format, defaults to the source format
        options: Adapter options such as {"quality": 85}

    Returns:
        Dimensions of the written image
    """
    transformer = ImageTransformer(AdapterConfig.from_mapping(options))
    request = TransformRequest(
        width=width,
        height=height,
        crop=crop,
        autorotate=autorotate,
        output_format=output_format,
    )
    return transformer.transform(source, destination, request)
