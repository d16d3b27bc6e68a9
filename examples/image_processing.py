"""
Example: Thumbnails and previews with RasterKit

This example demonstrates how to:
- Transform a photo in one call (autorotate, crop, re-encode)
- Chain adapter operations on a single image
"""
from pathlib import Path
from rasterkit import (
    AdapterConfig,
    ImageAdapter,
    ImageTransformer,
    TransformRequest,
    RasterKitError,
)


def make_thumbnails(photo: Path):
    """Write a square thumbnail and a web-sized copy using the facade."""
    transformer = ImageTransformer(AdapterConfig(quality=85))

    thumb = transformer.transform(photo, photo.with_name(f"{photo.stem}_thumb.jpg"),
                                  TransformRequest(200, 200, crop=True))
    print(f"Thumbnail: {thumb.width}x{thumb.height}")

    web = transformer.transform(photo, photo.with_name(f"{photo.stem}_web.webp"),
                                TransformRequest(width=1280, output_format="webp"))
    print(f"Web copy: {web.width}x{web.height}")


def use_adapter(photo: Path):
    """Chain operations on one adapter."""
    with ImageAdapter.open(photo) as image:
        print(f"Loaded {image!r}")

        image.autorotate()
        print(f"Upright: {image.width}x{image.height}")

        image.resize(0, 480)
        image.save(photo.with_name(f"{photo.stem}_480.png"), "png")
        print(f"Saved: {image.dimensions.width}x{image.dimensions.height}")


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python image_processing.py <image_path>")
        sys.exit(1)

    photo = Path(sys.argv[1])
    if not photo.exists():
        print(f"File not found: {photo}")
        sys.exit(1)

    try:
        make_thumbnails(photo)
        use_adapter(photo)
    except RasterKitError as e:
        print(f"Failed: {e}")
        sys.exit(1)
