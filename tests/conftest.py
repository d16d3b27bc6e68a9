"""
Pytest configuration and fixtures for RasterKit tests.
"""
import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image
import numpy as np

from rasterkit.core.exceptions import EncodeError, UnreadableFile, UnsupportedSaveFormat
from rasterkit.core.formats import ImageFormat
from rasterkit.core.interfaces import DecodedImage, IMetadataReader, IRasterBackend


class FakeBuffer:
    """In-memory stand-in for a decoded image."""

    def __init__(self, width, height, source=None):
        self.width = width
        self.height = height
        self.source = source
        self.released = False
        self.flipped = False

    def __repr__(self):
        return f"<FakeBuffer {self.width}x{self.height}>"


class FakeBackend(IRasterBackend):
    """Raster backend recording calls instead of touching pixels."""

    def __init__(self, images=None, resample_available=True, fail_on=()):
        self.images = dict(images or {})
        self.resample_available = resample_available
        self.fail_on = set(fail_on)
        self.calls = []
        self.created = []
        self.encoded = []
        self.double_releases = 0

    def add_image(self, path, width, height, fmt=ImageFormat.JPEG):
        self.images[str(path)] = (width, height, fmt)

    @property
    def live(self):
        return [b for b in self.created if not b.released]

    def call_names(self):
        return [name for name, _ in self.calls]

    def _new(self, width, height, source=None):
        buffer = FakeBuffer(width, height, source)
        self.created.append(buffer)
        return buffer

    def _record(self, name, *args):
        self.calls.append((name, args))
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    def decode(self, path):
        self._record("decode", path)
        if str(path) not in self.images:
            raise UnreadableFile("Image file does not exist", {"path": path})
        width, height, fmt = self.images[str(path)]
        return DecodedImage(self._new(width, height), width, height, fmt)

    def allocate_canvas(self, width, height, transparency, source):
        self._record("allocate_canvas", width, height, transparency)
        return self._new(width, height, source)

    def resample(self, dest, src, src_box, dest_box):
        self._record("resample", src_box, dest_box)
        return self.resample_available

    def resize(self, dest, src, src_box, dest_box):
        self._record("resize", src_box, dest_box)

    def rotate(self, buffer, degrees, fill_color=None):
        self._record("rotate", degrees, fill_color)
        if degrees in (90, 270):
            return self._new(buffer.height, buffer.width, buffer)
        return self._new(buffer.width, buffer.height, buffer)

    def flip_horizontal(self, buffer):
        self._record("flip_horizontal")
        flipped = self._new(buffer.width, buffer.height, buffer)
        flipped.flipped = True
        return flipped

    def apply_transparency(self, buffer, transparency):
        self._record("apply_transparency", transparency)
        return buffer

    def encode(self, buffer, path, fmt, quality=None, **options):
        self._record("encode", path, fmt)
        if fmt is ImageFormat.TIFF:
            raise UnsupportedSaveFormat(f"Can not save image format {fmt.value}")
        if "encode_error" in self.fail_on:
            raise EncodeError("Disk full", {"path": path})
        self.encoded.append({"buffer": buffer, "path": path, "format": fmt, "quality": quality, **options})

    def release(self, buffer):
        if buffer.released:
            self.double_releases += 1
        buffer.released = True


class FakeMetadataReader(IMetadataReader):
    """Returns a fixed orientation, or raises a given error."""

    def __init__(self, orientation=None, error=None):
        self.orientation = orientation
        self.error = error
        self.calls = 0

    def read_orientation(self, path, fmt):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.orientation


@pytest.fixture
def fake_backend():
    """Fake backend knowing a 4000x3000 JPEG, a 100x200 JPEG and a 400x400 PNG."""
    backend = FakeBackend()
    backend.add_image("photo.jpg", 4000, 3000)
    backend.add_image("portrait.jpg", 100, 200)
    backend.add_image("logo.png", 400, 400, ImageFormat.PNG)
    return backend


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp(prefix="rasterkit_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_image(temp_dir) -> Path:
    """Create a sample test image."""
    image_path = temp_dir / "test_image.jpg"
    img = Image.new("RGB", (800, 600), color="blue")
    img.save(image_path, "JPEG", quality=90)
    return image_path


@pytest.fixture
def portrait_image(temp_dir) -> Path:
    """Create a portrait orientation image."""
    image_path = temp_dir / "portrait.jpg"
    img = Image.new("RGB", (600, 800), color="green")
    img.save(image_path, "JPEG", quality=90)
    return image_path


@pytest.fixture
def png_image(temp_dir) -> Path:
    """Create a PNG image with transparency."""
    image_path = temp_dir / "transparent.png"
    img = Image.new("RGBA", (400, 400), color=(255, 0, 0, 128))
    img.save(image_path, "PNG")
    return image_path


@pytest.fixture
def gif_image(temp_dir) -> Path:
    """Create a GIF whose left half uses the transparent palette index."""
    image_path = temp_dir / "transparent.gif"
    img = Image.new("P", (40, 30), 0)
    img.putpalette([255, 0, 0, 0, 255, 0] + [0, 0, 0] * 254)
    img.paste(1, (20, 0, 40, 30))
    img.save(image_path, "GIF", transparency=0)
    return image_path


@pytest.fixture
def gradient_png(temp_dir) -> Path:
    """Create a lossless, non-symmetric image to check pixel placement."""
    image_path = temp_dir / "gradient.png"
    data = (np.arange(30 * 20 * 3) % 251).reshape(20, 30, 3).astype(np.uint8)
    Image.fromarray(data, "RGB").save(image_path, "PNG")
    return image_path


@pytest.fixture
def exif_image(temp_dir):
    """Factory creating a 60x40 JPEG (left red, right blue) with an EXIF orientation."""
    def _create(orientation: int, name: str = "exif.jpg") -> Path:
        image_path = temp_dir / name
        img = Image.new("RGB", (60, 40), color="blue")
        img.paste((255, 0, 0), (0, 0, 30, 40))
        exif = Image.Exif()
        exif[0x0112] = orientation
        img.save(image_path, "JPEG", quality=95, exif=exif)
        return image_path
    return _create
