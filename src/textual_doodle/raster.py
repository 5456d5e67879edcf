"""Provides the RasterBuffer class, the RGBA color type, and image file conversion (and exceptions.)"""
import io
import os
from typing import NamedTuple

from PIL import Image, UnidentifiedImageError
from textual.color import Color


class RGBA(NamedTuple):
    """A color as four 0-255 channels."""
    r: int
    g: int
    b: int
    a: int


TRANSPARENT = RGBA(0, 0, 0, 0)
WHITE = RGBA(255, 255, 255, 255)
BLACK = RGBA(0, 0, 0, 255)

# Pillow can't write an alpha channel for these,
# so the image is flattened onto white before saving.
OPAQUE_FORMATS = ["JPEG", "BMP", "PDF", "EPS", "PCX", "PPM", "SGI", "XBM"]


class OutOfBounds(IndexError):
    """A pixel coordinate outside of the buffer was accessed."""


class FormatWriteNotSupported(Exception):
    """The format doesn't support writing."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

class FormatReadNotSupported(Exception):
    """The format doesn't support reading."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def parse_color(text: str) -> RGBA:
    """Parse a CSS-like color string, such as "#f00", "#ff0000" or "rgb(255,0,0)".

    Raises textual.color.ColorParseError if the string is not a color.
    """
    color = Color.parse(text)
    return RGBA(color.r, color.g, color.b, round(color.a * 255))


class RasterBuffer:
    """A rectangular grid of RGBA pixels, stored as a flat bytearray."""

    def __init__(self, width: int, height: int, fill: RGBA = TRANSPARENT) -> None:
        """Initialize the buffer, filled with a single color."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.data = bytearray(fill) * (width * height)

    def __repr__(self) -> str:
        return f"RasterBuffer({self.width}, {self.height})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterBuffer):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self.data == other.data

    def contains(self, x: int, y: int) -> bool:
        """Returns True if the coordinates are within the buffer."""
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        """Returns the offset of the pixel's red channel in the data array."""
        if not self.contains(x, y):
            raise OutOfBounds(f"Pixel ({x}, {y}) is outside of {self.width}x{self.height} buffer")
        return (y * self.width + x) * 4

    def get(self, x: int, y: int) -> RGBA:
        """Get the color of a pixel."""
        i = self.index(x, y)
        return RGBA(*self.data[i:i + 4])

    def set(self, x: int, y: int, color: RGBA) -> None:
        """Set the color of a pixel."""
        i = self.index(x, y)
        self.data[i:i + 4] = bytes(color)

    def clear(self, color: RGBA = TRANSPARENT) -> None:
        """Fill the entire buffer with one color."""
        self.data[:] = bytes(color) * (self.width * self.height)

    def copy(self) -> 'RasterBuffer':
        """Returns an independent copy of the buffer."""
        buffer = RasterBuffer(self.width, self.height)
        buffer.data[:] = self.data
        return buffer

    def to_image(self) -> Image.Image:
        """Convert the buffer to a Pillow image in RGBA mode."""
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))

    @staticmethod
    def from_image(image: Image.Image) -> 'RasterBuffer':
        """Creates a buffer from a Pillow image of any mode."""
        rgba_image = image.convert("RGBA") # handles indexed images, etc.
        width, height = rgba_image.size
        buffer = RasterBuffer(width, height)
        buffer.data[:] = rgba_image.tobytes()
        return buffer


def composite(background: RasterBuffer, drawing: RasterBuffer) -> RasterBuffer:
    """Merge the drawing layer over the background layer into a new buffer.

    Transparent pixels of the drawing let the background show through.
    """
    if (background.width, background.height) != (drawing.width, drawing.height):
        raise ValueError(f"Layer sizes differ: {background.width}x{background.height} vs {drawing.width}x{drawing.height}")
    merged = Image.alpha_composite(background.to_image(), drawing.to_image())
    return RasterBuffer.from_image(merged)


def format_from_extension(file_path: str) -> str | None:
    """Get the Pillow format ID from the file extension of the given path, e.g. 'PNG' for '.png'."""
    # Ignore case and trailing '~' (indicating a backup file)
    file_ext_with_dot = os.path.splitext(file_path)[1].lower().rstrip("~")
    ext_to_id = Image.registered_extensions() # maps extension to format ID, e.g. '.jp2': 'JPEG2000'
    return ext_to_id.get(file_ext_with_dot)


def encode_image(buffer: RasterBuffer, file_path: str) -> bytes:
    """Encode the buffer as an image file, in the format implied by the file extension."""
    format_id = format_from_extension(file_path)
    if format_id is None:
        raise FormatWriteNotSupported(f"Unknown file extension: {file_path!r}")
    if format_id not in Image.SAVE:
        raise FormatWriteNotSupported(f"Cannot write files in {format_id} format.")
    image = buffer.to_image()
    if format_id in OPAQUE_FORMATS:
        flattened = Image.new("RGBA", image.size, color=tuple(WHITE))
        image = Image.alpha_composite(flattened, image).convert("RGB")
    output = io.BytesIO()
    # `quality` is for JPEG, matching a typical browser export.
    # `lossless` is for WebP.
    try:
        image.save(output, format_id, quality=90, lossless=True)
    except ValueError as e:
        # Some writers only accept particular image modes, e.g. BLP.
        raise FormatWriteNotSupported(f"Cannot write this image in {format_id} format: {e}") from e
    return output.getvalue()


def decode_image(content: bytes, width: int, height: int) -> RasterBuffer:
    """Creates a buffer from image file bytes, stretched to the given size.

    Raises FormatReadNotSupported if the format is not detected.
    """
    try:
        image = Image.open(io.BytesIO(content))
        image.load()
    except UnidentifiedImageError as e:
        raise FormatReadNotSupported("Unrecognized image format.") from e
    image = image.convert("RGBA")
    if image.size != (width, height):
        image = image.resize((width, height))
    return RasterBuffer.from_image(image)
