"""This file is loaded by pytest automatically. Fixtures defined here are available to all tests in the folder.

https://docs.pytest.org/en/7.1.x/reference/fixtures.html#conftest-py-sharing-fixtures-across-multiple-files
"""

import io
from typing import Generator

import pytest
from PIL import Image
from pyfakefs.fake_filesystem import FakeFilesystem

from textual_doodle.raster import RasterBuffer
from textual_doodle.session import DoodleSession, ToolSettings

# Load Pillow's format plugins up front, from the real filesystem,
# so they're available inside the fake filesystem.
Image.init()


@pytest.fixture
def buffer() -> RasterBuffer:
    """A small transparent buffer."""
    return RasterBuffer(16, 12)

@pytest.fixture
def session() -> DoodleSession:
    """A session drawing 1px wide straight lines, so pixels are easy to predict."""
    return DoodleSession(20, 10, ToolSettings(pen_width=1, eraser_width=1, smoothing=False))

@pytest.fixture
def red_png() -> bytes:
    """A small solid red image file."""
    output = io.BytesIO()
    Image.new("RGBA", (4, 4), (255, 0, 0, 255)).save(output, "PNG")
    return output.getvalue()

@pytest.fixture
def my_fs(fs: FakeFilesystem) -> Generator[FakeFilesystem, None, None]:
    """Fixture to fake the filesystem, with a folder to save into."""
    fs.create_dir("/drawings")
    yield fs
