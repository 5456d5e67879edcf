"""Raster doodling in the terminal, built with Textual."""

__version__ = "0.1.0"
__license__ = "MIT"

import sys

PYTEST = "pytest" in sys.modules
"""Whether running from pytest."""
