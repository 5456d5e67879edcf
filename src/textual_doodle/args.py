"""Command line arguments for the app."""

import argparse

from textual_doodle.__init__ import PYTEST, __version__
from textual_doodle.history import DEFAULT_CAPACITY

parser = argparse.ArgumentParser(description='Doodle in the terminal.', usage='%(prog)s [options] [filename]', prog="textual-doodle")
parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
parser.add_argument('--width', type=int, default=80, help='Canvas width in pixels (one pixel per terminal cell)')
parser.add_argument('--height', type=int, default=40, help='Canvas height in pixels (one pixel per terminal cell)')
parser.add_argument('--background', default=None, metavar="IMAGE", help='Image file to load as the background layer, stretched to the canvas size')
parser.add_argument('--history-limit', type=int, default=DEFAULT_CAPACITY, metavar="N", help='Number of undo steps kept per layer')
parser.add_argument('--tolerance', type=int, default=0, help='Per-channel color tolerance for the fill tool, from 0 (exact) to 255')
parser.add_argument('--no-smoothing', action='store_true', help='Draw strokes with straight segments instead of smoothed curves')
parser.add_argument('--transparent-eraser', action='store_true', help='Erase to transparency, revealing the background, instead of painting white')
parser.add_argument('--ascii-only', action='store_true', help='Use only ASCII characters for the UI, for use in older terminals')

parser.add_argument('filename', nargs='?', default="doodle.png", help='Path to save the merged image to. The format is chosen by file extension.')

args = parser.parse_args([]) if PYTEST else parser.parse_args()
"""Parsed command line arguments."""

__all__ = ["args"]
