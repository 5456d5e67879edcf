"""Drawing utilities for use with the RasterBuffer class."""

import math
from functools import lru_cache
from typing import Iterator

from textual.geometry import Region

from textual_doodle.raster import RGBA, RasterBuffer


def bresenham_walk(x0: int, y0: int, x1: int, y1: int) -> Iterator[tuple[int, int]]:
    """Bresenham's line algorithm"""
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err = err - dy
            x0 = x0 + sx
        if e2 < dx:
            err = err + dx
            y0 = y0 + sy


def compute_quadratic_bezier(t: float, start_x: float, start_y: float, control_x: float, control_y: float, end_x: float, end_y: float) -> tuple[float, float]:
    """Returns a point along a quadratic bezier curve."""
    mt = 1 - t
    a = mt * mt
    b = mt * t * 2
    c = t * t
    return (
        a * start_x + b * control_x + c * end_x,
        a * start_y + b * control_y + c * end_y,
    )

def quadratic_curve_walk(start_x: float, start_y: float, control_x: float, control_y: float, end_x: float, end_y: float) -> Iterator[tuple[int, int]]:
    """Yields points along a quadratic curve, from the start point through to the end point.

    The curve is flattened into short straight segments, enough of them that
    each segment spans only a couple of pixels.
    """
    hull_length = math.hypot(control_x - start_x, control_y - start_y) + math.hypot(end_x - control_x, end_y - control_y)
    steps = max(1, math.ceil(hull_length / 2))
    point_a = (round(start_x), round(start_y))
    for i in range(1, steps + 1):
        t = i / steps
        x, y = compute_quadratic_bezier(t, start_x, start_y, control_x, control_y, end_x, end_y)
        point_b = (round(x), round(y))
        yield from bresenham_walk(point_a[0], point_a[1], point_b[0], point_b[1])
        point_a = point_b


@lru_cache(maxsize=64)
def brush_offsets(width: int) -> tuple[tuple[int, int], ...]:
    """Offsets of the pixels covered by a round brush of the given diameter, centered on (0, 0)."""
    if width <= 1:
        return ((0, 0),)
    radius = width / 2
    # Even widths have no center pixel, so the disc is biased toward the top left, like a canvas would.
    low = -(width // 2)
    high = low + width
    center = (low + high - 1) / 2
    offsets: list[tuple[int, int]] = []
    for dy in range(low, high):
        for dx in range(low, high):
            if (dx - center) ** 2 + (dy - center) ** 2 <= radius * radius:
                offsets.append((dx, dy))
    return tuple(offsets)

def stamp_brush(buffer: RasterBuffer, x: int, y: int, width: int, color: RGBA) -> Region:
    """Paints a round brush of the given diameter centered at (x, y), clipped to the buffer.

    Returns the region affected (empty if entirely outside the buffer.)
    """
    pixel = bytes(color)
    data = buffer.data
    painted: list[tuple[int, int]] = []
    for dx, dy in brush_offsets(width):
        px = x + dx
        py = y + dy
        if 0 <= px < buffer.width and 0 <= py < buffer.height:
            i = (py * buffer.width + px) * 4
            data[i:i + 4] = pixel
            painted.append((px, py))
    return bounding_region(painted)

def bounding_region(points: list[tuple[int, int]]) -> Region:
    """Returns the smallest region containing all the points, or an empty region if there are none."""
    if not points:
        return Region()
    xs = [x for x, _ in points]
    ys = [y for _, y in points]
    return Region(min(xs), min(ys), max(xs) - min(xs) + 1, max(ys) - min(ys) + 1)

def union_regions(a: Region, b: Region) -> Region:
    """Union of two regions, where an empty region contributes nothing (unlike Region.union, which would include its origin.)"""
    if not a.area:
        return b
    if not b.area:
        return a
    return a.union(b)


def color_match(a: RGBA, b: RGBA, tolerance: int = 0) -> bool:
    """Returns True if every channel of the two colors differs by at most `tolerance`. A tolerance of 0 means an exact match."""
    return (
        abs(a[0] - b[0]) <= tolerance and
        abs(a[1] - b[1]) <= tolerance and
        abs(a[2] - b[2]) <= tolerance and
        abs(a[3] - b[3]) <= tolerance
    )


def flood_fill(buffer: RasterBuffer, x: int, y: int, fill_color: RGBA, tolerance: int = 0) -> Region|None:
    """Flood fill algorithm.

    Recolors the 4-connected region of pixels matching the seed pixel's color (within tolerance).
    Returns the region affected, or None if nothing changed.
    """
    if not buffer.contains(x, y):
        return None

    # Get the original value of the pixel.
    # This is the color to be replaced, and it's matched against for the whole fill,
    # not the color of the neighbor that led to a pixel, otherwise the fill could
    # creep along a gradient.
    target_color = buffer.get(x, y)

    # If filling wouldn't make a visible difference, there's nothing to do,
    # and filled pixels would match the target, so the fill would never end.
    if color_match(target_color, fill_color, tolerance):
        return None

    width = buffer.width
    height = buffer.height
    data = buffer.data
    pixel = bytes(fill_color)

    # Track the region affected by the fill.
    min_x = x
    min_y = y
    max_x = x
    max_y = y

    # An explicit stack instead of recursion, since regions can be as large as the whole buffer.
    # Pixels may be pushed more than once before they're recolored; the color check handles that.
    stack: list[tuple[int, int]] = [(x, y)]
    while stack:
        cx, cy = stack.pop()
        i = (cy * width + cx) * 4
        if not color_match(data[i:i + 4], target_color, tolerance):
            continue
        data[i:i + 4] = pixel
        min_x = min(min_x, cx)
        min_y = min(min_y, cy)
        max_x = max(max_x, cx)
        max_y = max(max_y, cy)
        if cx + 1 < width:
            stack.append((cx + 1, cy))
        if cx - 1 >= 0:
            stack.append((cx - 1, cy))
        if cy + 1 < height:
            stack.append((cx, cy + 1))
        if cy - 1 >= 0:
            stack.append((cx, cy - 1))

    # Return the affected region.
    return Region(min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)
