"""Turns a stream of pointer samples into painted pixels."""

from enum import Enum
from typing import NamedTuple, Optional

from textual.geometry import Offset, Region

from textual_doodle.graphics_primitives import (bresenham_walk,
                                                quadratic_curve_walk,
                                                stamp_brush, union_regions)
from textual_doodle.raster import RGBA, RasterBuffer


class StrokeState(Enum):
    """Whether a stroke is in progress."""
    idle = 1
    active = 2


class SegmentKind(Enum):
    """How a stroke segment was drawn."""
    line = 1
    quadratic = 2


class DrawnSegment(NamedTuple):
    """A piece of a stroke that was painted in response to one pointer sample."""
    kind: SegmentKind
    region: Region


class StrokeRenderer:
    """Paints strokes onto a buffer, optionally smoothing them with quadratic curves.

    The color and width are captured when a stroke begins, and don't change mid-stroke.
    Smoothing draws a curve through each window of the last three samples,
    using the middle sample as the control point, so each move costs the same
    regardless of how long the stroke is.
    """

    def __init__(self, smoothing: bool = True) -> None:
        self.smoothing = smoothing
        """Whether to draw quadratic curves instead of straight segments, once there are enough samples."""
        self.state = StrokeState.idle
        self.samples: list[Offset] = []
        self.buffer: Optional[RasterBuffer] = None
        self.color: RGBA = RGBA(0, 0, 0, 255)
        self.width = 1

    @property
    def active(self) -> bool:
        """Whether a stroke is in progress."""
        return self.state == StrokeState.active

    def begin_stroke(self, buffer: RasterBuffer, first_sample: Offset, color: RGBA, width: int) -> None:
        """Start a stroke. Nothing is drawn until the pointer moves."""
        if width < 1:
            raise ValueError(f"Stroke width must be at least 1, got {width}")
        if self.active:
            # Don't leave a stroke dangling if the pointer up was never seen.
            self.end_stroke()
        self.buffer = buffer
        self.color = color
        self.width = width
        self.samples = [first_sample]
        self.state = StrokeState.active

    def extend_stroke(self, sample: Offset) -> Optional[DrawnSegment]:
        """Add a sample to the stroke, painting the newest piece of it.

        Returns what was drawn, or None if there weren't enough samples to draw anything.
        """
        if not self.active or self.buffer is None:
            raise RuntimeError("extend_stroke called without an active stroke")
        self.samples.append(sample)
        if len(self.samples) < 2:
            return None

        if self.smoothing and len(self.samples) >= 3:
            p0, p1, p2 = self.samples[-3:]
            gen = quadratic_curve_walk(p0.x, p0.y, p1.x, p1.y, p2.x, p2.y)
            kind = SegmentKind.quadratic
        else:
            last = self.samples[-2]
            gen = bresenham_walk(last.x, last.y, sample.x, sample.y)
            kind = SegmentKind.line

        affected_region = Region()
        for x, y in gen:
            affected_region = union_regions(affected_region, stamp_brush(self.buffer, x, y, self.width, self.color))
        return DrawnSegment(kind, affected_region)

    def end_stroke(self) -> bool:
        """Finish the stroke.

        Returns True if a stroke was in progress, meaning the caller should record a history entry.
        """
        if not self.active:
            return False
        self.state = StrokeState.idle
        self.samples = []
        self.buffer = None
        return True
