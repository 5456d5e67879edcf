"""The drawing session: tool settings, the drawing and background layers, and their histories."""

import os
from typing import Callable, Literal, Optional

from textual.geometry import Offset, Region

from textual_doodle.graphics_primitives import flood_fill
from textual_doodle.history import DEFAULT_CAPACITY, HistoryManager
from textual_doodle.raster import (BLACK, RGBA, TRANSPARENT, WHITE,
                                   RasterBuffer, composite, decode_image,
                                   encode_image, parse_color)
from textual_doodle.stroke import DrawnSegment, StrokeRenderer
from textual_doodle.tool import Tool

LayerName = Literal["drawing", "background"]

MAX_FILE_SIZE = 50_000_000 # 50 MB


class ToolSettings:
    """The current tool and its options.

    Passed explicitly to the session instead of living in globals,
    so the drawing core can be driven without a UI.
    """

    def __init__(
        self,
        tool: Tool = Tool.pen,
        color: RGBA = BLACK,
        pen_width: int = 5,
        eraser_width: int = 10,
        tolerance: int = 0,
        smoothing: bool = True,
        transparent_eraser: bool = False,
    ) -> None:
        self.tool = tool
        self.color = color
        self.pen_width = pen_width
        self.eraser_width = eraser_width
        self.tolerance = tolerance
        self.smoothing = smoothing
        self.transparent_eraser = transparent_eraser
        """Whether the eraser reveals the background instead of painting white over it."""
        self.validate()

    def __repr__(self) -> str:
        return (
            f"ToolSettings(tool={self.tool.name}, color={tuple(self.color)}, pen_width={self.pen_width}, "
            f"eraser_width={self.eraser_width}, tolerance={self.tolerance}, smoothing={self.smoothing}, "
            f"transparent_eraser={self.transparent_eraser})"
        )

    def validate(self) -> None:
        """Raise ValueError if any option is out of range."""
        if self.pen_width < 1:
            raise ValueError(f"Pen width must be at least 1, got {self.pen_width}")
        if self.eraser_width < 1:
            raise ValueError(f"Eraser width must be at least 1, got {self.eraser_width}")
        if not 0 <= self.tolerance <= 255:
            raise ValueError(f"Tolerance must be between 0 and 255, got {self.tolerance}")

    def select_color(self, color: RGBA | str) -> None:
        """Set the drawing color.

        Picking a color while erasing switches back to the pen; other tools stay selected.
        """
        self.color = parse_color(color) if isinstance(color, str) else color
        if self.tool == Tool.eraser:
            self.tool = Tool.pen

    @property
    def stroke_color(self) -> RGBA:
        """The color painted by the current tool.

        The eraser paints white, like erasing to blank paper, or transparency with `transparent_eraser`.
        """
        if self.tool == Tool.eraser:
            return TRANSPARENT if self.transparent_eraser else WHITE
        return self.color

    @property
    def stroke_width(self) -> int:
        """The brush diameter for the current tool."""
        return self.eraser_width if self.tool == Tool.eraser else self.pen_width


class Layer:
    """A raster surface with its own undo/redo history."""

    def __init__(self, name: LayerName, width: int, height: int, history_capacity: int = DEFAULT_CAPACITY) -> None:
        self.name = name
        self.buffer = RasterBuffer(width, height)
        self.history = HistoryManager(name, history_capacity)
        # The blank layer is the state to return to after undoing everything.
        self.history.reset(self.buffer)

    def __repr__(self) -> str:
        return f"Layer({self.name!r}, {self.buffer.width}x{self.buffer.height})"

    def record(self) -> bool:
        """Push the current state onto the history."""
        return self.history.push(self.buffer)


class DoodleSession:
    """Drives the drawing core from discrete input events.

    Every completed stroke, fill, clear, load, undo, redo, or resize notifies the listeners,
    so a UI can re-render and update undo/redo availability.
    """

    def __init__(
        self,
        width: int,
        height: int,
        settings: Optional[ToolSettings] = None,
        history_capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        self.settings = settings or ToolSettings()
        self.history_capacity = history_capacity
        self.drawing = Layer("drawing", width, height, history_capacity)
        self.background = Layer("background", width, height, history_capacity)
        self.stroke_renderer = StrokeRenderer(smoothing=self.settings.smoothing)
        self.listeners: list[Callable[[], None]] = []

    @property
    def width(self) -> int:
        return self.drawing.buffer.width

    @property
    def height(self) -> int:
        return self.drawing.buffer.height

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback for state changes."""
        self.listeners.append(listener)

    def notify(self) -> None:
        for listener in self.listeners:
            listener()

    def get_layer(self, name: LayerName) -> Layer:
        if name == "drawing":
            return self.drawing
        if name == "background":
            return self.background
        raise ValueError(f"Unknown layer: {name!r}")

    def clamp(self, x: int, y: int) -> Offset:
        """Clamp a pointer position to the canvas."""
        return Offset(
            max(0, min(self.width - 1, x)),
            max(0, min(self.height - 1, y)),
        )

    # Pointer phases

    def pointer_down(self, x: int, y: int) -> Optional[Region]:
        """Start a stroke, or fill, depending on the tool.

        Returns the region affected by a fill (None if the fill changed nothing, or for stroke tools.)
        """
        pos = self.clamp(x, y)
        if self.stroke_renderer.active:
            self.pointer_up()

        if not self.settings.tool.draws_strokes:
            affected_region = flood_fill(self.drawing.buffer, pos.x, pos.y, self.settings.color, self.settings.tolerance)
            # Like a paint program, a fill that changed nothing still counts as an action.
            self.drawing.record()
            self.notify()
            return affected_region

        # Settings are read at the start of the stroke,
        # so changing them mid-stroke doesn't affect the stroke.
        self.stroke_renderer.smoothing = self.settings.smoothing
        self.stroke_renderer.begin_stroke(
            self.drawing.buffer,
            pos,
            self.settings.stroke_color,
            self.settings.stroke_width,
        )
        return None

    def pointer_move(self, x: int, y: int) -> Optional[DrawnSegment]:
        """Extend the stroke in progress, if any."""
        if not self.stroke_renderer.active:
            return None
        return self.stroke_renderer.extend_stroke(self.clamp(x, y))

    def pointer_up(self) -> bool:
        """Finish the stroke in progress, recording it in history. Returns False if no stroke was in progress."""
        if not self.stroke_renderer.end_stroke():
            return False
        self.drawing.record()
        self.notify()
        return True

    def pointer_cancel(self) -> bool:
        """Same as pointer_up, so a stroke is never left in progress."""
        return self.pointer_up()

    # Layer operations

    def clear_drawing(self) -> None:
        """Erase the whole drawing layer, leaving the background."""
        self.drawing.buffer.clear()
        self.drawing.record()
        self.notify()

    def load_background(self, content: bytes) -> None:
        """Replace the background layer with an image file's contents, stretched to the canvas size.

        Raises FormatReadNotSupported if the image can't be decoded.
        """
        image_buffer = decode_image(content, self.width, self.height)
        self.background.buffer.data[:] = image_buffer.data
        self.background.record()
        self.notify()

    def load_background_file(self, file_path: str) -> None:
        """Replace the background layer with an image file."""
        if os.path.getsize(file_path) > MAX_FILE_SIZE:
            raise ValueError(f"File is too large to load as a background: {file_path!r}")
        with open(file_path, "rb") as f:
            content = f.read()
        self.load_background(content)

    def remove_background(self) -> None:
        """Clear the background layer, keeping the drawing."""
        self.background.buffer.clear()
        self.background.record()
        self.notify()

    # History

    def undo(self, layer: LayerName = "drawing") -> bool:
        """Undo the last action on a layer. Returns False if there was nothing to undo."""
        if layer == "drawing" and self.stroke_renderer.active:
            self.pointer_up()
        target = self.get_layer(layer)
        if not target.history.undo(target.buffer):
            return False
        self.notify()
        return True

    def redo(self, layer: LayerName = "drawing") -> bool:
        """Redo the last undone action on a layer. Returns False if there was nothing to redo."""
        if layer == "drawing" and self.stroke_renderer.active:
            self.pointer_up()
        target = self.get_layer(layer)
        if not target.history.redo(target.buffer):
            return False
        self.notify()
        return True

    def undo_available(self, layer: LayerName = "drawing") -> bool:
        return self.get_layer(layer).history.undo_available

    def redo_available(self, layer: LayerName = "drawing") -> bool:
        return self.get_layer(layer).history.redo_available

    # Output

    def export(self) -> RasterBuffer:
        """The background with the drawing composited on top."""
        return composite(self.background.buffer, self.drawing.buffer)

    def save(self, file_path: str) -> None:
        """Save the merged image, in the format implied by the file extension.

        Raises FormatWriteNotSupported for unknown or unwritable formats.
        """
        content = encode_image(self.export(), file_path)
        with open(file_path, "wb") as f:
            f.write(content)

    def resize(self, width: int, height: int) -> None:
        """Replace both layers with blank ones of a new size. History does not survive a resize."""
        self.stroke_renderer.end_stroke()
        self.drawing = Layer("drawing", width, height, self.history_capacity)
        self.background = Layer("background", width, height, self.history_capacity)
        self.notify()
