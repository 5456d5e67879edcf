"""The Canvas widget."""

from typing import Any, Optional

from rich.color import Color
from rich.segment import Segment
from rich.style import Style
from textual import events
from textual.geometry import Offset, Size
from textual.message import Message
from textual.strip import Strip
from textual.widget import Widget

from textual_doodle.raster import RasterBuffer


class Canvas(Widget):
    """The drawing surface widget. Displays a RasterBuffer, one pixel per cell, and turns mouse events into tool messages."""

    DEFAULT_CSS = """
    Canvas {
        width: auto;
        height: auto;
    }
    """

    class ToolStart(Message):
        """Message when starting drawing."""

        def __init__(self, position: Offset, button: int) -> None:
            self.x = position.x
            self.y = position.y
            self.button = button
            super().__init__()

    class ToolUpdate(Message):
        """Message when dragging on the canvas."""

        def __init__(self, position: Offset) -> None:
            self.x = position.x
            self.y = position.y
            super().__init__()

    class ToolStop(Message):
        """Message when releasing the mouse."""

        def __init__(self, position: Offset) -> None:
            self.x = position.x
            self.y = position.y
            super().__init__()

    def __init__(self, **kwargs: Any) -> None:
        """Initialize the canvas."""
        super().__init__(**kwargs)
        self.image: RasterBuffer|None = None
        self.pointer_active: bool = False
        self.which_button: Optional[int] = None

    def show_image(self, image: RasterBuffer) -> None:
        """Display a new image, resizing the widget if needed."""
        resized = self.image is None or (self.image.width, self.image.height) != (image.width, image.height)
        self.image = image
        self.refresh(layout=resized)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        """Called when a mouse button is pressed. Starts the tool, unless another button is already held."""
        if self.pointer_active:
            return

        self.post_message(self.ToolStart(self.get_mouse_position(event), event.button))
        self.pointer_active = True
        self.which_button = event.button
        self.capture_mouse(True)

    def get_mouse_position(self, event: events.MouseEvent) -> Offset:
        """Work around inconsistent widget-relative mouse coordinates by calculating from screen coordinates."""
        # Coordinates can be calculated differently during mouse capture,
        # so always calculate straight from the screen coordinates.
        return event.screen_offset - self.region.offset

    def on_mouse_move(self, event: events.MouseMove) -> None:
        """Called when the mouse is moved. Update the tool action."""
        if self.pointer_active:
            self.post_message(self.ToolUpdate(self.get_mouse_position(event)))

    def on_mouse_up(self, event: events.MouseUp) -> None:
        """Called when a mouse button is released. Stop the current tool."""
        if self.pointer_active:
            self.post_message(self.ToolStop(self.get_mouse_position(event)))
        self.pointer_active = False
        self.which_button = None
        self.capture_mouse(False)

    def get_content_width(self, container: Size, viewport: Size) -> int:
        """Defines the intrinsic width of the widget."""
        if self.image is None:
            return 0 # shouldn't really happen
        return self.image.width

    def get_content_height(self, container: Size, viewport: Size, width: int) -> int:
        """Defines the intrinsic height of the widget."""
        if self.image is None:
            return 0 # shouldn't really happen
        return self.image.height

    def render_line(self, y: int) -> Strip:
        """Render a line of the widget. y is relative to the top of the widget."""
        if self.image is None or y >= self.image.height:
            return Strip.blank(self.size.width)
        segments: list[Segment] = []
        data = self.image.data
        row_start = y * self.image.width * 4
        for x in range(min(self.size.width, self.image.width)):
            i = row_start + x * 4
            r, g, b, a = data[i:i + 4]
            # Transparent areas are shown as white paper.
            r = (r * a + 255 * (255 - a)) // 255
            g = (g * a + 255 * (255 - a)) // 255
            b = (b * a + 255 * (255 - a)) // 255
            segments.append(Segment(" ", Style.from_color(bgcolor=Color.from_rgb(r, g, b))))
        return Strip(segments, len(segments))
