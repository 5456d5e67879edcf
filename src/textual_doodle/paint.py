#!/usr/bin/env python3

"""Textual Doodle is a raster doodling app that runs in the terminal."""

import os
from typing import Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Static

from textual_doodle.args import args
from textual_doodle.canvas import Canvas
from textual_doodle.palette_data import DEFAULT_PALETTE
from textual_doodle.raster import (FormatReadNotSupported,
                                   FormatWriteNotSupported)
from textual_doodle.session import DoodleSession, LayerName, ToolSettings
from textual_doodle.tool import Tool


class DoodleApp(App[None]):
    """Pen, eraser and bucket fill on a drawing layer over a background image."""

    CSS = """
    #editing_area {
        height: 1fr;
        overflow: auto;
    }
    #status_bar {
        dock: bottom;
        height: 1;
        background: $panel;
    }
    """

    # These call action_* methods on the app.
    # https://textual.textualize.io/guide/actions/
    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+s", "save", "Save"),
        Binding("ctrl+z", "undo('drawing')", "Undo"),
        Binding("ctrl+y,ctrl+shift+z", "redo('drawing')", "Repeat"),
        Binding("ctrl+u", "undo('background')", "Undo Background"),
        Binding("ctrl+r", "redo('background')", "Repeat Background"),
        Binding("ctrl+shift+n,delete", "clear_drawing", "Clear Drawing"),
        Binding("x", "remove_background", "Remove Background"),
        Binding("p", "select_tool('pen')", "Pen"),
        Binding("e", "select_tool('eraser')", "Eraser"),
        Binding("b", "select_tool('bucket')", "Fill With Color"),
        Binding("s", "toggle_smoothing", "Smoothing"),
        Binding("left_square_bracket", "adjust_width(-1)", "Thinner"),
        Binding("right_square_bracket", "adjust_width(1)", "Thicker"),
        Binding("minus", "adjust_tolerance(-8)", "Less Tolerance"),
        Binding("plus,equals_sign", "adjust_tolerance(8)", "More Tolerance"),
        Binding("escape", "cancel", "Cancel"),
    ] + [
        # Number keys pick palette colors; 0 is the tenth color.
        Binding(str((index + 1) % 10), f"select_color({index})", f"Color {index + 1}", show=False)
        for index in range(len(DEFAULT_PALETTE))
    ]

    TITLE = "Textual Doodle"

    def __init__(self, session: Optional[DoodleSession] = None, save_path: str = "doodle.png", ascii_only: bool = False) -> None:
        """Initialize the app, optionally with an existing session."""
        super().__init__()
        self.session = session or DoodleSession(80, 40)
        """The drawing core: tool settings, layers and histories."""
        self.save_path = save_path
        """Where the merged image is saved to."""
        self.ascii_only = ascii_only
        """Whether to avoid emoji in the status bar."""
        self.status_message = ""
        """A transient message shown in the status bar, such as the result of saving."""

    def compose(self) -> ComposeResult:
        """Add widgets to the layout."""
        self.canvas = Canvas(id="canvas")
        with Container(id="editing_area"):
            yield self.canvas
        yield Static(id="status_bar")

    def on_mount(self) -> None:
        """Called when the app is mounted to the DOM."""
        self.session.add_listener(self.on_session_changed)
        self.canvas.show_image(self.session.export())
        self.update_status()

    def on_session_changed(self) -> None:
        """Re-render after a completed action, and update undo/redo availability."""
        self.canvas.show_image(self.session.export())
        self.update_status()

    def update_status(self) -> None:
        """Show the tool settings and history availability in the status bar."""
        self.query_one("#status_bar", Static).update(Text(self.get_status_text()))

    def get_status_text(self) -> str:
        """Describe the tool settings, and which undo/redo actions are available for each layer."""
        settings = self.session.settings
        r, g, b, a = settings.color
        parts = [
            f"{settings.tool.get_icon(self.ascii_only)} {settings.tool.get_name()}",
            f"#{r:02x}{g:02x}{b:02x}" + (f" ({a * 100 // 255}%)" if a < 255 else ""),
            f"Width: {settings.stroke_width}",
            f"Tolerance: {settings.tolerance}",
            f"Smoothing: {'ON' if settings.smoothing else 'OFF'}",
            "Undo" if self.session.undo_available("drawing") else "-",
            "Redo" if self.session.redo_available("drawing") else "-",
            "BG Undo" if self.session.undo_available("background") else "-",
            "BG Redo" if self.session.redo_available("background") else "-",
        ]
        if self.status_message:
            parts.append(self.status_message)
        return " | ".join(parts)

    def show_status_message(self, message: str) -> None:
        """Show a message until the next one replaces it."""
        self.status_message = message
        self.update_status()

    def on_canvas_tool_start(self, event: Canvas.ToolStart) -> None:
        """Called when the user starts drawing on the canvas."""
        self.session.pointer_down(event.x, event.y)

    def on_canvas_tool_update(self, event: Canvas.ToolUpdate) -> None:
        """Called when the user is drawing on the canvas."""
        if self.session.pointer_move(event.x, event.y):
            self.canvas.show_image(self.session.export())

    def on_canvas_tool_stop(self, event: Canvas.ToolStop) -> None:
        """Called when releasing the mouse button after drawing."""
        self.session.pointer_up()

    def action_cancel(self) -> None:
        """Action to end the current stroke, via Escape key."""
        self.session.pointer_cancel()

    def action_undo(self, layer: LayerName) -> None:
        """Undoes the last action on a layer."""
        self.session.undo(layer)

    def action_redo(self, layer: LayerName) -> None:
        """Redoes the last undone action on a layer."""
        self.session.redo(layer)

    def action_clear_drawing(self) -> None:
        """Clears the drawing layer, keeping the background."""
        self.session.clear_drawing()

    def action_remove_background(self) -> None:
        """Clears the background layer, keeping the drawing."""
        self.session.remove_background()

    def action_select_tool(self, tool_name: str) -> None:
        """Selects a tool by name."""
        self.session.settings.tool = Tool[tool_name]
        self.update_status()

    def action_select_color(self, index: int) -> None:
        """Selects a palette color."""
        self.session.settings.select_color(DEFAULT_PALETTE[index])
        self.update_status()

    def action_toggle_smoothing(self) -> None:
        """Toggles quadratic smoothing of strokes."""
        self.session.settings.smoothing = not self.session.settings.smoothing
        self.update_status()

    def action_adjust_width(self, delta: int) -> None:
        """Makes the current tool's brush thinner or thicker."""
        settings = self.session.settings
        if settings.tool == Tool.eraser:
            settings.eraser_width = max(1, settings.eraser_width + delta)
        else:
            settings.pen_width = max(1, settings.pen_width + delta)
        self.update_status()

    def action_adjust_tolerance(self, delta: int) -> None:
        """Changes the color tolerance of the fill tool."""
        settings = self.session.settings
        settings.tolerance = max(0, min(255, settings.tolerance + delta))
        self.update_status()

    def action_save(self) -> None:
        """Saves the background and drawing, merged, to the save path."""
        try:
            self.session.save(self.save_path)
        except FormatWriteNotSupported as e:
            self.show_status_message(e.message)
            return
        except OSError as e:
            self.show_status_message(f"Failed to save {self.save_path}: {e.strerror or e}")
            return
        self.show_status_message(f"Saved {os.path.basename(self.save_path)}")

    def load_background_file(self, file_path: str) -> None:
        """Loads an image file into the background layer, reporting failure in the status bar."""
        try:
            self.session.load_background_file(file_path)
        except FormatReadNotSupported as e:
            self.show_status_message(f"Can't load {os.path.basename(file_path)}: {e.message}")
        except (OSError, ValueError) as e:
            self.show_status_message(f"Can't load {os.path.basename(file_path)}: {e}")


def main() -> None:
    """Entry point for the textual-doodle CLI."""
    if args.width < 1 or args.height < 1:
        raise SystemExit("Canvas width and height must be positive")
    if args.history_limit < 1:
        raise SystemExit("History limit must be at least 1")
    if not 0 <= args.tolerance <= 255:
        raise SystemExit("Tolerance must be between 0 and 255")

    settings = ToolSettings(tolerance=args.tolerance, smoothing=not args.no_smoothing, transparent_eraser=args.transparent_eraser)
    session = DoodleSession(args.width, args.height, settings, history_capacity=args.history_limit)
    app = DoodleApp(session, save_path=os.path.abspath(args.filename), ascii_only=args.ascii_only)

    if args.background:
        # This updates the status bar, so it needs the widgets to exist, hence call_later().
        background_path = os.path.abspath(args.background)
        app.call_later(lambda: app.load_background_file(background_path))

    app.run()

if __name__ == "__main__":
    main()
