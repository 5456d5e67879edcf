"""Enumeration of the tools available in the Doodle app."""

from enum import Enum


class Tool(Enum):
    """The tools available in the Doodle app."""
    pen = 1
    eraser = 2
    bucket = 3

    def get_icon(self, ascii_only: bool = False) -> str:
        """Get the icon for this tool."""
        if ascii_only:
            enum_to_icon = {
                Tool.pen: "-==",
                Tool.eraser: "[_]",
                Tool.bucket: "H?",
            }
        else:
            enum_to_icon = {
                Tool.pen: "✏️",
                Tool.eraser: "🧼",
                Tool.bucket: "🌊",
            }
        return enum_to_icon[self]

    def get_name(self) -> str:
        """Get the name of this tool."""
        return {
            Tool.pen: "Pen",
            Tool.eraser: "Eraser",
            Tool.bucket: "Fill With Color",
        }[self]

    @property
    def draws_strokes(self) -> bool:
        """Whether dragging with this tool paints a stroke."""
        return self in (Tool.pen, Tool.eraser)
