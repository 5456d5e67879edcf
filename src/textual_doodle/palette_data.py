"""Color palette data for Textual Doodle."""

# Bound to the number keys 1-9 and 0, in order.
DEFAULT_PALETTE = [
    "rgb(0,0,0)",  # Black
    "rgb(255,255,255)",  # White
    "rgb(128,128,128)",  # Dark Gray
    "rgb(255,0,0)",  # Bright Red
    "rgb(255,128,0)",  # Orange
    "rgb(255,255,0)",  # Yellow
    "rgb(0,255,0)",  # Bright Green
    "rgb(0,255,255)",  # Cyan
    "rgb(0,0,255)",  # Bright Blue
    "rgb(255,0,255)",  # Magenta
]
